from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ParsedStep(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    content: str = ""


class ParsedFlowBox(BaseModel):
    """One section of imported content. Carries no id or position."""

    model_config = ConfigDict(frozen=True)

    title: str
    description: str = ""
    steps: list[ParsedStep] = Field(default_factory=list)


class CSVRow(BaseModel):
    model_config = ConfigDict(frozen=True)

    flow_name: str
    flow_description: str
    step_title: str
    content: str


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FlowSummary(_CamelModel):
    name: str
    step_count: int


class ImportCounts(_CamelModel):
    flow_boxes_created: int = 0
    steps_created: int = 0
    flows: list[FlowSummary] = Field(default_factory=list)


def _now() -> datetime:
    return datetime.now(UTC)


class ImportSuccess(_CamelModel):
    success: Literal[True] = True
    message: str
    results: ImportCounts
    imported_at: datetime = Field(default_factory=_now)


class ImportFailure(_CamelModel):
    success: Literal[False] = False
    message: str
    results: ImportCounts = Field(default_factory=ImportCounts)
    imported_at: datetime = Field(default_factory=_now)


ImportResult = ImportSuccess | ImportFailure
