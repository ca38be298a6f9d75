from pydantic import BaseModel, Field


class GuideCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    slug: str | None = Field(default=None, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$", max_length=100)


class GuideResponse(BaseModel):
    id: int
    title: str
    description: str | None
    slug: str
    is_active: bool
    created_at: str
    updated_at: str


class StepResponse(BaseModel):
    id: int
    flow_box_id: int
    title: str
    content: str | None
    position: int
    is_visible: bool


class FlowBoxResponse(BaseModel):
    id: int
    guide_id: int
    title: str
    description: str | None
    position: int
    is_visible: bool
    steps: list[StepResponse] = Field(default_factory=list)


class GuideDetail(GuideResponse):
    flow_boxes: list[FlowBoxResponse] = Field(default_factory=list)
