import structlog

from guideflow.guides.importers.base import ImporterBase
from guideflow.guides.importers.schemas import ParsedFlowBox, ParsedStep

logger = structlog.get_logger()

FLOW_BOX_MARKER = "## "
STEP_MARKER = "### "


class _FlowBoxDraft:
    __slots__ = ("title", "description", "steps")

    def __init__(self, title: str, description: str = "") -> None:
        self.title = title
        self.description = description
        self.steps: list[ParsedStep] = []

    def build(self) -> ParsedFlowBox:
        return ParsedFlowBox(title=self.title, description=self.description, steps=self.steps)


class MarkdownImporter(ImporterBase):
    """Reads guides written as ``## Flow box`` / ``### Step`` sections.

    A flow box heading may be followed directly by a one-line italic
    description (``*like this*``). Everything under a step heading up to the
    next heading is the step's content, kept with its original indentation.
    Malformed input never raises: lines that do not fit the layout are ignored.
    """

    def parse(self, text: str) -> list[ParsedFlowBox]:
        lines = [line.rstrip("\r") for line in text.split("\n")]
        flow_boxes: list[ParsedFlowBox] = []

        current_box: _FlowBoxDraft | None = None
        step_title: str | None = None
        content_lines: list[str] = []

        def finish_step() -> None:
            if step_title is not None and current_box is not None:
                content = "\n".join(content_lines).strip()
                current_box.steps.append(ParsedStep(title=step_title, content=content))

        i = 0
        while i < len(lines):
            line = lines[i].strip()

            if line.startswith(FLOW_BOX_MARKER):
                finish_step()
                if current_box is not None:
                    flow_boxes.append(current_box.build())

                current_box = _FlowBoxDraft(line[len(FLOW_BOX_MARKER) :].strip())
                if i + 1 < len(lines):
                    description = self._italic_description(lines[i + 1])
                    if description is not None:
                        current_box.description = description
                        i += 1

                step_title = None
                content_lines = []

            elif line.startswith(STEP_MARKER):
                finish_step()
                content_lines = []
                if current_box is None:
                    logger.debug("markdown_orphan_step_ignored", line=i + 1)
                    step_title = None
                else:
                    step_title = line[len(STEP_MARKER) :].strip()

            elif step_title is not None and line:
                content_lines.append(lines[i])

            i += 1

        finish_step()
        if current_box is not None:
            flow_boxes.append(current_box.build())

        logger.debug(
            "markdown_parsed",
            flow_boxes=len(flow_boxes),
            steps=sum(len(fb.steps) for fb in flow_boxes),
        )
        return flow_boxes

    @staticmethod
    def _italic_description(raw_line: str) -> str | None:
        candidate = raw_line.strip()
        if candidate and candidate.startswith("*") and candidate.endswith("*"):
            return candidate[1:-1]
        return None


def parse_markdown(text: str) -> list[ParsedFlowBox]:
    return MarkdownImporter().parse(text)
