import structlog

from guideflow.config import settings
from guideflow.exceptions import ValidationError
from guideflow.guides.importers.base import ImporterBase
from guideflow.guides.importers.csv_importer import CSVImporter
from guideflow.guides.importers.markdown_importer import MarkdownImporter
from guideflow.guides.importers.schemas import (
    ImportFailure,
    ImportResult,
    ImportSuccess,
    ParsedFlowBox,
)
from guideflow.guides.service import GuideService

logger = structlog.get_logger()


def decode_upload(file_content: bytes, filename: str, max_bytes: int) -> str:
    """Check the upload size and decode it to text."""
    if len(file_content) > max_bytes:
        raise ValidationError(
            f"File '{filename}' is {len(file_content)} bytes; limit is {max_bytes}"
        )
    return ImporterBase.decode(file_content)


class ImportService:
    def __init__(self, guide_service: GuideService, max_bytes: int | None = None) -> None:
        self._guide_service = guide_service
        self._max_bytes = settings.max_import_bytes if max_bytes is None else max_bytes

    def decode_upload(self, file_content: bytes, filename: str) -> str:
        return decode_upload(file_content, filename, self._max_bytes)

    def preview_markdown(self, text: str) -> list[ParsedFlowBox]:
        """Parse Markdown without persisting anything."""
        return MarkdownImporter().parse(text)

    async def import_markdown(
        self, guide_id: int, text: str, source: str = "upload.md"
    ) -> ImportResult:
        """Parse Markdown and append its flow boxes to the guide."""
        await self._guide_service.get_by_id(guide_id)
        flow_boxes = MarkdownImporter().parse(text)

        try:
            counts = await self._guide_service.append_flow_boxes(guide_id, flow_boxes)
        except Exception as exc:
            logger.error("markdown_import_failed", guide_id=guide_id, source=source, error=str(exc))
            return ImportFailure(message=str(exc) or "Failed to import markdown content")

        logger.info(
            "import_completed",
            format="markdown",
            guide_id=guide_id,
            source=source,
            flow_boxes=counts.flow_boxes_created,
            steps=counts.steps_created,
        )
        return ImportSuccess(
            message=(
                f"Successfully imported {counts.flow_boxes_created} flow boxes "
                f"with {counts.steps_created} steps"
            ),
            results=counts,
        )

    async def import_csv(
        self, guide_id: int, text: str, source: str = "upload.csv"
    ) -> ImportResult:
        """Parse CSV and append its flows to the guide.

        Header and line-count problems raise ValidationError. An input with no
        usable rows, or a storage failure, is reported as an ImportFailure.
        """
        await self._guide_service.get_by_id(guide_id)
        importer = CSVImporter()
        rows = importer.parse_rows(text)
        flow_boxes = importer.group_rows(rows)

        if not flow_boxes:
            logger.warning("csv_import_empty", guide_id=guide_id, source=source)
            return ImportFailure(message="No valid data rows found in CSV")

        try:
            counts = await self._guide_service.append_flow_boxes(guide_id, flow_boxes)
        except Exception as exc:
            logger.error("csv_import_failed", guide_id=guide_id, source=source, error=str(exc))
            return ImportFailure(message=str(exc) or "Unknown import error")

        logger.info(
            "import_completed",
            format="csv",
            guide_id=guide_id,
            source=source,
            flow_boxes=counts.flow_boxes_created,
            steps=counts.steps_created,
        )
        return ImportSuccess(
            message=(
                f"Successfully imported {counts.flow_boxes_created} flows "
                f"with {counts.steps_created} steps"
            ),
            results=counts,
        )
