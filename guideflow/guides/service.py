import re

import structlog

from guideflow.exceptions import ConflictError, NotFoundError
from guideflow.guides.importers.schemas import FlowSummary, ImportCounts, ParsedFlowBox
from guideflow.guides.repository import GuideRepository
from guideflow.guides.schemas import (
    FlowBoxResponse,
    GuideCreate,
    GuideDetail,
    GuideResponse,
    StepResponse,
)

logger = structlog.get_logger()

_SLUG_INVALID = re.compile(r"[^a-z0-9]+")


def slugify(title: str) -> str:
    slug = _SLUG_INVALID.sub("-", title.lower()).strip("-")
    return slug[:100].rstrip("-") or "guide"


class GuideService:
    def __init__(self, repo: GuideRepository) -> None:
        self._repo = repo

    async def create(self, data: GuideCreate) -> GuideResponse:
        async with self._repo.write_lock:
            if data.slug is not None:
                if await self._repo.get_guide_by_slug(data.slug) is not None:
                    raise ConflictError(f"Guide with slug '{data.slug}' already exists")
                slug = data.slug
            else:
                slug = await self._unique_slug(slugify(data.title))

            guide_id = await self._repo.create_guide(data.title, data.description, slug)
            await self._repo.commit()

        logger.info("guide_created", guide_id=guide_id, slug=slug)
        return await self.get_by_id(guide_id)

    async def get_by_id(self, guide_id: int) -> GuideResponse:
        row = await self._repo.get_guide(guide_id)
        if row is None:
            raise NotFoundError("Guide", guide_id)
        return self._to_response(row)

    async def list_all(self) -> list[GuideResponse]:
        rows = await self._repo.list_guides()
        return [self._to_response(row) for row in rows]

    async def get_detail(self, guide_id: int) -> GuideDetail:
        guide = await self.get_by_id(guide_id)
        flow_boxes: list[FlowBoxResponse] = []
        for box in await self._repo.list_flow_boxes(guide_id):
            steps = [
                StepResponse(
                    id=step["id"],
                    flow_box_id=step["flow_box_id"],
                    title=step["title"],
                    content=step["content"],
                    position=step["position"],
                    is_visible=bool(step["is_visible"]),
                )
                for step in await self._repo.list_steps(box["id"])
            ]
            flow_boxes.append(
                FlowBoxResponse(
                    id=box["id"],
                    guide_id=box["guide_id"],
                    title=box["title"],
                    description=box["description"],
                    position=box["position"],
                    is_visible=bool(box["is_visible"]),
                    steps=steps,
                )
            )
        return GuideDetail(**guide.model_dump(), flow_boxes=flow_boxes)

    async def append_flow_boxes(
        self, guide_id: int, flow_boxes: list[ParsedFlowBox]
    ) -> ImportCounts:
        """Persist parsed flow boxes after the guide's existing ones.

        New flow boxes take positions after the current maximum; steps are
        numbered from 1 within each flow box. The whole batch is committed
        together and rolled back if any insert fails; the connection's write
        lock is held from reading the maximum position until then.
        """
        async with self._repo.write_lock:
            try:
                counts = await self._insert_flow_boxes(guide_id, flow_boxes)
                await self._repo.commit()
            except Exception:
                await self._repo.rollback()
                raise

        logger.info(
            "flow_boxes_appended",
            guide_id=guide_id,
            flow_boxes=counts.flow_boxes_created,
            steps=counts.steps_created,
        )
        return counts

    async def _insert_flow_boxes(
        self, guide_id: int, flow_boxes: list[ParsedFlowBox]
    ) -> ImportCounts:
        position = await self._repo.get_max_position(guide_id)
        counts = ImportCounts()

        for flow_box in flow_boxes:
            position += 1
            flow_box_id = await self._repo.create_flow_box(
                guide_id, flow_box.title, flow_box.description or None, position
            )
            counts.flow_boxes_created += 1

            for step_position, step in enumerate(flow_box.steps, start=1):
                await self._repo.create_step(flow_box_id, step.title, step.content, step_position)
                counts.steps_created += 1

            counts.flows.append(FlowSummary(name=flow_box.title, step_count=len(flow_box.steps)))

        return counts

    async def _unique_slug(self, base: str) -> str:
        slug = base
        suffix = 2
        while await self._repo.get_guide_by_slug(slug) is not None:
            slug = f"{base}-{suffix}"
            suffix += 1
        return slug

    def _to_response(self, row: dict) -> GuideResponse:
        return GuideResponse(
            id=row["id"],
            title=row["title"],
            description=row["description"],
            slug=row["slug"],
            is_active=bool(row["is_active"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
