from datetime import UTC, datetime

import aiosqlite

from guideflow.database import get_write_lock


def _now() -> str:
    return datetime.now(UTC).isoformat()


class GuideRepository:
    def __init__(self, db: aiosqlite.Connection) -> None:
        self._db = db
        self.write_lock = get_write_lock(db)

    async def create_guide(self, title: str, description: str | None, slug: str) -> int:
        now = _now()
        cursor = await self._db.execute(
            """
            INSERT INTO guides (title, description, slug, is_active, created_at, updated_at)
            VALUES (?, ?, ?, 1, ?, ?)
            """,
            (title, description, slug, now, now),
        )
        return cursor.lastrowid

    async def get_guide(self, guide_id: int) -> dict | None:
        cursor = await self._db.execute("SELECT * FROM guides WHERE id = ?", (guide_id,))
        row = await cursor.fetchone()
        if row is None:
            return None
        return dict(row)

    async def get_guide_by_slug(self, slug: str) -> dict | None:
        cursor = await self._db.execute("SELECT * FROM guides WHERE slug = ?", (slug,))
        row = await cursor.fetchone()
        if row is None:
            return None
        return dict(row)

    async def list_guides(self) -> list[dict]:
        cursor = await self._db.execute("SELECT * FROM guides ORDER BY created_at DESC, id DESC")
        rows = await cursor.fetchall()
        return [dict(row) for row in rows]

    async def list_flow_boxes(self, guide_id: int) -> list[dict]:
        cursor = await self._db.execute(
            "SELECT * FROM flow_boxes WHERE guide_id = ? ORDER BY position ASC, id ASC",
            (guide_id,),
        )
        rows = await cursor.fetchall()
        return [dict(row) for row in rows]

    async def get_max_position(self, guide_id: int) -> int:
        cursor = await self._db.execute(
            "SELECT COALESCE(MAX(position), 0) AS max_position FROM flow_boxes WHERE guide_id = ?",
            (guide_id,),
        )
        row = await cursor.fetchone()
        return int(row["max_position"]) if row else 0

    async def create_flow_box(
        self, guide_id: int, title: str, description: str | None, position: int
    ) -> int:
        now = _now()
        cursor = await self._db.execute(
            """
            INSERT INTO flow_boxes (
                guide_id, title, description, position, is_visible, created_at, updated_at
            ) VALUES (?, ?, ?, ?, 1, ?, ?)
            """,
            (guide_id, title, description, position, now, now),
        )
        return cursor.lastrowid

    async def create_step(self, flow_box_id: int, title: str, content: str, position: int) -> int:
        now = _now()
        cursor = await self._db.execute(
            """
            INSERT INTO steps (
                flow_box_id, title, content, position, is_visible, created_at, updated_at
            ) VALUES (?, ?, ?, ?, 1, ?, ?)
            """,
            (flow_box_id, title, content, position, now, now),
        )
        return cursor.lastrowid

    async def list_steps(self, flow_box_id: int) -> list[dict]:
        cursor = await self._db.execute(
            "SELECT * FROM steps WHERE flow_box_id = ? ORDER BY position ASC, id ASC",
            (flow_box_id,),
        )
        rows = await cursor.fetchall()
        return [dict(row) for row in rows]

    async def commit(self) -> None:
        await self._db.commit()

    async def rollback(self) -> None:
        await self._db.rollback()
