"""
Shared fixtures for GuideFlow tests.

Every test gets its own in-memory SQLite database with the schema applied,
so storage-backed tests never see each other's rows.
"""
from __future__ import annotations

from typing import AsyncGenerator

import aiosqlite
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from guideflow.database import apply_schema
from guideflow.dependencies import get_guide_service, get_import_service
from guideflow.guides.importers.service import ImportService
from guideflow.guides.repository import GuideRepository
from guideflow.guides.schemas import GuideCreate
from guideflow.guides.service import GuideService
from guideflow.main import app


# ---------------------------------------------------------------------------
# Storage fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def db() -> AsyncGenerator[aiosqlite.Connection, None]:
    conn = await aiosqlite.connect(":memory:")
    conn.row_factory = aiosqlite.Row
    await apply_schema(conn)
    try:
        yield conn
    finally:
        await conn.close()


@pytest_asyncio.fixture
async def repo(db: aiosqlite.Connection) -> GuideRepository:
    return GuideRepository(db)


@pytest_asyncio.fixture
async def guide_service(repo: GuideRepository) -> GuideService:
    return GuideService(repo)


@pytest_asyncio.fixture
async def import_service(guide_service: GuideService) -> ImportService:
    return ImportService(guide_service)


@pytest_asyncio.fixture
async def guide_id(guide_service: GuideService) -> int:
    guide = await guide_service.create(GuideCreate(title="Developer Onboarding"))
    return guide.id


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def client(
    guide_service: GuideService, import_service: ImportService
) -> AsyncGenerator[AsyncClient, None]:
    """
    httpx AsyncClient wired to the FastAPI app with services bound to the
    per-test database.
    """
    app.dependency_overrides[get_guide_service] = lambda: guide_service
    app.dependency_overrides[get_import_service] = lambda: import_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
