"""Tests for the guides HTTP surface: creation, lookup, and content import."""
import pytest
from httpx import AsyncClient

MARKDOWN = b"""## Setup
*Get ready*

### Install
Run npm install
"""

CSV = b"""Flow Name,Flow Description,Step Title,Content
Accounts,Get access,Request laptop,Ask IT
Accounts,Get access,Join Slack,"Accept the invite, then say hi"
"""

HEADER_ONLY = b"Flow Name,Flow Description,Step Title,Content\n"


async def _create_guide(client: AsyncClient, title: str = "Onboarding") -> int:
    resp = await client.post("/api/v1/guides/", json={"title": title})
    assert resp.status_code == 201
    return resp.json()["id"]


# ---------------------------------------------------------------------------
# Guides
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_guide_derives_unique_slug(client: AsyncClient):
    first = await client.post("/api/v1/guides/", json={"title": "Welcome Aboard!"})
    second = await client.post("/api/v1/guides/", json={"title": "Welcome aboard"})

    assert first.json()["slug"] == "welcome-aboard"
    assert second.json()["slug"] == "welcome-aboard-2"


@pytest.mark.asyncio
async def test_duplicate_explicit_slug_conflicts(client: AsyncClient):
    await client.post("/api/v1/guides/", json={"title": "A", "slug": "shared"})
    resp = await client.post("/api/v1/guides/", json={"title": "B", "slug": "shared"})

    assert resp.status_code == 409
    assert resp.json()["error"] == "CONFLICT"


@pytest.mark.asyncio
async def test_get_unknown_guide_returns_404(client: AsyncClient):
    resp = await client.get("/api/v1/guides/42")

    assert resp.status_code == 404
    assert resp.json()["error"] == "NOT_FOUND"


# ---------------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_preview_markdown(client: AsyncClient):
    resp = await client.post(
        "/api/v1/guides/import/markdown/preview",
        files={"file": ("guide.md", MARKDOWN, "text/markdown")},
    )

    assert resp.status_code == 200
    assert resp.json() == [
        {
            "title": "Setup",
            "description": "Get ready",
            "steps": [{"title": "Install", "content": "Run npm install"}],
        }
    ]


@pytest.mark.asyncio
async def test_import_markdown_then_read_back(client: AsyncClient):
    guide_id = await _create_guide(client)

    resp = await client.post(
        f"/api/v1/guides/{guide_id}/import/markdown",
        files={"file": ("guide.md", MARKDOWN, "text/markdown")},
    )

    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["results"] == {
        "flowBoxesCreated": 1,
        "stepsCreated": 1,
        "flows": [{"name": "Setup", "stepCount": 1}],
    }
    assert "importedAt" in body

    detail = (await client.get(f"/api/v1/guides/{guide_id}")).json()
    assert detail["flow_boxes"][0]["title"] == "Setup"
    assert detail["flow_boxes"][0]["steps"][0]["content"] == "Run npm install"


@pytest.mark.asyncio
async def test_import_csv(client: AsyncClient):
    guide_id = await _create_guide(client)

    resp = await client.post(
        f"/api/v1/guides/{guide_id}/import/csv",
        files={"file": ("guide.csv", CSV, "text/csv")},
    )

    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Successfully imported 1 flows with 2 steps"

    detail = (await client.get(f"/api/v1/guides/{guide_id}")).json()
    steps = detail["flow_boxes"][0]["steps"]
    assert [s["position"] for s in steps] == [1, 2]
    assert steps[1]["content"] == "Accept the invite, then say hi"


@pytest.mark.asyncio
async def test_import_csv_with_bad_header_returns_422(client: AsyncClient):
    guide_id = await _create_guide(client)

    resp = await client.post(
        f"/api/v1/guides/{guide_id}/import/csv",
        files={"file": ("guide.csv", b"Name,Description\nA,B\n", "text/csv")},
    )

    assert resp.status_code == 422
    assert resp.json()["error"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_import_csv_without_rows_reports_failure(client: AsyncClient):
    guide_id = await _create_guide(client)

    resp = await client.post(
        f"/api/v1/guides/{guide_id}/import/csv",
        files={"file": ("guide.csv", HEADER_ONLY, "text/csv")},
    )

    assert resp.status_code == 500
    body = resp.json()
    assert body["success"] is False
    assert body["message"] == "No valid data rows found in CSV"
    assert body["results"]["flowBoxesCreated"] == 0


@pytest.mark.asyncio
async def test_import_into_unknown_guide_returns_404(client: AsyncClient):
    resp = await client.post(
        "/api/v1/guides/999/import/markdown",
        files={"file": ("guide.md", MARKDOWN, "text/markdown")},
    )

    assert resp.status_code == 404
