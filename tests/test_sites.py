"""Tests for the Sites module: CRUD, pipeline view, evaluation, stage history."""

from __future__ import annotations

import uuid

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.models.enums import ChecklistStatus, SiteStatus
from portal.models.sites import ChecklistItem, Site, SiteActivity, SiteStageTransition

pytestmark = pytest.mark.anyio


async def _create(client: AsyncClient, **overrides) -> dict:
    payload = {"name": "Marcellus Ridge", "city": "Wheeling", "state": "WV"} | overrides
    resp = await client.post("/v1/sites", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestCreateSite:
    async def test_create_defaults(self, client: AsyncClient, db: AsyncSession):
        """POST /v1/sites returns 201 and starts at stage 1"""
        data = await _create(client)
        assert data["stage"] == 1
        assert data["status"] == "active"
        assert data["inputs"] == {}

        activity = (await db.execute(select(SiteActivity))).scalars().all()
        assert [a.action for a in activity] == ["Site created"]
        transitions = (await db.execute(select(SiteStageTransition))).scalars().all()
        assert [(t.from_stage, t.to_stage) for t in transitions] == [(None, 1)]

    async def test_create_strips_name(self, client: AsyncClient):
        data = await _create(client, name="  Eagle Ford  ")
        assert data["name"] == "Eagle Ford"

    async def test_blank_name_rejected(self, client: AsyncClient):
        resp = await client.post("/v1/sites", json={"name": "   "})
        assert resp.status_code == 422

    async def test_stage_out_of_range_rejected(self, client: AsyncClient):
        resp = await client.post("/v1/sites", json={"name": "X", "stage": 8})
        assert resp.status_code == 422

    async def test_create_requires_auth(self, anon_client: AsyncClient):
        resp = await anon_client.post("/v1/sites", json={"name": "X"})
        assert resp.status_code == 401


class TestPipeline:
    async def test_list_with_evaluation(self, client: AsyncClient, sample_site: Site):
        """GET /v1/sites returns pipeline rows with headline evaluation"""
        resp = await client.get("/v1/sites")
        assert resp.status_code == 200
        rows = resp.json()
        assert len(rows) == 1
        row = rows[0]
        assert row["name"] == "Permian Basin Tract"
        assert row["estimatedMW"] == 107
        assert row["riskLevel"] == "Low"
        assert row["stage_label"] == "Identified"
        assert row["progress"] == {"completed": 0, "total": 42}

    async def test_progress_counts_completed_items(
        self, client: AsyncClient, db: AsyncSession, sample_site: Site
    ):
        db.add(ChecklistItem(site_id=sample_site.id, stage=1, item_key="option_executed", status=ChecklistStatus.COMPLETE))
        db.add(ChecklistItem(site_id=sample_site.id, stage=1, item_key="site_visit", status=ChecklistStatus.IN_PROGRESS))
        await db.flush()

        resp = await client.get("/v1/sites")
        assert resp.json()[0]["progress"]["completed"] == 1

    async def test_ordered_by_stage(self, client: AsyncClient):
        await _create(client, name="Later", stage=4)
        await _create(client, name="Earlier", stage=2)
        resp = await client.get("/v1/sites")
        assert [r["name"] for r in resp.json()] == ["Earlier", "Later"]

    async def test_filters(self, client: AsyncClient, sample_site: Site):
        await _create(client, name="Held", status="on_hold", stage=3)

        by_stage = await client.get("/v1/sites", params={"stage": 3})
        assert [r["name"] for r in by_stage.json()] == ["Held"]

        by_status = await client.get("/v1/sites", params={"status": "active"})
        assert [r["name"] for r in by_status.json()] == ["Permian Basin Tract"]

        by_search = await client.get("/v1/sites", params={"search": "odessa"})
        assert [r["name"] for r in by_search.json()] == ["Permian Basin Tract"]

    async def test_deleted_sites_hidden(self, client: AsyncClient, sample_site: Site):
        resp = await client.delete(f"/v1/sites/{sample_site.id}")
        assert resp.status_code == 204
        assert (await client.get("/v1/sites")).json() == []
        assert (await client.get(f"/v1/sites/{sample_site.id}")).status_code == 404


class TestGetUpdateSite:
    async def test_get_site(self, client: AsyncClient, sample_site: Site):
        resp = await client.get(f"/v1/sites/{sample_site.id}")
        assert resp.status_code == 200
        assert resp.json()["inputs"]["gasVolume"] == 14400

    async def test_get_missing_site(self, client: AsyncClient):
        resp = await client.get(f"/v1/sites/{uuid.uuid4()}")
        assert resp.status_code == 404

    async def test_patch_fields(self, client: AsyncClient, sample_site: Site):
        resp = await client.patch(
            f"/v1/sites/{sample_site.id}",
            json={"notes": "Landowner responsive", "status": "on_hold"},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["notes"] == "Landowner responsive"
        assert data["status"] == "on_hold"
        assert data["name"] == "Permian Basin Tract"

    async def test_patch_null_name_rejected(self, client: AsyncClient, sample_site: Site):
        resp = await client.patch(f"/v1/sites/{sample_site.id}", json={"name": None})
        assert resp.status_code == 422

    async def test_stage_change_logged(
        self, client: AsyncClient, db: AsyncSession, sample_site: Site
    ):
        """Moving stage records a transition and an activity entry"""
        resp = await client.patch(f"/v1/sites/{sample_site.id}", json={"stage": 2})
        assert resp.status_code == 200
        assert resp.json()["stage"] == 2

        actions = (
            await db.execute(select(SiteActivity.action).where(SiteActivity.site_id == sample_site.id))
        ).scalars().all()
        assert "Moved to Stage 2: Gas Confirmed" in actions

        transitions = (
            await db.execute(select(SiteStageTransition).where(SiteStageTransition.site_id == sample_site.id))
        ).scalars().all()
        assert [(t.from_stage, t.to_stage) for t in transitions] == [(1, 2)]

    async def test_same_stage_not_logged(
        self, client: AsyncClient, db: AsyncSession, sample_site: Site
    ):
        await client.patch(f"/v1/sites/{sample_site.id}", json={"stage": 1})
        transitions = (await db.execute(select(SiteStageTransition))).scalars().all()
        assert transitions == []

    async def test_soft_delete_keeps_row(
        self, client: AsyncClient, db: AsyncSession, sample_site: Site
    ):
        await client.delete(f"/v1/sites/{sample_site.id}")
        site = await db.get(Site, sample_site.id)
        assert site is not None
        assert site.is_deleted is True


class TestSiteEvaluation:
    async def test_get_evaluation(self, client: AsyncClient, sample_site: Site):
        resp = await client.get(f"/v1/sites/{sample_site.id}/evaluation")
        assert resp.status_code == 200
        data = resp.json()
        assert data["estimatedMW"] == 107
        assert data["totalGasCost"] == 3_650_000
        # "$2,400,000" parses to 2.4M
        assert data["deRiskingCosts"]["siteControl"] == 130_000

    async def test_replace_inputs(self, client: AsyncClient, sample_site: Site):
        """PUT /v1/sites/{id}/inputs replaces the bag and re-evaluates"""
        resp = await client.put(
            f"/v1/sites/{sample_site.id}/inputs",
            json={"gasVolume": 9600, "politicalClimate": "hostile"},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["site"]["inputs"] == {"gasVolume": 9600, "politicalClimate": "hostile"}
        assert data["evaluation"]["estimatedMW"] == 50
        assert data["evaluation"]["riskScore"] == 4

    async def test_inputs_stored_as_entered(self, client: AsyncClient, sample_site: Site):
        await client.put(f"/v1/sites/{sample_site.id}/inputs", json={"gasVolume": "lots"})
        resp = await client.get(f"/v1/sites/{sample_site.id}")
        assert resp.json()["inputs"] == {"gasVolume": "lots"}

    async def test_out_of_range_inputs_keep_pipeline_up(
        self, client: AsyncClient, sample_site: Site
    ):
        resp = await client.put(
            f"/v1/sites/{sample_site.id}/inputs", json={"gasVolume": "9" * 400}
        )
        assert resp.status_code == 200
        assert resp.json()["evaluation"]["estimatedMW"] == 0

        rows = (await client.get("/v1/sites")).json()
        assert rows[0]["estimatedMW"] == 0
        assert (await client.get("/v1/reports/dashboard")).status_code == 200

    async def test_evaluation_missing_site(self, client: AsyncClient):
        resp = await client.get(f"/v1/sites/{uuid.uuid4()}/evaluation")
        assert resp.status_code == 404


class TestStageHistory:
    async def test_history_lists_all_stages(self, client: AsyncClient):
        site = await _create(client)
        await client.patch(f"/v1/sites/{site['id']}", json={"stage": 3})

        resp = await client.get(f"/v1/sites/{site['id']}/stage-history")
        assert resp.status_code == 200
        history = resp.json()
        assert [h["stage"] for h in history] == [1, 2, 3, 4, 5, 6, 7]
        entered = {h["stage"]: h["entered_at"] for h in history}
        assert entered[1] is not None
        assert entered[2] is None
        assert entered[3] is not None

    async def test_history_missing_site(self, client: AsyncClient):
        resp = await client.get(f"/v1/sites/{uuid.uuid4()}/stage-history")
        assert resp.status_code == 404

    async def test_site_status_enum(self, sample_site: Site):
        assert sample_site.status == SiteStatus.ACTIVE
