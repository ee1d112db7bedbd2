"""Tests for the stage gate checklist."""

from __future__ import annotations

import uuid

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from portal.models.sites import Site
from portal.modules.checklist.service import sites_with_kill_triggers
from portal.modules.checklist.templates import STAGE_CHECKLISTS, TOTAL_ITEMS, get_item, get_stage

pytestmark = pytest.mark.anyio


class TestTemplates:
    def test_seven_stages(self):
        assert [s.stage for s in STAGE_CHECKLISTS] == [1, 2, 3, 4, 5, 6, 7]
        assert TOTAL_ITEMS == sum(len(s.items) for s in STAGE_CHECKLISTS) == 42

    def test_keys_unique_within_stage(self):
        for stage in STAGE_CHECKLISTS:
            keys = [item.key for item in stage.items]
            assert len(keys) == len(set(keys))

    def test_lookup(self):
        assert get_stage(2).name == "Gas Confirmation"
        assert get_item(2, "gas_capacity_confirmed").kill_trigger

    def test_lookup_unknown(self):
        with pytest.raises(LookupError):
            get_stage(8)
        with pytest.raises(LookupError):
            get_item(1, "no_such_item")


class TestGetChecklist:
    async def test_fresh_site(self, client: AsyncClient, sample_site: Site):
        """GET /v1/sites/{id}/checklist returns all stages not started"""
        resp = await client.get(f"/v1/sites/{sample_site.id}/checklist")
        assert resp.status_code == 200
        data = resp.json()
        assert len(data["stages"]) == 7
        assert data["completed"] == 0
        assert data["total"] == 42
        assert data["kill_triggers"] == []
        first = data["stages"][0]
        assert first["progress"] == 0
        assert {item["status"] for item in first["items"]} == {"not_started"}

    async def test_missing_site(self, client: AsyncClient):
        resp = await client.get(f"/v1/sites/{uuid.uuid4()}/checklist")
        assert resp.status_code == 404


class TestUpdateItem:
    async def test_complete_item(self, client: AsyncClient, sample_site: Site):
        resp = await client.put(
            f"/v1/sites/{sample_site.id}/checklist/1/site_identified",
            json={"status": "complete", "date": "2026-03-02", "notes": "Desk screen done"},
        )
        assert resp.status_code == 200
        item = resp.json()
        assert item["status"] == "complete"
        assert item["date"] == "2026-03-02"

        checklist = (await client.get(f"/v1/sites/{sample_site.id}/checklist")).json()
        assert checklist["completed"] == 1
        # 1 of 5 items in stage 1
        assert checklist["stages"][0]["progress"] == 20

    async def test_update_is_upsert(self, client: AsyncClient, sample_site: Site):
        url = f"/v1/sites/{sample_site.id}/checklist/2/gas_feasibility"
        await client.put(url, json={"status": "in_progress"})
        resp = await client.put(url, json={"status": "complete"})
        assert resp.status_code == 200

        checklist = (await client.get(f"/v1/sites/{sample_site.id}/checklist")).json()
        stage2 = checklist["stages"][1]
        statuses = {item["key"]: item["status"] for item in stage2["items"]}
        assert statuses["gas_feasibility"] == "complete"
        assert checklist["completed"] == 1

    async def test_blocked_kill_trigger_alerts(
        self, client: AsyncClient, db: AsyncSession, sample_site: Site
    ):
        resp = await client.put(
            f"/v1/sites/{sample_site.id}/checklist/2/gas_capacity_confirmed",
            json={"status": "blocked"},
        )
        assert resp.status_code == 200

        checklist = (await client.get(f"/v1/sites/{sample_site.id}/checklist")).json()
        alerts = checklist["kill_triggers"]
        assert len(alerts) == 1
        assert alerts[0]["key"] == "gas_capacity_confirmed"
        assert "kill" in alerts[0]["message"].lower()
        assert await sites_with_kill_triggers(db) == {sample_site.id}

    async def test_blocked_plain_item_no_alert(self, client: AsyncClient, sample_site: Site):
        await client.put(
            f"/v1/sites/{sample_site.id}/checklist/1/site_visit",
            json={"status": "blocked"},
        )
        checklist = (await client.get(f"/v1/sites/{sample_site.id}/checklist")).json()
        assert checklist["kill_triggers"] == []

    async def test_unknown_stage(self, client: AsyncClient, sample_site: Site):
        resp = await client.put(
            f"/v1/sites/{sample_site.id}/checklist/9/site_visit",
            json={"status": "complete"},
        )
        assert resp.status_code == 404

    async def test_unknown_item(self, client: AsyncClient, sample_site: Site):
        resp = await client.put(
            f"/v1/sites/{sample_site.id}/checklist/1/gas_capacity_confirmed",
            json={"status": "complete"},
        )
        assert resp.status_code == 404

    async def test_invalid_status(self, client: AsyncClient, sample_site: Site):
        resp = await client.put(
            f"/v1/sites/{sample_site.id}/checklist/1/site_visit",
            json={"status": "done"},
        )
        assert resp.status_code == 422
