"""Tests for fund settings and pipeline stage labels."""

from __future__ import annotations

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.models.fund import FundSettingsRecord
from portal.modules.settings.service import DEFAULT_STAGE_LABELS, stage_label

pytestmark = pytest.mark.anyio


class TestFundSettings:
    async def test_defaults_before_first_save(self, client: AsyncClient):
        """GET /v1/settings/fund returns defaults when nothing is saved"""
        resp = await client.get("/v1/settings/fund")
        assert resp.status_code == 200
        data = resp.json()
        assert data["id"] is None
        assert data["fund_size"] == 10_000_000
        assert data["pref_return"] == 0.16
        assert data["lp_split"] == 0.6
        assert data["gp_split"] == 0.4

    async def test_update_merges_and_appends(self, client: AsyncClient, db: AsyncSession):
        resp = await client.put("/v1/settings/fund", json={"fund_size": 25_000_000})
        assert resp.status_code == 200
        data = resp.json()
        assert data["fund_size"] == 25_000_000
        assert data["pref_return"] == 0.16
        assert data["id"] is not None

        await client.put("/v1/settings/fund", json={"pref_return": 0.12})
        current = (await client.get("/v1/settings/fund")).json()
        assert current["fund_size"] == 25_000_000
        assert current["pref_return"] == 0.12

        rows = (await db.execute(select(FundSettingsRecord))).scalars().all()
        assert len(rows) == 2

    async def test_out_of_range_rejected(self, client: AsyncClient):
        resp = await client.put("/v1/settings/fund", json={"lp_split": 1.5})
        assert resp.status_code == 422

    async def test_fund_change_flows_into_evaluation(
        self, client: AsyncClient, sample_site
    ):
        before = (await client.get(f"/v1/sites/{sample_site.id}/evaluation")).json()
        await client.put("/v1/settings/fund", json={"fund_size": 20_000_000})
        after = (await client.get(f"/v1/sites/{sample_site.id}/evaluation")).json()
        assert after["fundReturns"]["lpFirst"] > before["fundReturns"]["lpFirst"]


class TestStageLabels:
    async def test_default_labels(self, client: AsyncClient):
        resp = await client.get("/v1/settings/stages")
        assert resp.status_code == 200
        assert [s["label"] for s in resp.json()] == DEFAULT_STAGE_LABELS

    async def test_rename_stages(self, client: AsyncClient):
        labels = ["Lead", "Gas", "Power", "Permits", "Ready", "Listed", "Sold"]
        resp = await client.put("/v1/settings/stages", json={"labels": labels})
        assert resp.status_code == 200
        assert [s["label"] for s in resp.json()] == labels

        again = (await client.get("/v1/settings/stages")).json()
        assert again[6] == {"stage": 7, "label": "Sold"}

    async def test_renamed_label_in_pipeline(self, client: AsyncClient, sample_site):
        labels = ["Prospect", "Gas", "Power", "Permits", "Ready", "Listed", "Sold"]
        await client.put("/v1/settings/stages", json={"labels": labels})
        rows = (await client.get("/v1/sites")).json()
        assert rows[0]["stage_label"] == "Prospect"

    async def test_wrong_count_rejected(self, client: AsyncClient):
        resp = await client.put("/v1/settings/stages", json={"labels": ["One", "Two"]})
        assert resp.status_code == 422

    async def test_blank_label_rejected(self, client: AsyncClient):
        labels = ["A", "B", " ", "D", "E", "F", "G"]
        resp = await client.put("/v1/settings/stages", json={"labels": labels})
        assert resp.status_code == 422

    def test_stage_label_fallback(self):
        assert stage_label({1: "Identified"}, 1) == "Identified"
        assert stage_label({}, 9) == "Stage 9"
