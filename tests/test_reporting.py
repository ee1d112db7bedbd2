"""Tests for the dashboard, site comparison and portfolio exports."""

from __future__ import annotations

import csv
import io
import json
import uuid

import pytest
from httpx import AsyncClient
from openpyxl import load_workbook
from sqlalchemy.ext.asyncio import AsyncSession

from portal.models.enums import ChecklistStatus, SiteStatus
from portal.models.sites import ChecklistItem, Site
from portal.modules.reporting.generators import CSVGenerator, XLSXGenerator

pytestmark = pytest.mark.anyio


@pytest.fixture
async def second_site(db: AsyncSession) -> Site:
    site = Site(
        name="Haynesville Parcel",
        city="Shreveport",
        state="LA",
        stage=3,
        inputs={"gasVolume": 9600, "politicalClimate": "hostile"},
        actuals={},
    )
    db.add(site)
    await db.flush()
    return site


class TestGenerators:
    def test_csv_tables(self):
        data = {"sites": [{"name": "A", "estimated_mw": 10, "notes": None}]}
        content, content_type = CSVGenerator(title="T").generate(data, [{"name": "sites"}])
        assert content_type == "text/csv"
        rows = list(csv.reader(io.StringIO(content.decode("utf-8"))))
        assert rows == [["Name", "Estimated Mw", "Notes"], ["A", "10", ""]]

    def test_xlsx_sheets(self):
        data = {
            "summary": {"sites": 1},
            "sites": [{"name": "A", "estimated_mw": 10}],
            "fund": {"fund_size": 10_000_000},
        }
        content, _ = XLSXGenerator(title="Portfolio").generate(
            data, [{"name": "sites", "title": "Sites"}, {"name": "fund", "title": "Fund"}]
        )
        wb = load_workbook(io.BytesIO(content))
        assert wb.sheetnames == ["Cover", "Sites", "Fund"]
        assert wb["Cover"]["A1"].value == "Portfolio"
        assert wb["Sites"]["A2"].value == "A"
        assert wb["Fund"]["B2"].value == 10_000_000


class TestDashboard:
    async def test_empty_portfolio(self, client: AsyncClient):
        resp = await client.get("/v1/reports/dashboard")
        assert resp.status_code == 200
        data = resp.json()
        assert data["active_sites"] == 0
        assert data["total_mw"] == 0
        assert data["avg_risk_score"] == 0
        assert [f["count"] for f in data["funnel"]] == [0] * 7

    async def test_totals(
        self, client: AsyncClient, db: AsyncSession, sample_site: Site, second_site: Site
    ):
        """GET /v1/reports/dashboard sums active sites"""
        db.add(Site(name="Killed", stage=2, status=SiteStatus.KILLED, inputs={"gasVolume": 19200}, actuals={}))
        db.add(
            ChecklistItem(
                site_id=second_site.id,
                stage=2,
                item_key="gas_capacity_confirmed",
                status=ChecklistStatus.BLOCKED,
            )
        )
        await db.flush()

        data = (await client.get("/v1/reports/dashboard")).json()
        assert data["active_sites"] == 2
        # 107 + 50
        assert data["total_mw"] == 157
        assert data["total_gross_exit"] == pytest.approx((107 + 50) * 300_000)
        assert data["avg_risk_score"] == 2.0
        funnel = {f["stage"]: f["count"] for f in data["funnel"]}
        assert funnel[1] == 1
        assert funnel[3] == 1
        assert funnel[2] == 0
        assert data["kill_trigger_sites"] == 1

    async def test_recent_activity_feed(self, client: AsyncClient):
        for name in ("A", "B", "C"):
            await client.post("/v1/sites", json={"name": name})
        site = (await client.get("/v1/sites")).json()[0]
        for i in range(4):
            await client.post(f"/v1/sites/{site['id']}/activity", json={"action": f"Call {i}"})

        data = (await client.get("/v1/reports/dashboard")).json()
        assert len(data["recent_activity"]) == 5
        assert all(entry["site_name"] for entry in data["recent_activity"])


class TestCompare:
    async def test_compare_two(
        self, client: AsyncClient, sample_site: Site, second_site: Site
    ):
        resp = await client.get(
            "/v1/reports/compare",
            params=[("site_ids", str(sample_site.id)), ("site_ids", str(second_site.id))],
        )
        assert resp.status_code == 200
        sites = resp.json()["sites"]
        assert [s["site"]["name"] for s in sites] == ["Permian Basin Tract", "Haynesville Parcel"]
        assert [s["evaluation"]["estimatedMW"] for s in sites] == [107, 50]

    async def test_compare_needs_two(self, client: AsyncClient, sample_site: Site):
        resp = await client.get("/v1/reports/compare", params={"site_ids": str(sample_site.id)})
        assert resp.status_code == 422

    async def test_compare_max_four(self, client: AsyncClient):
        params = [("site_ids", str(uuid.uuid4())) for _ in range(5)]
        resp = await client.get("/v1/reports/compare", params=params)
        assert resp.status_code == 422

    async def test_compare_missing_site(self, client: AsyncClient, sample_site: Site):
        resp = await client.get(
            "/v1/reports/compare",
            params=[("site_ids", str(sample_site.id)), ("site_ids", str(uuid.uuid4()))],
        )
        assert resp.status_code == 404


class TestExport:
    async def test_csv_export(
        self, client: AsyncClient, sample_site: Site, second_site: Site
    ):
        resp = await client.get("/v1/reports/export", params={"format": "csv"})
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        assert resp.headers["content-disposition"].startswith("attachment;")
        rows = list(csv.DictReader(io.StringIO(resp.text)))
        assert [r["Name"] for r in rows] == ["Permian Basin Tract", "Haynesville Parcel"]
        assert rows[0]["Estimated Mw"] == "107"

    async def test_xlsx_export(self, client: AsyncClient, sample_site: Site):
        resp = await client.get("/v1/reports/export", params={"format": "xlsx"})
        assert resp.status_code == 200
        assert ".xlsx" in resp.headers["content-disposition"]
        wb = load_workbook(io.BytesIO(resp.content))
        assert wb.sheetnames == ["Cover", "Sites", "Fund Settings"]
        assert wb["Sites"]["A2"].value == "Permian Basin Tract"

    async def test_json_export(self, client: AsyncClient, sample_site: Site):
        resp = await client.get("/v1/reports/export", params={"format": "json"})
        assert resp.status_code == 200
        dump = json.loads(resp.content)
        assert dump["fund"]["fund_size"] == 10_000_000
        assert dump["stage_labels"]["1"] == "Identified"
        assert dump["sites"][0]["site"]["inputs"]["gasVolume"] == 14400
        assert dump["sites"][0]["evaluation"]["estimatedMW"] == 107

    async def test_unknown_format(self, client: AsyncClient):
        resp = await client.get("/v1/reports/export", params={"format": "pdf"})
        assert resp.status_code == 422
