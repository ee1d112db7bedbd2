"""Reporting service: portfolio dashboard, side-by-side comparison and exports."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from portal.models.enums import SiteStatus
from portal.models.sites import Site
from portal.modules.activity.service import recent_activity
from portal.modules.checklist.service import sites_with_kill_triggers
from portal.modules.evaluation.schemas import EvaluationResult, FundSettings
from portal.modules.reporting.generators import CSVGenerator, XLSXGenerator
from portal.modules.reporting.schemas import (
    CompareResponse,
    DashboardResponse,
    FunnelStage,
    PortfolioExport,
)
from portal.modules.settings import service as settings_service
from portal.modules.sites import service as sites_service
from portal.modules.sites.schemas import SiteResponse, SiteWithEvaluation

logger = structlog.get_logger()

COMPARE_MIN = 2
COMPARE_MAX = 4

EXPORT_SECTIONS = [
    {"name": "sites", "title": "Sites"},
    {"name": "fund", "title": "Fund Settings"},
]


# ── Dashboard ────────────────────────────────────────────────────────────────


async def dashboard(db: AsyncSession) -> DashboardResponse:
    """Headline numbers over active sites, plus the stage funnel and feed."""
    sites = await sites_service.list_sites(db, status=SiteStatus.ACTIVE)
    fund = await settings_service.get_fund_settings(db)
    labels = await settings_service.get_stage_labels(db)

    evaluations = [sites_service.evaluate_site(site, fund) for site in sites]
    counts: dict[int, int] = {}
    for site in sites:
        counts[site.stage] = counts.get(site.stage, 0) + 1

    avg_risk = (
        round(sum(e.risk_score for e in evaluations) / len(evaluations), 1)
        if evaluations
        else 0.0
    )
    return DashboardResponse(
        active_sites=len(sites),
        total_mw=sum(e.estimated_mw for e in evaluations),
        total_gross_exit=round(sum(e.fund_returns.gross_exit for e in evaluations), 2),
        avg_risk_score=avg_risk,
        funnel=[
            FunnelStage(stage=stage, label=label, count=counts.get(stage, 0))
            for stage, label in sorted(labels.items())
        ],
        kill_trigger_sites=len(await sites_with_kill_triggers(db)),
        recent_activity=await recent_activity(db, limit=5),
    )


# ── Compare ──────────────────────────────────────────────────────────────────


async def compare(db: AsyncSession, site_ids: list[uuid.UUID]) -> CompareResponse:
    """Evaluate 2-4 sites side by side, in the order requested.

    Raises:
        ValueError: too few or too many (distinct) site IDs.
        LookupError: one of the sites does not exist.
    """
    unique_ids = list(dict.fromkeys(site_ids))
    if not COMPARE_MIN <= len(unique_ids) <= COMPARE_MAX:
        raise ValueError(
            f"Compare takes {COMPARE_MIN} to {COMPARE_MAX} distinct sites, got {len(unique_ids)}"
        )

    fund = await settings_service.get_fund_settings(db)
    rows: list[SiteWithEvaluation] = []
    for site_id in unique_ids:
        site = await sites_service.get_site(db, site_id)
        rows.append(
            SiteWithEvaluation(
                site=SiteResponse.model_validate(site),
                evaluation=sites_service.evaluate_site(site, fund),
            )
        )
    return CompareResponse(sites=rows)


# ── Export ───────────────────────────────────────────────────────────────────


def export_row(site: Site, label: str, evaluation: EvaluationResult) -> dict[str, Any]:
    """Flat row of the key figures for one site."""
    return {
        "name": site.name,
        "city": site.city,
        "state": site.state,
        "stage": site.stage,
        "stage_label": label,
        "status": site.status.value,
        "acreage": site.acreage,
        "asking_price": site.asking_price,
        "estimated_mw": evaluation.estimated_mw,
        "total_gas_cost": evaluation.total_gas_cost,
        "de_risking_total": evaluation.de_risking_costs.total,
        "risk_score": evaluation.risk_score,
        "risk_level": evaluation.risk_level,
        "timeline_low": evaluation.timeline.low,
        "timeline_high": evaluation.timeline.high,
        "gross_exit": evaluation.fund_returns.gross_exit,
        "total_lp": evaluation.fund_returns.total_lp,
        "lp_multiple": evaluation.fund_returns.lp_multiple,
    }


async def _export_data(
    db: AsyncSession,
) -> tuple[list[Site], list[EvaluationResult], dict[int, str], FundSettings]:
    sites = await sites_service.list_sites(db)
    fund = await settings_service.get_fund_settings(db)
    labels = await settings_service.get_stage_labels(db)
    evaluations = [sites_service.evaluate_site(site, fund) for site in sites]
    return sites, evaluations, labels, fund


async def export_rows(db: AsyncSession) -> list[dict[str, Any]]:
    sites, evaluations, labels, _ = await _export_data(db)
    return [
        export_row(site, settings_service.stage_label(labels, site.stage), evaluation)
        for site, evaluation in zip(sites, evaluations)
    ]


async def export_csv(db: AsyncSession) -> tuple[bytes, str]:
    rows = await export_rows(db)
    logger.info("export_generated", format="csv", sites=len(rows))
    return CSVGenerator(title="Site Portfolio").generate({"sites": rows}, EXPORT_SECTIONS[:1])


async def export_xlsx(db: AsyncSession) -> tuple[bytes, str]:
    sites, evaluations, labels, fund = await _export_data(db)
    rows = [
        export_row(site, settings_service.stage_label(labels, site.stage), evaluation)
        for site, evaluation in zip(sites, evaluations)
    ]
    data = {
        "summary": {
            "sites": len(rows),
            "total_mw": sum(e.estimated_mw for e in evaluations),
            "total_gross_exit": round(sum(e.fund_returns.gross_exit for e in evaluations), 2),
        },
        "sites": rows,
        "fund": fund.model_dump(),
    }
    logger.info("export_generated", format="xlsx", sites=len(rows))
    return XLSXGenerator(title="Site Portfolio").generate(data, EXPORT_SECTIONS)


async def export_json(db: AsyncSession) -> tuple[bytes, str]:
    sites, evaluations, labels, fund = await _export_data(db)
    dump = PortfolioExport(
        exported_at=datetime.now(timezone.utc),
        fund=fund,
        stage_labels=labels,
        sites=[
            SiteWithEvaluation(site=SiteResponse.model_validate(site), evaluation=evaluation)
            for site, evaluation in zip(sites, evaluations)
        ],
    )
    logger.info("export_generated", format="json", sites=len(sites))
    return dump.model_dump_json(by_alias=True, indent=2).encode("utf-8"), "application/json"
