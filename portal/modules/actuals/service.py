"""Actuals service: de-risking spend against the engine's estimates."""

from __future__ import annotations

import uuid
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from portal.models.sites import Site
from portal.modules.actuals.schemas import (
    ActualLine,
    ActualsResponse,
    ActualsTotals,
    ActualUpdate,
)
from portal.modules.evaluation.schemas import DeRiskingCosts, to_number
from portal.modules.settings import service as settings_service
from portal.modules.sites.service import evaluate_site, get_site

logger = structlog.get_logger()

CATEGORY_LABELS: dict[str, str] = {
    "site_control": "Site Control",
    "gas_studies": "Gas Studies",
    "enviro": "Environmental",
    "air_permit": "Air Permit",
    "fiber": "Fiber",
    "political": "Political/Community",
    "engineering": "Engineering",
    "demo": "Demolition",
    "exit_costs": "Exit Costs",
}


def build_actuals(estimates: DeRiskingCosts, stored: dict[str, Any]) -> ActualsResponse:
    lines: list[ActualLine] = []
    for key, label in CATEGORY_LABELS.items():
        entry = stored.get(key) or {}
        estimated = getattr(estimates, key)
        actual = to_number(entry.get("actual"))
        lines.append(
            ActualLine(
                key=key,
                label=label,
                estimated=estimated,
                actual=actual,
                variance=round(actual - estimated, 2),
                notes=entry.get("notes"),
            )
        )

    total_estimated = round(sum(line.estimated for line in lines), 2)
    total_actual = round(sum(line.actual for line in lines), 2)
    burn_pct = round(total_actual / total_estimated * 100, 1) if total_estimated else 0.0
    return ActualsResponse(
        categories=lines,
        totals=ActualsTotals(
            estimated=total_estimated,
            actual=total_actual,
            variance=round(total_actual - total_estimated, 2),
            burn_pct=burn_pct,
        ),
    )


async def _estimates(db: AsyncSession, site: Site) -> DeRiskingCosts:
    fund = await settings_service.get_fund_settings(db)
    return evaluate_site(site, fund).de_risking_costs


async def get_actuals(db: AsyncSession, site_id: uuid.UUID) -> ActualsResponse:
    site = await get_site(db, site_id)
    return build_actuals(await _estimates(db, site), site.actuals or {})


async def update_actual(
    db: AsyncSession, site_id: uuid.UUID, category: str, body: ActualUpdate
) -> ActualLine:
    if category not in CATEGORY_LABELS:
        raise LookupError(f"Unknown de-risking category {category!r}")
    site = await get_site(db, site_id)

    stored = dict(site.actuals or {})
    stored[category] = {"actual": body.actual, "notes": body.notes}
    site.actuals = stored
    await db.flush()
    logger.info("site_actual_recorded", site_id=str(site_id), category=category, actual=body.actual)

    response = build_actuals(await _estimates(db, site), stored)
    return next(line for line in response.categories if line.key == category)
