"""Sites service: site CRUD, pipeline view, stage transitions."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

import structlog
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.models.enums import ChecklistStatus, SiteStatus
from portal.models.sites import ChecklistItem, Site, SiteActivity, SiteStageTransition
from portal.modules.checklist.templates import TOTAL_ITEMS
from portal.modules.evaluation.engine import evaluate
from portal.modules.evaluation.schemas import EvaluationResult, FundSettings
from portal.modules.settings import service as settings_service
from portal.modules.sites.schemas import (
    ChecklistProgress,
    SiteCreate,
    SiteSummary,
    SiteUpdate,
    StageHistoryEntry,
)

logger = structlog.get_logger()


def _today():
    return datetime.now(timezone.utc).date()


# ── Lookup ───────────────────────────────────────────────────────────────────


async def get_site(db: AsyncSession, site_id: uuid.UUID) -> Site:
    site = await db.get(Site, site_id)
    if not site or site.is_deleted:
        raise LookupError(f"Site {site_id} not found")
    return site


async def list_sites(
    db: AsyncSession,
    stage: int | None = None,
    status: SiteStatus | None = None,
    search: str | None = None,
) -> list[Site]:
    stmt = select(Site).where(Site.is_deleted.is_(False))
    if stage is not None:
        stmt = stmt.where(Site.stage == stage)
    if status is not None:
        stmt = stmt.where(Site.status == status)
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        stmt = stmt.where(
            or_(
                Site.name.ilike(pattern),
                Site.city.ilike(pattern),
                Site.state.ilike(pattern),
            )
        )
    stmt = stmt.order_by(Site.stage.asc(), Site.updated_at.desc())
    result = await db.execute(stmt)
    return list(result.scalars().all())


# ── Evaluation ───────────────────────────────────────────────────────────────


def evaluate_site(site: Site, fund: FundSettings) -> EvaluationResult:
    return evaluate(site.inputs or {}, fund)


async def get_site_evaluation(db: AsyncSession, site_id: uuid.UUID) -> EvaluationResult:
    site = await get_site(db, site_id)
    fund = await settings_service.get_fund_settings(db)
    return evaluate_site(site, fund)


# ── Pipeline view ────────────────────────────────────────────────────────────


async def checklist_progress(
    db: AsyncSession, site_ids: list[uuid.UUID]
) -> dict[uuid.UUID, ChecklistProgress]:
    """Completed checklist items per site, out of the full template."""
    completed: dict[uuid.UUID, int] = {}
    if site_ids:
        result = await db.execute(
            select(ChecklistItem.site_id, func.count())
            .where(
                ChecklistItem.site_id.in_(site_ids),
                ChecklistItem.status == ChecklistStatus.COMPLETE,
            )
            .group_by(ChecklistItem.site_id)
        )
        completed = {site_id: count for site_id, count in result.all()}
    return {
        site_id: ChecklistProgress(completed=completed.get(site_id, 0), total=TOTAL_ITEMS)
        for site_id in site_ids
    }


async def pipeline(
    db: AsyncSession,
    stage: int | None = None,
    status: SiteStatus | None = None,
    search: str | None = None,
) -> list[SiteSummary]:
    sites = await list_sites(db, stage=stage, status=status, search=search)
    fund = await settings_service.get_fund_settings(db)
    labels = await settings_service.get_stage_labels(db)
    progress = await checklist_progress(db, [s.id for s in sites])

    rows: list[SiteSummary] = []
    for site in sites:
        evaluation = evaluate_site(site, fund)
        rows.append(
            SiteSummary(
                id=site.id,
                name=site.name,
                city=site.city,
                state=site.state,
                stage=site.stage,
                stage_label=settings_service.stage_label(labels, site.stage),
                status=site.status,
                progress=progress[site.id],
                estimated_mw=evaluation.estimated_mw,
                risk_level=evaluation.risk_level,
                updated_at=site.updated_at,
            )
        )
    return rows


# ── Mutations ────────────────────────────────────────────────────────────────


async def _record_stage_change(
    db: AsyncSession, site: Site, from_stage: int | None, to_stage: int
) -> None:
    db.add(SiteStageTransition(site_id=site.id, from_stage=from_stage, to_stage=to_stage))
    if from_stage is not None:
        labels = await settings_service.get_stage_labels(db)
        db.add(
            SiteActivity(
                site_id=site.id,
                activity_date=_today(),
                action=f"Moved to Stage {to_stage}: {settings_service.stage_label(labels, to_stage)}",
                cost=0.0,
                stage=to_stage,
            )
        )
    logger.info(
        "site_stage_changed",
        site_id=str(site.id),
        from_stage=from_stage,
        to_stage=to_stage,
    )


async def create_site(db: AsyncSession, body: SiteCreate) -> Site:
    site = Site(**body.model_dump())
    db.add(site)
    await db.flush()

    db.add(
        SiteActivity(
            site_id=site.id,
            activity_date=_today(),
            action="Site created",
            cost=0.0,
            stage=site.stage,
        )
    )
    await _record_stage_change(db, site, None, site.stage)
    await db.flush()
    return site


async def update_site(db: AsyncSession, site_id: uuid.UUID, body: SiteUpdate) -> Site:
    site = await get_site(db, site_id)
    changes = body.model_dump(exclude_unset=True)
    for field in ("name", "stage", "status"):
        if field in changes and changes[field] is None:
            raise ValueError(f"{field} cannot be null")

    previous_stage = site.stage
    for field, value in changes.items():
        setattr(site, field, value)

    if "stage" in changes and changes["stage"] != previous_stage:
        await _record_stage_change(db, site, previous_stage, changes["stage"])
    await db.flush()
    return site


async def replace_inputs(
    db: AsyncSession, site_id: uuid.UUID, inputs: dict[str, Any]
) -> Site:
    site = await get_site(db, site_id)
    site.inputs = dict(inputs)
    await db.flush()
    logger.info("site_inputs_replaced", site_id=str(site_id), fields=len(inputs))
    return site


async def delete_site(db: AsyncSession, site_id: uuid.UUID) -> None:
    site = await get_site(db, site_id)
    site.is_deleted = True
    await db.flush()


async def stage_history(db: AsyncSession, site_id: uuid.UUID) -> list[StageHistoryEntry]:
    """When the site last entered each pipeline stage (None if never)."""
    await get_site(db, site_id)
    labels = await settings_service.get_stage_labels(db)
    result = await db.execute(
        select(SiteStageTransition.to_stage, func.max(SiteStageTransition.created_at))
        .where(SiteStageTransition.site_id == site_id)
        .group_by(SiteStageTransition.to_stage)
    )
    entered = {stage: at for stage, at in result.all()}
    return [
        StageHistoryEntry(stage=stage, label=label, entered_at=entered.get(stage))
        for stage, label in sorted(labels.items())
    ]
