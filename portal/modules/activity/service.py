"""Activity service: dated log entries and spend per site."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.models.sites import Site, SiteActivity
from portal.modules.activity.schemas import (
    ActivityCreate,
    ActivityListResponse,
    ActivityResponse,
    RecentActivity,
)
from portal.modules.sites.service import get_site

logger = structlog.get_logger()


def to_response(entry: SiteActivity) -> ActivityResponse:
    return ActivityResponse(
        id=entry.id,
        site_id=entry.site_id,
        date=entry.activity_date,
        action=entry.action,
        notes=entry.notes,
        cost=entry.cost,
        stage=entry.stage,
        created_at=entry.created_at,
    )


async def list_activity(db: AsyncSession, site_id: uuid.UUID) -> ActivityListResponse:
    await get_site(db, site_id)
    result = await db.execute(
        select(SiteActivity)
        .where(SiteActivity.site_id == site_id)
        .order_by(SiteActivity.activity_date.desc(), SiteActivity.created_at.desc())
    )
    entries = result.scalars().all()
    return ActivityListResponse(
        items=[to_response(e) for e in entries],
        total_cost=round(sum(e.cost for e in entries), 2),
    )


async def add_activity(
    db: AsyncSession, site_id: uuid.UUID, body: ActivityCreate
) -> SiteActivity:
    site = await get_site(db, site_id)
    entry = SiteActivity(
        site_id=site.id,
        activity_date=body.date or datetime.now(timezone.utc).date(),
        action=body.action.strip(),
        notes=body.notes,
        cost=body.cost,
        stage=body.stage or site.stage,
    )
    db.add(entry)
    await db.flush()
    return entry


async def delete_activity(
    db: AsyncSession, site_id: uuid.UUID, entry_id: uuid.UUID
) -> None:
    await get_site(db, site_id)
    entry = await db.get(SiteActivity, entry_id)
    if entry is None or entry.site_id != site_id:
        raise LookupError(f"Activity {entry_id} not found")
    await db.delete(entry)
    await db.flush()


async def recent_activity(db: AsyncSession, limit: int = 5) -> list[RecentActivity]:
    """Latest entries across all live sites, for the dashboard feed."""
    result = await db.execute(
        select(SiteActivity, Site.name)
        .join(Site, Site.id == SiteActivity.site_id)
        .where(Site.is_deleted.is_(False))
        .order_by(SiteActivity.activity_date.desc(), SiteActivity.created_at.desc())
        .limit(limit)
    )
    return [
        RecentActivity(**to_response(entry).model_dump(), site_name=name)
        for entry, name in result.all()
    ]
