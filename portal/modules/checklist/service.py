"""Checklist service: per-site item state merged onto the stage template."""

from __future__ import annotations

import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.models.enums import ChecklistStatus
from portal.models.sites import ChecklistItem, Site
from portal.modules.checklist.schemas import (
    ChecklistItemState,
    ChecklistItemUpdate,
    ChecklistResponse,
    ChecklistStage,
    KillTriggerAlert,
)
from portal.modules.checklist.templates import STAGE_CHECKLISTS, TOTAL_ITEMS, get_item
from portal.modules.sites.service import get_site

logger = structlog.get_logger()


def _stage_progress(items: list[ChecklistItemState]) -> int:
    if not items:
        return 0
    complete = sum(1 for item in items if item.status == ChecklistStatus.COMPLETE)
    return round(complete / len(items) * 100)


async def _rows_by_key(
    db: AsyncSession, site_id: uuid.UUID
) -> dict[tuple[int, str], ChecklistItem]:
    result = await db.execute(
        select(ChecklistItem).where(ChecklistItem.site_id == site_id)
    )
    return {(row.stage, row.item_key): row for row in result.scalars().all()}


async def get_checklist(db: AsyncSession, site_id: uuid.UUID) -> ChecklistResponse:
    await get_site(db, site_id)
    rows = await _rows_by_key(db, site_id)

    stages: list[ChecklistStage] = []
    alerts: list[KillTriggerAlert] = []
    completed = 0
    for template in STAGE_CHECKLISTS:
        items: list[ChecklistItemState] = []
        for item in template.items:
            row = rows.get((template.stage, item.key))
            state = ChecklistItemState(
                key=item.key,
                name=item.name,
                kill_trigger=item.kill_trigger,
                status=row.status if row else ChecklistStatus.NOT_STARTED,
                date=row.status_date if row else None,
                notes=row.notes if row else None,
            )
            items.append(state)
            if state.status == ChecklistStatus.COMPLETE:
                completed += 1
            if item.kill_trigger and state.status == ChecklistStatus.BLOCKED:
                alerts.append(
                    KillTriggerAlert(
                        stage=template.stage,
                        key=item.key,
                        name=item.name,
                        message=item.kill_trigger,
                    )
                )
        stages.append(
            ChecklistStage(
                stage=template.stage,
                name=template.name,
                progress=_stage_progress(items),
                items=items,
            )
        )

    return ChecklistResponse(
        stages=stages,
        completed=completed,
        total=TOTAL_ITEMS,
        kill_triggers=alerts,
    )


async def update_item(
    db: AsyncSession,
    site_id: uuid.UUID,
    stage: int,
    key: str,
    body: ChecklistItemUpdate,
) -> ChecklistItemState:
    """Upsert the state of one checklist item.

    Raises:
        LookupError: unknown site, stage or item key.
    """
    await get_site(db, site_id)
    template_item = get_item(stage, key)

    rows = await _rows_by_key(db, site_id)
    row = rows.get((stage, key))
    if row is None:
        row = ChecklistItem(site_id=site_id, stage=stage, item_key=key)
        db.add(row)
    row.status = body.status
    row.status_date = body.date
    row.notes = body.notes
    await db.flush()

    if template_item.kill_trigger and body.status == ChecklistStatus.BLOCKED:
        logger.warning(
            "checklist_kill_trigger",
            site_id=str(site_id),
            stage=stage,
            item=key,
            message=template_item.kill_trigger,
        )

    return ChecklistItemState(
        key=template_item.key,
        name=template_item.name,
        kill_trigger=template_item.kill_trigger,
        status=row.status,
        date=row.status_date,
        notes=row.notes,
    )


async def sites_with_kill_triggers(db: AsyncSession) -> set[uuid.UUID]:
    """IDs of live sites with at least one blocked kill-trigger item."""
    triggers = {
        (template.stage, item.key)
        for template in STAGE_CHECKLISTS
        for item in template.items
        if item.kill_trigger
    }
    result = await db.execute(
        select(ChecklistItem.site_id, ChecklistItem.stage, ChecklistItem.item_key)
        .join(Site, Site.id == ChecklistItem.site_id)
        .where(
            ChecklistItem.status == ChecklistStatus.BLOCKED,
            Site.is_deleted.is_(False),
        )
    )
    return {
        site_id
        for site_id, stage, key in result.all()
        if (stage, key) in triggers
    }
