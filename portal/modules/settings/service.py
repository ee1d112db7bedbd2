"""Settings service: active fund terms and pipeline stage labels."""

from __future__ import annotations

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.models.fund import FundSettingsRecord, PipelineStage
from portal.modules.evaluation.schemas import FundSettings
from portal.modules.settings.schemas import FundSettingsUpdate

logger = structlog.get_logger()

STAGE_COUNT = 7
DEFAULT_STAGE_LABELS = [
    "Identified",
    "Gas Confirmed",
    "Power Secured",
    "Permits Filed",
    "De-risked",
    "Marketing",
    "Closed",
]

# ── Fund settings ────────────────────────────────────────────────────────────


async def get_active_fund_record(db: AsyncSession) -> FundSettingsRecord | None:
    result = await db.execute(
        select(FundSettingsRecord)
        .order_by(FundSettingsRecord.created_at.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def get_fund_settings(db: AsyncSession) -> FundSettings:
    """The active fund terms, or the defaults when none have been saved."""
    record = await get_active_fund_record(db)
    if record is None:
        return FundSettings()
    return FundSettings.model_validate(record)


async def update_fund_settings(
    db: AsyncSession, body: FundSettingsUpdate
) -> FundSettingsRecord:
    """Save a new revision: the update merged onto the currently active terms."""
    current = await get_fund_settings(db)
    values = current.model_dump()
    values.update(body.model_dump(exclude_none=True))

    record = FundSettingsRecord(**values)
    db.add(record)
    await db.flush()
    logger.info("fund_settings_updated", **values)
    return record


# ── Stage labels ─────────────────────────────────────────────────────────────


async def get_stage_labels(db: AsyncSession) -> dict[int, str]:
    labels = {i + 1: label for i, label in enumerate(DEFAULT_STAGE_LABELS)}
    result = await db.execute(select(PipelineStage))
    for row in result.scalars().all():
        if 1 <= row.stage <= STAGE_COUNT:
            labels[row.stage] = row.label
    return labels


async def update_stage_labels(db: AsyncSession, labels: list[str]) -> dict[int, str]:
    if len(labels) != STAGE_COUNT:
        raise ValueError(f"Expected {STAGE_COUNT} stage labels, got {len(labels)}")

    result = await db.execute(select(PipelineStage))
    existing = {row.stage: row for row in result.scalars().all()}
    for stage, label in enumerate(labels, start=1):
        row = existing.get(stage)
        if row is None:
            db.add(PipelineStage(stage=stage, label=label))
        else:
            row.label = label
    await db.flush()
    logger.info("stage_labels_updated", labels=labels)
    return {stage: label for stage, label in enumerate(labels, start=1)}


def stage_label(labels: dict[int, str], stage: int) -> str:
    return labels.get(stage, f"Stage {stage}")
