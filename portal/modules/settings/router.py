"""Settings API router: fund terms and pipeline stage labels."""

import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from portal.auth.dependencies import get_current_user
from portal.core.database import get_db
from portal.modules.settings import service
from portal.modules.settings.schemas import (
    FundSettingsResponse,
    FundSettingsUpdate,
    StageLabel,
    StageLabelsUpdate,
)
from portal.schemas.auth import CurrentUser

logger = structlog.get_logger()

router = APIRouter(prefix="/settings", tags=["settings"])


# ── Fund ─────────────────────────────────────────────────────────────────────


@router.get("/fund", response_model=FundSettingsResponse)
async def get_fund_settings(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Active fund terms (defaults until the first save)."""
    record = await service.get_active_fund_record(db)
    if record is None:
        return FundSettingsResponse(**(await service.get_fund_settings(db)).model_dump())
    return FundSettingsResponse.model_validate(record)


@router.put("/fund", response_model=FundSettingsResponse)
async def update_fund_settings(
    body: FundSettingsUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    record = await service.update_fund_settings(db, body)
    logger.info("fund_settings_saved", user=current_user.email)
    return FundSettingsResponse.model_validate(record)


# ── Stage labels ─────────────────────────────────────────────────────────────


@router.get("/stages", response_model=list[StageLabel])
async def get_stage_labels(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    labels = await service.get_stage_labels(db)
    return [StageLabel(stage=stage, label=label) for stage, label in sorted(labels.items())]


@router.put("/stages", response_model=list[StageLabel])
async def update_stage_labels(
    body: StageLabelsUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Rename the seven pipeline stages."""
    try:
        labels = await service.update_stage_labels(db, body.labels)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return [StageLabel(stage=stage, label=label) for stage, label in sorted(labels.items())]
