"""Checklist API router: stage gate items per site."""

import uuid

import structlog
from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.ext.asyncio import AsyncSession

from portal.auth.dependencies import get_current_user
from portal.core.database import get_db
from portal.modules.checklist import service
from portal.modules.checklist.schemas import (
    ChecklistItemState,
    ChecklistItemUpdate,
    ChecklistResponse,
)
from portal.schemas.auth import CurrentUser

logger = structlog.get_logger()

router = APIRouter(prefix="/sites/{site_id}/checklist", tags=["checklist"])


@router.get("", response_model=ChecklistResponse)
async def get_checklist(
    site_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """All seven stages with item state, progress and active kill triggers."""
    try:
        return await service.get_checklist(db, site_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))


@router.put("/{stage}/{item_key}", response_model=ChecklistItemState)
async def update_item(
    site_id: uuid.UUID,
    body: ChecklistItemUpdate,
    stage: int,
    item_key: str = Path(..., max_length=100),
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        item = await service.update_item(db, site_id, stage, item_key, body)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    logger.info(
        "checklist_item_updated",
        site_id=str(site_id),
        stage=stage,
        item=item_key,
        status=body.status.value,
    )
    return item
