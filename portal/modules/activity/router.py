"""Activity API router: per-site activity log."""

import uuid

import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from portal.auth.dependencies import get_current_user
from portal.core.database import get_db
from portal.modules.activity import service
from portal.modules.activity.schemas import (
    ActivityCreate,
    ActivityListResponse,
    ActivityResponse,
)
from portal.schemas.auth import CurrentUser

logger = structlog.get_logger()

router = APIRouter(prefix="/sites/{site_id}/activity", tags=["activity"])


@router.get("", response_model=ActivityListResponse)
async def list_activity(
    site_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Entries newest first, with the running spend total."""
    try:
        return await service.list_activity(db, site_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))


@router.post("", response_model=ActivityResponse, status_code=201)
async def add_activity(
    site_id: uuid.UUID,
    body: ActivityCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        entry = await service.add_activity(db, site_id, body)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    logger.info(
        "activity_logged",
        site_id=str(site_id),
        cost=entry.cost,
        user=current_user.email,
    )
    return service.to_response(entry)


@router.delete("/{entry_id}", status_code=204)
async def delete_activity(
    site_id: uuid.UUID,
    entry_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> None:
    try:
        await service.delete_activity(db, site_id, entry_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
