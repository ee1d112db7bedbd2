"""Actuals API router: de-risking budget vs. actual spend per site."""

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from portal.auth.dependencies import get_current_user
from portal.core.database import get_db
from portal.modules.actuals import service
from portal.modules.actuals.schemas import ActualLine, ActualsResponse, ActualUpdate
from portal.schemas.auth import CurrentUser

router = APIRouter(prefix="/sites/{site_id}/actuals", tags=["actuals"])


@router.get("", response_model=ActualsResponse)
async def get_actuals(
    site_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await service.get_actuals(db, site_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))


@router.put("/{category}", response_model=ActualLine)
async def update_actual(
    site_id: uuid.UUID,
    category: str,
    body: ActualUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Record actual spend for one de-risking category."""
    try:
        return await service.update_actual(db, site_id, category, body)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
