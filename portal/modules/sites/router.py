"""Sites API router: CRUD, pipeline view, evaluation and stage history."""

import uuid
from typing import Any

import structlog
from fastapi import APIRouter, Body, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from portal.auth.dependencies import get_current_user
from portal.core.database import get_db
from portal.models.enums import SiteStatus
from portal.modules.evaluation.schemas import EvaluationResult
from portal.modules.settings import service as settings_service
from portal.modules.sites import service
from portal.modules.sites.schemas import (
    SiteCreate,
    SiteResponse,
    SiteSummary,
    SiteUpdate,
    SiteWithEvaluation,
    StageHistoryEntry,
)
from portal.schemas.auth import CurrentUser

logger = structlog.get_logger()

router = APIRouter(prefix="/sites", tags=["sites"])


@router.get("", response_model=list[SiteSummary])
async def list_sites(
    stage: int | None = Query(None, ge=1, le=7),
    status: SiteStatus | None = Query(None),
    search: str | None = Query(None, max_length=100),
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Pipeline view: live sites with checklist progress and headline evaluation."""
    return await service.pipeline(db, stage=stage, status=status, search=search)


@router.post("", response_model=SiteResponse, status_code=201)
async def create_site(
    body: SiteCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    site = await service.create_site(db, body)
    logger.info("site_created", site_id=str(site.id), stage=site.stage, user=current_user.email)
    return SiteResponse.model_validate(site)


@router.get("/{site_id}", response_model=SiteResponse)
async def get_site(
    site_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        site = await service.get_site(db, site_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return SiteResponse.model_validate(site)


@router.patch("/{site_id}", response_model=SiteResponse)
async def update_site(
    site_id: uuid.UUID,
    body: SiteUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Update site fields. A stage change is logged to the activity feed."""
    try:
        site = await service.update_site(db, site_id, body)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    logger.info("site_updated", site_id=str(site_id), user=current_user.email)
    return SiteResponse.model_validate(site)


@router.delete("/{site_id}", status_code=204)
async def delete_site(
    site_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> None:
    try:
        await service.delete_site(db, site_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    logger.info("site_deleted", site_id=str(site_id), user=current_user.email)


@router.put("/{site_id}/inputs", response_model=SiteWithEvaluation)
async def replace_inputs(
    site_id: uuid.UUID,
    inputs: dict[str, Any] = Body(...),
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Replace the evaluation attribute bag and return the fresh evaluation."""
    try:
        site = await service.replace_inputs(db, site_id, inputs)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    fund = await settings_service.get_fund_settings(db)
    return SiteWithEvaluation(
        site=SiteResponse.model_validate(site),
        evaluation=service.evaluate_site(site, fund),
    )


@router.get("/{site_id}/evaluation", response_model=EvaluationResult)
async def get_evaluation(
    site_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Evaluate the stored inputs against the active fund terms."""
    try:
        return await service.get_site_evaluation(db, site_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))


@router.get("/{site_id}/stage-history", response_model=list[StageHistoryEntry])
async def get_stage_history(
    site_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await service.stage_history(db, site_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
