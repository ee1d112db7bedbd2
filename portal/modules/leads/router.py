"""Leads API router: intake, review, pass and convert."""

import uuid

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from portal.auth.dependencies import get_current_user
from portal.core.database import get_db
from portal.models.enums import LeadStatus
from portal.modules.leads import service
from portal.modules.leads.schemas import (
    LeadConvertResponse,
    LeadCreate,
    LeadResponse,
    LeadStats,
    LeadUpdate,
)
from portal.schemas.auth import CurrentUser

logger = structlog.get_logger()

router = APIRouter(prefix="/leads", tags=["leads"])


@router.get("", response_model=list[LeadResponse])
async def list_leads(
    status: LeadStatus | None = Query(None),
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Leads ordered by score, best first."""
    leads = await service.list_leads(db, status=status)
    return [LeadResponse.model_validate(lead) for lead in leads]


@router.get("/stats", response_model=LeadStats)
async def lead_stats(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await service.lead_stats(db)


@router.post("", response_model=LeadResponse, status_code=201)
async def create_lead(
    body: LeadCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        lead = await service.create_lead(db, body)
    except service.DuplicateLeadError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return LeadResponse.model_validate(lead)


@router.get("/{lead_id}", response_model=LeadResponse)
async def get_lead(
    lead_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        lead = await service.get_lead(db, lead_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return LeadResponse.model_validate(lead)


@router.patch("/{lead_id}", response_model=LeadResponse)
async def update_lead(
    lead_id: uuid.UUID,
    body: LeadUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Edit lead details or review status; the score is recomputed."""
    try:
        lead = await service.update_lead(db, lead_id, body)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except (service.DuplicateLeadError, service.LeadConflictError) as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    logger.info("lead_updated", lead_id=str(lead_id), user=current_user.email)
    return LeadResponse.model_validate(lead)


@router.post("/{lead_id}/pass", response_model=LeadResponse)
async def pass_lead(
    lead_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        lead = await service.pass_lead(db, lead_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except service.LeadConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return LeadResponse.model_validate(lead)


@router.post("/{lead_id}/convert", response_model=LeadConvertResponse, status_code=201)
async def convert_lead(
    lead_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Open a stage-1 site from this lead."""
    try:
        lead, site = await service.convert_lead(db, lead_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except service.LeadConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    logger.info("lead_converted_by", lead_id=str(lead_id), user=current_user.email)
    return LeadConvertResponse(lead=LeadResponse.model_validate(lead), site_id=site.id)
