"""Leads service: intake, scoring, review status and conversion to sites."""

from __future__ import annotations

import uuid

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.models.enums import LeadStatus
from portal.models.leads import Lead
from portal.models.sites import Site
from portal.modules.leads.schemas import LeadCreate, LeadStats, LeadUpdate
from portal.modules.leads.scoring import score_lead
from portal.modules.sites import service as sites_service
from portal.modules.sites.schemas import SiteCreate

logger = structlog.get_logger()


class DuplicateLeadError(ValueError):
    """A lead with this email address already exists."""


class LeadConflictError(ValueError):
    """The lead is in a state that does not allow the requested transition."""


def _rescore(lead: Lead) -> None:
    lead.score = score_lead(
        acreage=lead.acreage,
        asking_price=lead.asking_price,
        relationship=lead.relationship.value if lead.relationship else None,
        current_use=lead.current_use,
        email=lead.email,
        phone=lead.phone,
    )


async def _email_taken(
    db: AsyncSession, email: str, exclude_id: uuid.UUID | None = None
) -> bool:
    stmt = select(Lead.id).where(Lead.email == email, Lead.is_deleted.is_(False))
    if exclude_id is not None:
        stmt = stmt.where(Lead.id != exclude_id)
    result = await db.execute(stmt)
    return result.first() is not None


async def get_lead(db: AsyncSession, lead_id: uuid.UUID) -> Lead:
    lead = await db.get(Lead, lead_id)
    if not lead or lead.is_deleted:
        raise LookupError(f"Lead {lead_id} not found")
    return lead


async def list_leads(db: AsyncSession, status: LeadStatus | None = None) -> list[Lead]:
    stmt = select(Lead).where(Lead.is_deleted.is_(False))
    if status is not None:
        stmt = stmt.where(Lead.status == status)
    stmt = stmt.order_by(Lead.score.desc(), Lead.created_at.desc())
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def create_lead(db: AsyncSession, body: LeadCreate) -> Lead:
    if await _email_taken(db, body.email):
        raise DuplicateLeadError(f"A lead with email {body.email} already exists")
    lead = Lead(**body.model_dump(), status=LeadStatus.NEW)
    _rescore(lead)
    db.add(lead)
    await db.flush()
    logger.info("lead_created", lead_id=str(lead.id), score=lead.score, source=lead.source)
    return lead


async def update_lead(db: AsyncSession, lead_id: uuid.UUID, body: LeadUpdate) -> Lead:
    lead = await get_lead(db, lead_id)
    changes = body.model_dump(exclude_unset=True)
    if "email" in changes:
        if changes["email"] is None:
            raise ValueError("email cannot be null")
        if await _email_taken(db, changes["email"], exclude_id=lead.id):
            raise DuplicateLeadError(f"A lead with email {changes['email']} already exists")
    if "status" in changes:
        if changes["status"] is None:
            raise ValueError("status cannot be null")
        if changes["status"] == LeadStatus.CONVERTED and lead.converted_site_id is None:
            raise LeadConflictError("Use the convert action to convert a lead")

    for field, value in changes.items():
        setattr(lead, field, value)
    _rescore(lead)
    await db.flush()
    return lead


async def pass_lead(db: AsyncSession, lead_id: uuid.UUID) -> Lead:
    lead = await get_lead(db, lead_id)
    if lead.status == LeadStatus.CONVERTED:
        raise LeadConflictError("Lead has already been converted to a site")
    lead.status = LeadStatus.PASSED
    await db.flush()
    logger.info("lead_passed", lead_id=str(lead_id))
    return lead


def _site_name(lead: Lead) -> str:
    if lead.company and lead.company.strip():
        return lead.company.strip()
    location = ", ".join(part for part in (lead.city, lead.state) if part)
    if location:
        return f"{location} site"
    person = " ".join(part for part in (lead.first_name, lead.last_name) if part)
    return f"{person or lead.email} site"


async def convert_lead(db: AsyncSession, lead_id: uuid.UUID) -> tuple[Lead, Site]:
    """Open a stage-1 site from the lead and mark the lead converted."""
    lead = await get_lead(db, lead_id)
    if lead.status == LeadStatus.CONVERTED or lead.converted_site_id is not None:
        raise LeadConflictError("Lead has already been converted to a site")

    contact = " ".join(part for part in (lead.first_name, lead.last_name) if part)
    notes = f"Converted from lead {lead.email}"
    if contact:
        notes += f" ({contact})"
    if lead.notes:
        notes += f"\n{lead.notes}"

    site = await sites_service.create_site(
        db,
        SiteCreate(
            name=_site_name(lead),
            city=lead.city,
            state=lead.state,
            county=lead.county,
            acreage=lead.acreage,
            asking_price=lead.asking_price,
            notes=notes,
            inputs={
                k: v
                for k, v in {"acreage": lead.acreage, "askingPrice": lead.asking_price}.items()
                if v is not None
            },
        ),
    )
    lead.status = LeadStatus.CONVERTED
    lead.converted_site_id = site.id
    await db.flush()
    logger.info("lead_converted", lead_id=str(lead_id), site_id=str(site.id))
    return lead, site


async def lead_stats(db: AsyncSession) -> LeadStats:
    result = await db.execute(
        select(Lead.status, func.count())
        .where(Lead.is_deleted.is_(False))
        .group_by(Lead.status)
    )
    counts = {status: count for status, count in result.all()}
    by_status = {status.value: counts.get(status, 0) for status in LeadStatus}
    return LeadStats(total=sum(by_status.values()), by_status=by_status)
