"""Documents service: external file links attached to sites."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.models.enums import DocumentCategory
from portal.models.sites import Site, SiteDocument
from portal.modules.documents.schemas import DocumentCreate, DocumentResponse, DocumentWithSite
from portal.modules.sites.service import get_site


async def list_site_documents(
    db: AsyncSession,
    site_id: uuid.UUID,
    category: DocumentCategory | None = None,
) -> list[SiteDocument]:
    await get_site(db, site_id)
    stmt = select(SiteDocument).where(SiteDocument.site_id == site_id)
    if category is not None:
        stmt = stmt.where(SiteDocument.category == category)
    stmt = stmt.order_by(SiteDocument.date_added.desc(), SiteDocument.created_at.desc())
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def list_all_documents(
    db: AsyncSession, category: DocumentCategory | None = None
) -> list[DocumentWithSite]:
    stmt = (
        select(SiteDocument, Site.name)
        .join(Site, Site.id == SiteDocument.site_id)
        .where(Site.is_deleted.is_(False))
    )
    if category is not None:
        stmt = stmt.where(SiteDocument.category == category)
    stmt = stmt.order_by(SiteDocument.date_added.desc(), SiteDocument.created_at.desc())
    result = await db.execute(stmt)
    return [
        DocumentWithSite(
            **DocumentResponse.model_validate(doc).model_dump(),
            site_name=site_name,
        )
        for doc, site_name in result.all()
    ]


async def add_document(
    db: AsyncSession, site_id: uuid.UUID, body: DocumentCreate
) -> SiteDocument:
    await get_site(db, site_id)
    doc = SiteDocument(
        site_id=site_id,
        name=body.name.strip(),
        url=body.url,
        category=body.category,
        date_added=datetime.now(timezone.utc).date(),
    )
    db.add(doc)
    await db.flush()
    return doc


async def delete_document(
    db: AsyncSession, site_id: uuid.UUID, doc_id: uuid.UUID
) -> None:
    await get_site(db, site_id)
    doc = await db.get(SiteDocument, doc_id)
    if doc is None or doc.site_id != site_id:
        raise LookupError(f"Document {doc_id} not found")
    await db.delete(doc)
    await db.flush()
