"""Documents API router: per-site links plus the cross-site library."""

import uuid

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from portal.auth.dependencies import get_current_user
from portal.core.database import get_db
from portal.models.enums import DocumentCategory
from portal.modules.documents import service
from portal.modules.documents.schemas import (
    DocumentCreate,
    DocumentResponse,
    DocumentWithSite,
)
from portal.schemas.auth import CurrentUser

logger = structlog.get_logger()

router = APIRouter(tags=["documents"])


@router.get("/documents", response_model=list[DocumentWithSite])
async def list_all_documents(
    category: DocumentCategory | None = Query(None),
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Document library across all live sites, newest first."""
    return await service.list_all_documents(db, category=category)


@router.get("/sites/{site_id}/documents", response_model=list[DocumentResponse])
async def list_site_documents(
    site_id: uuid.UUID,
    category: DocumentCategory | None = Query(None),
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        docs = await service.list_site_documents(db, site_id, category=category)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return [DocumentResponse.model_validate(d) for d in docs]


@router.post("/sites/{site_id}/documents", response_model=DocumentResponse, status_code=201)
async def add_document(
    site_id: uuid.UUID,
    body: DocumentCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        doc = await service.add_document(db, site_id, body)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    logger.info(
        "document_linked",
        site_id=str(site_id),
        category=doc.category.value,
        user=current_user.email,
    )
    return DocumentResponse.model_validate(doc)


@router.delete("/sites/{site_id}/documents/{doc_id}", status_code=204)
async def delete_document(
    site_id: uuid.UUID,
    doc_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> None:
    try:
        await service.delete_document(db, site_id, doc_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
