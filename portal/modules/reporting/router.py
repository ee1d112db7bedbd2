"""Reporting API router: dashboard, compare and portfolio export."""

import uuid
from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from portal.auth.dependencies import get_current_user
from portal.core.database import get_db
from portal.modules.reporting import service
from portal.modules.reporting.schemas import CompareResponse, DashboardResponse, ExportFormat
from portal.schemas.auth import CurrentUser

logger = structlog.get_logger()

router = APIRouter(prefix="/reports", tags=["reports"])

_EXPORTERS = {
    ExportFormat.CSV: service.export_csv,
    ExportFormat.XLSX: service.export_xlsx,
    ExportFormat.JSON: service.export_json,
}


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await service.dashboard(db)


@router.get("/compare", response_model=CompareResponse)
async def compare_sites(
    site_ids: list[uuid.UUID] = Query(...),
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Evaluate 2-4 sites side by side."""
    try:
        return await service.compare(db, site_ids)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))


@router.get("/export")
async def export_portfolio(
    format: ExportFormat = Query(ExportFormat.CSV),
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Download every live site with its key evaluation outputs."""
    content, media_type = await _EXPORTERS[format](db)
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d")
    filename = f"site_portfolio_{stamp}.{format.value}"
    logger.info("portfolio_exported", format=format.value, user=current_user.email)
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
