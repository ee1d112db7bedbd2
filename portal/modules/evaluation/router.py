"""Evaluation API router: stateless what-if evaluation of unsaved inputs."""

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from portal.auth.dependencies import get_current_user
from portal.core.database import get_db
from portal.modules.evaluation.engine import evaluate
from portal.modules.evaluation.schemas import EvaluationPreviewRequest, EvaluationResult
from portal.modules.settings import service as settings_service
from portal.schemas.auth import CurrentUser

logger = structlog.get_logger()

router = APIRouter(prefix="/evaluation", tags=["evaluation"])


@router.post("/preview", response_model=EvaluationResult)
async def preview(
    body: EvaluationPreviewRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> EvaluationResult:
    """Evaluate an attribute bag without saving it.

    Uses the active fund terms unless the request carries its own.
    """
    fund = body.fund or await settings_service.get_fund_settings(db)
    result = evaluate(body.inputs, fund)
    logger.info(
        "evaluation_preview",
        estimated_mw=result.estimated_mw,
        risk_score=result.risk_score,
    )
    return result
