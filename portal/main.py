from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

import structlog
from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from portal.core.config import settings
from portal.core.errors import global_exception_handler, http_exception_handler
from portal.middleware.security import (
    RequestBodySizeLimitMiddleware,
    SecurityHeadersMiddleware,
)

import portal.models  # noqa: F401  register all models at startup

from portal.auth.router import router as auth_router
from portal.modules.activity.router import router as activity_router
from portal.modules.actuals.router import router as actuals_router
from portal.modules.checklist.router import router as checklist_router
from portal.modules.documents.router import router as documents_router
from portal.modules.evaluation.router import router as evaluation_router
from portal.modules.leads.router import router as leads_router
from portal.modules.reporting.router import router as reporting_router
from portal.modules.settings.router import router as settings_router
from portal.modules.sites.router import router as sites_router
from portal.core.sentry import init_sentry

# ── Sentry: must be initialised BEFORE FastAPI app is created ────────────────
init_sentry(settings.SENTRY_DSN, settings.SENTRY_ENVIRONMENT, settings.APP_VERSION)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None]:
    logger.info("Starting Site Portal API", env=settings.APP_ENV)
    yield
    logger.info("Shutting down Site Portal API")


_is_prod = settings.APP_ENV == "production"

app = FastAPI(
    title="Site Portal API",
    description="Data-center site acquisition pipeline: evaluation, diligence and fund returns.",
    version="0.1.0",
    docs_url=None if _is_prod else "/docs",
    redoc_url=None if _is_prod else "/redoc",
    openapi_url=None if _is_prod else "/openapi.json",
    lifespan=lifespan,
)

app.add_exception_handler(HTTPException, http_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(Exception, global_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "Accept", "X-Request-ID"],
    expose_headers=["Content-Disposition"],
)
# Security middleware (added last = outermost = first to see requests, last to touch responses)
app.add_middleware(
    RequestBodySizeLimitMiddleware,  # type: ignore[arg-type]
    max_bytes=settings.MAX_REQUEST_BODY_BYTES,
)
app.add_middleware(
    SecurityHeadersMiddleware,  # type: ignore[arg-type]
    is_production=_is_prod,
)


# ── X-API-Version response header ────────────────────────────────────────────


@app.middleware("http")
async def add_version_header(request: Request, call_next) -> Response:
    response = await call_next(request)
    response.headers["X-API-Version"] = "v1"
    return response


# ── Health check (root-level, not under /v1) ─────────────────────────────────


@app.get("/health")
async def health_check() -> dict:
    """Probes the database; reports degraded rather than failing."""
    checks: dict[str, dict] = {}

    try:
        from sqlalchemy import text
        from portal.core.database import async_session_factory
        async with async_session_factory() as db:
            await db.execute(text("SELECT 1"))
        checks["database"] = {"status": "healthy"}
    except Exception as exc:
        checks["database"] = {"status": "unhealthy", "error": str(exc)}

    overall = (
        "healthy"
        if all(c["status"] == "healthy" for c in checks.values())
        else "degraded"
    )
    return {"status": overall, "service": "site-portal-api", "checks": checks}


# ── /v1 versioned router ──────────────────────────────────────────────────────

api_v1 = APIRouter(prefix="/v1")

api_v1.include_router(auth_router)
api_v1.include_router(sites_router)
api_v1.include_router(evaluation_router)
api_v1.include_router(checklist_router)
api_v1.include_router(activity_router)
api_v1.include_router(actuals_router)
api_v1.include_router(documents_router)
api_v1.include_router(leads_router)
api_v1.include_router(settings_router)
api_v1.include_router(reporting_router)

app.include_router(api_v1)
