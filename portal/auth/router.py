"""Auth API router: shared-password login, logout, session probe."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Response, status

from portal.auth.dependencies import get_current_user
from portal.auth.session import check_password, issue_token
from portal.core.config import settings
from portal.schemas.auth import CurrentUser, LoginRequest, LoginResponse

logger = structlog.get_logger()

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, response: Response) -> LoginResponse:
    """Exchange the portal password for a session cookie."""
    if not check_password(body.password):
        logger.warning("portal_login_failed", email=body.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "invalid_credentials", "message": "Invalid password"},
        )

    token, expires_at = issue_token(body.email)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_TTL_DAYS * 24 * 60 * 60,
        expires=expires_at,
        httponly=True,
        secure=settings.APP_ENV == "production",
        samesite="lax",
        path="/",
    )
    logger.info("portal_login", email=body.email)
    return LoginResponse(authenticated=True, email=body.email)


@router.post("/logout", status_code=204)
async def logout(response: Response) -> None:
    response.delete_cookie(settings.SESSION_COOKIE_NAME, path="/")


@router.get("/me", response_model=CurrentUser)
async def me(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Return the identity attached to the current session."""
    return current_user
