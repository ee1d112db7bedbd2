"""Portal session tokens: HS256 JWTs signed with SECRET_KEY.

The portal has a single shared password. A successful login is exchanged
for a signed token that rides in an HttpOnly cookie (or a bearer header
for API clients).
"""

import secrets
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from portal.core.config import settings
from portal.schemas.auth import CurrentUser

ALGORITHM = "HS256"
_AUDIENCE = "site-portal"


def check_password(candidate: str) -> bool:
    """Constant-time comparison against the configured portal password.

    Always False while no password is configured.
    """
    expected = settings.PORTAL_PASSWORD
    if not expected:
        return False
    return secrets.compare_digest(candidate.encode(), expected.encode())


def issue_token(email: str, now: datetime | None = None) -> tuple[str, datetime]:
    issued_at = now or datetime.now(timezone.utc)
    expires_at = issued_at + timedelta(days=settings.SESSION_TTL_DAYS)
    claims = {
        "sub": email,
        "aud": _AUDIENCE,
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    token = jwt.encode(claims, settings.SECRET_KEY, algorithm=ALGORITHM)
    return token, expires_at


def verify_token(token: str) -> CurrentUser:
    """Decode and validate a session token.

    Raises:
        JWTError: signature, audience or expiry check failed, or the
            subject claim is missing.
    """
    payload = jwt.decode(
        token,
        settings.SECRET_KEY,
        algorithms=[ALGORITHM],
        audience=_AUDIENCE,
    )
    subject = payload.get("sub")
    if not subject:
        raise JWTError("Token missing subject claim")
    return CurrentUser(
        email=subject,
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )
