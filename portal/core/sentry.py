"""Error reporting to Sentry for the portal API."""

import structlog
import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

from portal.core.config import settings

logger = structlog.get_logger()

REDACTED = "[REDACTED]"
_CREDENTIAL_HEADERS = frozenset({"authorization", "cookie", "set-cookie"})


def _traces_rate(environment: str) -> float:
    return 0.1 if environment == "production" else 1.0


def redact_credentials(event: dict, hint: dict) -> dict:
    """``before_send`` hook: strip the portal session and bearer tokens."""
    request = event.get("request") or {}
    headers = request.get("headers") or {}
    for name in headers:
        if name.lower() in _CREDENTIAL_HEADERS:
            headers[name] = REDACTED
    cookies = request.get("cookies")
    if isinstance(cookies, dict) and settings.SESSION_COOKIE_NAME in cookies:
        cookies[settings.SESSION_COOKIE_NAME] = REDACTED
    elif cookies:
        request["cookies"] = REDACTED
    return event


def init_sentry(
    dsn: str | None,
    environment: str = "development",
    release: str | None = None,
) -> None:
    """Start the Sentry client; skipped entirely when no DSN is configured.

    Must run before the app object exists so the FastAPI integration can
    patch routing.
    """
    if not dsn:
        logger.info("error_reporting_off", environment=environment)
        return

    rate = _traces_rate(environment)
    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        release=release,
        traces_sample_rate=rate,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
        ],
        send_default_pii=False,
        before_send=redact_credentials,
    )
    logger.info("error_reporting_on", environment=environment, release=release, traces_rate=rate)
