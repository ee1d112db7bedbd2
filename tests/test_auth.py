"""Tests for the shared-password login and session tokens."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient
from jose import JWTError, jwt

from portal.auth.session import ALGORITHM, check_password, issue_token, verify_token
from portal.core.config import settings

pytestmark = pytest.mark.anyio


@pytest.fixture
def portal_password(monkeypatch) -> str:
    monkeypatch.setattr(settings, "PORTAL_PASSWORD", "correct-horse")
    return "correct-horse"


class TestSessionTokens:
    def test_password_check(self, portal_password: str):
        assert check_password(portal_password) is True
        assert check_password("wrong") is False

    def test_no_password_configured(self, monkeypatch):
        monkeypatch.setattr(settings, "PORTAL_PASSWORD", "")
        assert check_password("") is False

    def test_round_trip(self):
        token, expires_at = issue_token("analyst@example.com")
        user = verify_token(token)
        assert user.email == "analyst@example.com"
        assert abs((user.expires_at - expires_at).total_seconds()) < 1

    def test_expired_token(self):
        token, _ = issue_token(
            "analyst@example.com",
            now=datetime.now(timezone.utc) - timedelta(days=settings.SESSION_TTL_DAYS + 1),
        )
        with pytest.raises(JWTError):
            verify_token(token)

    def test_wrong_audience(self):
        token = jwt.encode(
            {"sub": "a@b.co", "aud": "elsewhere", "exp": 4102444800},
            settings.SECRET_KEY,
            algorithm=ALGORITHM,
        )
        with pytest.raises(JWTError):
            verify_token(token)


class TestAuthAPI:
    async def test_login_sets_cookie(self, anon_client: AsyncClient, portal_password: str):
        """POST /v1/auth/login returns 200 and an HttpOnly session cookie"""
        resp = await anon_client.post(
            "/v1/auth/login",
            json={"email": "analyst@example.com", "password": portal_password},
        )
        assert resp.status_code == 200
        assert resp.json() == {"authenticated": True, "email": "analyst@example.com"}
        set_cookie = resp.headers["set-cookie"]
        assert set_cookie.startswith(f"{settings.SESSION_COOKIE_NAME}=")
        assert "httponly" in set_cookie.lower()

    async def test_bad_password(self, anon_client: AsyncClient, portal_password: str):
        resp = await anon_client.post(
            "/v1/auth/login", json={"email": "analyst@example.com", "password": "nope"}
        )
        assert resp.status_code == 401
        assert resp.json()["error"] == "invalid_credentials"

    async def test_me_with_bearer_token(self, anon_client: AsyncClient, portal_password: str):
        login = await anon_client.post(
            "/v1/auth/login",
            json={"email": "analyst@example.com", "password": portal_password},
        )
        token = login.headers["set-cookie"].split(";", 1)[0].split("=", 1)[1]

        resp = await anon_client.get("/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 200
        assert resp.json()["email"] == "analyst@example.com"

    async def test_unauthenticated(self, anon_client: AsyncClient):
        resp = await anon_client.get("/v1/sites")
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Not authenticated"

    async def test_garbage_token(self, anon_client: AsyncClient):
        resp = await anon_client.get("/v1/sites", headers={"Authorization": "Bearer not-a-jwt"})
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Invalid or expired session"

    async def test_logout_clears_cookie(self, anon_client: AsyncClient):
        resp = await anon_client.post("/v1/auth/logout")
        assert resp.status_code == 204
        assert f'{settings.SESSION_COOKIE_NAME}=""' in resp.headers["set-cookie"]
