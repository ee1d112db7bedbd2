"""Shared test fixtures for the Site Portal API test suite."""

import os

# Point the app at in-memory SQLite before portal.core.database builds its engine
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ.setdefault("APP_ENV", "test")

from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from portal.auth.dependencies import get_current_user
from portal.core.database import Base, get_db
from portal.main import app
from portal.models.sites import Site
from portal.schemas.auth import CurrentUser

# One shared in-memory connection; tables are rebuilt for every test
_test_engine = create_async_engine(
    "sqlite+aiosqlite://",
    poolclass=StaticPool,
    connect_args={"check_same_thread": False},
)

SAMPLE_CURRENT_USER = CurrentUser(
    email="analyst@example.com",
    expires_at=datetime.now(timezone.utc) + timedelta(days=30),
)

# Inputs for a large, mostly clean site
SAMPLE_INPUTS = {
    "acreage": 120,
    "askingPrice": "$2,400,000",
    "gasVolume": 14400,
    "gasPressure": 600,
    "pipelineDiameter": 24,
    "pipelineDistance": 2,
    "terrain": "easy",
    "phaseIStatus": "clean",
    "politicalClimate": "supportive",
    "zoning": "industrial",
    "permitType": "minor",
}


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
async def db() -> AsyncGenerator[AsyncSession]:
    """Provide a session over freshly created tables."""
    async with _test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session = AsyncSession(bind=_test_engine, expire_on_commit=False)
    try:
        yield session
    finally:
        await session.close()
        async with _test_engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient]:
    """Authenticated client sharing the test session."""
    app.dependency_overrides[get_current_user] = lambda: SAMPLE_CURRENT_USER
    app.dependency_overrides[get_db] = lambda: db
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac
    app.dependency_overrides.pop(get_current_user, None)
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
async def anon_client(db: AsyncSession) -> AsyncGenerator[AsyncClient]:
    """Client with the real auth dependency in place."""
    app.dependency_overrides[get_db] = lambda: db
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
async def sample_site(db: AsyncSession) -> Site:
    site = Site(
        name="Permian Basin Tract",
        city="Odessa",
        state="TX",
        county="Ector",
        acreage=120.0,
        asking_price=2_400_000.0,
        stage=1,
        inputs=dict(SAMPLE_INPUTS),
        actuals={},
    )
    db.add(site)
    await db.flush()
    return site
