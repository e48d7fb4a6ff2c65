"""API test infrastructure — async httpx client with SQLite test database."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import datetime
from zoneinfo import ZoneInfo

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.dialects.postgresql import UUID as PG_UUID

from app.models import Base, MonthlyAggregation, Organization, OrganizationMember
from app.models.database import get_db

# ---------------------------------------------------------------------------
# SQLite compatibility for PostgreSQL column types
# ---------------------------------------------------------------------------

@compiles(PG_UUID, "sqlite")
def _compile_uuid_sqlite(type_, compiler, **kw):
    return "CHAR(36)"


# ---------------------------------------------------------------------------
# Database fixtures
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Mid-June: seasonal production factor is 1.0
ZURICH = ZoneInfo("Europe/Zurich")
NOON = datetime(2026, 6, 15, 12, 30, tzinfo=ZURICH)


@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    async with engine.begin() as conn:
        await conn.exec_driver_sql("PRAGMA foreign_keys = ON")
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


# ---------------------------------------------------------------------------
# FastAPI app with overridden dependencies
# ---------------------------------------------------------------------------

@pytest.fixture
def now() -> dict[str, datetime]:
    """Mutable holder so a test can move the clock before calling the API."""
    return {"value": NOON}


@pytest_asyncio.fixture
async def app(session_factory, now):
    from app.core.clock import get_now
    from app.main import create_app

    application = create_app()

    async def _override_get_db():
        async with session_factory() as session:
            yield session

    application.dependency_overrides[get_db] = _override_get_db
    application.dependency_overrides[get_now] = lambda: now["value"]

    yield application

    application.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------

TEST_API_KEY = "cel_test_4f1c2a"


@pytest_asyncio.fixture
async def community(session_factory) -> Organization:
    """Community without metered history: falls back to CEL defaults."""
    async with session_factory() as session:
        org = Organization(slug="pompaples", name="CEL Pompaples")
        org.members = [
            OrganizationMember(
                firstname="Anne",
                lastname="Favre",
                api_key=TEST_API_KEY,
                solar_capacity_kwp=None,
            ),
            OrganizationMember(firstname="Luc", lastname="Rochat", solar_capacity_kwp=None),
        ]
        session.add(org)
        await session.commit()
        await session.refresh(org)
        return org


@pytest_asyncio.fixture
async def metered_community(session_factory) -> Organization:
    """Three months of metering and 40 kWp of declared capacity."""
    async with session_factory() as session:
        org = Organization(slug="vallorbe", name="CEL Vallorbe")
        org.members = [
            OrganizationMember(firstname="Marc", lastname="Jaquet", solar_capacity_kwp=25.0),
            OrganizationMember(firstname="Lea", lastname="Golay", solar_capacity_kwp=15.0),
        ]
        org.monthly_aggregations = [
            MonthlyAggregation(
                year=2026, month=m, total_production_kwh=2400.0, total_consumption_kwh=3600.0
            )
            for m in (3, 4, 5)
        ]
        session.add(org)
        await session.commit()
        await session.refresh(org)
        return org
