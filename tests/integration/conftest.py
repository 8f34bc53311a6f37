"""Integration test fixtures backed by an in-memory SQLite database."""

from collections.abc import AsyncGenerator
from datetime import date

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from factories import ORG_ID
from seed import HOME_ID, OFFICE_ID
from time_ledger.api.app import create_app
from time_ledger.api.dependencies import get_db_session
from time_ledger.calculators.types import LocationCategory
from time_ledger.models import Base, Location, PolicyConfig

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Fresh schema per test; StaticPool keeps the in-memory database alive."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Get database session for integration tests."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture(scope="function")
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app, with sessions from the test database."""
    app = create_app()

    async def override_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def org_headers() -> dict[str, str]:
    return {"X-Org-ID": str(ORG_ID)}


@pytest_asyncio.fixture(scope="function")
async def seeded_db(db_session: AsyncSession) -> AsyncSession:
    """Locations, an org default policy and a California policy."""
    db_session.add_all([
        Location(
            location_id=OFFICE_ID,
            org_id=ORG_ID,
            name="HQ",
            code="HQ",
            category=LocationCategory.OFFICE.value,
        ),
        Location(
            location_id=HOME_ID,
            org_id=ORG_ID,
            name="Home",
            category=LocationCategory.HOME.value,
        ),
        PolicyConfig(
            org_id=ORG_ID,
            required_days_per_week=3,
            minimum_minutes_per_day=480,
            annual_pto_days=10,
            max_carryover_days=5,
            effective_date=date(2024, 1, 1),
        ),
        PolicyConfig(
            org_id=ORG_ID,
            jurisdiction="US-CA",
            minimum_minutes_per_day=420,
            annual_pto_days=12,
            max_carryover_days=0,
            effective_date=date(2024, 1, 1),
        ),
    ])
    await db_session.commit()
    return db_session
