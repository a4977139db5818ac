"""
Shared fixtures: an in-memory sqlite database, sessions and users.

Provider credentials are blanked before the app is imported so every
provider takes its unconfigured path unless a test patches it.
"""

import os

for _key in (
    "AMADEUS_CLIENT_ID",
    "AMADEUS_CLIENT_SECRET",
    "DUFFEL_ACCESS_TOKEN",
    "TRIPADVISOR_API_KEY",
    "UNSPLASH_ACCESS_KEY",
    "OPENAI_API_KEY",
    "GMAIL_CLIENT_ID",
    "GMAIL_CLIENT_SECRET",
    "GMAIL_REFRESH_TOKEN",
    "GOOGLE_CLIENT_ID",
    "GOOGLE_CLIENT_SECRET",
    "GOOGLE_REFRESH_TOKEN",
):
    os.environ[_key] = ""
os.environ["DATABASE_URL_OVERRIDE"] = "sqlite+aiosqlite://"
os.environ["ENVIRONMENT"] = "test"

from collections.abc import AsyncIterator  # noqa: E402
from unittest.mock import MagicMock, patch  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

import planera.domains.models  # noqa: E402,F401
from planera.domains.user.models import AuthProvider, PlanType, User  # noqa: E402
from planera.infra.database import Base  # noqa: E402


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def session(session_factory) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_user(session: AsyncSession):
    """Factory for persisted users."""
    counter = {"n": 0}

    async def _make(plan: PlanType = PlanType.FREE, trips_generated: int = 0) -> User:
        counter["n"] += 1
        user = User(
            email=f"user{counter['n']}@example.com",
            full_name=f"User {counter['n']}",
            provider=AuthProvider.GOOGLE,
            social_id=f"google-{counter['n']}",
            plan=plan,
            trips_generated=trips_generated,
        )
        session.add(user)
        await session.commit()
        return user

    return _make


@pytest_asyncio.fixture
async def user(make_user) -> User:
    return await make_user()


@pytest.fixture
def enqueued():
    """Capture generation task enqueues instead of sending them to the broker."""
    with patch("planera.domains.trip.tasks.generate_trip_task.delay") as delay:
        delay.return_value = MagicMock(id="task-1")
        yield delay
