"""
Tests for InsightService: verification, listing, likes and completed trips.
"""

import time
from uuid import uuid4

import pytest
import pytest_asyncio

from planera.core.exceptions import AuthNotReadyError, NotFoundError
from planera.domains.insight.models import InsightCategory
from planera.domains.insight.schemas import InsightCreate
from planera.domains.insight.service import InsightService
from planera.domains.trip.models import Trip, TripStatus

DAY_MS = 86_400_000


@pytest_asyncio.fixture
async def service(session) -> InsightService:
    return InsightService(session)


@pytest_asyncio.fixture
async def make_trip(session, user):
    async def _make(destination: str, days_ago: int, status: TripStatus = TripStatus.COMPLETED) -> Trip:
        end = int(time.time() * 1000) - days_ago * DAY_MS
        trip = Trip(
            user_id=user.id,
            destination=destination,
            start_date=end - 3 * DAY_MS,
            end_date=end,
            budget="medium",
            status=status,
            generation_version=1,
        )
        session.add(trip)
        await session.commit()
        return trip

    return _make


def _tip(destination: str = "Lisbon", **overrides) -> InsightCreate:
    data = {"destination": destination, "content": "Take tram 28 early.", "category": "transport"}
    data.update(overrides)
    return InsightCreate(**data)


class TestCreateInsight:
    """Tests for create_insight."""

    @pytest.mark.asyncio
    async def test_verified_after_completed_trip(self, service, user, make_trip):
        await make_trip("Lisbon, Portugal", days_ago=10)

        insight = await service.create_insight(user, _tip("lisbon"))

        assert insight.verified is True
        assert insight.likes == 0
        assert insight.category == InsightCategory.TRANSPORT

    @pytest.mark.asyncio
    async def test_not_verified_for_future_or_failed_trips(self, service, user, make_trip):
        await make_trip("Lisbon", days_ago=-5)
        await make_trip("Lisbon", days_ago=10, status=TripStatus.FAILED)

        insight = await service.create_insight(user, _tip())

        assert insight.verified is False

    @pytest.mark.asyncio
    async def test_signed_out(self, service):
        with pytest.raises(AuthNotReadyError):
            await service.create_insight(None, _tip())


class TestListAndLike:
    """Tests for listing and liking insights."""

    @pytest.mark.asyncio
    async def test_filter_by_destination(self, service, user):
        await service.create_insight(user, _tip("Lisbon"))
        await service.create_insight(user, _tip("Porto", category="food"))

        assert [i.destination for i in await service.list_insights("Porto")] == ["Porto"]
        assert len(await service.list_insights()) == 2

    @pytest.mark.asyncio
    async def test_like_twice(self, service, user):
        insight = await service.create_insight(user, _tip())

        await service.like_insight(insight.id)
        liked = await service.like_insight(insight.id)

        assert liked.likes == 2

    @pytest.mark.asyncio
    async def test_like_unknown(self, service):
        with pytest.raises(NotFoundError):
            await service.like_insight(uuid4())


class TestCompletedTrips:
    """Tests for completed trip lookups."""

    @pytest.mark.asyncio
    async def test_only_past_completed_trips(self, service, user, make_trip):
        await make_trip("Rome", days_ago=30)
        await make_trip("Paris", days_ago=2)
        await make_trip("Berlin", days_ago=-10)

        trips = await service.completed_trips(user)

        assert [t.destination for t in trips] == ["Paris", "Rome"]
        assert await service.has_completed_trip_to(user, "rome") is True
        assert await service.has_completed_trip_to(user, "Berlin") is False

    @pytest.mark.asyncio
    async def test_signed_out(self, service):
        assert await service.completed_trips(None) == []
        assert await service.has_completed_trip_to(None, "Rome") is False
