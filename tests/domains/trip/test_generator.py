"""
Tests for the trip generation pipeline.

Providers are unconfigured in the test environment, so every category
takes its fallback path unless a test patches a client in.
"""

import random
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
import pytest_asyncio

from planera.core.exceptions import NotFoundError
from planera.domains.trip.generator import (
    gather_activities,
    gather_destination_image,
    gather_flights,
    gather_restaurants,
    generate_trip,
)
from planera.domains.trip.models import Trip, TripStatus
from planera.domains.trip.tools.base import APIClientError
from planera.domains.trip.tools.unsplash import FALLBACK_DESTINATION_IMAGE

# 2024-06-01T00:00:00Z
JUNE_1_MS = 1_717_200_000_000
DAY_MS = 86_400_000


def _trip_dict(**overrides):
    trip = {
        "id": "trip-1",
        "destination": "Paris, France",
        "origin": "Athens",
        "start_date": JUNE_1_MS,
        "end_date": JUNE_1_MS + 3 * DAY_MS,
        "budget": "medium",
        "travelers": 2,
        "interests": ["culture"],
        "skip_flights": False,
        "skip_hotel": False,
        "preferred_flight_time": None,
    }
    trip.update(overrides)
    return trip


def _configured_client(**methods):
    client = MagicMock()
    client.is_configured = True
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    for name, mock in methods.items():
        setattr(client, name, mock)
    return client


@pytest_asyncio.fixture
async def paris_trip(session, user) -> Trip:
    trip = Trip(
        user_id=user.id,
        destination="Paris, France",
        origin="Athens",
        start_date=JUNE_1_MS,
        end_date=JUNE_1_MS + 3 * DAY_MS,
        budget="medium",
        travelers=2,
        interests=["food", "culture"],
        status=TripStatus.GENERATING,
        generation_version=1,
    )
    session.add(trip)
    await session.commit()
    return trip


class TestGenerateTrip:
    """End-to-end runs of generate_trip against sqlite."""

    @pytest.mark.asyncio
    async def test_paris_trip_completes_with_fallbacks(self, session, paris_trip):
        stored = await generate_trip(session, paris_trip.id, 1, rng=random.Random(42))
        assert stored is True

        await session.refresh(paris_trip)
        assert paris_trip.status == TripStatus.COMPLETED
        assert paris_trip.error_message is None
        assert paris_trip.completed_at is not None

        itinerary = paris_trip.itinerary
        assert len(itinerary["flights"]) == 3
        assert itinerary["flights"][0]["isBestPrice"] is True
        assert [h["name"] for h in itinerary["hotels"]][0] == "Hotel Le Marais"
        assert itinerary["activities"] == []
        assert [t["type"] for t in itinerary["transportation"]] == ["taxi", "uber", "car", "public"]

        days = itinerary["dayByDayItinerary"]
        assert [d["day"] for d in days] == [1, 2, 3]
        breakfast = days[0]["activities"][0]
        assert breakfast["restaurant"] == "Le Petit Cler"
        assert breakfast["price"] == "€€"

        assert itinerary["estimatedDailyExpenses"]["accommodation"] == 180
        assert itinerary["estimatedDailyExpenses"]["total"] == 295
        assert itinerary["styleBasedHighlights"][0]["style"] == "food"
        assert itinerary["destinationImage"]["url"] == FALLBACK_DESTINATION_IMAGE

    @pytest.mark.asyncio
    async def test_skipped_sections_make_no_provider_calls(self, session, paris_trip):
        paris_trip.skip_flights = True
        paris_trip.skip_hotel = True
        await session.commit()

        with patch("planera.domains.trip.generator.AmadeusClient") as amadeus, patch(
            "planera.domains.trip.generator.generate_flights_for_trip"
        ) as generated:
            await generate_trip(session, paris_trip.id, 1)

        amadeus.assert_not_called()
        generated.assert_not_called()
        await session.refresh(paris_trip)
        assert paris_trip.itinerary["flights"] == {"skipped": True}
        assert paris_trip.itinerary["hotels"] == {"skipped": True}
        # Expenses still estimated from the destination's hotels
        assert paris_trip.itinerary["estimatedDailyExpenses"]["accommodation"] == 180

    @pytest.mark.asyncio
    async def test_stale_run_is_discarded(self, session, paris_trip):
        paris_trip.generation_version = 2
        await session.commit()

        stored = await generate_trip(session, paris_trip.id, 1)

        assert stored is False
        await session.refresh(paris_trip)
        assert paris_trip.status == TripStatus.GENERATING
        assert paris_trip.itinerary is None

    @pytest.mark.asyncio
    async def test_failure_marks_trip_failed_and_reraises(self, session, paris_trip):
        with patch(
            "planera.domains.trip.generator.merge_restaurants_into_itinerary",
            side_effect=RuntimeError("boom"),
        ):
            with pytest.raises(RuntimeError):
                await generate_trip(session, paris_trip.id, 1)

        await session.refresh(paris_trip)
        assert paris_trip.status == TripStatus.FAILED
        assert paris_trip.error_message == "boom"
        assert paris_trip.itinerary is None

    @pytest.mark.asyncio
    async def test_stale_failure_leaves_newer_run_alone(self, session, paris_trip):
        paris_trip.generation_version = 2
        await session.commit()

        with patch(
            "planera.domains.trip.generator.merge_restaurants_into_itinerary",
            side_effect=RuntimeError("boom"),
        ):
            with pytest.raises(RuntimeError):
                await generate_trip(session, paris_trip.id, 1)

        await session.refresh(paris_trip)
        assert paris_trip.status == TripStatus.GENERATING
        assert paris_trip.error_message is None

    @pytest.mark.asyncio
    async def test_missing_trip(self, session):
        with pytest.raises(NotFoundError):
            await generate_trip(session, uuid4(), 1)


class TestGatherers:
    """Tests for the per-category fetchers."""

    @pytest.mark.asyncio
    async def test_amadeus_failure_falls_back_to_generated_flights(self):
        client = _configured_client(
            search_flights=AsyncMock(side_effect=APIClientError("down", tool_name="Amadeus"))
        )
        with patch("planera.domains.trip.generator.AmadeusClient", return_value=client):
            flights = await gather_flights(_trip_dict(), random.Random(1))

        client.search_flights.assert_awaited_once()
        assert len(flights) == 3
        assert all(f["isFallback"] for f in flights)

    @pytest.mark.asyncio
    async def test_same_day_trip_searches_one_way(self):
        client = _configured_client(
            search_flights=AsyncMock(side_effect=APIClientError("down", tool_name="Amadeus"))
        )
        with patch("planera.domains.trip.generator.AmadeusClient", return_value=client):
            await gather_flights(_trip_dict(end_date=JUNE_1_MS), random.Random(1))

        kwargs = client.search_flights.call_args.kwargs
        assert kwargs["origin"] == "ATH"
        assert kwargs["destination"] == "CDG"
        assert kwargs["departure_date"] == "2024-06-01"
        assert kwargs["return_date"] is None

    @pytest.mark.asyncio
    async def test_activities_prioritized_by_style(self):
        client = _configured_client(
            search_attractions=AsyncMock(
                return_value=[
                    {"title": "Seine cruise", "type": "tour"},
                    {"title": "Louvre", "type": "museum"},
                ]
            )
        )
        with patch("planera.domains.trip.generator.TripAdvisorClient", return_value=client):
            activities = await gather_activities(_trip_dict())

        assert [a["title"] for a in activities] == ["Louvre", "Seine cruise"]

    @pytest.mark.asyncio
    async def test_activities_failure_is_empty(self):
        client = _configured_client(
            search_attractions=AsyncMock(side_effect=APIClientError("down", tool_name="TripAdvisor"))
        )
        with patch("planera.domains.trip.generator.TripAdvisorClient", return_value=client):
            assert await gather_activities(_trip_dict()) == []

    @pytest.mark.asyncio
    async def test_restaurants_unconfigured_use_curated(self):
        restaurants = await gather_restaurants(_trip_dict())
        assert restaurants[0]["name"] == "Le Petit Cler"

    @pytest.mark.asyncio
    async def test_restaurants_failure_is_empty(self):
        client = _configured_client(
            search_restaurants=AsyncMock(side_effect=APIClientError("down", tool_name="TripAdvisor"))
        )
        with patch("planera.domains.trip.generator.TripAdvisorClient", return_value=client):
            assert await gather_restaurants(_trip_dict()) == []

    @pytest.mark.asyncio
    async def test_destination_image_from_unsplash(self):
        photo = {
            "id": "ph_1",
            "urls": {"regular": "https://images.unsplash.com/ph_1", "small": "s", "thumb": "t"},
            "user": {"name": "Ana Lima", "username": "analima", "links": {"html": "https://unsplash.com/@analima"}},
        }
        client = _configured_client(
            destination_photo=AsyncMock(return_value=photo),
            track_download=AsyncMock(),
        )
        with patch("planera.domains.trip.generator.UnsplashClient", return_value=client):
            image = await gather_destination_image(_trip_dict())

        client.destination_photo.assert_awaited_once_with("Paris, France", None)
        client.track_download.assert_awaited_once_with(photo)
        assert image["url"] == "https://images.unsplash.com/ph_1"
        assert image["photographerName"] == "Ana Lima"

    @pytest.mark.asyncio
    async def test_destination_image_failure_uses_generic_photo(self):
        client = _configured_client(
            destination_photo=AsyncMock(side_effect=APIClientError("down", tool_name="Unsplash"))
        )
        with patch("planera.domains.trip.generator.UnsplashClient", return_value=client):
            image = await gather_destination_image(_trip_dict())

        assert image["url"] == FALLBACK_DESTINATION_IMAGE
