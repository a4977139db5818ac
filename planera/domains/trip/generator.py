"""Trip generation pipeline.

Gathers flights, hotels, activities, restaurants and a cover photo
concurrently, plans the days, merges restaurants into meal slots and
assembles the itinerary document. Each data category is guarded on its
own: a provider failure degrades that category to its fallback and never
fails the run.

Flow (LangGraph):
    gather -> plan_days -> merge_restaurants -> assemble
"""

import asyncio
import logging
import random
from datetime import timedelta
from typing import Any, TypedDict
from uuid import UUID

from langchain_core.runnables import Runnable
from langgraph.graph import END, StateGraph
from sqlalchemy.ext.asyncio import AsyncSession

from planera.core.config import settings
from planera.core.exceptions import NotFoundError
from planera.domains.trip.fallback import (
    estimate_daily_expenses,
    generate_flights_for_trip,
    generate_transportation_options,
    get_fallback_hotels,
    get_fallback_restaurants,
)
from planera.domains.trip.locations import extract_iata_code
from planera.domains.trip.meals import merge_restaurants_into_itinerary
from planera.domains.trip.models import Trip
from planera.domains.trip.planner import DayPlanResult, epoch_ms_to_date, plan_days
from planera.domains.trip.repository import TripRepository
from planera.domains.trip.schemas import ItineraryDocument
from planera.domains.trip.styles import build_style_highlights, prioritize_activities_by_style
from planera.domains.trip.tools.amadeus import (
    AmadeusClient,
    flight_result_to_options,
    hotel_result_to_hotels,
)
from planera.domains.trip.tools.tripadvisor import TripAdvisorClient
from planera.domains.trip.tools.unsplash import (
    UnsplashClient,
    fallback_destination_image,
    to_image,
)

logger = logging.getLogger(__name__)

SKIPPED = {"skipped": True}


class GenerationState(TypedDict, total=False):
    """State passed between the pipeline nodes."""

    # Input
    trip: dict[str, Any]
    rng: random.Random | None
    llm: Runnable | None

    # Gathered data
    flights: list[dict[str, Any]] | dict[str, bool]
    hotels: list[dict[str, Any]] | dict[str, bool]
    activities: list[dict[str, Any]]
    restaurants: list[dict[str, Any]]
    transportation: list[dict[str, Any]]
    destination_image: dict[str, Any]

    # Planning
    plan: DayPlanResult

    # Output
    itinerary: dict[str, Any]


def trip_snapshot(trip: Trip) -> dict[str, Any]:
    """Plain-dict view of the trip inputs the pipeline reads."""
    return {
        "id": str(trip.id),
        "destination": trip.destination,
        "origin": trip.origin or settings.DEFAULT_ORIGIN,
        "start_date": trip.start_date,
        "end_date": trip.end_date,
        "budget": trip.budget,
        "travelers": trip.travelers,
        "interests": list(trip.interests or []),
        "skip_flights": trip.skip_flights,
        "skip_hotel": trip.skip_hotel,
        "preferred_flight_time": trip.preferred_flight_time,
    }


# ============ Category fetchers ============


async def gather_flights(trip: dict[str, Any], rng: random.Random | None = None) -> Any:
    """Live flights, or generated ones when Amadeus is unavailable."""
    if trip["skip_flights"]:
        return dict(SKIPPED)

    start = epoch_ms_to_date(trip["start_date"])
    end = epoch_ms_to_date(trip["end_date"])
    client = AmadeusClient()
    if client.is_configured:
        try:
            async with client:
                result = await client.search_flights(
                    origin=extract_iata_code(trip["origin"]),
                    destination=extract_iata_code(trip["destination"]),
                    departure_date=start.isoformat(),
                    return_date=end.isoformat() if end > start else None,
                    adults=trip["travelers"],
                )
            options = flight_result_to_options(result, trip["travelers"])
            if options:
                return options
            logger.warning(f"Amadeus returned no flights for trip {trip['id']}")
        except Exception as e:
            logger.warning(f"Amadeus flight search failed for trip {trip['id']}: {e}")

    return generate_flights_for_trip(
        trip["origin"],
        trip["destination"],
        start,
        end,
        trip["travelers"],
        trip["preferred_flight_time"],
        rng,
    )


async def gather_hotels(trip: dict[str, Any]) -> Any:
    """Live hotel offers, or the destination's curated hotels."""
    if trip["skip_hotel"]:
        return dict(SKIPPED)

    client = AmadeusClient()
    if client.is_configured:
        check_in = epoch_ms_to_date(trip["start_date"])
        check_out = epoch_ms_to_date(trip["end_date"])
        if check_out <= check_in:
            check_out = check_in + timedelta(days=1)
        try:
            async with client:
                result = await client.search_hotels(
                    city_code=extract_iata_code(trip["destination"]),
                    check_in_date=check_in.isoformat(),
                    check_out_date=check_out.isoformat(),
                    adults=trip["travelers"],
                )
            hotels = hotel_result_to_hotels(result)
            if hotels:
                return hotels
            logger.warning(f"Amadeus returned no hotels for trip {trip['id']}")
        except Exception as e:
            logger.warning(f"Amadeus hotel search failed for trip {trip['id']}: {e}")

    return get_fallback_hotels(trip["destination"])


async def gather_activities(trip: dict[str, Any]) -> list[dict[str, Any]]:
    """TripAdvisor attractions ordered by the user's styles; empty on failure."""
    client = TripAdvisorClient()
    if not client.is_configured:
        logger.info("TRIPADVISOR_API_KEY not set, no attractions")
        return []
    try:
        async with client:
            activities = await client.search_attractions(trip["destination"])
    except Exception as e:
        logger.warning(f"TripAdvisor attractions failed for trip {trip['id']}: {e}")
        return []
    return prioritize_activities_by_style(activities, trip["interests"])


async def gather_restaurants(trip: dict[str, Any]) -> list[dict[str, Any]]:
    """TripAdvisor restaurants.

    Curated restaurants stand in only when TripAdvisor is not configured;
    a failed call yields an empty list.
    """
    client = TripAdvisorClient()
    if not client.is_configured:
        return get_fallback_restaurants(trip["destination"])
    try:
        async with client:
            return await client.search_restaurants(trip["destination"])
    except Exception as e:
        logger.warning(f"TripAdvisor restaurants failed for trip {trip['id']}: {e}")
        return []


async def gather_destination_image(
    trip: dict[str, Any], rng: random.Random | None = None
) -> dict[str, Any]:
    """Unsplash cover photo for the destination, or a generic travel photo."""
    client = UnsplashClient()
    if client.is_configured:
        try:
            async with client:
                photo = await client.destination_photo(trip["destination"], rng)
                if photo is not None:
                    await client.track_download(photo)
                    return to_image(photo)
            logger.warning(f"No Unsplash photo for {trip['destination']}")
        except Exception as e:
            logger.warning(f"Unsplash search failed for trip {trip['id']}: {e}")
    return fallback_destination_image()


# ============ Nodes ============


async def gather_node(state: GenerationState) -> dict:
    trip = state["trip"]
    logger.info(f"Gathering data for trip {trip['id']} ({trip['destination']})")
    flights, hotels, activities, restaurants, image = await asyncio.gather(
        gather_flights(trip, state.get("rng")),
        gather_hotels(trip),
        gather_activities(trip),
        gather_restaurants(trip),
        gather_destination_image(trip, state.get("rng")),
    )
    transportation = generate_transportation_options(
        trip["destination"], trip["origin"], trip["travelers"], state.get("rng")
    )
    return {
        "flights": flights,
        "hotels": hotels,
        "activities": activities,
        "restaurants": restaurants,
        "transportation": transportation,
        "destination_image": image,
    }


async def plan_days_node(state: GenerationState) -> dict:
    plan = await plan_days(
        state["trip"],
        state["activities"],
        state["restaurants"],
        llm=state.get("llm"),
    )
    return {"plan": plan}


async def merge_restaurants_node(state: GenerationState) -> dict:
    plan = state["plan"]
    merge_restaurants_into_itinerary(plan.days, state["restaurants"])
    return {"plan": plan}


async def assemble_node(state: GenerationState) -> dict:
    trip = state["trip"]
    plan = state["plan"]
    hotels = state["hotels"]

    highlights = plan.style_highlights or build_style_highlights(plan.days, trip["interests"])
    expenses = plan.daily_expenses or estimate_daily_expenses(
        hotels if isinstance(hotels, list) else None,
        trip["destination"],
    )
    document = ItineraryDocument.model_validate(
        {
            "flights": state["flights"],
            "hotels": hotels,
            "activities": state["activities"],
            "restaurants": state["restaurants"],
            "transportation": state["transportation"],
            "dayByDayItinerary": plan.days,
            "estimatedDailyExpenses": expenses,
            "styleBasedHighlights": highlights,
            "destinationImage": state["destination_image"],
        }
    )
    return {"itinerary": document.to_storage()}


def build_generation_graph() -> StateGraph:
    """Build the LangGraph workflow for trip generation."""
    workflow = StateGraph(GenerationState)

    workflow.add_node("gather", gather_node)
    workflow.add_node("plan_days", plan_days_node)
    workflow.add_node("merge_restaurants", merge_restaurants_node)
    workflow.add_node("assemble", assemble_node)

    workflow.set_entry_point("gather")
    workflow.add_edge("gather", "plan_days")
    workflow.add_edge("plan_days", "merge_restaurants")
    workflow.add_edge("merge_restaurants", "assemble")
    workflow.add_edge("assemble", END)

    return workflow


generation_graph = build_generation_graph().compile()


# ============ Public Interface ============


async def generate_trip(
    session: AsyncSession,
    trip_id: UUID,
    generation_version: int,
    rng: random.Random | None = None,
    llm: Runnable | None = None,
) -> bool:
    """Generate and store the itinerary for one generation run.

    The result is written only if ``generation_version`` is still the
    trip's current version. Any exception marks the run failed (under the
    same version check) and is re-raised.

    Args:
        session: Database session; committed by this function
        trip_id: Trip to generate
        generation_version: Version the run was started for
        rng: Random source for generated fallbacks
        llm: Runnable replacing the configured ChatOpenAI

    Returns:
        True if the itinerary was stored, False if the run was stale

    Raises:
        NotFoundError: If the trip does not exist
    """
    repo = TripRepository(session)
    trip = await repo.get_by_id(trip_id)
    if trip is None:
        raise NotFoundError("Trip not found")

    snapshot = trip_snapshot(trip)
    try:
        state = await generation_graph.ainvoke({"trip": snapshot, "rng": rng, "llm": llm})
        stored = await repo.save_generation_result(trip_id, generation_version, state["itinerary"])
        await session.commit()
    except Exception as e:
        logger.error(f"Trip generation failed for trip {trip_id}: {e}")
        await session.rollback()
        await repo.mark_failed(trip_id, generation_version, str(e) or type(e).__name__)
        await session.commit()
        raise

    if stored:
        logger.info(f"Stored itinerary v{generation_version} for trip {trip_id}")
    return stored
