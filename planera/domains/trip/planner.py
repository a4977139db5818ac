"""Day-by-day planning with the LLM, and the template used without it."""

import json
import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Any

from langchain_core.prompts import ChatPromptTemplate
from langchain_core.runnables import Runnable
from langchain_openai import ChatOpenAI
from pydantic import ValidationError

from planera.core.config import settings
from planera.domains.trip.schemas import DailyExpenses, DayPlan, StyleHighlight
from planera.domains.trip.styles import generate_style_specific_prompt

logger = logging.getLogger(__name__)

MS_PER_DAY = 86_400_000
MAX_PROMPT_ACTIVITIES = 20
MAX_PROMPT_RESTAURANTS = 15


# ============ Prompts ============


ITINERARY_SYSTEM_PROMPT = """You are an expert travel planner. Create detailed, personalized \
day-by-day itineraries that match the traveler's preferences and travel styles.

Respond with a single JSON object with this structure:
{{
  "dayByDayItinerary": [
    {{
      "day": 1,
      "date": "YYYY-MM-DD",
      "title": "Short theme for the day",
      "activities": [
        {{"time": "HH:MM", "title": "...", "description": "...", "type": "activity|restaurant|transport", "price": "€10-20"}}
      ]
    }}
  ],
  "styleBasedHighlights": [
    {{"style": "food", "label": "Food & Dining", "recommendations": ["..."], "count": 1}}
  ],
  "estimatedDailyExpenses": {{
    "accommodation": 120, "food": 60, "activities": 40, "transportation": 15, "total": 235, "currency": "EUR"
  }}
}}

Rules:
- Exactly {days} days, numbered from 1, with dates starting at {start_date}.
- Times use the 24-hour HH:MM format.
- Prices are ranges in euros such as "€10-20", or "Free".
- Include breakfast, lunch and dinner every day with type "restaurant".
- Prefer the listed attractions and restaurants over invented ones."""

ITINERARY_USER_PROMPT = """Plan a trip to {destination} from {origin}.

Dates: {start_date} to {end_date} ({days} days)
Travelers: {travelers}
Budget: {budget}
Interests: {interests}

{style_context}

Attractions available:
{activities}

Restaurants available:
{restaurants}"""


def get_llm(temperature: float = 0.7) -> Runnable:
    """ChatOpenAI in JSON mode."""
    return ChatOpenAI(
        model=settings.OPENAI_MODEL,
        api_key=settings.OPENAI_API_KEY,
        temperature=temperature,
    ).bind(response_format={"type": "json_object"})


# ============ Dates ============


def trip_day_count(start_ms: int, end_ms: int) -> int:
    """Days covered by a trip; a same-day trip still counts as one."""
    return max(1, math.ceil((end_ms - start_ms) / MS_PER_DAY))


def epoch_ms_to_date(ms: int) -> date:
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).date()


# ============ Parsing ============


def parse_llm_json(content: str) -> dict[str, Any]:
    """Parse an LLM reply into a JSON object.

    The whole reply is tried first; if that fails, the span from the
    first ``{`` to the last ``}`` is tried.

    Raises:
        ValueError: If neither attempt yields a JSON object
    """
    candidates = [content]
    start, end = content.find("{"), content.rfind("}")
    if start != -1 and end > start:
        candidates.append(content[start : end + 1])

    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed
    raise ValueError("LLM reply does not contain a JSON object")


# ============ Template plan ============


def build_template_itinerary(destination: str, start_ms: int, end_ms: int) -> list[dict[str, Any]]:
    """Fixed five-slot days used when the LLM is unavailable or unusable."""
    city = destination.split(",")[0].strip() or destination
    first_day = epoch_ms_to_date(start_ms)
    days = []
    for index in range(trip_day_count(start_ms, end_ms)):
        days.append(
            {
                "day": index + 1,
                "date": (first_day + timedelta(days=index)).isoformat(),
                "title": f"Day {index + 1} in {city}",
                "activities": [
                    {
                        "time": "08:00",
                        "title": "Breakfast",
                        "description": "Start the day with breakfast near your hotel.",
                        "type": "restaurant",
                        "price": "€10-20",
                    },
                    {
                        "time": "10:00",
                        "title": f"Morning sightseeing in {city}",
                        "description": f"Visit the best-known sights of {city}.",
                        "type": "activity",
                        "price": "€0-30",
                    },
                    {
                        "time": "13:00",
                        "title": "Lunch",
                        "description": "Lunch at a local spot.",
                        "type": "restaurant",
                        "price": "€15-30",
                    },
                    {
                        "time": "15:00",
                        "title": f"Afternoon exploration of {city}",
                        "description": "Wander the neighbourhoods, markets and parks.",
                        "type": "activity",
                        "price": "€0-40",
                    },
                    {
                        "time": "19:30",
                        "title": "Dinner",
                        "description": "Dinner with local specialties.",
                        "type": "restaurant",
                        "price": "€25-50",
                    },
                ],
            }
        )
    return days


# ============ LLM plan ============


@dataclass
class DayPlanResult:
    """Output of the day-planning step."""

    days: list[dict[str, Any]]
    style_highlights: list[dict[str, Any]] = field(default_factory=list)
    daily_expenses: dict[str, Any] | None = None
    from_llm: bool = False


def _format_places(places: list[dict[str, Any]], name_key: str, limit: int) -> str:
    if not places:
        return "None found; suggest well-known options."
    lines = []
    for place in places[:limit]:
        details = [str(place[k]) for k in ("type", "cuisine", "priceRange", "rating") if place.get(k)]
        suffix = f" ({', '.join(details)})" if details else ""
        lines.append(f"- {place.get(name_key)}{suffix}")
    return "\n".join(lines)


def _validated_days(payload: dict[str, Any]) -> list[dict[str, Any]]:
    raw_days = payload.get("dayByDayItinerary") or payload.get("itinerary")
    if not isinstance(raw_days, list) or not raw_days:
        raise ValueError("LLM reply has no day plans")
    return [
        DayPlan.model_validate(day).model_dump(mode="json", by_alias=True, exclude_none=True)
        for day in raw_days
    ]


def _fit_to_trip(days: list[dict[str, Any]], template_days: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Trim extra LLM days and fill missing ones from the template."""
    if len(days) != len(template_days):
        logger.info(f"LLM planned {len(days)} days for a {len(template_days)}-day trip, adjusting")
    fitted = days[: len(template_days)]
    fitted.extend(template_days[len(fitted) :])
    return fitted


def _optional_section(payload: dict[str, Any], key: str, schema: Any) -> Any:
    value = payload.get(key)
    if not value:
        return None
    try:
        if isinstance(value, list):
            return [schema.model_validate(v).model_dump(mode="json", by_alias=True) for v in value]
        return schema.model_validate(value).model_dump(mode="json", by_alias=True)
    except ValidationError as e:
        logger.warning(f"Ignoring invalid {key} from LLM: {e.error_count()} errors")
        return None


async def plan_days(
    trip: dict[str, Any],
    activities: list[dict[str, Any]],
    restaurants: list[dict[str, Any]],
    llm: Runnable | None = None,
) -> DayPlanResult:
    """Produce the day-by-day plan for a trip.

    The LLM is called once when an API key is configured (or an ``llm`` is
    passed in). Any failure, including an unparseable or invalid reply,
    falls back to ``build_template_itinerary``. A reply with the wrong
    number of days is trimmed, or padded with template days.

    Args:
        trip: destination, origin, start_date, end_date (epoch ms), travelers,
            budget and interests
        activities: Attractions gathered for the destination
        restaurants: Restaurants gathered for the destination
        llm: Runnable to use instead of the configured ChatOpenAI
    """
    template = DayPlanResult(
        days=build_template_itinerary(trip["destination"], trip["start_date"], trip["end_date"])
    )
    if llm is None:
        if not settings.OPENAI_API_KEY:
            logger.info("OPENAI_API_KEY not set, using template itinerary")
            return template
        llm = get_llm()

    prompt = ChatPromptTemplate.from_messages(
        [("system", ITINERARY_SYSTEM_PROMPT), ("human", ITINERARY_USER_PROMPT)]
    )
    start = epoch_ms_to_date(trip["start_date"])
    messages = prompt.format_messages(
        destination=trip["destination"],
        origin=trip["origin"],
        start_date=start.isoformat(),
        end_date=epoch_ms_to_date(trip["end_date"]).isoformat(),
        days=trip_day_count(trip["start_date"], trip["end_date"]),
        travelers=trip["travelers"],
        budget=trip["budget"],
        interests=", ".join(trip["interests"]) or "general sightseeing",
        style_context=generate_style_specific_prompt(trip["interests"]),
        activities=_format_places(activities, "title", MAX_PROMPT_ACTIVITIES),
        restaurants=_format_places(restaurants, "name", MAX_PROMPT_RESTAURANTS),
    )

    try:
        response = await llm.ainvoke(messages)
        payload = parse_llm_json(response.content)
        days = _validated_days(payload)
    except ValueError as e:
        logger.warning(f"Unusable LLM itinerary for {trip['destination']}: {e}")
        return template
    except Exception as e:
        logger.warning(f"LLM itinerary call failed for {trip['destination']}: {e}")
        return template

    return DayPlanResult(
        days=_fit_to_trip(days, template.days),
        style_highlights=_optional_section(payload, "styleBasedHighlights", StyleHighlight) or [],
        daily_expenses=_optional_section(payload, "estimatedDailyExpenses", DailyExpenses),
        from_llm=True,
    )
