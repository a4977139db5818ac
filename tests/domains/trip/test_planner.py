"""
Tests for day planning: parsing, the template plan and the LLM path.
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from planera.domains.trip.planner import (
    build_template_itinerary,
    parse_llm_json,
    plan_days,
    trip_day_count,
)

# 2024-06-01T00:00:00Z
JUNE_1_MS = 1_717_200_000_000
DAY_MS = 86_400_000


def _trip(**overrides):
    trip = {
        "id": "trip-1",
        "destination": "Paris, France",
        "origin": "Athens",
        "start_date": JUNE_1_MS,
        "end_date": JUNE_1_MS + 2 * DAY_MS,
        "budget": "medium",
        "travelers": 2,
        "interests": ["food"],
    }
    trip.update(overrides)
    return trip


def _llm(content: str):
    llm = MagicMock()
    llm.ainvoke = AsyncMock(return_value=MagicMock(content=content))
    return llm


class TestDayCount:
    """Tests for trip_day_count."""

    def test_whole_days(self):
        assert trip_day_count(JUNE_1_MS, JUNE_1_MS + 3 * DAY_MS) == 3

    def test_partial_day_rounds_up(self):
        assert trip_day_count(JUNE_1_MS, JUNE_1_MS + DAY_MS + 1) == 2

    def test_same_day_is_one(self):
        assert trip_day_count(JUNE_1_MS, JUNE_1_MS) == 1


class TestParseLlmJson:
    """Tests for parse_llm_json."""

    def test_plain_json(self):
        assert parse_llm_json('{"a": 1}') == {"a": 1}

    def test_json_inside_prose(self):
        content = 'Here is your plan:\n```json\n{"dayByDayItinerary": []}\n```\nEnjoy!'
        assert parse_llm_json(content) == {"dayByDayItinerary": []}

    def test_no_object(self):
        with pytest.raises(ValueError):
            parse_llm_json("Sorry, I cannot help with that.")

    def test_array_is_not_an_object(self):
        with pytest.raises(ValueError):
            parse_llm_json("[1, 2, 3]")


class TestTemplateItinerary:
    """Tests for build_template_itinerary."""

    def test_five_slots_per_day(self):
        days = build_template_itinerary("Paris, France", JUNE_1_MS, JUNE_1_MS + 2 * DAY_MS)

        assert [d["day"] for d in days] == [1, 2]
        assert [d["date"] for d in days] == ["2024-06-01", "2024-06-02"]
        assert days[0]["title"] == "Day 1 in Paris"
        first = days[0]["activities"]
        assert [a["time"] for a in first] == ["08:00", "10:00", "13:00", "15:00", "19:30"]
        assert [a["type"] for a in first] == [
            "restaurant", "activity", "restaurant", "activity", "restaurant",
        ]
        assert first[1]["title"] == "Morning sightseeing in Paris"

    def test_same_day_trip_has_one_day(self):
        assert len(build_template_itinerary("Rome", JUNE_1_MS, JUNE_1_MS)) == 1


class TestPlanDays:
    """Tests for plan_days."""

    @pytest.mark.asyncio
    async def test_without_key_uses_template(self):
        plan = await plan_days(_trip(), [], [])
        assert plan.from_llm is False
        assert len(plan.days) == 2

    @pytest.mark.asyncio
    async def test_valid_llm_reply(self):
        reply = {
            "dayByDayItinerary": [
                {
                    "day": 1,
                    "date": "2024-06-01",
                    "title": "Left Bank",
                    "activities": [
                        {"time": "09:00", "title": "Musée d'Orsay", "type": "activity", "price": "€16"},
                    ],
                }
            ],
            "estimatedDailyExpenses": {
                "accommodation": 150, "food": 70, "activities": 30,
                "transportation": 10, "total": 260, "currency": "EUR",
            },
            "styleBasedHighlights": [
                {"style": "food", "label": "Food", "recommendations": ["Crêpes"], "count": 1},
            ],
        }
        llm = _llm(json.dumps(reply))

        plan = await plan_days(_trip(), [{"title": "Louvre"}], [{"name": "Le Comptoir"}], llm=llm)

        assert plan.from_llm is True
        assert plan.days[0]["title"] == "Left Bank"
        assert plan.days[0]["activities"][0]["title"] == "Musée d'Orsay"
        assert plan.daily_expenses["total"] == 260
        assert plan.style_highlights[0]["recommendations"] == ["Crêpes"]

        messages = llm.ainvoke.call_args.args[0]
        assert "Exactly 2 days" in messages[0].content
        assert "- Louvre" in messages[1].content
        assert "- Le Comptoir" in messages[1].content

    @pytest.mark.asyncio
    async def test_itinerary_key_accepted(self):
        reply = {"itinerary": [{"day": 1, "title": "Arrival", "activities": []}]}
        plan = await plan_days(_trip(end_date=JUNE_1_MS), [], [], llm=_llm(json.dumps(reply)))
        assert plan.from_llm is True
        assert plan.days == [{"day": 1, "title": "Arrival", "activities": []}]

    @pytest.mark.asyncio
    async def test_unparseable_reply_falls_back(self):
        plan = await plan_days(_trip(), [], [], llm=_llm("not json"))
        assert plan.from_llm is False
        assert plan.days[0]["title"] == "Day 1 in Paris"

    @pytest.mark.asyncio
    async def test_invalid_day_falls_back(self):
        reply = {"dayByDayItinerary": [{"day": 0, "title": "Bad"}]}
        plan = await plan_days(_trip(), [], [], llm=_llm(json.dumps(reply)))
        assert plan.from_llm is False

    @pytest.mark.asyncio
    async def test_llm_error_falls_back(self):
        llm = MagicMock()
        llm.ainvoke = AsyncMock(side_effect=RuntimeError("rate limited"))
        plan = await plan_days(_trip(), [], [], llm=llm)
        assert plan.from_llm is False

    @pytest.mark.asyncio
    async def test_invalid_optional_sections_ignored(self):
        reply = {
            "dayByDayItinerary": [{"day": 1, "title": "Arrival"}],
            "estimatedDailyExpenses": {"food": "lots"},
        }
        plan = await plan_days(_trip(), [], [], llm=_llm(json.dumps(reply)))
        assert plan.from_llm is True
        assert plan.daily_expenses is None

    @pytest.mark.asyncio
    async def test_short_reply_padded_to_trip_length(self):
        reply = {"dayByDayItinerary": [{"day": 1, "title": "Arrival"}]}
        plan = await plan_days(_trip(end_date=JUNE_1_MS + 3 * DAY_MS), [], [], llm=_llm(json.dumps(reply)))

        assert plan.from_llm is True
        assert [d["day"] for d in plan.days] == [1, 2, 3]
        assert plan.days[0]["title"] == "Arrival"
        assert plan.days[2]["title"] == "Day 3 in Paris"

    @pytest.mark.asyncio
    async def test_long_reply_trimmed_to_trip_length(self):
        reply = {"dayByDayItinerary": [{"day": n, "title": f"Day {n}"} for n in range(1, 6)]}
        plan = await plan_days(_trip(), [], [], llm=_llm(json.dumps(reply)))

        assert [d["title"] for d in plan.days] == ["Day 1", "Day 2"]
