"""
Tests for splicing restaurants into meal slots.
"""

from planera.domains.trip.meals import (
    find_restaurant,
    is_meal_activity,
    merge_restaurants_into_itinerary,
)

RESTAURANTS = [
    {"name": "Café de Flore", "cuisine": "French", "rating": 4.3, "priceRange": "€€", "url": "https://flore.example"},
    {"name": "Le Comptoir", "cuisine": "Bistro", "rating": 4.6, "address": "9 Carrefour de l'Odéon"},
    {"name": "Pink Mamma", "cuisine": "Italian", "description": "Four floors of trattoria"},
]


def _day(*activities):
    return {"activities": [dict(a) for a in activities]}


class TestIsMealActivity:
    """Tests for meal detection."""

    def test_by_type(self):
        assert is_meal_activity({"title": "Evening", "type": "restaurant"})

    def test_by_title(self):
        assert is_meal_activity({"title": "Lunch break", "type": "activity"})

    def test_sightseeing_is_not_a_meal(self):
        assert not is_meal_activity({"title": "Louvre", "type": "activity"})


class TestFindRestaurant:
    """Tests for choosing a restaurant for one meal."""

    def test_exact_name(self):
        chosen = find_restaurant({"title": "le comptoir"}, RESTAURANTS, 0, 0)
        assert chosen["name"] == "Le Comptoir"

    def test_substring_match(self):
        chosen = find_restaurant({"title": "Dinner at Pink Mamma"}, RESTAURANTS, 0, 0)
        assert chosen["name"] == "Pink Mamma"

    def test_round_robin_by_day_and_slot(self):
        chosen = find_restaurant({"title": "Dinner"}, RESTAURANTS, 1, 1)
        # (1 * 3 + 1) % 3
        assert chosen["name"] == "Le Comptoir"


class TestMergeRestaurants:
    """Tests for merge_restaurants_into_itinerary."""

    def test_fills_meal_slots_only(self):
        days = [
            _day(
                {"time": "08:00", "title": "Breakfast", "type": "restaurant", "price": "€10-20"},
                {"time": "10:00", "title": "Louvre", "type": "activity"},
                {"time": "13:00", "title": "Lunch", "type": "restaurant"},
            )
        ]
        merge_restaurants_into_itinerary(days, RESTAURANTS)
        breakfast, sight, lunch = days[0]["activities"]

        assert breakfast["restaurant"] == "Café de Flore"
        assert breakfast["price"] == "€€"
        assert breakfast["bookingUrl"] == "https://flore.example"
        assert breakfast["cuisine"] == "French"
        assert breakfast["description"] == "French cuisine · rated 4.3"
        assert "restaurant" not in sight
        assert lunch["restaurant"] == "Le Comptoir"
        assert lunch["address"] == "9 Carrefour de l'Odéon"

    def test_restaurant_description_preferred(self):
        days = [_day({"title": "Dinner at Pink Mamma", "type": "restaurant"})]
        merge_restaurants_into_itinerary(days, RESTAURANTS)
        assert days[0]["activities"][0]["description"] == "Four floors of trattoria"

    def test_no_restaurants_leaves_days_untouched(self):
        days = [_day({"title": "Lunch", "type": "restaurant", "price": "€15-30"})]
        assert merge_restaurants_into_itinerary(days, []) == [
            {"activities": [{"title": "Lunch", "type": "restaurant", "price": "€15-30"}]}
        ]
