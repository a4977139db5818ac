"""Attach fetched restaurants to the meal slots of a day-by-day plan."""

import logging
from typing import Any

logger = logging.getLogger(__name__)

MEALS_PER_DAY = 3

MEAL_TYPES = frozenset({"restaurant", "meal", "dining", "food"})
MEAL_WORDS = ("breakfast", "brunch", "lunch", "dinner", "meal", "restaurant", "café", "cafe")


def is_meal_activity(activity: dict[str, Any]) -> bool:
    """True when the activity's type or title marks it as a meal."""
    if str(activity.get("type") or "").lower() in MEAL_TYPES:
        return True
    title = str(activity.get("title") or "").lower()
    return any(word in title for word in MEAL_WORDS)


def _restaurant_url(restaurant: dict[str, Any]) -> str | None:
    return (
        restaurant.get("url")
        or restaurant.get("bookingUrl")
        or restaurant.get("tripAdvisorUrl")
    )


def _restaurant_description(restaurant: dict[str, Any]) -> str:
    if restaurant.get("description"):
        return restaurant["description"]
    parts = [f"{restaurant.get('cuisine') or 'Local'} cuisine"]
    if restaurant.get("rating"):
        parts.append(f"rated {restaurant['rating']}")
    if restaurant.get("address"):
        parts.append(restaurant["address"])
    return " · ".join(parts)


def find_restaurant(
    activity: dict[str, Any],
    restaurants: list[dict[str, Any]],
    day_index: int,
    meal_slot: int,
) -> dict[str, Any]:
    """Choose the restaurant for one meal activity.

    Exact name match first, then a substring match in either direction,
    then a round-robin pick by day and meal slot.
    """
    candidates = [
        str(activity.get(field) or "").strip().lower()
        for field in ("title", "restaurant")
    ]
    candidates = [c for c in candidates if c]
    names = [str(r.get("name") or "").strip().lower() for r in restaurants]

    for restaurant, name in zip(restaurants, names):
        if name and name in candidates:
            return restaurant
    for restaurant, name in zip(restaurants, names):
        if name and any(name in c or c in name for c in candidates):
            return restaurant
    return restaurants[(day_index * MEALS_PER_DAY + meal_slot) % len(restaurants)]


def merge_restaurants_into_itinerary(
    days: list[dict[str, Any]],
    restaurants: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Splice restaurant details into every meal activity, in place.

    Args:
        days: Day plans, each with an ``activities`` list
        restaurants: Restaurants fetched for the destination

    Returns:
        The same ``days`` list
    """
    if not restaurants:
        return days

    merged = 0
    for day_index, day in enumerate(days):
        meal_slot = 0
        for activity in day.get("activities") or []:
            if not is_meal_activity(activity):
                continue
            restaurant = find_restaurant(activity, restaurants, day_index, meal_slot)
            meal_slot += 1

            activity["restaurant"] = restaurant.get("name")
            activity["description"] = _restaurant_description(restaurant)
            activity["price"] = restaurant.get("priceRange") or activity.get("price")
            url = _restaurant_url(restaurant)
            if url:
                activity["bookingUrl"] = url
            for field in ("cuisine", "rating", "address"):
                if restaurant.get(field) is not None:
                    activity[field] = restaurant[field]
            merged += 1

    logger.debug(f"Merged restaurants into {merged} meal slots")
    return days
