"""TripAdvisor Content API client for restaurants and attractions."""

import asyncio
import logging
from typing import Any

import httpx

from planera.core.config import settings
from planera.domains.trip.tools.base import BaseAsyncAPIClient, ToolError

logger = logging.getLogger(__name__)

MAX_DETAILS = 20


class TripAdvisorClient(BaseAsyncAPIClient):
    """Async client for the TripAdvisor Content API.

    The API key travels as a query parameter on every call.
    """

    tool_name = "TripAdvisor"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key or settings.TRIPADVISOR_API_KEY
        super().__init__(base_url or settings.TRIPADVISOR_BASE_URL, transport=transport)

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def _get_headers(self) -> dict[str, str]:
        return {"Accept": "application/json"}

    def _params(self, **extra: Any) -> dict[str, Any]:
        return {"key": self.api_key, "language": "en", **extra}

    async def search_location(self, query: str) -> dict[str, Any] | None:
        """First geographic match for a destination name."""
        response = await self.get(
            "/location/search",
            params=self._params(searchQuery=query, category="geos"),
        )
        results = response.get("data") or []
        return results[0] if results else None

    async def nearby_search(self, location_id: str, category: str) -> list[dict[str, Any]]:
        """Places of a category ("restaurants" or "attractions") near a location."""
        response = await self.get(
            f"/location/{location_id}/nearby_search",
            params=self._params(category=category, currency="EUR"),
        )
        return response.get("data") or []

    async def details(self, location_id: str) -> dict[str, Any] | None:
        """Details for one place, or None if the lookup failed."""
        try:
            return await self.get(
                f"/location/{location_id}/details",
                params=self._params(currency="EUR"),
            )
        except ToolError as e:
            logger.warning(f"TripAdvisor details for {location_id} failed: {e}")
            return None

    async def _search(self, destination: str, category: str) -> list[dict[str, Any]]:
        location = await self.search_location(destination)
        if location is None:
            logger.warning(f"No TripAdvisor location found for {destination}")
            return []
        places = (await self.nearby_search(location["location_id"], category))[:MAX_DETAILS]
        details = await asyncio.gather(*(self.details(p["location_id"]) for p in places))
        return [
            {**place, **detail}
            for place, detail in zip(places, details)
            if detail is not None
        ]

    async def search_restaurants(self, destination: str) -> list[dict[str, Any]]:
        """Restaurants near the destination, shaped for the itinerary."""
        return [to_restaurant(d) for d in await self._search(destination, "restaurants")]

    async def search_attractions(self, destination: str) -> list[dict[str, Any]]:
        """Attractions near the destination, shaped for the itinerary."""
        return [to_attraction(d) for d in await self._search(destination, "attractions")]


def to_restaurant(details: dict[str, Any]) -> dict[str, Any]:
    """TripAdvisor details to an itinerary restaurant."""
    cuisine = details.get("cuisine") or []
    return {
        "name": details.get("name"),
        "cuisine": cuisine[0].get("localized_name") if cuisine else "Local",
        "priceRange": details.get("price_level") or "€€",
        "rating": details.get("rating") or "4.0",
        "reviewCount": int(details.get("num_reviews") or 0),
        "address": (details.get("address_obj") or {}).get("address_string", ""),
        "description": details.get("description") or "",
        "url": details.get("web_url"),
    }


def to_attraction(details: dict[str, Any]) -> dict[str, Any]:
    """TripAdvisor details to an itinerary activity."""
    subcategories = details.get("subcategory") or []
    return {
        "title": details.get("name"),
        "description": details.get("description") or "",
        "type": subcategories[0].get("localized_name", "attraction") if subcategories else "attraction",
        "rating": details.get("rating"),
        "url": details.get("web_url"),
    }
