"""
Tests for the Amadeus, TripAdvisor and Unsplash clients against mock transports.
"""

import random
from urllib.parse import parse_qs

import httpx
import pytest

from planera.domains.trip.images import ImageService
from planera.domains.trip.tools.amadeus import (
    AmadeusClient,
    flight_result_to_options,
    hotel_result_to_hotels,
    parse_duration_minutes,
)
from planera.domains.trip.tools.base import APIClientError, ProviderAuthenticationError, RateLimitError
from planera.domains.trip.tools.tripadvisor import TripAdvisorClient, to_restaurant
from planera.domains.trip.tools.unsplash import UnsplashClient, to_image

AMADEUS_URL = "https://amadeus.test"
TRIPADVISOR_URL = "https://tripadvisor.test"
UNSPLASH_URL = "https://unsplash.test"

FLIGHT_OFFERS = {
    "data": [
        {
            "id": "1",
            "price": {"grandTotal": "312.40", "currency": "EUR"},
            "itineraries": [
                {
                    "duration": "PT3H10M",
                    "segments": [
                        {
                            "departure": {"iataCode": "ATH", "at": "2024-06-01T07:05:00"},
                            "arrival": {"iataCode": "FCO", "at": "2024-06-01T08:15:00"},
                            "carrierCode": "AZ",
                            "number": "721",
                            "duration": "PT2H10M",
                        }
                    ],
                },
                {
                    "duration": "PT2H5M",
                    "segments": [
                        {
                            "departure": {"iataCode": "FCO", "at": "2024-06-05T19:40:00"},
                            "arrival": {"iataCode": "ATH", "at": "2024-06-05T22:45:00"},
                            "carrierCode": "AZ",
                            "number": "722",
                            "duration": "PT2H5M",
                        }
                    ],
                },
            ],
        }
    ],
    "dictionaries": {"carriers": {"AZ": "ITA AIRWAYS"}},
}


def _amadeus(handler) -> AmadeusClient:
    return AmadeusClient(
        client_id="id",
        client_secret="secret",
        base_url=AMADEUS_URL,
        transport=httpx.MockTransport(handler),
    )


def _amadeus_handler(routes: dict[str, httpx.Response], tokens: list | None = None):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/v1/security/oauth2/token":
            if tokens is not None:
                tokens.append(parse_qs(request.content.decode()))
            return httpx.Response(200, json={"access_token": "amadeus-token", "expires_in": 1799})
        assert request.headers["Authorization"] == "Bearer amadeus-token"
        return routes[request.url.path]

    return handler


class TestAmadeus:
    """Tests for AmadeusClient."""

    def test_parse_duration(self):
        assert parse_duration_minutes("PT3H10M") == 190
        assert parse_duration_minutes("PT45M") == 45
        assert parse_duration_minutes("") == 0

    @pytest.mark.asyncio
    async def test_flight_search_to_options(self):
        tokens = []
        handler = _amadeus_handler(
            {"/v2/shopping/flight-offers": httpx.Response(200, json=FLIGHT_OFFERS)}, tokens
        )

        async with _amadeus(handler) as amadeus:
            result = await amadeus.search_flights("ath", "fco", "2024-06-01", "2024-06-05", adults=2)

        assert tokens[0]["grant_type"] == ["client_credentials"]
        options = flight_result_to_options(result, adults=2)
        assert len(options) == 1
        option = options[0]
        assert option["pricePerPerson"] == 156.2
        assert option["isBestPrice"] is True
        assert option["outbound"] == {
            "airline": "ITA AIRWAYS",
            "flightNumber": "AZ721",
            "departure": "07:05 AM",
            "arrival": "08:15 AM",
            "duration": "3h 10m",
            "stops": 0,
        }
        assert option["return"]["arrival"] == "10:45 PM"
        assert option["bookingUrl"] == "https://www.skyscanner.com/transport/flights/ATH/FCO/240601/240605"

    @pytest.mark.asyncio
    async def test_hotels_priced_per_night(self):
        handler = _amadeus_handler(
            {
                "/v1/reference-data/locations/hotels/by-city": httpx.Response(
                    200,
                    json={
                        "data": [
                            {"hotelId": "RMHOT1", "rating": 4, "geoCode": {"latitude": 41.9, "longitude": 12.5}}
                        ]
                    },
                ),
                "/v3/shopping/hotel-offers": httpx.Response(
                    200,
                    json={
                        "data": [
                            {
                                "hotel": {"hotelId": "RMHOT1", "name": "Hotel Artemide", "cityCode": "ROM"},
                                "offers": [
                                    {"price": {"total": "900.00", "currency": "EUR"}},
                                    {"price": {"total": "640.00", "currency": "EUR"}, "boardType": "BREAKFAST"},
                                ],
                            }
                        ]
                    },
                ),
            }
        )

        async with _amadeus(handler) as amadeus:
            result = await amadeus.search_hotels("rom", "2024-06-01", "2024-06-05")

        hotels = hotel_result_to_hotels(result)
        assert hotels == [
            {
                "name": "Hotel Artemide",
                "rating": "4",
                "price": "160",
                "totalPrice": "640.00",
                "currency": "EUR",
                "roomType": None,
                "boardType": "BREAKFAST",
                "coordinates": {"latitude": 41.9, "longitude": 12.5},
            }
        ]

    @pytest.mark.asyncio
    async def test_rejected_credentials(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, text="invalid_client")

        with pytest.raises(ProviderAuthenticationError):
            async with _amadeus(handler):
                pass

    @pytest.mark.asyncio
    async def test_rate_limited(self):
        handler = _amadeus_handler({"/v2/shopping/flight-offers": httpx.Response(429, text="slow down")})

        async with _amadeus(handler) as amadeus:
            with pytest.raises(RateLimitError):
                await amadeus.search_flights("ATH", "FCO", "2024-06-01")


class TestTripAdvisor:
    """Tests for TripAdvisorClient."""

    @pytest.mark.asyncio
    async def test_restaurants_skip_failed_details(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["key"] == "ta-key"
            path = request.url.path
            if path == "/location/search":
                return httpx.Response(200, json={"data": [{"location_id": "187147"}]})
            if path == "/location/187147/nearby_search":
                assert request.url.params["category"] == "restaurants"
                return httpx.Response(
                    200, json={"data": [{"location_id": "1", "name": "Clamato"}, {"location_id": "2"}]}
                )
            if path == "/location/1/details":
                return httpx.Response(
                    200,
                    json={
                        "name": "Clamato",
                        "cuisine": [{"localized_name": "Seafood"}],
                        "rating": "4.5",
                        "num_reviews": "812",
                        "address_obj": {"address_string": "80 Rue de Charonne, Paris"},
                    },
                )
            return httpx.Response(500, text="boom")

        client = TripAdvisorClient(api_key="ta-key", base_url=TRIPADVISOR_URL, transport=httpx.MockTransport(handler))
        async with client as tripadvisor:
            restaurants = await tripadvisor.search_restaurants("Paris")

        assert restaurants == [
            {
                "name": "Clamato",
                "cuisine": "Seafood",
                "priceRange": "€€",
                "rating": "4.5",
                "reviewCount": 812,
                "address": "80 Rue de Charonne, Paris",
                "description": "",
                "url": None,
            }
        ]

    @pytest.mark.asyncio
    async def test_unknown_destination(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"data": []})

        client = TripAdvisorClient(api_key="ta-key", base_url=TRIPADVISOR_URL, transport=httpx.MockTransport(handler))
        async with client as tripadvisor:
            assert await tripadvisor.search_attractions("Atlantis") == []

    @pytest.mark.asyncio
    async def test_search_failure_propagates(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="down")

        client = TripAdvisorClient(api_key="ta-key", base_url=TRIPADVISOR_URL, transport=httpx.MockTransport(handler))
        async with client as tripadvisor:
            with pytest.raises(APIClientError):
                await tripadvisor.search_restaurants("Paris")

    def test_restaurant_defaults(self):
        restaurant = to_restaurant({"name": "Taverna"})
        assert restaurant["cuisine"] == "Local"
        assert restaurant["rating"] == "4.0"
        assert restaurant["reviewCount"] == 0


def _photo(photo_id: str) -> dict:
    return {
        "id": photo_id,
        "alt_description": "Eiffel tower at dusk",
        "urls": {
            "regular": f"https://images.unsplash.com/{photo_id}?w=1080",
            "small": f"https://images.unsplash.com/{photo_id}?w=400",
            "thumb": f"https://images.unsplash.com/{photo_id}?w=200",
        },
        "links": {"download_location": f"{UNSPLASH_URL}/photos/{photo_id}/download?ixid=abc"},
        "user": {"name": "Ana Lima", "username": "analima", "links": {"html": "https://unsplash.com/@analima"}},
    }


def _unsplash(handler) -> UnsplashClient:
    return UnsplashClient(access_key="us-key", base_url=UNSPLASH_URL, transport=httpx.MockTransport(handler))


class TestUnsplash:
    """Tests for UnsplashClient and ImageService."""

    @pytest.mark.asyncio
    async def test_destination_photo_tries_broader_queries(self):
        queries = []

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.headers["Authorization"] == "Client-ID us-key"
            query = request.url.params["query"]
            queries.append(query)
            if query == "Paris city":
                return httpx.Response(200, json={"results": [_photo("ph_1"), {"id": "no-urls"}]})
            return httpx.Response(200, json={"results": []})

        async with _unsplash(handler) as unsplash:
            photo = await unsplash.destination_photo("Paris", random.Random(3))

        assert queries == ["Paris travel", "Paris city"]
        assert photo["id"] == "ph_1"

    @pytest.mark.asyncio
    async def test_nothing_found(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"results": []})

        async with _unsplash(handler) as unsplash:
            assert await unsplash.destination_photo("Atlantis") is None

    @pytest.mark.asyncio
    async def test_track_download_uses_relative_path(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, json={"url": "https://images.unsplash.com/ph_1"})

        async with _unsplash(handler) as unsplash:
            await unsplash.track_download(_photo("ph_1"))

        assert seen == [f"{UNSPLASH_URL}/photos/ph_1/download?ixid=abc"]

    @pytest.mark.asyncio
    async def test_track_download_failure_is_logged_only(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="down")

        async with _unsplash(handler) as unsplash:
            await unsplash.track_download(_photo("ph_1"))

    def test_to_image_carries_attribution(self):
        image = to_image(_photo("ph_1"))

        assert image["url"] == "https://images.unsplash.com/ph_1?w=1080"
        assert image["description"] == "Eiffel tower at dusk"
        assert image["photographerUrl"] == "https://unsplash.com/@analima?utm_source=planera&utm_medium=referral"
        assert image["unsplashUrl"] == "https://unsplash.com/?utm_source=planera&utm_medium=referral"

    @pytest.mark.asyncio
    async def test_restaurant_image_query(self):
        queries = []

        def handler(request: httpx.Request) -> httpx.Response:
            queries.append((request.url.params["query"], request.url.params["per_page"]))
            return httpx.Response(200, json={"results": [_photo("ph_2")]})

        image = await ImageService(_unsplash(handler)).restaurant_image("Seafood", "Lisbon")

        assert queries == [("Seafood restaurant Lisbon", "1")]
        assert image["unsplashPhotoId"] == "ph_2"

    @pytest.mark.asyncio
    async def test_image_service_without_key_or_on_failure(self):
        assert await ImageService(UnsplashClient(access_key="")).destination_image("Paris") is None

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, text="rate limit")

        assert await ImageService(_unsplash(handler)).destination_gallery("Paris", 3) == []
