"""Amadeus Self-Service client for flight and hotel offers.

Results are parsed into typed models first and then flattened into the
dict shapes stored on an itinerary.
"""

import logging
import re
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any

import httpx
from pydantic import BaseModel

from planera.core.config import settings
from planera.domains.trip.fallback import format_clock, skyscanner_url
from planera.domains.trip.tools.base import (
    BaseAsyncAPIClient,
    ProviderAuthenticationError,
)

logger = logging.getLogger(__name__)

_DURATION_RE = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?")


# ============ Output Schemas ============


class FlightSegment(BaseModel):
    """Single flight segment information."""

    departure_airport: str
    departure_time: str
    arrival_airport: str
    arrival_time: str
    carrier: str
    carrier_name: str | None = None
    flight_number: str
    duration: str


class FlightItinerary(BaseModel):
    """One direction of travel."""

    segments: list[FlightSegment]
    duration_minutes: int


class FlightOffer(BaseModel):
    """Complete flight offer with pricing."""

    offer_id: str
    itineraries: list[FlightItinerary]
    total_price: Decimal
    currency: str


class FlightSearchResult(BaseModel):
    """Result of flight search."""

    offers: list[FlightOffer]
    origin: str
    destination: str
    departure_date: str
    return_date: str | None = None


class HotelOffer(BaseModel):
    """Hotel offer with pricing."""

    hotel_id: str
    name: str
    city_code: str
    latitude: float | None = None
    longitude: float | None = None
    star_rating: int | None = None
    room_type: str | None = None
    total_price: Decimal
    price_per_night: Decimal
    currency: str
    check_in: str
    check_out: str
    board_type: str | None = None


class HotelSearchResult(BaseModel):
    """Result of hotel search."""

    offers: list[HotelOffer]
    city_code: str
    check_in_date: str
    check_out_date: str


def parse_duration_minutes(duration: str) -> int:
    """ISO 8601 ``PT2H30M`` to minutes; 0 when unparseable."""
    match = _DURATION_RE.fullmatch(duration or "")
    if not match:
        return 0
    hours, minutes = match.groups()
    return int(hours or 0) * 60 + int(minutes or 0)


def _clock(iso: str) -> str:
    moment = datetime.fromisoformat(iso)
    return format_clock(moment.hour, moment.minute)


# ============ Amadeus API Client ============


class AmadeusClient(BaseAsyncAPIClient):
    """Async client for the Amadeus API."""

    tool_name = "Amadeus"

    def __init__(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client_id = client_id or settings.AMADEUS_CLIENT_ID
        self.client_secret = client_secret or settings.AMADEUS_CLIENT_SECRET
        super().__init__(base_url or settings.AMADEUS_BASE_URL, transport=transport)
        self._access_token: str | None = None
        self._token_expires_at: datetime | None = None

    @property
    def is_configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    async def _get_headers(self) -> dict[str, str]:
        token = await self._ensure_token()
        return {
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
        }

    async def _ensure_token(self) -> str:
        """Return a valid client-credentials token, fetching one if needed."""
        if (
            self._access_token
            and self._token_expires_at
            and datetime.now() < self._token_expires_at
        ):
            return self._access_token

        async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
            response = await client.post(
                f"{self.base_url}/v1/security/oauth2/token",
                data={
                    "grant_type": "client_credentials",
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                },
            )

        if response.status_code != 200:
            raise ProviderAuthenticationError(
                f"Failed to authenticate with Amadeus: {response.text}",
                tool_name=self.tool_name,
            )

        data = response.json()
        self._access_token = data["access_token"]
        expires_in = data.get("expires_in", 1799)
        self._token_expires_at = datetime.now() + timedelta(seconds=expires_in - 60)
        return self._access_token

    async def search_flights(
        self,
        origin: str,
        destination: str,
        departure_date: str,
        return_date: str | None = None,
        adults: int = 1,
        max_results: int = 5,
        currency: str = "EUR",
    ) -> FlightSearchResult:
        """Search for flight offers.

        Args:
            origin: Origin IATA code
            destination: Destination IATA code
            departure_date: YYYY-MM-DD
            return_date: YYYY-MM-DD for round trips
            adults: Number of adult passengers
            max_results: Maximum number of offers
            currency: Price currency

        Returns:
            Parsed offers, cheapest first as returned by Amadeus
        """
        params: dict[str, Any] = {
            "originLocationCode": origin.upper(),
            "destinationLocationCode": destination.upper(),
            "departureDate": departure_date,
            "adults": adults,
            "currencyCode": currency,
            "max": max_results,
        }
        if return_date:
            params["returnDate"] = return_date

        response = await self.get("/v2/shopping/flight-offers", params=params)
        return FlightSearchResult(
            offers=self._parse_flight_offers(response),
            origin=origin.upper(),
            destination=destination.upper(),
            departure_date=departure_date,
            return_date=return_date,
        )

    def _parse_flight_offers(self, response: dict) -> list[FlightOffer]:
        carriers = response.get("dictionaries", {}).get("carriers", {})
        offers = []
        for data in response.get("data", []):
            itineraries = []
            for itinerary in data.get("itineraries", []):
                segments = [
                    FlightSegment(
                        departure_airport=s["departure"]["iataCode"],
                        departure_time=s["departure"]["at"],
                        arrival_airport=s["arrival"]["iataCode"],
                        arrival_time=s["arrival"]["at"],
                        carrier=s.get("carrierCode", ""),
                        carrier_name=carriers.get(s.get("carrierCode", "")),
                        flight_number=f"{s.get('carrierCode', '')}{s.get('number', '')}",
                        duration=s.get("duration", ""),
                    )
                    for s in itinerary.get("segments", [])
                ]
                itineraries.append(
                    FlightItinerary(
                        segments=segments,
                        duration_minutes=parse_duration_minutes(itinerary.get("duration", "")),
                    )
                )
            price = data.get("price", {})
            offers.append(
                FlightOffer(
                    offer_id=data.get("id", ""),
                    itineraries=itineraries,
                    total_price=Decimal(price.get("grandTotal", "0")),
                    currency=price.get("currency", "EUR"),
                )
            )
        return offers

    async def search_hotels(
        self,
        city_code: str,
        check_in_date: str,
        check_out_date: str,
        adults: int = 1,
        radius: int = 10,
        max_results: int = 10,
        currency: str = "EUR",
    ) -> HotelSearchResult:
        """Search hotels in a city and price them for the stay.

        A failed pricing call leaves the result empty rather than raising,
        since the hotel list alone has no prices to show.
        """
        hotels_response = await self.get(
            "/v1/reference-data/locations/hotels/by-city",
            params={
                "cityCode": city_code.upper(),
                "radius": radius,
                "radiusUnit": "KM",
                "hotelSource": "ALL",
            },
        )
        hotels_data = hotels_response.get("data", [])[:max_results]
        result = HotelSearchResult(
            offers=[],
            city_code=city_code.upper(),
            check_in_date=check_in_date,
            check_out_date=check_out_date,
        )
        if not hotels_data:
            return result

        offers_response = await self.get(
            "/v3/shopping/hotel-offers",
            params={
                "hotelIds": ",".join(h["hotelId"] for h in hotels_data[:20]),
                "checkInDate": check_in_date,
                "checkOutDate": check_out_date,
                "adults": adults,
                "roomQuantity": 1,
                "currency": currency,
            },
        )
        result.offers = self._parse_hotel_offers(
            offers_response, hotels_data, check_in_date, check_out_date
        )
        return result

    def _parse_hotel_offers(
        self,
        response: dict,
        hotels_data: list[dict],
        check_in: str,
        check_out: str,
    ) -> list[HotelOffer]:
        hotels_map = {h["hotelId"]: h for h in hotels_data}
        nights = (date.fromisoformat(check_out) - date.fromisoformat(check_in)).days

        offers = []
        for data in response.get("data", []):
            hotel = data.get("hotel", {})
            hotel_id = hotel.get("hotelId", "")
            info = hotels_map.get(hotel_id, {})
            # Cheapest offer per hotel
            priced = sorted(
                data.get("offers", []),
                key=lambda o: Decimal(o.get("price", {}).get("total", "0")),
            )
            if not priced:
                continue
            offer = priced[0]
            total = Decimal(offer.get("price", {}).get("total", "0"))
            offers.append(
                HotelOffer(
                    hotel_id=hotel_id,
                    name=hotel.get("name", "Unknown Hotel"),
                    city_code=hotel.get("cityCode", ""),
                    latitude=info.get("geoCode", {}).get("latitude"),
                    longitude=info.get("geoCode", {}).get("longitude"),
                    star_rating=info.get("rating"),
                    room_type=offer.get("room", {}).get("typeEstimated", {}).get("category"),
                    total_price=total,
                    price_per_night=total / nights if nights > 0 else total,
                    currency=offer.get("price", {}).get("currency", "EUR"),
                    check_in=check_in,
                    check_out=check_out,
                    board_type=offer.get("boardType"),
                )
            )
        return offers


# ============ Itinerary shapes ============


def _leg_from_itinerary(itinerary: FlightItinerary) -> dict[str, Any]:
    first, last = itinerary.segments[0], itinerary.segments[-1]
    minutes = itinerary.duration_minutes
    return {
        "airline": first.carrier_name or first.carrier,
        "flightNumber": first.flight_number,
        "departure": _clock(first.departure_time),
        "arrival": _clock(last.arrival_time),
        "duration": f"{minutes // 60}h {minutes % 60}m",
        "stops": len(itinerary.segments) - 1,
    }


def flight_result_to_options(result: FlightSearchResult, adults: int) -> list[dict[str, Any]]:
    """Flatten Amadeus offers into itinerary flight options."""
    adults = max(adults, 1)
    options = []
    for index, offer in enumerate(result.offers):
        if not offer.itineraries or not offer.itineraries[0].segments:
            continue
        total = float(offer.total_price)
        options.append(
            {
                "id": offer.offer_id,
                "pricePerPerson": round(total / adults, 2),
                "totalPrice": total,
                "currency": offer.currency,
                "outbound": _leg_from_itinerary(offer.itineraries[0]),
                "return": (
                    _leg_from_itinerary(offer.itineraries[1])
                    if len(offer.itineraries) > 1 and offer.itineraries[1].segments
                    else None
                ),
                "bookingUrl": skyscanner_url(
                    result.origin, result.destination, result.departure_date, result.return_date
                ),
                "isBestPrice": index == 0,
            }
        )
    return options


def hotel_result_to_hotels(result: HotelSearchResult) -> list[dict[str, Any]]:
    """Flatten Amadeus hotel offers into itinerary hotels."""
    return [
        {
            "name": offer.name,
            "rating": str(offer.star_rating) if offer.star_rating else None,
            "price": str(round(offer.price_per_night)),
            "totalPrice": str(offer.total_price),
            "currency": offer.currency,
            "roomType": offer.room_type,
            "boardType": offer.board_type,
            "coordinates": (
                {"latitude": offer.latitude, "longitude": offer.longitude}
                if offer.latitude is not None and offer.longitude is not None
                else None
            ),
        }
        for offer in result.offers
    ]
