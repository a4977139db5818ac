"""Duffel flights API client.

Covers offer search, revalidation of a single offer before booking, and
order creation paid from the Duffel balance.
"""

import asyncio
import logging
import re
from dataclasses import dataclass, field
from typing import Any

import httpx

from planera.core.config import settings
from planera.domains.trip.tools.base import APIClientError, BaseAsyncAPIClient, ToolError

logger = logging.getLogger(__name__)

DUFFEL_VERSION = "v2"
POLL_ATTEMPTS = 15
POLL_INTERVAL = 2.0  # seconds

# Ages Duffel uses to price non-adult passengers
CHILD_AGE = 8
INFANT_AGE = 1

_DURATION_RE = re.compile(r"P(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?)?")


@dataclass
class OfferRequestResult:
    """Offer request id plus whatever offers are available for it."""

    offer_request_id: str
    offers: list[dict[str, Any]] = field(default_factory=list)


class DuffelClient(BaseAsyncAPIClient):
    """Async client for the Duffel API."""

    tool_name = "Duffel"

    def __init__(
        self,
        access_token: str | None = None,
        base_url: str | None = None,
        poll_interval: float = POLL_INTERVAL,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.access_token = access_token or settings.DUFFEL_ACCESS_TOKEN
        self.environment = settings.DUFFEL_ENV
        self.poll_interval = poll_interval
        super().__init__(base_url or settings.DUFFEL_BASE_URL, transport=transport)

    @property
    def is_configured(self) -> bool:
        return bool(self.access_token)

    async def _get_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.access_token}",
            "Duffel-Version": DUFFEL_VERSION,
            "Accept": "application/json",
        }

    # ==================== Offers ====================

    async def create_offer_request(
        self,
        origin: str,
        destination: str,
        departure_date: str,
        return_date: str | None,
        adults: int,
        children: int = 0,
        infants: int = 0,
        cabin_class: str = "economy",
    ) -> OfferRequestResult:
        """Create an offer request and collect its offers.

        When Duffel returns no offers inline, ``/air/offers`` is polled
        until some appear or the attempts run out.

        Args:
            origin: Origin IATA code
            destination: Destination IATA code
            departure_date: YYYY-MM-DD
            return_date: YYYY-MM-DD, or None for one-way
            adults: Adult passengers
            children: Child passengers
            infants: Infant passengers
            cabin_class: economy, premium_economy, business or first

        Returns:
            OfferRequestResult with raw Duffel offers

        Raises:
            APIClientError: If Duffel rejects the request
        """
        passengers = (
            [{"type": "adult"} for _ in range(max(adults, 1))]
            + [{"age": CHILD_AGE} for _ in range(children)]
            + [{"age": INFANT_AGE} for _ in range(infants)]
        )
        slices = [
            {"origin": origin, "destination": destination, "departure_date": departure_date}
        ]
        if return_date:
            slices.append(
                {"origin": destination, "destination": origin, "departure_date": return_date}
            )

        logger.info(
            f"Creating Duffel offer request ({self.environment}) {origin}->{destination} "
            f"on {departure_date}"
        )
        response = await self.post(
            "/air/offer_requests",
            json_data={
                "data": {
                    "passengers": passengers,
                    "slices": slices,
                    "cabin_class": cabin_class,
                }
            },
            params={"return_offers": "true"},
        )
        data = response["data"]
        result = OfferRequestResult(offer_request_id=data["id"], offers=data.get("offers") or [])

        attempts = 0
        while not result.offers and attempts < POLL_ATTEMPTS:
            attempts += 1
            try:
                result.offers = await self.get_offers(result.offer_request_id)
            except ToolError as e:
                logger.warning(f"Duffel offers poll {attempts}/{POLL_ATTEMPTS} failed: {e}")
            if not result.offers:
                await asyncio.sleep(self.poll_interval)

        logger.info(f"Duffel: {result.offer_request_id}, found {len(result.offers)} offers")
        return result

    async def get_offers(self, offer_request_id: str, limit: int = 10) -> list[dict[str, Any]]:
        """Raw offers for an offer request, cheapest first."""
        response = await self.get(
            "/air/offers",
            params={
                "offer_request_id": offer_request_id,
                "limit": limit,
                "sort": "total_amount",
            },
        )
        return response.get("data") or []

    async def get_offer(self, offer_id: str) -> dict[str, Any] | None:
        """Fetch one offer to confirm it is still bookable.

        Returns:
            The raw offer, or None when it expired or the call failed
        """
        try:
            response = await self.get(f"/air/offers/{offer_id}")
        except ToolError as e:
            logger.warning(f"Duffel get offer {offer_id} failed: {e}")
            return None
        return response.get("data")

    # ==================== Orders ====================

    async def get_order(self, order_id: str) -> dict[str, Any] | None:
        """Fetch a placed order.

        Returns:
            The raw order, or None when it is unknown or the call failed
        """
        try:
            response = await self.get(f"/air/orders/{order_id}")
        except ToolError as e:
            logger.warning(f"Duffel get order {order_id} failed: {e}")
            return None
        return response.get("data")

    async def create_order(
        self,
        offer_id: str,
        passengers: list[dict[str, Any]],
        payment_type: str = "balance",
        metadata: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Book an offer as an instant order.

        The payment covers the offer's current total, so the offer is
        re-fetched first.

        Returns:
            The Duffel order, including ``booking_reference``

        Raises:
            APIClientError: If the offer is gone or Duffel rejects the order
        """
        offer = await self.get_offer(offer_id)
        if offer is None:
            raise APIClientError("Offer not found or expired", tool_name=self.tool_name)

        response = await self.post(
            "/air/orders",
            json_data={
                "data": {
                    "type": "instant",
                    "selected_offers": [offer_id],
                    "passengers": passengers,
                    "payments": [
                        {
                            "type": payment_type,
                            "currency": offer.get("total_currency", "EUR"),
                            "amount": offer.get("total_amount", "0"),
                        }
                    ],
                    "metadata": metadata or {},
                }
            },
        )
        order = response["data"]
        logger.info(f"Duffel order {order.get('id')} created, ref {order.get('booking_reference')}")
        return order


# ============ Offer transformation ============


def format_time(iso: str | None) -> str:
    """``2024-06-01T14:05:00`` to ``02:05 PM``; input echoed if unparseable."""
    if not iso or "T" not in iso:
        return iso or ""
    hours, _, rest = iso.split("T", 1)[1].partition(":")
    try:
        hour = int(hours)
    except ValueError:
        return iso
    period = "PM" if hour >= 12 else "AM"
    return f"{hour % 12 or 12:02d}:{rest[:2]} {period}"


def format_duration(iso: str | None) -> str:
    """ISO 8601 ``PT2H30M`` to ``2h 30m``; input echoed if unparseable.

    Days are folded into hours, so ``P1DT2H30M`` becomes ``26h 30m``.
    """
    if not iso:
        return ""
    match = _DURATION_RE.fullmatch(iso)
    if not match or not any(match.groups()):
        return iso
    days, hours, minutes = (int(g) if g else 0 for g in match.groups())
    hours += 24 * days
    parts = [f"{hours}h" if hours else "", f"{minutes}m" if minutes else ""]
    return " ".join(p for p in parts if p) or "0m"


def _transform_slice(slice_: dict[str, Any] | None) -> dict[str, Any] | None:
    if not slice_:
        return None
    segments = slice_.get("segments") or []
    first = segments[0] if segments else {}
    last = segments[-1] if segments else {}
    carrier = first.get("operating_carrier") or first.get("marketing_carrier") or {}
    return {
        "airline": carrier.get("name") or carrier.get("iata_code") or "Unknown",
        "flightNumber": f"{carrier.get('iata_code', '')}{first.get('operating_carrier_flight_number') or first.get('marketing_carrier_flight_number') or ''}",
        "departure": format_time(first.get("departing_at")),
        "arrival": format_time(last.get("arriving_at")),
        "duration": format_duration(slice_.get("duration")),
        "stops": max(len(segments) - 1, 0),
        "origin": (slice_.get("origin") or {}).get("iata_code"),
        "destination": (slice_.get("destination") or {}).get("iata_code"),
        "departureDate": (first.get("departing_at") or "")[:10] or None,
    }


def _booking_url(offer: dict[str, Any], outbound: dict | None, inbound: dict | None) -> str:
    owner_site = (offer.get("owner") or {}).get("website_url")
    if owner_site:
        return owner_site
    if not outbound or not (outbound["origin"] and outbound["destination"] and outbound["departureDate"]):
        return ""
    url = (
        f"https://www.skyscanner.com/transport/flights/{outbound['origin']}/"
        f"{outbound['destination']}/{outbound['departureDate'][2:].replace('-', '')}"
    )
    if inbound and inbound["departureDate"]:
        url += f"/{inbound['departureDate'][2:].replace('-', '')}"
    return url


def transform_offer_to_flight_option(offer: dict[str, Any], adults: int, index: int) -> dict[str, Any]:
    """Map a raw Duffel offer onto the app's flight option shape.

    Pure: the same offer and index always give the same option.

    Args:
        offer: Raw Duffel offer
        adults: Adults the price is split between
        index: Position in the price-sorted list; 0 is the best price
    """
    slices = offer.get("slices") or []
    outbound = _transform_slice(slices[0] if slices else None)
    inbound = _transform_slice(slices[1] if len(slices) > 1 else None)
    total = float(offer.get("total_amount") or 0)
    adults = max(adults, 1)
    return {
        "id": offer.get("id"),
        "pricePerPerson": round(total / adults, 2),
        "totalPrice": total,
        "currency": offer.get("total_currency") or "EUR",
        "outbound": outbound,
        "return": inbound,
        "luggage": "1 checked bag included",
        "checkedBaggageIncluded": True,
        "bookingUrl": _booking_url(offer, outbound, inbound),
        "expiresAt": offer.get("expires_at"),
        "isBestPrice": index == 0,
    }
