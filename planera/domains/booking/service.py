"""Services for the flight booking flow.

Search -> revalidate -> draft (passengers, seats, baggage, policy) ->
submit. Submission places a Duffel order paid from the Duffel balance,
stores the booking and emails a confirmation.
"""

import html
import logging
from datetime import datetime, timezone
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from planera.core.config import settings
from planera.core.exceptions import BadRequestError, UpstreamServiceError
from planera.domains.booking.models import (
    FlightBooking,
    FlightBookingDraft,
    FlightBookingStatus,
)
from planera.domains.booking.repository import (
    FlightBookingDraftRepository,
    FlightBookingRepository,
)
from planera.domains.booking.schemas import (
    FlightBookingDraftUpdate,
    FlightOfferCheck,
    FlightSearchResponse,
)
from planera.domains.traveler.models import Gender
from planera.domains.trip.locations import extract_iata_code
from planera.domains.trip.planner import epoch_ms_to_date
from planera.domains.trip.repository import TripRepository
from planera.domains.trip.tools.base import ToolError
from planera.domains.trip.tools.duffel import DuffelClient, transform_offer_to_flight_option
from planera.infra.gmail import EmailConfigurationError, send_email

logger = logging.getLogger(__name__)

OFFER_EXPIRED = "Flight offer not found or has expired. Please search for new flights."
OFFER_CHECK_FAILED = "Failed to verify flight offer. Please try again."
DRAFT_EXPIRED = "This flight offer has expired. Please search for new flights."
POLICY_REQUIRED = "Please review and accept the fare conditions before booking."
PASSENGERS_REQUIRED = "Add at least one passenger before booking."


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.warning(f"Unparseable offer expiry {value!r}")
        return None


def _aware(moment: datetime) -> datetime:
    # sqlite hands back naive datetimes
    return moment if moment.tzinfo else moment.replace(tzinfo=timezone.utc)


def to_duffel_passengers(
    passengers: list[dict[str, Any]],
    offer_passenger_ids: list[str],
) -> list[dict[str, Any]]:
    """Draft passengers in Duffel's order format.

    Duffel requires the passenger ids it issued with the offer; positional
    ``pas_{i}`` ids stand in when the offer carried none.
    """
    return [
        {
            "id": offer_passenger_ids[i] if i < len(offer_passenger_ids) else f"pas_{i}",
            "given_name": p["given_name"],
            "family_name": p["family_name"],
            "born_on": p["born_on"],
            "gender": "m" if p["gender"] == Gender.MALE.value else "f",
            "title": p["title"],
            "email": p["email"],
            "phone_number": p["phone_number"],
        }
        for i, p in enumerate(passengers)
    ]


def _leg_snapshot(leg: dict[str, Any] | None) -> dict[str, Any] | None:
    if not leg:
        return None
    keys = ("airline", "flightNumber", "departure", "arrival", "departureDate", "origin", "destination")
    return {k: leg.get(k) for k in keys}


def confirmation_email(booking: FlightBooking) -> tuple[str, str, str]:
    """Subject, HTML and text of the booking confirmation."""
    out = booking.outbound_flight
    reference = booking.booking_reference or "PENDING"
    subject = (
        f"Flight Confirmation - {out.get('origin')} to {out.get('destination')} "
        f"| {booking.booking_reference or 'Planera'}"
    )
    lines = [
        f"Booking reference: {reference}",
        f"Outbound: {out.get('airline')} {out.get('flightNumber')} on {out.get('departureDate')}, "
        f"{out.get('departure')} - {out.get('arrival')}",
    ]
    if booking.return_flight:
        ret = booking.return_flight
        lines.append(
            f"Return: {ret.get('airline')} {ret.get('flightNumber')} on {ret.get('departureDate')}, "
            f"{ret.get('departure')} - {ret.get('arrival')}"
        )
    names = ", ".join(f"{p['given_name']} {p['family_name']}" for p in booking.passengers)
    lines.append(f"Passengers: {names}")
    lines.append(f"Total paid: {booking.total_amount:.2f} {booking.currency}")

    text = "\n".join(lines)
    body = "".join(f"<p>{html.escape(line)}</p>" for line in lines)
    return subject, f"<html><body>{body}</body></html>", text


class BookingService:
    """Flight search, booking drafts and order placement for a user's trips."""

    def __init__(self, session: AsyncSession, duffel: DuffelClient | None = None) -> None:
        self.session = session
        self.trip_repository = TripRepository(session)
        self.draft_repository = FlightBookingDraftRepository(session)
        self.booking_repository = FlightBookingRepository(session)
        self._duffel = duffel

    @property
    def duffel(self) -> DuffelClient:
        if self._duffel is None:
            self._duffel = DuffelClient()
        return self._duffel

    # ==================== Search ====================

    async def search_flights(self, trip_id: UUID, user_id: UUID) -> FlightSearchResponse:
        """Live Duffel offers for the trip's route, dates and travelers.

        Raises:
            NotFoundError: If the trip is not the user's
            UpstreamServiceError: If Duffel is unavailable or rejects the search
        """
        trip = await self.trip_repository.get_owned(trip_id, user_id)
        start = epoch_ms_to_date(trip.start_date)
        end = epoch_ms_to_date(trip.end_date)
        try:
            async with self.duffel as duffel:
                result = await duffel.create_offer_request(
                    origin=extract_iata_code(trip.origin or settings.DEFAULT_ORIGIN),
                    destination=extract_iata_code(trip.destination),
                    departure_date=start.isoformat(),
                    return_date=end.isoformat() if end > start else None,
                    adults=trip.travelers,
                )
        except ToolError as e:
            logger.warning(f"Duffel search failed for trip {trip_id}: {e.message}")
            raise UpstreamServiceError(detail=e.message)

        offers = sorted(result.offers, key=lambda o: float(o.get("total_amount") or 0))
        return FlightSearchResponse(
            offer_request_id=result.offer_request_id,
            flights=[
                transform_offer_to_flight_option(offer, trip.travelers, index)
                for index, offer in enumerate(offers)
            ],
        )

    async def get_flight_offer(self, offer_id: str) -> FlightOfferCheck:
        """Check that an offer is still bookable and report its current price."""
        try:
            async with self.duffel as duffel:
                offer = await duffel.get_offer(offer_id)
        except ToolError as e:
            logger.warning(f"Offer check for {offer_id} failed: {e.message}")
            return FlightOfferCheck(valid=False, error=OFFER_CHECK_FAILED)

        if offer is None:
            return FlightOfferCheck(valid=False, error=OFFER_EXPIRED)

        total = float(offer.get("total_amount") or 0)
        passengers = len(offer.get("passengers") or []) or 1
        return FlightOfferCheck(
            valid=True,
            offer=offer,
            price_per_person=round(total / passengers),
            total_price=round(total),
            currency=offer.get("total_currency") or "EUR",
            expires_at=offer.get("expires_at"),
        )

    # ==================== Drafts ====================

    async def create_draft(self, trip_id: UUID, user_id: UUID, offer_id: str) -> FlightBookingDraft:
        """Start a booking draft for a revalidated offer.

        Raises:
            NotFoundError: If the trip is not the user's
            BadRequestError: If the offer is gone
        """
        trip = await self.trip_repository.get_owned(trip_id, user_id)
        check = await self.get_flight_offer(offer_id)
        if not check.valid:
            raise BadRequestError(detail=check.error or OFFER_EXPIRED)

        offer = check.offer or {}
        passenger_ids = [p["id"] for p in offer.get("passengers") or [] if p.get("id")]
        draft = await self.draft_repository.create(
            {
                "user_id": user_id,
                "trip_id": trip.id,
                "offer_id": offer_id,
                "offer_passenger_ids": passenger_ids,
                "flight": transform_offer_to_flight_option(
                    offer, len(passenger_ids) or trip.travelers, 0
                ),
                "expires_at": _parse_timestamp(check.expires_at),
                "total_amount": float(offer.get("total_amount") or 0),
                "currency": check.currency or "EUR",
            }
        )
        await self.session.commit()
        logger.info(f"Created booking draft {draft.id} for offer {offer_id}")
        return draft

    async def get_draft(self, draft_id: UUID, user_id: UUID) -> FlightBookingDraft:
        """Get an owned draft.

        Raises:
            NotFoundError: If the draft is missing or not the user's
        """
        return await self.draft_repository.get_owned(draft_id, user_id)

    async def update_draft(
        self,
        draft_id: UUID,
        user_id: UUID,
        data: FlightBookingDraftUpdate,
    ) -> FlightBookingDraft:
        """Save one or more booking tabs on a draft."""
        draft = await self.get_draft(draft_id, user_id)
        draft = await self.draft_repository.apply(
            draft, data.model_dump(mode="json", exclude_unset=True)
        )
        await self.session.commit()
        return draft

    # ==================== Submission ====================

    def _check_submittable(self, draft: FlightBookingDraft, now: datetime) -> None:
        if draft.expires_at and _aware(draft.expires_at) <= now:
            raise BadRequestError(detail=DRAFT_EXPIRED)
        if not draft.policy_acknowledged:
            raise BadRequestError(detail=POLICY_REQUIRED)
        if not draft.passengers:
            raise BadRequestError(detail=PASSENGERS_REQUIRED)

    async def submit_draft(
        self,
        draft_id: UUID,
        user_id: UUID,
        now: datetime | None = None,
    ) -> FlightBooking:
        """Place the Duffel order for a completed draft.

        The draft is consumed. A confirmation email is attempted afterwards;
        its failure does not undo the booking.

        Raises:
            NotFoundError: If the draft is not the user's
            BadRequestError: If the offer expired, the policy was not
                acknowledged or there are no passengers
            UpstreamServiceError: If Duffel rejects the order
        """
        now = now or datetime.now(timezone.utc)
        draft = await self.get_draft(draft_id, user_id)
        self._check_submittable(draft, now)

        try:
            async with self.duffel as duffel:
                order = await duffel.create_order(
                    draft.offer_id,
                    to_duffel_passengers(draft.passengers, draft.offer_passenger_ids),
                    metadata={"trip_id": str(draft.trip_id), "draft_id": str(draft.id)},
                )
        except ToolError as e:
            logger.error(f"Duffel order for draft {draft.id} failed: {e.message}")
            raise UpstreamServiceError(detail=e.message)

        flight = draft.flight or {}
        booking = await self.booking_repository.create(
            {
                "user_id": user_id,
                "trip_id": draft.trip_id,
                "duffel_order_id": order["id"],
                "booking_reference": order.get("booking_reference"),
                "total_amount": float(order.get("total_amount") or draft.total_amount),
                "currency": order.get("total_currency") or draft.currency,
                "outbound_flight": _leg_snapshot(flight.get("outbound")) or {},
                "return_flight": _leg_snapshot(flight.get("return")),
                "passengers": [
                    {
                        "given_name": p["given_name"],
                        "family_name": p["family_name"],
                        "email": p["email"],
                    }
                    for p in draft.passengers
                ],
                "status": FlightBookingStatus.CONFIRMED,
                "confirmed_at": now,
            }
        )
        await self.draft_repository.remove(draft)
        await self.session.commit()
        logger.info(f"Booked order {order['id']} ({booking.booking_reference}) for draft {draft_id}")

        await self._send_confirmation(booking)
        return booking

    async def _send_confirmation(self, booking: FlightBooking) -> None:
        recipient = next((p["email"] for p in booking.passengers if p.get("email")), None)
        if recipient is None:
            logger.warning(f"No passenger email for booking {booking.id}")
            return

        subject, body_html, body_text = confirmation_email(booking)
        try:
            result = await send_email(recipient, subject, body_html, body_text)
        except EmailConfigurationError as e:
            logger.warning(f"Confirmation email for booking {booking.id} not sent: {e}")
            return

        if not result.success:
            logger.warning(f"Confirmation email for booking {booking.id} failed: {result.error}")
            return
        await self.booking_repository.apply(booking, {"confirmation_email_sent": True})
        await self.session.commit()

    # ==================== Bookings ====================

    async def list_bookings(self, trip_id: UUID, user_id: UUID) -> Sequence[FlightBooking]:
        """The user's flight bookings for a trip."""
        await self.trip_repository.get_owned(trip_id, user_id)
        return await self.booking_repository.list_for_trip(trip_id, user_id)
