"""Every ORM model, imported so each table registers on ``Base.metadata``."""

from planera.domains.booking.models import FlightBooking, FlightBookingDraft
from planera.domains.cart.models import Cart
from planera.domains.feedback.models import Feedback
from planera.domains.insight.models import Insight
from planera.domains.traveler.models import Traveler
from planera.domains.trip.models import Trip
from planera.domains.user.models import User

__all__ = [
    "Cart",
    "Feedback",
    "FlightBooking",
    "FlightBookingDraft",
    "Insight",
    "Traveler",
    "Trip",
    "User",
]
