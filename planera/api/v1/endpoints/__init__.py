"""API v1 endpoints."""

from planera.api.v1.endpoints import auth, booking, cart, health, travelers, trips

__all__ = ["auth", "booking", "cart", "health", "travelers", "trips"]
