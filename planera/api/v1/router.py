"""API v1 main router - aggregates all domain routers."""

from fastapi import APIRouter

from planera.api.v1.endpoints import (
    assistant,
    auth,
    booking,
    cart,
    feedback,
    health,
    images,
    insights,
    travelers,
    trips,
)

api_router = APIRouter()

api_router.include_router(auth.router)

api_router.include_router(health.router, tags=["Health"])

api_router.include_router(trips.router)

api_router.include_router(cart.router)

api_router.include_router(travelers.router)

api_router.include_router(booking.router)

api_router.include_router(images.router)

api_router.include_router(assistant.router)

api_router.include_router(insights.router)

api_router.include_router(feedback.router)
