"""Trip API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from planera.core.deps import ActiveUser
from planera.domains.trip.schemas import TripCreate, TripResponse, TripSummary, TripUpdate
from planera.domains.trip.service import TripService
from planera.infra.database import get_db

router = APIRouter(prefix="/trips", tags=["Trips"])


def get_trip_service(
    session: Annotated[AsyncSession, Depends(get_db)],
) -> TripService:
    """Dependency for getting TripService."""
    return TripService(session)


TripServiceDep = Annotated[TripService, Depends(get_trip_service)]


@router.post(
    "",
    response_model=TripSummary,
    status_code=status.HTTP_201_CREATED,
    summary="Create a trip",
    description="Store the trip with status `generating` and queue itinerary generation.",
)
async def create_trip(data: TripCreate, user: ActiveUser, service: TripServiceDep) -> TripSummary:
    """Create a trip and start generating its itinerary.

    Poll `GET /trips/{id}` until the status leaves `generating`.

    Raises:
        403 Forbidden: If the free plan limit is reached
    """
    trip = await service.create_trip(user, data)
    return TripSummary.model_validate(trip)


@router.get("", response_model=list[TripSummary], summary="List my trips")
async def list_trips(
    user: ActiveUser,
    service: TripServiceDep,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=100),
) -> list[TripSummary]:
    trips = await service.list_trips(user.id, skip=skip, limit=limit)
    return [TripSummary.model_validate(t) for t in trips]


@router.get("/{trip_id}", response_model=TripResponse, summary="Get a trip with its itinerary")
async def get_trip(trip_id: UUID, user: ActiveUser, service: TripServiceDep) -> TripResponse:
    return await service.get_trip_details(trip_id, user)


@router.patch("/{trip_id}", response_model=TripResponse, summary="Update a trip")
async def update_trip(
    trip_id: UUID,
    data: TripUpdate,
    user: ActiveUser,
    service: TripServiceDep,
) -> TripResponse:
    trip = await service.update_trip(trip_id, user.id, data)
    return TripResponse.model_validate(trip)


@router.post(
    "/{trip_id}/regenerate",
    response_model=TripSummary,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Regenerate the itinerary",
)
async def regenerate_trip(trip_id: UUID, user: ActiveUser, service: TripServiceDep) -> TripSummary:
    """Start a new generation run; older runs still in flight are discarded."""
    trip = await service.regenerate_trip(trip_id, user.id)
    return TripSummary.model_validate(trip)


@router.delete("/{trip_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a trip")
async def delete_trip(trip_id: UUID, user: ActiveUser, service: TripServiceDep) -> None:
    await service.delete_trip(trip_id, user.id)
