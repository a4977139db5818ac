"""Traveler insight API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from planera.core.deps import ActiveUser, OptionalUser
from planera.domains.insight.schemas import CompletedTrip, InsightCreate, InsightResponse
from planera.domains.insight.service import InsightService
from planera.infra.database import get_db

router = APIRouter(prefix="/insights", tags=["Insights"])


def get_insight_service(
    session: Annotated[AsyncSession, Depends(get_db)],
) -> InsightService:
    """Dependency for getting InsightService."""
    return InsightService(session)


InsightServiceDep = Annotated[InsightService, Depends(get_insight_service)]


@router.get("", response_model=list[InsightResponse], summary="List insights")
async def list_insights(
    service: InsightServiceDep,
    destination: Annotated[str | None, Query(max_length=255)] = None,
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> list[InsightResponse]:
    """Newest first, optionally for one destination."""
    insights = await service.list_insights(destination, skip=skip, limit=limit)
    return [InsightResponse.model_validate(i) for i in insights]


@router.post(
    "",
    response_model=InsightResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Share an insight",
)
async def create_insight(
    data: InsightCreate,
    user: OptionalUser,
    service: InsightServiceDep,
) -> InsightResponse:
    """Share a tip; it is verified when you have completed a trip there.

    Raises:
        401 Unauthorized: ``AUTH_NOT_READY`` while sign-in has not settled
    """
    return InsightResponse.model_validate(await service.create_insight(user, data))


@router.get("/completed-trips", response_model=list[CompletedTrip], summary="Trips to share about")
async def completed_trips(user: OptionalUser, service: InsightServiceDep) -> list[CompletedTrip]:
    return [CompletedTrip.model_validate(t) for t in await service.completed_trips(user)]


@router.get("/completed-trips/check", response_model=bool, summary="Completed a trip to a destination")
async def has_completed_trip_to(
    destination: Annotated[str, Query(min_length=1, max_length=255)],
    user: OptionalUser,
    service: InsightServiceDep,
) -> bool:
    return await service.has_completed_trip_to(user, destination)


@router.post("/{insight_id}/like", response_model=InsightResponse, summary="Like an insight")
async def like_insight(
    insight_id: UUID,
    user: ActiveUser,
    service: InsightServiceDep,
) -> InsightResponse:
    return InsightResponse.model_validate(await service.like_insight(insight_id))
