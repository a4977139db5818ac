"""Services for the Insight domain."""

import logging
import time
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from planera.core.exceptions import AuthNotReadyError, NotFoundError
from planera.domains.insight.models import Insight
from planera.domains.insight.repository import InsightRepository
from planera.domains.insight.schemas import InsightCreate
from planera.domains.trip.models import Trip
from planera.domains.trip.repository import TripRepository
from planera.domains.user.models import User

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class InsightService:
    """Tips travelers share about destinations.

    An insight is marked verified when its author has a completed trip
    whose end date has passed and whose destination matches.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.repository = InsightRepository(session)
        self.trip_repository = TripRepository(session)

    async def list_insights(
        self,
        destination: str | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> Sequence[Insight]:
        return await self.repository.list_recent(destination, skip=skip, limit=limit)

    async def create_insight(self, user: User | None, data: InsightCreate) -> Insight:
        """Share a tip.

        Raises:
            AuthNotReadyError: If the caller is not signed in yet
        """
        if user is None:
            raise AuthNotReadyError()

        verified = await self.trip_repository.has_completed_trip_to(
            user.id, data.destination, _now_ms()
        )
        insight = await self.repository.create(
            {**data.model_dump(), "user_id": user.id, "verified": verified, "likes": 0}
        )
        await self.session.commit()
        logger.info(f"User {user.id} shared insight {insight.id} about {data.destination}")
        return insight

    async def like_insight(self, insight_id: UUID) -> Insight:
        """Add one like.

        Raises:
            NotFoundError: If the insight does not exist
        """
        if await self.repository.increment_likes(insight_id) is None:
            raise NotFoundError("Insight not found")
        await self.session.commit()

        insight = await self.repository.get_by_id(insight_id)
        await self.session.refresh(insight)
        return insight

    async def completed_trips(self, user: User | None) -> Sequence[Trip]:
        """Past generated trips; empty while the caller is not signed in."""
        if user is None:
            return []
        return await self.trip_repository.list_completed(user.id, _now_ms())

    async def has_completed_trip_to(self, user: User | None, destination: str) -> bool:
        if user is None:
            return False
        return await self.trip_repository.has_completed_trip_to(user.id, destination, _now_ms())
