"""Repository for the Insight domain."""

from typing import Sequence
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from planera.domains.insight.models import Insight
from planera.domains.insight.schemas import InsightCreate
from planera.domains.shared.repository import GenericRepository


class InsightRepository(GenericRepository[Insight, InsightCreate, BaseModel]):
    """Repository for Insight persistence."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(Insight, session)

    async def list_recent(
        self,
        destination: str | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> Sequence[Insight]:
        """Newest first, optionally for one destination."""
        conditions = [Insight.destination == destination] if destination else []
        return await self.find_many(
            *conditions,
            skip=skip,
            limit=limit,
            order_by=[Insight.created_at.desc(), Insight.id.desc()],
        )

    async def increment_likes(self, insight_id: UUID) -> int | None:
        """Add one like in the database.

        Returns:
            The new like count, or None if the insight does not exist
        """
        result = await self.session.execute(
            update(Insight)
            .where(Insight.id == insight_id)
            .values(likes=Insight.likes + 1)
            .returning(Insight.likes)
            .execution_options(synchronize_session=False)
        )
        return result.scalar_one_or_none()
