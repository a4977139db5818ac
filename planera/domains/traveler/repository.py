"""Repository for the Traveler domain."""

from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from planera.domains.shared.repository import GenericRepository
from planera.domains.traveler.models import Traveler
from planera.domains.traveler.schemas import TravelerCreate, TravelerUpdate


class TravelerRepository(GenericRepository[Traveler, TravelerCreate, TravelerUpdate]):
    """Repository for Traveler persistence."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(Traveler, session)

    async def list_for_user(self, user_id: UUID) -> Sequence[Traveler]:
        """The user's travelers, default first, then oldest first."""
        return await self.find_many(
            Traveler.user_id == user_id,
            order_by=[Traveler.is_default.desc(), Traveler.created_at.asc()],
        )

    async def count_for_user(self, user_id: UUID) -> int:
        return await self.count(Traveler.user_id == user_id)

    async def find_owned(self, ids: list[UUID], user_id: UUID) -> dict[UUID, Traveler]:
        """Owned travelers among ``ids``, keyed by id. Others are left out."""
        if not ids:
            return {}
        travelers = await self.find_many(
            Traveler.id.in_(ids),
            Traveler.user_id == user_id,
            limit=len(ids),
        )
        return {t.id: t for t in travelers}

    async def clear_default(self, user_id: UUID, keep_id: UUID | None = None) -> int:
        """Unmark the user's default traveler, except ``keep_id``.

        Returns:
            Number of travelers unmarked
        """
        conditions = [Traveler.user_id == user_id, Traveler.is_default.is_(True)]
        if keep_id is not None:
            conditions.append(Traveler.id != keep_id)
        return await self.update_many(*conditions, data={"is_default": False})
