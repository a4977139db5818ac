"""Repository for the Cart domain."""

from uuid import UUID

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from planera.domains.cart.models import Cart
from planera.domains.shared.repository import GenericRepository


class CartRepository(GenericRepository[Cart, BaseModel, BaseModel]):
    """Repository for Cart persistence."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(Cart, session)

    async def get_for_trip(self, trip_id: UUID, user_id: UUID) -> Cart | None:
        """The user's cart for a trip, if one exists."""
        return await self.find_one(Cart.trip_id == trip_id, Cart.user_id == user_id)

    async def delete_for_trip(self, trip_id: UUID) -> int:
        """Delete every cart of a trip."""
        return await self.delete_many(Cart.trip_id == trip_id)
