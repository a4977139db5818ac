"""Services for the Cart domain."""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from planera.core.config import settings
from planera.domains.cart.models import Cart, CartStatus
from planera.domains.cart.repository import CartRepository
from planera.domains.cart.schemas import CartItem, CartItemQuantity, CartItemRef, CheckoutResponse
from planera.domains.trip.repository import TripRepository

logger = logging.getLogger(__name__)

EMPTY_CART_MESSAGE = "Your cart is empty"


def _same_item(item: dict[str, Any], ref: CartItemRef) -> bool:
    return (
        item.get("name") == ref.name
        and item.get("type") == ref.type
        and item.get("day") == ref.day
    )


def cart_total(items: list[dict[str, Any]]) -> float:
    """Sum of price * quantity, rounded to cents."""
    return round(sum(item["price"] * item["quantity"] for item in items), 2)


class CartService:
    """Per-trip shopping cart.

    Operations are scoped to the trip owner; the total is recomputed
    after every change to the items.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.repository = CartRepository(session)
        self.trip_repository = TripRepository(session)

    async def _check_trip(self, trip_id: UUID, user_id: UUID) -> None:
        await self.trip_repository.get_owned(trip_id, user_id)

    async def _save_items(self, cart: Cart, items: list[dict[str, Any]]) -> Cart:
        # JSON columns only notice reassignment
        cart = await self.repository.apply(cart, {"items": items, "total_amount": cart_total(items)})
        await self.session.commit()
        return cart

    async def get_cart(self, trip_id: UUID, user_id: UUID) -> Cart | None:
        """The cart for a trip, or None when nothing was added yet."""
        await self._check_trip(trip_id, user_id)
        return await self.repository.get_for_trip(trip_id, user_id)

    async def add_to_cart(self, trip_id: UUID, user_id: UUID, item: CartItem) -> Cart:
        """Add an item, merging quantities with an existing (name, type, day) match.

        A new cart takes the currency of its first item.
        """
        await self._check_trip(trip_id, user_id)
        stored = item.to_storage()
        cart = await self.repository.get_for_trip(trip_id, user_id)

        if cart is None:
            cart = await self.repository.create(
                {
                    "user_id": user_id,
                    "trip_id": trip_id,
                    "items": [stored],
                    "total_amount": cart_total([stored]),
                    "currency": item.currency,
                    "status": CartStatus.PENDING,
                }
            )
            await self.session.commit()
            logger.info(f"Created cart {cart.id} for trip {trip_id}")
            return cart

        items = [dict(i) for i in cart.items]
        for existing in items:
            if _same_item(existing, item):
                existing["quantity"] += item.quantity
                break
        else:
            items.append(stored)
        return await self._save_items(cart, items)

    async def remove_from_cart(self, trip_id: UUID, user_id: UUID, ref: CartItemRef) -> Cart | None:
        """Remove the item matching (name, type, day)."""
        await self._check_trip(trip_id, user_id)
        cart = await self.repository.get_for_trip(trip_id, user_id)
        if cart is None:
            return None
        return await self._save_items(cart, [i for i in cart.items if not _same_item(i, ref)])

    async def update_item_quantity(
        self,
        trip_id: UUID,
        user_id: UUID,
        change: CartItemQuantity,
    ) -> Cart | None:
        """Set an item's quantity; a quantity of zero or less removes it."""
        await self._check_trip(trip_id, user_id)
        cart = await self.repository.get_for_trip(trip_id, user_id)
        if cart is None:
            return None
        items = [
            {**i, "quantity": change.quantity} if _same_item(i, change) else dict(i)
            for i in cart.items
        ]
        return await self._save_items(cart, [i for i in items if i["quantity"] > 0])

    async def clear_cart(self, trip_id: UUID, user_id: UUID) -> None:
        """Delete the trip's cart."""
        await self._check_trip(trip_id, user_id)
        cart = await self.repository.get_for_trip(trip_id, user_id)
        if cart is not None:
            await self.repository.remove(cart)
            await self.session.commit()

    async def checkout(self, trip_id: UUID, user_id: UUID) -> CheckoutResponse:
        """Move the cart to checkout and hand back the checkout link.

        Payment happens outside this service.
        """
        await self._check_trip(trip_id, user_id)
        cart = await self.repository.get_for_trip(trip_id, user_id)
        if cart is None or not cart.items:
            return CheckoutResponse(success=False, message=EMPTY_CART_MESSAGE)

        cart = await self.repository.apply(cart, {"status": CartStatus.CHECKOUT})
        await self.session.commit()
        logger.info(f"Cart {cart.id} moved to checkout with {len(cart.items)} items")
        return CheckoutResponse(
            success=True,
            checkout_url=f"{settings.CHECKOUT_BASE_URL.rstrip('/')}/{cart.id}",
            message=f"Ready to checkout {len(cart.items)} items for €{cart.total_amount:.2f}",
        )
