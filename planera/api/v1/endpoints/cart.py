"""Cart API endpoints, one cart per trip."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from planera.core.deps import ActiveUser
from planera.domains.cart.models import Cart
from planera.domains.cart.schemas import (
    CartItem,
    CartItemQuantity,
    CartItemRef,
    CartResponse,
    CheckoutResponse,
)
from planera.domains.cart.service import CartService
from planera.infra.database import get_db

router = APIRouter(prefix="/trips/{trip_id}/cart", tags=["Cart"])


def get_cart_service(
    session: Annotated[AsyncSession, Depends(get_db)],
) -> CartService:
    """Dependency for getting CartService."""
    return CartService(session)


CartServiceDep = Annotated[CartService, Depends(get_cart_service)]


def _response(cart: Cart | None) -> CartResponse | None:
    return CartResponse.model_validate(cart) if cart is not None else None


@router.get("", response_model=CartResponse | None, summary="Get the trip's cart")
async def get_cart(trip_id: UUID, user: ActiveUser, service: CartServiceDep) -> CartResponse | None:
    return _response(await service.get_cart(trip_id, user.id))


@router.delete("", status_code=status.HTTP_204_NO_CONTENT, summary="Clear the cart")
async def clear_cart(trip_id: UUID, user: ActiveUser, service: CartServiceDep) -> None:
    await service.clear_cart(trip_id, user.id)


@router.post("/items", response_model=CartResponse, summary="Add an item")
async def add_item(
    trip_id: UUID,
    item: CartItem,
    user: ActiveUser,
    service: CartServiceDep,
) -> CartResponse:
    """Add an item; an item with the same name, type and day gains quantity."""
    return CartResponse.model_validate(await service.add_to_cart(trip_id, user.id, item))


@router.patch("/items", response_model=CartResponse | None, summary="Change an item's quantity")
async def update_item_quantity(
    trip_id: UUID,
    change: CartItemQuantity,
    user: ActiveUser,
    service: CartServiceDep,
) -> CartResponse | None:
    return _response(await service.update_item_quantity(trip_id, user.id, change))


@router.delete("/items", response_model=CartResponse | None, summary="Remove an item")
async def remove_item(
    trip_id: UUID,
    ref: CartItemRef,
    user: ActiveUser,
    service: CartServiceDep,
) -> CartResponse | None:
    return _response(await service.remove_from_cart(trip_id, user.id, ref))


@router.post(
    "/checkout",
    response_model=CheckoutResponse,
    response_model_by_alias=True,
    summary="Check out",
)
async def checkout(trip_id: UUID, user: ActiveUser, service: CartServiceDep) -> CheckoutResponse:
    return await service.checkout(trip_id, user.id)
