"""Pydantic schemas for the Cart domain.

Items keep the camelCase keys the app sends and reads back.
"""

from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from planera.domains.cart.models import CartStatus


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CartItem(_CamelModel):
    """A bookable item: hotel, activity, tour, transfer and so on."""

    type: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=255)
    price: float = Field(..., ge=0)
    currency: str = Field(default="EUR", min_length=3, max_length=3)
    quantity: int = Field(default=1, ge=1)
    day: int | None = Field(None, ge=1)
    booking_url: str | None = None
    product_code: str | None = None
    skip_the_line: bool | None = None
    image: str | None = None
    details: dict[str, Any] | None = None

    def to_storage(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class CartItemRef(_CamelModel):
    """Identifies an item by (name, type, day)."""

    name: str
    type: str
    day: int | None = None


class CartItemQuantity(CartItemRef):
    """New quantity for an item; zero or less removes it."""

    quantity: int


class CartResponse(BaseModel):
    """Schema for Cart response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    trip_id: UUID
    user_id: UUID
    items: list[dict[str, Any]]
    total_amount: float
    currency: str
    status: CartStatus


class CheckoutResponse(_CamelModel):
    """Result of a checkout request."""

    success: bool
    checkout_url: str | None = None
    message: str
