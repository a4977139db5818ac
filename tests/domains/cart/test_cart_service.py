"""
Tests for CartService.
"""

import pytest
import pytest_asyncio

from planera.core.exceptions import NotFoundError
from planera.domains.cart.models import CartStatus
from planera.domains.cart.schemas import CartItem, CartItemQuantity, CartItemRef
from planera.domains.cart.service import CartService, cart_total
from planera.domains.trip.models import Trip, TripStatus

JUNE_1_MS = 1_717_200_000_000


@pytest_asyncio.fixture
async def trip(session, user) -> Trip:
    trip = Trip(
        user_id=user.id,
        destination="Lisbon, Portugal",
        start_date=JUNE_1_MS,
        end_date=JUNE_1_MS,
        budget="medium",
        travelers=2,
        interests=[],
        status=TripStatus.COMPLETED,
    )
    session.add(trip)
    await session.commit()
    return trip


@pytest_asyncio.fixture
async def service(session) -> CartService:
    return CartService(session)


def _tour(**overrides) -> CartItem:
    data = {"type": "tour", "name": "Sintra day trip", "price": 65.0, "day": 2}
    data.update(overrides)
    return CartItem(**data)


class TestCartTotal:
    """Tests for cart_total."""

    def test_rounds_to_cents(self):
        items = [{"price": 19.99, "quantity": 3}, {"price": 0.1, "quantity": 1}]
        assert cart_total(items) == 60.07

    def test_empty(self):
        assert cart_total([]) == 0


class TestAddAndRemove:
    """Tests for adding, updating and removing items."""

    @pytest.mark.asyncio
    async def test_first_item_creates_cart(self, service, trip, user):
        cart = await service.add_to_cart(trip.id, user.id, _tour(currency="USD"))

        assert cart.status == CartStatus.PENDING
        assert cart.currency == "USD"
        assert cart.total_amount == 65.0
        assert cart.items[0]["name"] == "Sintra day trip"

    @pytest.mark.asyncio
    async def test_matching_item_merges_quantity(self, service, trip, user):
        await service.add_to_cart(trip.id, user.id, _tour())
        cart = await service.add_to_cart(trip.id, user.id, _tour(quantity=2))

        assert len(cart.items) == 1
        assert cart.items[0]["quantity"] == 3
        assert cart.total_amount == 195.0

    @pytest.mark.asyncio
    async def test_different_day_is_a_separate_item(self, service, trip, user):
        await service.add_to_cart(trip.id, user.id, _tour())
        cart = await service.add_to_cart(trip.id, user.id, _tour(day=3))

        assert [i["day"] for i in cart.items] == [2, 3]
        assert cart.total_amount == 130.0

    @pytest.mark.asyncio
    async def test_remove(self, service, trip, user):
        await service.add_to_cart(trip.id, user.id, _tour())
        await service.add_to_cart(trip.id, user.id, _tour(type="hotel", name="Memmo Alfama", price=210.0, day=None))

        cart = await service.remove_from_cart(
            trip.id, user.id, CartItemRef(name="Sintra day trip", type="tour", day=2)
        )
        assert [i["name"] for i in cart.items] == ["Memmo Alfama"]
        assert cart.total_amount == 210.0

    @pytest.mark.asyncio
    async def test_update_quantity(self, service, trip, user):
        await service.add_to_cart(trip.id, user.id, _tour())

        cart = await service.update_item_quantity(
            trip.id, user.id, CartItemQuantity(name="Sintra day trip", type="tour", day=2, quantity=4)
        )
        assert cart.items[0]["quantity"] == 4
        assert cart.total_amount == 260.0

    @pytest.mark.asyncio
    async def test_zero_quantity_removes_item(self, service, trip, user):
        await service.add_to_cart(trip.id, user.id, _tour())

        cart = await service.update_item_quantity(
            trip.id, user.id, CartItemQuantity(name="Sintra day trip", type="tour", day=2, quantity=0)
        )
        assert cart.items == []
        assert cart.total_amount == 0

    @pytest.mark.asyncio
    async def test_no_cart_yet(self, service, trip, user):
        assert await service.get_cart(trip.id, user.id) is None
        assert await service.remove_from_cart(trip.id, user.id, CartItemRef(name="x", type="tour")) is None

    @pytest.mark.asyncio
    async def test_clear(self, service, trip, user):
        await service.add_to_cart(trip.id, user.id, _tour())
        await service.clear_cart(trip.id, user.id)

        assert await service.get_cart(trip.id, user.id) is None

    @pytest.mark.asyncio
    async def test_other_users_trip_is_not_found(self, service, trip, make_user):
        stranger = await make_user()

        with pytest.raises(NotFoundError):
            await service.add_to_cart(trip.id, stranger.id, _tour())


class TestCheckout:
    """Tests for checkout."""

    @pytest.mark.asyncio
    async def test_empty_cart(self, service, trip, user):
        result = await service.checkout(trip.id, user.id)

        assert result.success is False
        assert result.message == "Your cart is empty"
        assert result.checkout_url is None

    @pytest.mark.asyncio
    async def test_checkout_link_and_status(self, service, trip, user):
        await service.add_to_cart(trip.id, user.id, _tour(quantity=2))
        cart = await service.add_to_cart(trip.id, user.id, _tour(type="transfer", name="Airport pickup", price=30.5, day=1))

        result = await service.checkout(trip.id, user.id)

        assert result.success is True
        assert result.checkout_url == f"https://checkout.planera.app/cart/{cart.id}"
        assert result.message == "Ready to checkout 2 items for €160.50"
        cart = await service.get_cart(trip.id, user.id)
        assert cart.status == CartStatus.CHECKOUT
