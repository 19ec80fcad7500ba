from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from minimarket.core.errors import (
    EmptyCart,
    NotFound,
    OrderSubmissionFailed,
    Unauthenticated,
)
from minimarket.repositories.protocols import OrderStore
from minimarket.schemas.user import Identity
from minimarket.services.cart_store import CartStore
from minimarket.services.order_service import OrderService

from conftest import InMemoryOrderStore, make_product

ALICE = Identity(id="user-a", name="Alice", email="alice@example.com")
BOB = Identity(id="user-b", name="Bob", email="bob@example.com")


def cart_with(*items) -> CartStore:
    cart = CartStore()
    for product_id, price, qty in items:
        cart.add_item(make_product(product_id, price=price), qty)
    return cart


def test_submit_derives_totals_below_threshold(order_store):
    cart = cart_with(("a", "10", 2), ("b", "5", 1))

    order = OrderService(order_store).submit_order(cart, ALICE)

    assert order.subtotal == Decimal("25")
    assert order.tax == Decimal("2.00")
    assert order.discount == Decimal("0")
    assert order.total == Decimal("27.00")


def test_submit_applies_discount_above_threshold(order_store):
    cart = cart_with(("a", "20.00", 3))

    order = OrderService(order_store).submit_order(cart, ALICE)

    assert order.subtotal == Decimal("60.00")
    assert order.tax == Decimal("4.80")
    assert order.discount == Decimal("6.00")
    assert order.total == Decimal("58.80")


def test_submit_freezes_line_snapshots_and_owner(order_store):
    cart = cart_with(("a", "3.50", 2))

    OrderService(order_store).submit_order(cart, ALICE)

    payload = order_store.payloads[0]
    assert payload.owner_id == "user-a"
    assert [(l.product_id, l.name, l.price, l.quantity) for l in payload.lines] == [
        ("a", "A", Decimal("3.50"), 2)
    ]


def test_guest_submission_has_no_owner(order_store):
    order = OrderService(order_store).submit_order(cart_with(("a", "1", 1)), None)
    assert order.owner_id is None


def test_submit_surfaces_store_status(order_store):
    order_store.status = "pending"
    order = OrderService(order_store).submit_order(cart_with(("a", "1", 1)), ALICE)
    assert order.status == "pending"


def test_submit_empty_cart_is_rejected(order_store):
    with pytest.raises(EmptyCart):
        OrderService(order_store).submit_order(CartStore(), ALICE)
    assert order_store.payloads == []


def test_submit_does_not_clear_the_cart(order_store):
    cart = cart_with(("a", "1", 1))
    OrderService(order_store).submit_order(cart, ALICE)
    assert len(cart) == 1


def test_failed_submission_leaves_cart_untouched_and_is_retriable(failing_store):
    cart = cart_with(("a", "10", 2), ("b", "5", 1))
    before = cart.lines()
    service = OrderService(failing_store)

    with pytest.raises(OrderSubmissionFailed) as excinfo:
        service.submit_order(cart, ALICE)

    assert excinfo.value.cause == "connection reset by peer"
    assert cart.lines() == before
    assert cart.item_count() == 3

    failing_store.fail_with = None
    order = service.submit_order(cart, ALICE)
    assert order.total == Decimal("27.00")


def test_transport_failure_is_wrapped():
    store = MagicMock(spec=OrderStore)
    store.create_order.side_effect = TimeoutError("timed out")

    with pytest.raises(OrderSubmissionFailed, match="timed out"):
        OrderService(store).submit_order(cart_with(("a", "1", 1)), None)


def test_programming_errors_in_the_store_propagate():
    store = MagicMock(spec=OrderStore)
    store.create_order.side_effect = AttributeError("'NoneType' object has no attribute 'id'")

    with pytest.raises(AttributeError):
        OrderService(store).submit_order(cart_with(("a", "1", 1)), None)


def test_list_orders_requires_identity(order_store):
    with pytest.raises(Unauthenticated):
        OrderService(order_store).list_orders(None)


def test_list_orders_is_scoped_and_most_recent_first(order_store):
    service = OrderService(order_store)
    first = service.submit_order(cart_with(("a", "1", 1)), ALICE)
    service.submit_order(cart_with(("b", "1", 1)), BOB)
    service.submit_order(cart_with(("c", "1", 1)), None)
    second = service.submit_order(cart_with(("d", "1", 1)), ALICE)

    orders = service.list_orders(ALICE)

    assert [o.id for o in orders] == [second.id, first.id]


def test_list_orders_breaks_timestamp_ties_by_insertion_order():
    store = InMemoryOrderStore()
    service = OrderService(store)
    a = service.submit_order(cart_with(("a", "1", 1)), ALICE)
    b = service.submit_order(cart_with(("b", "1", 1)), ALICE)
    store.orders = [o.model_copy(update={"created_at": a.created_at}) for o in store.orders]

    assert [o.id for o in service.list_orders(ALICE)] == [a.id, b.id]


def test_get_order_returns_own_order(order_store):
    service = OrderService(order_store)
    order = service.submit_order(cart_with(("a", "1", 1)), ALICE)

    assert service.get_order(order.id, ALICE) == order


def test_get_order_of_another_identity_is_not_found(order_store):
    service = OrderService(order_store)
    order = service.submit_order(cart_with(("a", "1", 1)), ALICE)

    with pytest.raises(NotFound):
        service.get_order(order.id, BOB)


def test_get_guest_order_is_not_found(order_store):
    service = OrderService(order_store)
    order = service.submit_order(cart_with(("a", "1", 1)), None)

    with pytest.raises(NotFound):
        service.get_order(order.id, ALICE)


def test_get_missing_order_is_not_found(order_store):
    with pytest.raises(NotFound):
        OrderService(order_store).get_order("ORD-404", ALICE)
