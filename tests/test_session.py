from decimal import Decimal

import pytest

from minimarket.core.errors import OrderSubmissionFailed, Unauthenticated
from minimarket.repositories.user_repo import SqlUserRepository
from minimarket.services.cart_slot import MemoryCartSlot
from minimarket.services.cart_store import CartStore
from minimarket.services.identity_service import IdentityService
from minimarket.services.order_service import OrderService
from minimarket.services.session import ShopSession, open_shop_session

from conftest import make_product


def shop_with(store, session, slot=None) -> ShopSession:
    return ShopSession(
        cart=CartStore(slot or MemoryCartSlot()),
        orders=OrderService(store),
        identities=IdentityService(SqlUserRepository(session)),
    )


def test_checkout_clears_cart_only_after_success(order_store, session):
    slot = MemoryCartSlot()
    shop = shop_with(order_store, session, slot)
    shop.cart.add_item(make_product("a", price="10"), 2)

    order = shop.checkout()

    assert order.total == Decimal("21.60")
    assert shop.cart.is_empty()
    assert slot.load() is None


def test_failed_checkout_keeps_cart_and_slot(failing_store, session):
    slot = MemoryCartSlot()
    shop = shop_with(failing_store, session, slot)
    shop.cart.add_item(make_product("a"), 2)
    stored = slot.load()

    with pytest.raises(OrderSubmissionFailed):
        shop.checkout()

    assert shop.cart.item_count() == 2
    assert slot.load() == stored


def test_login_tags_orders_and_logout_clears_cart(order_store, session):
    shop = shop_with(order_store, session)
    identity = shop.signup("Ana", "ana@example.com", "hunter22")
    shop.logout()
    assert shop.current_identity() is None

    assert shop.login("ana@example.com", "hunter22") == identity
    shop.cart.add_item(make_product("a"))
    order = shop.checkout()
    assert order.owner_id == identity.id
    assert shop.order_history() == [order]
    assert shop.get_order(order.id) == order

    shop.cart.add_item(make_product("b"))
    shop.logout()

    assert shop.current_identity() is None
    assert shop.access_token is None
    assert shop.cart.is_empty()
    with pytest.raises(Unauthenticated):
        shop.order_history()


def test_cart_is_restored_when_a_session_is_reopened(session):
    slot = MemoryCartSlot()
    first = open_shop_session(session, slot=slot)
    first.cart.add_item(make_product("a"), 3)

    second = open_shop_session(session, slot=slot)

    assert second.cart.item_count() == 3


def test_open_shop_session_checks_out_against_sql_store(session):
    shop = open_shop_session(session)
    shop.cart.add_item(make_product("a", price="30"), 2)

    order = shop.checkout()

    assert order.status == "confirmed"
    assert order.discount == Decimal("6.0")
    assert order.total == Decimal("58.80")
