# minimarket/routers/orders.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from minimarket.core.auth import get_current_identity
from minimarket.database import get_session
from minimarket.repositories.order_repo import SqlOrderRepository
from minimarket.schemas.order import CheckoutRequest, OrderRead
from minimarket.schemas.user import Identity
from minimarket.services.order_service import OrderService
from minimarket.services.session import open_shop_session

router = APIRouter(prefix="/orders", tags=["Orders"])


def get_order_service(session: Session = Depends(get_session)) -> OrderService:
    return OrderService(SqlOrderRepository(session))


@router.post("", response_model=OrderRead, status_code=status.HTTP_201_CREATED)
def checkout(
    payload: CheckoutRequest,
    session: Session = Depends(get_session),
    identity: Identity | None = Depends(get_current_identity),
):
    """
    Create an order from the client's cart.

    The lines are replayed into a fresh cart (duplicate product ids merge,
    non-positive quantities are rejected), then totals are derived here.
    Guests may check out; their order has no owner.
    """
    shop = open_shop_session(session, identity)
    for line in payload.lines:
        shop.cart.add_item(line.product, line.quantity)
    return shop.checkout()


@router.get("", response_model=list[OrderRead])
def list_my_orders(
    identity: Identity | None = Depends(get_current_identity),
    service: OrderService = Depends(get_order_service),
):
    """
    List the authenticated caller's orders, most recent first.
    """
    return service.list_orders(identity)


@router.get("/{order_id}", response_model=OrderRead)
def get_my_order(
    order_id: str,
    identity: Identity | None = Depends(get_current_identity),
    service: OrderService = Depends(get_order_service),
):
    """
    Get a single order belonging to the caller.

    404 both when the order does not exist and when it belongs to someone
    else.
    """
    return service.get_order(order_id, identity)
