# minimarket/services/order_service.py
import logging

from minimarket.core.errors import (
    EmptyCart,
    NotFound,
    OrderSubmissionFailed,
    StoreError,
    Unauthenticated,
)
from minimarket.repositories.protocols import OrderStore
from minimarket.schemas.order import OrderLineSnapshot, OrderPayload, OrderRead
from minimarket.schemas.user import Identity
from minimarket.services import pricing
from minimarket.services.cart_store import CartStore

logger = logging.getLogger(__name__)


class OrderService:
    """
    Checkout and order history.

    Responsibilities:
      - turn the current cart into an order payload (totals recomputed,
        lines frozen by value) and hand it to the store
      - wrap store failures as OrderSubmissionFailed, leaving the cart as is
      - scope history and lookups to the caller's identity

    The service never clears the cart. The caller does that after it has
    seen a successful result (see ShopSession.checkout).
    """

    def __init__(self, store: OrderStore):
        self.store = store

    def submit_order(self, cart: CartStore, identity: Identity | None) -> OrderRead:
        """
        Create an order from `cart`.

        Steps:
          1. Reject an empty cart.
          2. Read the cart's lines once.
          3. Derive subtotal/tax/discount/total from that read.
          4. Freeze {product_id, name, price, quantity} from the same read.
          5. Persist; return whatever the store hands back.

        Raises:
            EmptyCart: no lines.
            OrderSubmissionFailed: the store round trip failed. Other
                exceptions from the store are bugs and propagate as is.
        """
        lines = cart.lines()
        if not lines:
            raise EmptyCart("No order items")

        totals = pricing.compute_totals(lines)
        payload = OrderPayload(
            owner_id=identity.id if identity is not None else None,
            lines=tuple(
                OrderLineSnapshot(
                    product_id=line.product.id,
                    name=line.product.name,
                    price=line.product.price,
                    quantity=line.quantity,
                )
                for line in lines
            ),
            subtotal=totals.subtotal,
            tax=totals.tax,
            discount=totals.discount,
            total=totals.total,
        )

        try:
            order = self.store.create_order(payload)
        except (StoreError, OSError) as e:
            # StoreError from the database layer; OSError covers transport
            # failures (connection reset, timeouts) from remote stores
            logger.exception("Order creation failed")
            raise OrderSubmissionFailed(str(e) or e.__class__.__name__) from e

        logger.info(
            "Order %s created (owner=%s, lines=%d, total=%s)",
            order.id,
            order.owner_id or "guest",
            len(order.lines),
            pricing.to_currency(order.total),
        )
        return order

    def list_orders(self, identity: Identity | None) -> list[OrderRead]:
        """
        The caller's orders, most recent first.

        Orders with the same created_at keep the store's insertion order.
        Guest orders are never listed.
        """
        if identity is None:
            raise Unauthenticated()

        orders = [
            o for o in self.store.list_orders_for_identity(identity.id)
            if o.owner_id == identity.id
        ]
        return sorted(orders, key=lambda o: o.created_at, reverse=True)

    def get_order(self, order_id: str, identity: Identity | None) -> OrderRead:
        """
        A single order belonging to the caller.

        A missing order and someone else's order both report NotFound.
        """
        if identity is None:
            raise Unauthenticated()

        order = self.store.get_order_by_id(order_id)
        if order is None or order.owner_id != identity.id:
            raise NotFound("Order not found")
        return order
