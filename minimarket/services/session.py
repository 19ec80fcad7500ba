# minimarket/services/session.py
import logging

from sqlmodel import Session

from minimarket.repositories.order_repo import SqlOrderRepository
from minimarket.repositories.user_repo import SqlUserRepository
from minimarket.schemas.order import OrderRead
from minimarket.schemas.user import AuthResult, Identity
from minimarket.services.cart_slot import CartSlot
from minimarket.services.cart_store import CartStore
from minimarket.services.identity_service import IdentityService
from minimarket.services.order_service import OrderService

logger = logging.getLogger(__name__)


class ShopSession:
    """
    One shopper's session: who they are and what is in their cart.

    Lifecycle:
      - init: the cart restores itself from its durable slot
      - login/signup: attach an identity (cart is kept)
      - checkout: submit, and clear the cart only once the order exists
      - logout: drop the identity and clear the cart
    """

    def __init__(
        self,
        cart: CartStore,
        orders: OrderService,
        identities: IdentityService,
        identity: Identity | None = None,
    ):
        self.cart = cart
        self.orders = orders
        self.identities = identities
        self.identity = identity
        self.access_token: str | None = None

    def current_identity(self) -> Identity | None:
        return self.identity

    def _attach(self, result: AuthResult) -> Identity:
        self.identity = result.identity
        self.access_token = result.access_token
        return result.identity

    def login(self, email: str, password: str) -> Identity:
        return self._attach(self.identities.login(email, password))

    def signup(self, name: str, email: str, password: str) -> Identity:
        return self._attach(self.identities.signup(name, email, password))

    def logout(self) -> None:
        if self.identity is not None:
            logger.debug("Logging out %s", self.identity.id)
        self.identity = None
        self.access_token = None
        self.cart.clear()

    def checkout(self) -> OrderRead:
        """
        Submit the cart as an order.

        On failure the exception propagates and the cart is exactly as it
        was, so calling checkout() again retries with the same lines.
        """
        order = self.orders.submit_order(self.cart, self.identity)
        self.cart.clear()
        return order

    def order_history(self) -> list[OrderRead]:
        return self.orders.list_orders(self.identity)

    def get_order(self, order_id: str) -> OrderRead:
        return self.orders.get_order(order_id, self.identity)


def open_shop_session(
    db: Session,
    identity: Identity | None = None,
    slot: CartSlot | None = None,
) -> ShopSession:
    """
    Wire a ShopSession against the SQL stores.

    Without an explicit slot the cart lives only in memory, which is what
    a one-shot server-side checkout wants.
    """
    return ShopSession(
        cart=CartStore(slot),
        orders=OrderService(SqlOrderRepository(db)),
        identities=IdentityService(SqlUserRepository(db)),
        identity=identity,
    )
