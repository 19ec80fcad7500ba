# minimarket/repositories/protocols.py
"""
Storage boundaries the services depend on.

The SQL repositories in this package implement them; tests substitute
in-memory fakes or mocks.
"""

from typing import Any, Protocol

from minimarket.models.user import User
from minimarket.schemas.order import OrderPayload, OrderRead


class OrderStore(Protocol):
    def create_order(self, payload: OrderPayload) -> OrderRead:
        """Persist a new order. Raises StoreError on failure."""
        ...

    def list_orders_for_identity(self, identity_id: str) -> list[OrderRead]:
        """Orders owned by `identity_id`, in insertion order."""
        ...

    def get_order_by_id(self, order_id: str) -> OrderRead | None: ...


class CatalogStore(Protocol):
    def load_catalog(self) -> list[dict[str, Any]]:
        """Raw product documents, unvalidated. Raises StoreError on failure."""
        ...


class UserStore(Protocol):
    def get_by_id(self, user_id: str) -> User | None: ...

    def get_by_email(self, email: str) -> User | None: ...

    def create(self, user: User) -> User: ...
