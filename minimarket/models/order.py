# minimarket/models/order.py
from datetime import datetime, timezone
from decimal import Decimal

from sqlmodel import SQLModel, Field


class Order(SQLModel, table=True):
    """
    Persisted checkout.

    Immutable once created: the storefront never updates a row here.
    `status` is set at creation (confirmed for directly-submitted orders)
    and otherwise managed outside this service.

    Money columns keep 4 decimal places so the unrounded tax/discount
    derivations survive a round trip; rounding to cents happens only when
    a response is serialized.
    """

    __tablename__ = "orders"

    id: str = Field(
        primary_key=True,
        index=True,
        description="Store-assigned id, e.g. ORD-1718000000000-k3j9x0a2b",
    )

    # NULL => guest checkout
    owner_id: str | None = Field(
        default=None,
        foreign_key="users.id",
        index=True,
    )

    subtotal: Decimal = Field(ge=0, max_digits=14, decimal_places=4)
    tax: Decimal = Field(ge=0, max_digits=14, decimal_places=4)
    discount: Decimal = Field(default=Decimal("0"), ge=0, max_digits=14, decimal_places=4)
    total: Decimal = Field(ge=0, max_digits=14, decimal_places=4)

    # pending | confirmed | completed
    status: str = Field(
        default="confirmed",
        index=True,
        description="Order status lifecycle",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        index=True,
        description="Creation timestamp (UTC)",
    )

    # Monotonic insertion counter; breaks created_at ties in history listings
    seq: int | None = Field(default=None, index=True)


class OrderLine(SQLModel, table=True):
    """
    Frozen copy of a cart line at submission time.

    Holds product id/name/price by value so later catalog edits never
    change what an old order shows.
    """

    __tablename__ = "order_lines"

    id: int | None = Field(default=None, primary_key=True)

    order_id: str = Field(
        foreign_key="orders.id",
        index=True,
    )

    position: int = Field(
        ge=0,
        description="Index of the line within the order (display order)",
    )

    product_id: str
    name: str
    price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    quantity: int = Field(gt=0)
