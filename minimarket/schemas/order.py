# minimarket/schemas/order.py
from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import ConfigDict, field_serializer
from sqlmodel import SQLModel, Field

from minimarket.schemas.cart import CartLineIn
from minimarket.services.pricing import to_currency

OrderStatus = Literal["pending", "confirmed", "completed"]


class OrderLineSnapshot(SQLModel):
    """
    Product id/name/price/quantity copied from a cart line at submission.
    """

    model_config = ConfigDict(frozen=True)

    product_id: str
    name: str
    price: Decimal = Field(ge=0, decimal_places=2)
    quantity: int = Field(gt=0)

    @field_serializer("price", when_used="json")
    def price_as_currency(self, v: Decimal) -> str:
        return str(to_currency(v))


class OrderPayload(SQLModel):
    """
    What the order pipeline hands to the persistence collaborator.

    Totals are derived server-side from `lines`; owner_id is None for
    guest checkout.
    """

    model_config = ConfigDict(frozen=True)

    owner_id: str | None = None
    lines: tuple[OrderLineSnapshot, ...]
    subtotal: Decimal
    tax: Decimal
    discount: Decimal
    total: Decimal


class OrderRead(SQLModel):
    """
    Immutable persisted order, as returned by the store.

    Money fields keep full precision in Python and are rounded to cents
    only when dumped to JSON.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    owner_id: str | None
    lines: tuple[OrderLineSnapshot, ...]
    subtotal: Decimal
    tax: Decimal
    discount: Decimal
    total: Decimal
    status: OrderStatus
    created_at: datetime

    @field_serializer("subtotal", "tax", "discount", "total", when_used="json")
    def money_as_currency(self, v: Decimal) -> str:
        return str(to_currency(v))


class CheckoutRequest(SQLModel):
    """
    Payload for POST /orders: the client's cart, line by line.

    Client-side totals are deliberately not accepted; the server rebuilds
    the cart and derives totals itself.
    """

    model_config = ConfigDict(extra="forbid")

    lines: list[CartLineIn]
