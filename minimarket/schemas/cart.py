# minimarket/schemas/cart.py
from decimal import Decimal

from pydantic import ConfigDict, field_serializer
from sqlmodel import SQLModel, Field

from minimarket.schemas.product import ProductRead
from minimarket.services.pricing import to_currency


class CartLine(SQLModel):
    """
    One product in a cart, held by value as it looked when it was added.

    A cart never holds two lines for the same product id, and never holds
    a line with quantity 0 (the line is removed instead).
    """

    model_config = ConfigDict(frozen=True)

    product: ProductRead
    quantity: int = Field(gt=0)

    @property
    def product_id(self) -> str:
        return self.product.id

    @property
    def price(self) -> Decimal:
        return self.product.price

    @property
    def line_total(self) -> Decimal:
        return self.product.price * self.quantity


class CartLineIn(SQLModel):
    """
    A cart line as sent by a client at checkout.

    Structure only; merging duplicate product ids and rejecting bad
    quantities happens when the lines are replayed into a CartStore.
    """

    model_config = ConfigDict(extra="forbid")

    product: ProductRead
    quantity: int


class CartItemAdd(SQLModel):
    """
    Payload for adding to cart. The product is looked up in the catalog
    and snapshotted at this moment.
    """

    model_config = ConfigDict(extra="forbid")

    product_id: str
    quantity: int = Field(default=1, gt=0)


class CartItemUpdate(SQLModel):
    """
    Payload for setting a line's quantity. 0 or less removes the line.
    """

    model_config = ConfigDict(extra="forbid")

    quantity: int


class CartSummary(SQLModel):
    """
    Full cart response model with derived totals.
    """

    lines: list[CartLine]
    item_count: int
    subtotal: Decimal
    tax: Decimal
    discount: Decimal
    total: Decimal

    @field_serializer("subtotal", "tax", "discount", "total", when_used="json")
    def money_as_currency(self, v: Decimal) -> str:
        return str(to_currency(v))
