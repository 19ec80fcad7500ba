# minimarket/models/product.py
from datetime import datetime, timezone
from decimal import Decimal

from sqlmodel import SQLModel, Field


class Product(SQLModel, table=True):
    """
    Product catalog entry for Hami MiniMarket.

    Seeded externally (see minimarket.seed) and read-only to the cart and
    order logic: nothing in the storefront core ever mutates a row here.
    """

    __tablename__ = "products"

    id: str = Field(
        primary_key=True,
        index=True,
        description="Stable catalog identifier, e.g. 'apple-gala'",
    )

    name: str = Field(
        index=True,
        description="Display name of the product",
    )

    # fruits | vegetables
    category: str = Field(
        index=True,
        description="Catalog category",
    )

    price: Decimal = Field(
        ge=0,
        max_digits=12,
        decimal_places=2,
        description="Unit price",
    )

    image: str = Field(
        default="",
        description="Image reference (URL or asset path)",
    )

    description: str | None = Field(
        default=None,
        description="Optional long description",
    )

    stock: int = Field(
        default=0,
        ge=0,
        description="Units on hand; informational only, not enforced at checkout",
    )

    unit: str = Field(
        default="lb",
        description="Unit label shown next to the price",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
