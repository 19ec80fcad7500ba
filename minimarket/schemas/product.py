# minimarket/schemas/product.py
from decimal import Decimal
from typing import Any, Literal

from pydantic import ConfigDict, field_serializer, field_validator
from sqlmodel import SQLModel, Field

Category = Literal["fruits", "vegetables"]


class ProductRead(SQLModel):
    """
    Product representation for clients, and the by-value snapshot a cart
    line holds. Also the schema every catalog document is checked against
    at the load boundary (see services.catalog_service.validate_catalog).

    Validation rules:
      - id, name cannot be empty or whitespace
      - category must be one of the Category values
      - price must be an actual number (strings are rejected), >= 0, whole cents
      - stock defaults to 0 and cannot be negative
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    name: str
    category: Category
    price: Decimal = Field(ge=0, decimal_places=2)
    image: str = ""
    description: str | None = None
    stock: int = Field(default=0, ge=0)
    unit: str = "lb"

    @field_validator("id", "name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("price", mode="before")
    @classmethod
    def price_must_be_numeric(cls, v: Any) -> Any:
        # bool is an int subclass; "1.99" would be coerced in lax mode
        if isinstance(v, bool) or not isinstance(v, (int, float, Decimal)):
            raise ValueError("price must be a number")
        if isinstance(v, float):
            return Decimal(str(v))
        return v

    @field_serializer("price", when_used="json")
    def price_as_number(self, v: Decimal) -> float:
        # Clients (and the durable cart snapshot) expect a JSON number
        return float(v)
