# minimarket/services/pricing.py
"""
Checkout pricing.

Pure functions over Decimal: no rounding, no I/O, no hidden state, so a
second derivation from the same lines is bit-identical to the first.
Rounding to cents is a presentation concern (`to_currency`), applied only
when a response is serialized.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Protocol

from pydantic import BaseModel, ConfigDict

from minimarket.core.errors import InvalidAmount

# Fixed tax rate (8%)
TAX_RATE = Decimal("0.08")

# 10% off when the subtotal is strictly above the threshold
DISCOUNT_RATE = Decimal("0.10")
DISCOUNT_THRESHOLD = Decimal("50.00")

ZERO = Decimal("0")
CENT = Decimal("0.01")


class OrderTotals(BaseModel):
    """Derived totals for a set of lines. Never stored on its own."""

    model_config = ConfigDict(frozen=True)

    subtotal: Decimal
    tax: Decimal
    discount: Decimal
    total: Decimal


class PricedLine(Protocol):
    @property
    def price(self) -> Decimal: ...

    @property
    def quantity(self) -> int: ...


def _to_decimal(amount: Decimal | int | float) -> Decimal:
    # Floats go through str() so 49.99 means 49.99, not its binary expansion
    if isinstance(amount, Decimal):
        return amount
    if isinstance(amount, float):
        return Decimal(str(amount))
    return Decimal(amount)


def _require_non_negative(name: str, amount: Decimal | int | float) -> Decimal:
    amount = _to_decimal(amount)
    if amount < 0:
        raise InvalidAmount(f"{name} cannot be negative (got {amount})")
    return amount


def subtotal(lines: Iterable[PricedLine]) -> Decimal:
    """Sum of price x quantity over `lines`; an empty iterable gives 0."""
    return sum((_to_decimal(line.price) * line.quantity for line in lines), ZERO)


def tax(amount: Decimal | int | float) -> Decimal:
    """8% of the subtotal."""
    return _require_non_negative("subtotal", amount) * TAX_RATE


def discount(amount: Decimal | int | float) -> Decimal:
    """10% of the subtotal when it is above 50.00, else 0 (50.00 itself gets nothing)."""
    amount = _require_non_negative("subtotal", amount)
    if amount > DISCOUNT_THRESHOLD:
        return amount * DISCOUNT_RATE
    return ZERO


def total(
    subtotal_amount: Decimal | int | float,
    tax_amount: Decimal | int | float,
    discount_amount: Decimal | int | float,
) -> Decimal:
    subtotal_amount = _require_non_negative("subtotal", subtotal_amount)
    tax_amount = _require_non_negative("tax", tax_amount)
    discount_amount = _require_non_negative("discount", discount_amount)
    return subtotal_amount + tax_amount - discount_amount


def compute_totals(lines: Iterable[PricedLine]) -> OrderTotals:
    """
    Derive the full OrderTotals for a set of lines.

    Callers pass an already-materialized sequence when they also need the
    lines for something else (the order pipeline does), so both uses see
    the same cart state.
    """
    s = subtotal(lines)
    t = tax(s)
    d = discount(s)
    return OrderTotals(subtotal=s, tax=t, discount=d, total=total(s, t, d))


def to_currency(amount: Decimal | int | float) -> Decimal:
    """Round half-up to cents. Presentation boundary only."""
    return _to_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)
