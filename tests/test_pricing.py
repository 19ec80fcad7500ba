from decimal import Decimal

import pytest

from minimarket.core.errors import InvalidAmount
from minimarket.schemas.cart import CartLine
from minimarket.services import pricing

from conftest import make_product


def line(price: str, quantity: int, product_id: str = "p") -> CartLine:
    return CartLine(product=make_product(product_id, price=price), quantity=quantity)


def test_subtotal_of_empty_lines_is_zero():
    assert pricing.subtotal([]) == Decimal("0")


def test_subtotal_sums_price_times_quantity_in_any_order():
    lines = [line("10.00", 2, "a"), line("5.00", 1, "b"), line("0.99", 3, "c")]

    assert pricing.subtotal(lines) == Decimal("27.97")
    assert pricing.subtotal(list(reversed(lines))) == Decimal("27.97")


@pytest.mark.parametrize(
    "subtotal, expected",
    [
        ("0", "0"),
        ("49.99", "3.9992"),
        ("50.00", "4.00"),
        ("50.01", "4.0008"),
        ("1000", "80"),
    ],
)
def test_tax_is_eight_percent_without_rounding(subtotal, expected):
    assert pricing.tax(Decimal(subtotal)) == Decimal(expected)


def test_discount_threshold_is_strictly_greater_than_fifty():
    assert pricing.discount(Decimal("50.00")) == Decimal("0")
    assert pricing.discount(Decimal("50.01")) == Decimal("5.001")
    assert pricing.discount(Decimal("0")) == Decimal("0")


def test_total_is_subtotal_plus_tax_minus_discount():
    assert pricing.total(Decimal("60"), Decimal("4.8"), Decimal("6")) == Decimal("58.8")
    assert pricing.total(Decimal("25"), Decimal("2"), Decimal("0")) == Decimal("27")


@pytest.mark.parametrize("fn", [pricing.tax, pricing.discount])
def test_negative_subtotal_is_rejected(fn):
    with pytest.raises(InvalidAmount):
        fn(Decimal("-0.01"))


def test_total_rejects_negative_components():
    with pytest.raises(InvalidAmount):
        pricing.total(Decimal("10"), Decimal("-1"), Decimal("0"))


@pytest.mark.parametrize(
    "fn, amount, expected",
    [
        (pricing.tax, 49.99, "3.9992"),
        (pricing.tax, 50, "4.00"),
        (pricing.tax, 0, "0"),
        (pricing.discount, 50.01, "5.001"),
        (pricing.discount, 50.0, "0"),
        (pricing.discount, 1000, "100"),
    ],
)
def test_plain_numbers_are_priced_by_their_decimal_value(fn, amount, expected):
    assert fn(amount) == Decimal(expected)


def test_total_accepts_plain_numbers():
    assert pricing.total(60, 4.8, 6) == Decimal("58.8")
    with pytest.raises(InvalidAmount):
        pricing.total(10, -0.5, 0)


def test_compute_totals_is_idempotent():
    lines = [line("20.00", 3, "a")]

    first = pricing.compute_totals(lines)
    second = pricing.compute_totals(lines)

    assert first == second
    assert first.subtotal == Decimal("60.00")
    assert first.tax == Decimal("4.80")
    assert first.discount == Decimal("6.00")
    assert first.total == Decimal("58.80")


def test_to_currency_rounds_half_up_to_cents():
    assert pricing.to_currency(Decimal("3.9992")) == Decimal("4.00")
    assert pricing.to_currency(Decimal("5.005")) == Decimal("5.01")
    assert str(pricing.to_currency(Decimal("27"))) == "27.00"
