from decimal import Decimal

import pytest

from toystock.services.valuation import (
    derive_stock_value,
    format_money,
    format_stock_value,
    parse_decimal,
    parse_int,
)


def test_preview_of_decimal_price_and_text_quantity():
    assert format_stock_value("2.5", "4") == "10.00"


@pytest.mark.parametrize(
    "price, quantity, expected",
    [
        (5, 10, Decimal("50.00")),
        (Decimal("19.99"), 3, Decimal("59.97")),
        ("0.333", "3", Decimal("1.00")),
        ("1.005", "1", Decimal("1.01")),
        (0, 25, Decimal("0.00")),
        (7.25, 0, Decimal("0.00")),
    ],
)
def test_value_is_product_rounded_to_cents(price, quantity, expected):
    assert derive_stock_value(price, quantity) == expected


@pytest.mark.parametrize(
    "price, quantity",
    [
        ("", "4"),
        ("2.5", ""),
        (None, 3),
        ("abc", "2"),
        ("2", "many"),
        ("   ", "1"),
        ("nan", "1"),
        ("inf", "2"),
    ],
)
def test_missing_or_non_numeric_input_gives_zero(price, quantity):
    assert derive_stock_value(price, quantity) == Decimal("0.00")
    assert format_stock_value(price, quantity) == "0.00"


def test_quantity_is_truncated_to_whole_units():
    assert derive_stock_value("2", "3.9") == Decimal("6.00")


def test_parsers():
    assert parse_decimal(" 12.50 ") == Decimal("12.50")
    assert parse_decimal(3) == Decimal("3")
    assert parse_decimal(True) is None
    assert parse_decimal("12abc") is None
    assert parse_int("7") == 7
    assert parse_int(7.8) == 7
    assert parse_int("") is None


def test_format_money():
    assert format_money(Decimal("5")) == "$5.00"
    assert format_money(Decimal("1234.5"), "€") == "€1234.50"


@pytest.mark.parametrize("price, quantity", [("1e30", "1"), ("9" * 27, "1000")])
def test_product_too_large_for_cents_gives_zero(price, quantity):
    assert derive_stock_value(price, quantity) == Decimal("0.00")
    assert format_stock_value(price, quantity) == "0.00"
