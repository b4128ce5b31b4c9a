"""
Stock value calculation and the numeric coercion it shares with ingestion.

A stock's value is ``purchase_price * quantity``. Inputs arrive as form
text, spreadsheet cells or numbers, so every entry point goes through the
lenient parsers below: anything missing or unparsable becomes ``None`` and
the caller decides the fallback.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional
import logging

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
ZERO_VALUE = Decimal("0.00")

# Upper bounds accepted on manual entry. Their product stays well inside the
# default 28-digit decimal context once quantized to cents.
MAX_PRICE = Decimal("1000000000000")
MAX_QUANTITY = 1_000_000_000


def parse_decimal(value: Any) -> Optional[Decimal]:
    """Return *value* as a finite Decimal, or None when it is not a number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        text = str(value)
    else:
        text = str(value).strip()
        if not text:
            return None
    try:
        number = Decimal(text)
    except InvalidOperation:
        return None
    return number if number.is_finite() else None


def parse_int(value: Any) -> Optional[int]:
    """Return *value* truncated toward zero to an int, or None when it is not a number."""
    number = parse_decimal(value)
    if number is None:
        return None
    return int(number)


def derive_stock_value(purchase_price: Any, quantity: Any) -> Decimal:
    """
    Compute ``purchase_price * quantity`` rounded to two fraction digits.

    Returns ``0.00`` when either input is missing or not a number, and when
    the product is too large to be represented to the cent.
    """
    price = parse_decimal(purchase_price)
    units = parse_int(quantity)
    if price is None or units is None:
        return ZERO_VALUE
    try:
        return (price * units).quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        logger.warning("Stock value of %s x %s is out of range", price, units)
        return ZERO_VALUE


def format_stock_value(purchase_price: Any, quantity: Any) -> str:
    """Return the derived value as display text, e.g. ``"10.00"``."""
    return format(derive_stock_value(purchase_price, quantity), ".2f")


def format_money(amount: Decimal, symbol: str = "$") -> str:
    """Format a monetary amount with a currency prefix and two fraction digits."""
    return f"{symbol}{amount:.2f}"
