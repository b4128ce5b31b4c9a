"""
Spreadsheet ingestion normalizer.

Turns loosely-typed spreadsheet rows (column label -> scalar) into
validated stock drafts ready for a batch insert.

Rules:
  - Each field is looked up through an ordered list of accepted column
    labels; the first label holding a non-empty value wins.
  - Name and code are coerced to stripped text ("" when missing).
  - Prices fall back to 0 when missing or not numeric; quantity likewise,
    truncated to a whole number.
  - A row without both a name and a code is dropped silently. Bad numeric
    cells never reject a row on their own.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, Mapping
import logging

from toystock.core.exceptions import RowValidationError
from toystock.models.user import UserContext
from toystock.services.valuation import derive_stock_value, parse_decimal, parse_int

logger = logging.getLogger(__name__)


FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "item_name": ("Item Name", "item_name"),
    "item_code": ("Item Code", "item_code"),
    "purchase_price": ("Purchase Price", "purchase_price"),
    "selling_price": ("Selling Price", "selling_price"),
    "quantity": ("Quantity", "quantity"),
}


@dataclass(frozen=True)
class StockDraft:
    """A stock record before the store assigns its id and timestamp."""

    user_id: str
    item_name: str
    item_code: str
    purchase_price: Decimal
    selling_price: Decimal
    quantity: int

    @property
    def stock_value(self) -> Decimal:
        return derive_stock_value(self.purchase_price, self.quantity)

    def as_row(self) -> dict[str, Any]:
        """Return the draft keyed by the snake_case column labels."""
        return {
            "item_name": self.item_name,
            "item_code": self.item_code,
            "purchase_price": self.purchase_price,
            "selling_price": self.selling_price,
            "quantity": self.quantity,
        }


def _lookup(row: Mapping[str, Any], field: str) -> Any:
    """Return the first non-empty value among the field's aliases, else None."""
    for label in FIELD_ALIASES[field]:
        value = row.get(label)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def _coerce_text(value: Any) -> str:
    if value is None:
        return ""
    # Numeric codes read from a sheet come back as floats: 1001.0 -> "1001"
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def normalize_row(row: Mapping[str, Any], user: UserContext) -> StockDraft:
    """Coerce one spreadsheet row into a draft owned by *user*. Never raises."""
    purchase_price = parse_decimal(_lookup(row, "purchase_price"))
    selling_price = parse_decimal(_lookup(row, "selling_price"))
    quantity = parse_int(_lookup(row, "quantity"))
    return StockDraft(
        user_id=user.id,
        item_name=_coerce_text(_lookup(row, "item_name")),
        item_code=_coerce_text(_lookup(row, "item_code")),
        purchase_price=purchase_price if purchase_price is not None else Decimal("0"),
        selling_price=selling_price if selling_price is not None else Decimal("0"),
        quantity=quantity if quantity is not None else 0,
    )


def validate_draft(draft: StockDraft) -> StockDraft:
    """Raise RowValidationError unless the draft has both a name and a code."""
    if not draft.item_name or not draft.item_code:
        raise RowValidationError()
    return draft


def normalize_rows(
    rows: Iterable[Mapping[str, Any]],
    user: UserContext,
) -> list[StockDraft]:
    """Normalize a batch, keeping only the valid drafts in their original order."""
    valid: list[StockDraft] = []
    dropped = 0
    for row in rows:
        try:
            valid.append(validate_draft(normalize_row(row, user)))
        except RowValidationError:
            dropped += 1
    logger.info(
        "Normalized spreadsheet rows valid=%s dropped=%s user_id=%s",
        len(valid),
        dropped,
        user.id,
    )
    return valid
