"""Client-side style search over an already loaded stock list."""
from typing import Iterable

from toystock.models.stock import StockRecord


def filter_stocks(records: Iterable[StockRecord], query: str) -> list[StockRecord]:
    """
    Return the records whose name or code contains *query*, ignoring case.

    An empty or whitespace-only query matches everything. Any other query is
    matched as typed, surrounding spaces included. Order is preserved.
    """
    if not (query or "").strip():
        return list(records)
    needle = query.casefold()
    return [
        record
        for record in records
        if needle in record.item_name.casefold() or needle in record.item_code.casefold()
    ]
