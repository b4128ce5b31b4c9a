"""
Domain model representing a row of the `stocks` table.

`stock_value` is written once, when the record is created, and is read back
as stored. It is never recomputed from price and quantity on the way out.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass
class StockRecord:
    id: str
    user_id: str
    item_name: str
    item_code: str
    purchase_price: Decimal
    selling_price: Decimal
    quantity: int
    stock_value: Decimal
    created_at: datetime

    @classmethod
    def from_row(cls, row) -> "StockRecord":
        """Build a StockRecord from a sqlite3.Row object."""
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            item_name=row["item_name"],
            item_code=row["item_code"],
            purchase_price=Decimal(str(row["purchase_price"])),
            selling_price=Decimal(str(row["selling_price"])),
            quantity=int(row["quantity"]),
            stock_value=Decimal(str(row["stock_value"])),
            created_at=datetime.fromisoformat(row["created_at"]),
        )
