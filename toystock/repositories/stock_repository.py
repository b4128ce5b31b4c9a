"""
Repository layer for StockRecord persistence.
All SQL for the `stocks` table lives here.

Design rules enforced at DB level:
  - name and code are non-empty.
  - prices and quantity are >= 0 (CHECK constraints).

Any sqlite3 failure, or a value sqlite3 cannot bind, leaves this module
as an opaque StoreError.
"""
import sqlite3
import uuid
from datetime import datetime, timezone
from typing import Sequence
import logging

from toystock.core.exceptions import StoreError
from toystock.core.logging_config import log_db_timing
from toystock.models.stock import StockRecord
from toystock.services.normalizer import StockDraft

logger = logging.getLogger(__name__)

# OverflowError: an integer too large for SQLite INTEGER fails at bind time.
STORE_FAILURES = (sqlite3.Error, OverflowError)

INSERT_STOCK_SQL = """
INSERT INTO stocks (
    id, user_id, item_name, item_code,
    purchase_price, selling_price, quantity, stock_value, created_at
)
VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
"""


def _insert_params(draft: StockDraft, created_at: str) -> tuple:
    return (
        uuid.uuid4().hex,
        draft.user_id,
        draft.item_name,
        draft.item_code,
        float(draft.purchase_price),
        float(draft.selling_price),
        draft.quantity,
        float(draft.stock_value),
        created_at,
    )


class StockRepository:
    """Data access layer for stock records."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing StockRepository")
        self._conn = conn

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    @log_db_timing
    def get_by_id(self, stock_id: str) -> StockRecord:
        logger.trace("Fetching stock id=%s", stock_id)
        try:
            row = self._conn.execute(
                "SELECT * FROM stocks WHERE id = ?", (stock_id,)
            ).fetchone()
        except sqlite3.Error as exc:
            raise StoreError("Failed to load stocks") from exc
        if row is None:
            raise StoreError("Failed to load stocks")
        return StockRecord.from_row(row)

    @log_db_timing
    def select_all(self, user_id: str) -> list[StockRecord]:
        """Return every stock owned by *user_id*, oldest first."""
        logger.trace("Listing stocks user_id=%s", user_id)
        try:
            rows = self._conn.execute(
                "SELECT * FROM stocks WHERE user_id = ? ORDER BY created_at, rowid",
                (user_id,),
            ).fetchall()
        except sqlite3.Error as exc:
            raise StoreError("Failed to load stocks") from exc
        return [StockRecord.from_row(r) for r in rows]

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @log_db_timing
    def insert(self, draft: StockDraft) -> StockRecord:
        """Insert one draft and return it with its id and timestamp."""
        logger.info("Creating stock item_code=%s", draft.item_code)
        now = datetime.now(tz=timezone.utc).isoformat()
        params = _insert_params(draft, now)
        try:
            self._conn.execute(INSERT_STOCK_SQL, params)
        except STORE_FAILURES as exc:
            raise StoreError("Failed to add stock item") from exc
        return self.get_by_id(params[0])

    @log_db_timing
    def insert_many(self, drafts: Sequence[StockDraft]) -> int:
        """
        Insert a batch of drafts atomically.

        Either every row is written or, on any failure, none of them are.
        The batch runs inside a savepoint that is rolled back on every
        exception, including values sqlite3 refuses to bind.
        """
        logger.info("Creating stock batch size=%s", len(drafts))
        now = datetime.now(tz=timezone.utc).isoformat()
        params = [_insert_params(draft, now) for draft in drafts]
        try:
            self._conn.execute("SAVEPOINT stock_batch")
            try:
                self._conn.executemany(INSERT_STOCK_SQL, params)
            except BaseException:
                self._conn.execute("ROLLBACK TO SAVEPOINT stock_batch")
                raise
            finally:
                self._conn.execute("RELEASE SAVEPOINT stock_batch")
        except STORE_FAILURES as exc:
            raise StoreError("Failed to upload stocks") from exc
        return len(params)
