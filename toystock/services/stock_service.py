"""
Stock management service.

Business rules:
  - stock_value is always purchase_price * quantity, computed when the
    record is written.
  - A spreadsheet import is all-or-nothing: the valid rows go to the store
    in one batch; rows without a name or code are dropped beforehand.
  - An import with no valid rows writes nothing and is reported as such.
  - Store failures are reported, never retried.
"""
from datetime import datetime
from io import BytesIO
from typing import Any, Iterable, Mapping, Optional
import sqlite3
import logging

from toystock.core.exceptions import EmptyBatchError
from toystock.models.stock import StockRecord
from toystock.models.user import UserContext
from toystock.repositories.stock_repository import StockRepository
from toystock.schemas.stock import ImportResult, StockCreate, StockSummary
from toystock.services.normalizer import StockDraft, normalize_rows
from toystock.services.pdf_service import PDFService
from toystock.services.spreadsheet_service import (
    check_extension,
    read_rows,
    render_stock_workbook,
)
from toystock.services.valuation import ZERO_VALUE, format_stock_value

logger = logging.getLogger(__name__)


class StockService:
    """Business logic for stock records, imports and exports."""

    def __init__(
        self,
        conn: sqlite3.Connection,
        pdf_service: Optional[PDFService] = None,
    ) -> None:
        logger.trace("Initializing StockService")
        self._repo = StockRepository(conn)
        self._pdf = pdf_service or PDFService()

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def list_stocks(self, user: UserContext) -> list[StockRecord]:
        """Return all of the user's stocks, oldest first."""
        logger.info("Listing stocks user_id=%s", user.id)
        return self._repo.select_all(user.id)

    @staticmethod
    def preview_value(purchase_price: Any, quantity: Any) -> str:
        """Return the stock value a form would produce, as display text."""
        return format_stock_value(purchase_price, quantity)

    @staticmethod
    def summarize(records: Iterable[StockRecord]) -> StockSummary:
        records = list(records)
        return StockSummary(
            total_items=len(records),
            total_stock_value=sum((r.stock_value for r in records), ZERO_VALUE),
        )

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create_stock(self, data: StockCreate, user: UserContext) -> StockRecord:
        """Persist one stock entered through the form."""
        logger.info("Adding stock item_code=%s user_id=%s", data.item_code, user.id)
        draft = StockDraft(
            user_id=user.id,
            item_name=data.item_name,
            item_code=data.item_code,
            purchase_price=data.purchase_price,
            selling_price=data.selling_price,
            quantity=data.quantity,
        )
        record = self._repo.insert(draft)
        logger.info("Stock created id=%s value=%s", record.id, record.stock_value)
        return record

    def import_rows(
        self,
        rows: list[Mapping[str, Any]],
        user: UserContext,
    ) -> ImportResult:
        """Normalize parsed spreadsheet rows and insert the valid ones as one batch."""
        logger.info("Importing %s spreadsheet rows user_id=%s", len(rows), user.id)
        drafts = normalize_rows(rows, user)
        if not drafts:
            logger.warning("Spreadsheet import had no valid rows user_id=%s", user.id)
            raise EmptyBatchError()

        inserted = self._repo.insert_many(drafts)
        logger.info("Imported %s of %s rows user_id=%s", inserted, len(rows), user.id)
        return ImportResult(
            inserted_count=inserted,
            total_rows=len(rows),
            message=f"{inserted} items uploaded!",
        )

    def import_spreadsheet(
        self,
        filename: Optional[str],
        content: bytes,
        user: UserContext,
    ) -> ImportResult:
        """Parse an uploaded .xlsx/.xls file and import its rows."""
        check_extension(filename)
        return self.import_rows(read_rows(content), user)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export_pdf(
        self,
        records: Iterable[StockRecord],
        generated_at: Optional[datetime] = None,
    ) -> BytesIO:
        return self._pdf.generate_stock_list(records, generated_at=generated_at)

    def export_spreadsheet(self, records: Iterable[StockRecord]) -> BytesIO:
        return render_stock_workbook(records)
