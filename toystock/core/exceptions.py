"""
Domain errors raised by the stock services.

Every error carries a user-facing message and the HTTP status the API
returns for it. The exception handler registered in ``toystock.main``
turns them into ``{"detail": message}`` responses.
"""
from typing import Optional

from fastapi import status


class StockTrackerError(Exception):
    """Base class for all user-visible stock tracker failures."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Unexpected stock tracker error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class RowValidationError(StockTrackerError):
    """A spreadsheet row lacks an item name or code. Never surfaced to users."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "Row is missing an item name or item code"


class EmptyBatchError(StockTrackerError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "No valid data found in spreadsheet"


class ParseError(StockTrackerError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Failed to parse spreadsheet file"


class StoreError(StockTrackerError):
    """Opaque failure of the record store. Not retried."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Failed to save stocks"


class ImportInProgressError(StockTrackerError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Another stock update is still in progress"
