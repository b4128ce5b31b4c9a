"""
Pydantic schemas for stock request/response validation.
"""
from decimal import Decimal
from datetime import datetime
import logging

from pydantic import BaseModel, Field, field_validator

from toystock.services.valuation import MAX_PRICE, MAX_QUANTITY

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class StockCreate(BaseModel):
    item_name: str = Field(..., min_length=1, max_length=200, description="Display name of the toy")
    item_code: str = Field(..., min_length=1, max_length=100, description="Shop code, not required to be unique")
    purchase_price: Decimal = Field(..., ge=0, le=MAX_PRICE, description="Unit cost paid to the supplier")
    selling_price: Decimal = Field(..., ge=0, le=MAX_PRICE, description="Unit retail price")
    quantity: int = Field(..., ge=0, le=MAX_QUANTITY, description="Units on hand")

    @field_validator("item_name", "item_code", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("purchase_price", "selling_price", mode="before")
    @classmethod
    def coerce_decimal(cls, v):
        return Decimal(str(v)) if isinstance(v, (int, float)) else v


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class StockResponse(BaseModel):
    id: str
    item_name: str
    item_code: str
    purchase_price: Decimal
    selling_price: Decimal
    quantity: int
    stock_value: Decimal
    created_at: datetime

    model_config = {"from_attributes": True}


class StockSummary(BaseModel):
    """Totals over the currently visible stock list."""
    total_items: int
    total_stock_value: Decimal


class StockListResponse(StockSummary):
    items: list[StockResponse]
    query: str
    can_submit: bool


class StockValuePreview(BaseModel):
    stock_value: str = Field(..., description="purchase_price * quantity with two decimals")


class ImportResult(BaseModel):
    inserted_count: int
    total_rows: int
    message: str
