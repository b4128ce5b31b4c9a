"""
Stock endpoints (any authenticated user, scoped to their own stocks):
  POST   /stocks                  – Add one stock from the form
  GET    /stocks                  – Visible stock list (optionally set the search query)
  GET    /stocks/summary          – Item count and total value of the visible list
  GET    /stocks/value-preview    – Live stock value for the form
  POST   /stocks/import           – Upload an .xlsx/.xls file of stocks
  GET    /stocks/export/pdf       – Download the visible list as PDF
  GET    /stocks/export/xlsx      – Download the visible list as a spreadsheet
"""
from typing import Optional
import logging

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from fastapi.responses import StreamingResponse

from toystock.core.config import settings
from toystock.core.dependencies import db_dependency, get_current_user, get_stock_session
from toystock.models.user import UserContext
from toystock.schemas.stock import (
    ImportResult,
    StockCreate,
    StockListResponse,
    StockResponse,
    StockSummary,
    StockValuePreview,
)
from toystock.services.spreadsheet_service import XLSX_MEDIA_TYPE
from toystock.services.stock_list import StockListSession
from toystock.services.stock_service import StockService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stocks", tags=["Stocks"])

QUERY_DESCRIPTION = "Search by name or code; omitted keeps the current query"


def _visible(session: StockListSession, service: StockService, q: Optional[str]):
    if q is not None:
        session.set_query(q)
    session.ensure_loaded(service)
    return session.visible


def _attachment(buffer, media_type: str, extension: str) -> StreamingResponse:
    return StreamingResponse(
        buffer,
        media_type=media_type,
        headers={
            "Content-Disposition": f"attachment; filename={settings.EXPORT_BASENAME}.{extension}"
        },
    )


@router.post(
    "",
    response_model=StockResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a stock item",
)
async def create_stock(
    data: StockCreate,
    conn=Depends(db_dependency),
    session: StockListSession = Depends(get_stock_session),
):
    """
    Record one stock item. `stock_value` is computed from the purchase price
    and quantity at submission time and stored with the record.
    """
    logger.info("Adding stock item_code=%s", data.item_code)
    return session.create(StockService(conn), data)


@router.get(
    "",
    response_model=StockListResponse,
    summary="List visible stock items",
)
async def list_stocks(
    q: Optional[str] = Query(None, description=QUERY_DESCRIPTION),
    conn=Depends(db_dependency),
    session: StockListSession = Depends(get_stock_session),
):
    """
    Return the user's stocks (oldest first) filtered by the search query,
    with totals and whether a new submission can be offered right now.
    """
    logger.info("Listing stocks q=%s", q)
    visible = _visible(session, StockService(conn), q)
    summary = StockService.summarize(visible)
    return StockListResponse(
        items=[StockResponse.model_validate(r) for r in visible],
        query=session.query,
        can_submit=session.can_submit,
        total_items=summary.total_items,
        total_stock_value=summary.total_stock_value,
    )


@router.get(
    "/summary",
    response_model=StockSummary,
    summary="Totals of the visible stock list",
)
async def stock_summary(
    q: Optional[str] = Query(None, description=QUERY_DESCRIPTION),
    conn=Depends(db_dependency),
    session: StockListSession = Depends(get_stock_session),
):
    return StockService.summarize(_visible(session, StockService(conn), q))


@router.get(
    "/value-preview",
    response_model=StockValuePreview,
    summary="Preview the stock value",
)
def preview_stock_value(
    purchase_price: Optional[str] = Query(None),
    quantity: Optional[str] = Query(None),
    _: UserContext = Depends(get_current_user),
):
    """Return purchase_price * quantity with two decimals, or 0.00 if either is missing."""
    return StockValuePreview(stock_value=StockService.preview_value(purchase_price, quantity))


@router.post(
    "/import",
    response_model=ImportResult,
    summary="Import stocks from a spreadsheet",
)
async def import_stocks(
    file: UploadFile = File(..., description=".xlsx or .xls file"),
    conn=Depends(db_dependency),
    session: StockListSession = Depends(get_stock_session),
):
    """
    Import every row of the first sheet that has both an item name and code.

    - No valid rows → **422**, nothing written.
    - Unreadable file → **400**.
    - Store failure → **500**, nothing written.
    """
    logger.info("Importing stocks from %s", file.filename)
    return await session.import_upload(StockService(conn), file.filename, file.read)


@router.get(
    "/export/pdf",
    summary="Export visible stocks as PDF",
    response_class=StreamingResponse,
)
async def export_stocks_pdf(
    q: Optional[str] = Query(None, description=QUERY_DESCRIPTION),
    conn=Depends(db_dependency),
    session: StockListSession = Depends(get_stock_session),
):
    logger.info("Exporting stock PDF q=%s", q)
    service = StockService(conn)
    visible = _visible(session, service, q)
    return _attachment(service.export_pdf(visible), "application/pdf", "pdf")


@router.get(
    "/export/xlsx",
    summary="Export visible stocks as a spreadsheet",
    response_class=StreamingResponse,
)
async def export_stocks_xlsx(
    q: Optional[str] = Query(None, description=QUERY_DESCRIPTION),
    conn=Depends(db_dependency),
    session: StockListSession = Depends(get_stock_session),
):
    logger.info("Exporting stock spreadsheet q=%s", q)
    service = StockService(conn)
    visible = _visible(session, service, q)
    return _attachment(service.export_spreadsheet(visible), XLSX_MEDIA_TYPE, "xlsx")
