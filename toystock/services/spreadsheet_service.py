"""
Spreadsheet import/export.

Import reads the first sheet of an uploaded workbook into a list of
``{column label: cell value}`` rows (header taken from the first row,
blank cells omitted, blank rows skipped). Export writes the visible stock
list into a single styled sheet with raw numeric cells.
"""
from io import BytesIO
from typing import Any, Iterable, Optional
import logging

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from toystock.core.config import settings
from toystock.core.exceptions import ParseError
from toystock.models.stock import StockRecord

logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# (header label, record attribute, column type)
EXPORT_COLUMNS: list[tuple[str, str, str]] = [
    ("Item Name", "item_name", "text"),
    ("Item Code", "item_code", "text"),
    ("Purchase Price", "purchase_price", "currency"),
    ("Selling Price", "selling_price", "currency"),
    ("Quantity", "quantity", "number"),
    ("Stock Value", "stock_value", "currency"),
]

NUMBER_FORMATS = {
    "currency": '"$"#,##0.00',
    "number": "#,##0",
}

HEADER_FONT = Font(name="Calibri", size=11, bold=True, color="FFFFFF")
HEADER_FILL = PatternFill(start_color="E87957", end_color="E87957", fill_type="solid")
ALTERNATE_FILL = PatternFill(start_color="FDF1EC", end_color="FDF1EC", fill_type="solid")
THIN_BORDER = Border(
    left=Side(style="thin", color="D9D9D9"),
    right=Side(style="thin", color="D9D9D9"),
    top=Side(style="thin", color="D9D9D9"),
    bottom=Side(style="thin", color="D9D9D9"),
)
CENTER = Alignment(horizontal="center", vertical="center")
LEFT = Alignment(horizontal="left", vertical="center")
RIGHT = Alignment(horizontal="right", vertical="center")


# ---------------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------------

def check_extension(filename: Optional[str]) -> None:
    """Raise ParseError unless *filename* has one of the accepted extensions."""
    accepted = tuple(ext.lower() for ext in settings.IMPORT_EXTENSIONS)
    if not filename or not filename.lower().endswith(accepted):
        logger.warning("Rejected upload with unsupported name %r", filename)
        raise ParseError(
            f"Only {', '.join(settings.IMPORT_EXTENSIONS)} files are accepted"
        )


def read_rows(content: bytes) -> list[dict[str, Any]]:
    """
    Parse workbook bytes into rows keyed by the first sheet's header labels.

    Raises:
        ParseError: if the content cannot be opened as a workbook, or the
            first sheet cannot be read. Read-only sheets are parsed lazily,
            so corrupt sheet XML only surfaces while iterating.
    """
    try:
        workbook = load_workbook(BytesIO(content), read_only=True, data_only=True)
    except Exception as exc:
        logger.error("Failed to open uploaded workbook: %s", exc)
        raise ParseError() from exc

    try:
        if not workbook.worksheets:
            return []
        sheet_rows = workbook.worksheets[0].iter_rows(values_only=True)
        header = next(sheet_rows, None)
        if header is None:
            return []
        labels = [str(label).strip() if label is not None else None for label in header]

        rows: list[dict[str, Any]] = []
        for values in sheet_rows:
            row: dict[str, Any] = {}
            for label, value in zip(labels, values):
                if not label or value is None or label in row:
                    continue
                row[label] = value
            if row:
                rows.append(row)
    except Exception as exc:
        logger.error("Failed to read uploaded worksheet: %s", exc)
        raise ParseError() from exc
    finally:
        workbook.close()

    logger.info("Parsed %s spreadsheet rows", len(rows))
    return rows


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------

def _format_header_row(ws: Worksheet, row_num: int, num_cols: int) -> None:
    for col in range(1, num_cols + 1):
        cell = ws.cell(row=row_num, column=col)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = CENTER
        cell.border = THIN_BORDER


def _format_data_cell(ws: Worksheet, row_num: int, col_num: int, value, col_type: str) -> None:
    cell = ws.cell(row=row_num, column=col_num)
    cell.value = value
    if col_type == "text" and value is not None:
        # Keep names such as "=Robot" as text rather than formulas.
        cell.data_type = "s"
    cell.border = THIN_BORDER
    cell.alignment = RIGHT if col_type in NUMBER_FORMATS else LEFT
    if col_type in NUMBER_FORMATS:
        cell.number_format = NUMBER_FORMATS[col_type]
    if row_num % 2 == 1:
        cell.fill = ALTERNATE_FILL


def _auto_column_width(ws: Worksheet, min_width: int = 12, max_width: int = 50) -> None:
    for column in ws.columns:
        longest = max((len(str(cell.value)) for cell in column if cell.value is not None), default=0)
        letter = get_column_letter(column[0].column)
        ws.column_dimensions[letter].width = min(max(longest + 2, min_width), max_width)


def render_stock_workbook(
    records: Iterable[StockRecord],
    sheet_name: Optional[str] = None,
) -> BytesIO:
    """Write *records* into a one-sheet workbook and return it as a buffer."""
    records = list(records)
    logger.info("Generating stock spreadsheet rows=%s", len(records))

    workbook = Workbook()
    ws = workbook.active
    ws.title = sheet_name or settings.EXPORT_SHEET_NAME

    for col_num, (label, _, _) in enumerate(EXPORT_COLUMNS, 1):
        ws.cell(row=1, column=col_num).value = label
    _format_header_row(ws, 1, len(EXPORT_COLUMNS))

    for row_num, record in enumerate(records, 2):
        for col_num, (_, attr, col_type) in enumerate(EXPORT_COLUMNS, 1):
            _format_data_cell(ws, row_num, col_num, getattr(record, attr), col_type)

    _auto_column_width(ws)
    ws.freeze_panes = "A2"

    buffer = BytesIO()
    workbook.save(buffer)
    buffer.seek(0)
    logger.info("Stock spreadsheet generated successfully")
    return buffer
