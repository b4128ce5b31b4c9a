from datetime import datetime, timezone
from decimal import Decimal

from toystock.models.stock import StockRecord
from toystock.services.pdf_service import PDFService

GENERATED_AT = datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc)


def _record(idx):
    return StockRecord(
        id=f"id-{idx}",
        user_id="owner-1",
        item_name=f"Toy number {idx}",
        item_code=f"T-{idx:03d}",
        purchase_price=Decimal("1.50"),
        selling_price=Decimal("2.99"),
        quantity=idx,
        stock_value=Decimal("1.50") * idx,
        created_at=GENERATED_AT,
    )


def test_generates_pdf_document():
    pdf = PDFService().generate_stock_list([_record(1), _record(2)], generated_at=GENERATED_AT)
    data = pdf.getvalue()
    assert data.startswith(b"%PDF")
    assert data.rstrip().endswith(b"%%EOF")


def test_same_visible_set_gives_same_bytes():
    records = [_record(i) for i in range(1, 6)]
    first = PDFService().generate_stock_list(records, generated_at=GENERATED_AT).getvalue()
    second = PDFService().generate_stock_list(records, generated_at=GENERATED_AT).getvalue()
    assert first == second


def test_different_visible_sets_differ():
    all_records = [_record(i) for i in range(1, 6)]
    full = PDFService().generate_stock_list(all_records, generated_at=GENERATED_AT).getvalue()
    filtered = PDFService().generate_stock_list(all_records[:1], generated_at=GENERATED_AT).getvalue()
    assert full != filtered


def test_long_list_and_empty_list_render():
    short_pdf = PDFService().generate_stock_list([_record(1)], generated_at=GENERATED_AT).getvalue()
    long_pdf = PDFService().generate_stock_list(
        [_record(i) for i in range(1, 151)], generated_at=GENERATED_AT
    ).getvalue()
    empty_pdf = PDFService().generate_stock_list([], generated_at=GENERATED_AT).getvalue()

    assert len(long_pdf) > len(short_pdf)
    assert empty_pdf.startswith(b"%PDF")
