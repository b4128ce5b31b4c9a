import zipfile
from dataclasses import replace
from datetime import datetime, timezone
from decimal import Decimal
from io import BytesIO

import pytest
from openpyxl import Workbook, load_workbook

from toystock.core.exceptions import ParseError
from toystock.models.stock import StockRecord
from toystock.services.normalizer import normalize_rows
from toystock.services.spreadsheet_service import (
    check_extension,
    read_rows,
    render_stock_workbook,
)


def _record(code, price, quantity):
    price = Decimal(price)
    return StockRecord(
        id=f"id-{code}",
        user_id="owner-1",
        item_name=f"Toy {code}",
        item_code=code,
        purchase_price=price,
        selling_price=price * 2,
        quantity=quantity,
        stock_value=price * quantity,
        created_at=datetime(2026, 3, 1, tzinfo=timezone.utc),
    )


def test_read_rows_uses_first_sheet_header(make_workbook):
    content = make_workbook(
        ["Item Name", "Item Code", "Quantity"],
        [["Car", "C-1", 3], [None, None, None], ["Kite", None, 2]],
    )

    rows = read_rows(content)

    assert rows == [
        {"Item Name": "Car", "Item Code": "C-1", "Quantity": 3},
        {"Item Name": "Kite", "Quantity": 2},
    ]


def test_read_rows_ignores_later_sheets():
    workbook = Workbook()
    workbook.active.append(["item_name", "item_code"])
    workbook.active.append(["Top", "T-1"])
    other = workbook.create_sheet("Other")
    other.append(["Item Name", "Item Code"])
    other.append(["Hidden", "H-1"])
    buffer = BytesIO()
    workbook.save(buffer)

    assert read_rows(buffer.getvalue()) == [{"item_name": "Top", "item_code": "T-1"}]


def test_read_rows_header_only_sheet(make_workbook):
    assert read_rows(make_workbook(["Item Name"], [])) == []


def test_read_rows_rejects_garbage():
    with pytest.raises(ParseError):
        read_rows(b"\x00\x01 definitely not a spreadsheet")


@pytest.mark.parametrize("name", ["stock.xlsx", "STOCK.XLS", "a.b.xlsx"])
def test_accepted_extensions(name):
    check_extension(name)


@pytest.mark.parametrize("name", ["stock.csv", "stock.xlsx.txt", "", None])
def test_rejected_extensions(name):
    with pytest.raises(ParseError):
        check_extension(name)


def test_render_writes_named_sheet_with_headers_and_raw_numbers():
    records = [_record("RC-01", "5", 10), _record("BT-02", "2.5", 4)]

    workbook = load_workbook(render_stock_workbook(records))

    assert workbook.sheetnames == ["Stock List"]
    ws = workbook["Stock List"]
    rows = list(ws.iter_rows(values_only=True))
    assert rows[0] == (
        "Item Name", "Item Code", "Purchase Price", "Selling Price", "Quantity", "Stock Value",
    )
    assert rows[1] == ("Toy RC-01", "RC-01", 5, 10, 10, 50)
    assert rows[2] == ("Toy BT-02", "BT-02", 2.5, 5, 4, 10)
    assert ws["C2"].number_format == '"$"#,##0.00'


def test_render_is_deterministic_in_content():
    records = [_record("A", "1.25", 2)]
    first = load_workbook(render_stock_workbook(records)).active
    second = load_workbook(render_stock_workbook(records)).active
    assert list(first.values) == list(second.values)


def test_render_empty_list_keeps_header():
    ws = load_workbook(render_stock_workbook([])).active
    assert ws.max_row == 1


def test_read_rows_rejects_truncated_sheet(make_workbook):
    content = make_workbook(
        ["Item Name", "Item Code", "Quantity"],
        [[f"Toy {n}", f"T-{n}", n] for n in range(50)],
    )
    source = zipfile.ZipFile(BytesIO(content))
    broken = BytesIO()
    with zipfile.ZipFile(broken, "w") as target:
        for item in source.infolist():
            data = source.read(item.filename)
            if item.filename == "xl/worksheets/sheet1.xml":
                data = data[: len(data) // 2]
            target.writestr(item, data)

    with pytest.raises(ParseError):
        read_rows(broken.getvalue())


def test_text_that_looks_like_a_formula_survives_export(user):
    record = replace(_record("R-1", "2", 3), item_name="=Robot", item_code="=R-1")

    workbook = load_workbook(render_stock_workbook([record]))
    assert workbook.active["A2"].data_type == "s"

    rows = read_rows(render_stock_workbook([record]).getvalue())
    drafts = normalize_rows(rows, user)

    assert [(d.item_name, d.item_code) for d in drafts] == [("=Robot", "=R-1")]
