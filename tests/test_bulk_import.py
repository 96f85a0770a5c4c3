import io

import pytest
from openpyxl import Workbook

from app.models.department import Department
from app.services.bulk_import import BulkImportError, parse_upload


def csv_bytes(text):
    return text.strip().encode("utf-8")


def test_csv_with_alternate_headers():
    content = csv_bytes("""
Name,Department,Quantity,SerialNumber,Threshold,CabinNumber,Specs
Laptop,IT,3,SN-1,2,C-4,"{""ram"": ""16GB""}"
Beaker,chemistry,,,,,not json
""")

    parsed = parse_upload("items.csv", content)

    laptop, beaker = parsed.rows
    assert laptop["department"] == Department.IT
    assert laptop["quantity"] == 3
    assert laptop["serial_number"] == "SN-1"
    assert laptop["low_stock_threshold"] == 2
    assert laptop["cabin_number"] == "C-4"
    assert laptop["specifications"] == {"ram": "16GB"}
    assert laptop["status"] == "available"
    assert beaker["department"] == Department.CHEMISTRY
    assert beaker["quantity"] == 1
    assert beaker["low_stock_threshold"] == 5
    assert beaker["specifications"] == {}


def test_rows_without_name_or_department_are_skipped():
    content = csv_bytes("""
name,department,quantity
Laptop,IT,3
,IT,4
Mouse,,2
""")

    parsed = parse_upload("items.csv", content)

    assert [r["name"] for r in parsed.rows] == ["Laptop"]
    assert parsed.skipped == 2


def test_missing_required_columns():
    with pytest.raises(BulkImportError, match="Missing required columns: quantity"):
        parse_upload("items.csv", csv_bytes("name,department\nLaptop,IT"))


def test_no_valid_rows():
    with pytest.raises(BulkImportError, match="No valid items found in file"):
        parse_upload("items.csv", csv_bytes("name,department,quantity\n,,3"))


def test_unknown_department():
    with pytest.raises(BulkImportError, match="unknown department"):
        parse_upload("items.csv", csv_bytes("name,department,quantity\nLaptop,History,3"))


def test_negative_quantity():
    with pytest.raises(BulkImportError):
        parse_upload("items.csv", csv_bytes("name,department,quantity\nLaptop,IT,-3"))


def test_unsupported_extension():
    with pytest.raises(BulkImportError):
        parse_upload("items.txt", b"name,department,quantity")


def test_xlsx_upload():
    workbook = Workbook()
    sheet = workbook.active
    sheet.append(["Name", "Department", "Quantity", "low_stock_threshold"])
    sheet.append(["Oscilloscope", "Physics", 2, 1])
    sheet.append([None, None, None, None])
    buffer = io.BytesIO()
    workbook.save(buffer)

    parsed = parse_upload("items.xlsx", buffer.getvalue())

    assert len(parsed.rows) == 1
    assert parsed.rows[0]["department"] == Department.PHYSICS
    assert parsed.rows[0]["quantity"] == 2
    assert parsed.rows[0]["low_stock_threshold"] == 1
