import csv
import io

import pytest
from openpyxl import load_workbook

from app.services import report_export
from app.services.report_export import ColumnSpec, NoReportDataError, ReportFormat, render_report

COLUMNS = [
    ColumnSpec("Name", lambda r: r["name"], 30),
    ColumnSpec("Quantity", lambda r: r["quantity"], 10),
    ColumnSpec("Remarks", lambda r: r.get("remarks"), 40),
]

RECORDS = [
    {"name": "Oscilloscope", "quantity": 2, "remarks": 'Test lead marked "faulty", replace'},
    {"name": "Beaker, 250ml", "quantity": 40, "remarks": None},
    {"name": "Centrifuge", "quantity": 0, "remarks": "Line one\nline two"},
]


def render(fmt, **kwargs):
    return render_report(RECORDS, fmt, COLUMNS, title="Inventory Report", filename_stem="inventory-report-all-2026-01-01", **kwargs)


def test_csv_round_trip_recovers_rows_and_headers():
    report = render(ReportFormat.CSV)

    rows = list(csv.reader(io.StringIO(report.content.decode("utf-8"))))

    assert rows[0] == ["Name", "Quantity", "Remarks"]
    assert len(rows) - 1 == len(RECORDS)
    assert rows[1] == ["Oscilloscope", "2", 'Test lead marked "faulty", replace']
    assert rows[2][2] == ""
    assert rows[3][2] == "Line one\nline two"


def test_csv_quotes_every_field():
    first_line = render(ReportFormat.CSV).content.decode("utf-8").splitlines()[0]

    assert first_line == '"Name","Quantity","Remarks"'


def test_report_metadata():
    report = render(ReportFormat.CSV)

    assert report.filename == "inventory-report-all-2026-01-01.csv"
    assert report.media_type == "text/csv"


def test_xlsx_has_named_sheet_and_widths():
    report = render(ReportFormat.XLSX, sheet_name="Inventory")

    workbook = load_workbook(io.BytesIO(report.content))
    sheet = workbook["Inventory"]
    values = [[cell.value for cell in row] for row in sheet.iter_rows()]

    assert values[0] == ["Name", "Quantity", "Remarks"]
    assert len(values) == 4
    assert values[1][0] == "Oscilloscope"
    assert sheet.column_dimensions["A"].width == 30
    assert report.filename.endswith(".xlsx")


def test_pdf_is_generated():
    report = render(ReportFormat.PDF, subtitle="Department: All Departments", landscape=True)

    assert report.content.startswith(b"%PDF")
    assert report.media_type == "application/pdf"


def test_pdf_spans_pages_for_long_lists():
    records = [{"name": f"Item {i}", "quantity": i, "remarks": None} for i in range(300)]

    report = render_report(records, "pdf", COLUMNS, title="Inventory Report", filename_stem="inventory")

    assert report.content.startswith(b"%PDF")


@pytest.mark.parametrize("fmt", list(ReportFormat))
def test_empty_record_list_produces_no_file(fmt):
    with pytest.raises(NoReportDataError):
        render_report([], fmt, COLUMNS, title="Inventory Report", filename_stem="inventory")


def test_unknown_format_is_rejected():
    with pytest.raises(ValueError):
        render_report(RECORDS, "docx", COLUMNS, title="Inventory Report", filename_stem="inventory")


def _flatten(text):
    return " ".join(text.split())


def test_all_formats_carry_identical_cells(monkeypatch):
    pdf_tables = []

    class RecordingTable(report_export.Table):
        def __init__(self, data, *args, **kwargs):
            pdf_tables.append(data)
            super().__init__(data, *args, **kwargs)

    monkeypatch.setattr(report_export, "Table", RecordingTable)

    csv_rows = list(csv.reader(io.StringIO(render(ReportFormat.CSV).content.decode("utf-8"))))
    sheet = load_workbook(io.BytesIO(render(ReportFormat.XLSX).content)).active
    xlsx_rows = [["" if value is None else str(value) for value in row] for row in sheet.iter_rows(values_only=True)]
    pdf = render(ReportFormat.PDF)
    pdf_rows = [[cell.getPlainText() for cell in row] for row in pdf_tables[0]]

    assert pdf.content.startswith(b"%PDF")
    assert xlsx_rows == csv_rows
    # PDF paragraphs collapse whitespace, so compare word for word
    assert [[_flatten(c) for c in row] for row in pdf_rows] == [[_flatten(c) for c in row] for row in csv_rows]
