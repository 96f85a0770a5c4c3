"""
Render a list of records into a downloadable CSV, XLSX or PDF file.

The renderer is presentation only: callers filter and order records before
calling it. Every format reads cells through the same ``ColumnSpec`` list, so
the three outputs always carry identical data.
"""
import csv
import enum
import io
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, List, Optional, Sequence

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape as landscape_pagesize
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

logger = logging.getLogger(__name__)

HEADER_FILL_RGB = (59, 130, 246)


class ReportFormat(str, enum.Enum):
    CSV = "csv"
    XLSX = "xlsx"
    PDF = "pdf"


MEDIA_TYPES = {
    ReportFormat.CSV: "text/csv",
    ReportFormat.XLSX: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ReportFormat.PDF: "application/pdf",
}


class NoReportDataError(Exception):
    """Raised instead of producing an empty file."""


@dataclass(frozen=True)
class ColumnSpec:
    header: str
    extractor: Callable[[Any], Any]
    width: int = 15  # spreadsheet width hint, in characters

    def cell(self, record: Any) -> str:
        value = self.extractor(record)
        return "" if value is None else str(value)


@dataclass
class RenderedReport:
    content: bytes
    filename: str
    media_type: str


def build_rows(records: Sequence[Any], columns: Sequence[ColumnSpec]) -> List[List[str]]:
    return [[column.cell(record) for column in columns] for record in records]


def render_csv(records: Sequence[Any], columns: Sequence[ColumnSpec]) -> bytes:
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow([column.header for column in columns])
    writer.writerows(build_rows(records, columns))
    return output.getvalue().encode("utf-8")


def render_xlsx(records: Sequence[Any], columns: Sequence[ColumnSpec], sheet_name: str) -> bytes:
    workbook = Workbook()
    worksheet = workbook.active
    # Excel caps sheet titles at 31 characters
    worksheet.title = sheet_name[:31]

    worksheet.append([column.header for column in columns])
    for cell in worksheet[1]:
        cell.font = Font(bold=True)
        cell.fill = PatternFill(start_color="3B82F6", end_color="3B82F6", fill_type="solid")

    for row in build_rows(records, columns):
        worksheet.append(row)

    for index, column in enumerate(columns, start=1):
        worksheet.column_dimensions[get_column_letter(index)].width = column.width

    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def render_pdf(
    records: Sequence[Any],
    columns: Sequence[ColumnSpec],
    title: str,
    subtitle: Optional[str] = None,
    landscape: bool = False,
    font_size: int = 8,
    generated_at: Optional[datetime] = None,
) -> bytes:
    buffer = io.BytesIO()
    pagesize = landscape_pagesize(A4) if landscape else A4
    doc = SimpleDocTemplate(
        buffer,
        pagesize=pagesize,
        leftMargin=12 * mm,
        rightMargin=12 * mm,
        topMargin=15 * mm,
        bottomMargin=15 * mm,
        title=title,
    )
    styles = getSampleStyleSheet()
    cell_style = styles["BodyText"].clone("ReportCell", fontSize=font_size, leading=font_size + 2)
    header_style = cell_style.clone("ReportHeader", textColor=colors.white, fontName="Helvetica-Bold")

    generated_at = generated_at or datetime.now()
    story = [Paragraph(title, styles["Title"])]
    if subtitle:
        story.append(Paragraph(subtitle, styles["Normal"]))
    story.append(Paragraph(f"Generated: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}", styles["Normal"]))
    story.append(Spacer(1, 6 * mm))

    # Paragraph cells wrap long free text (remarks, messages) instead of overflowing
    data = [[Paragraph(_escape(column.header), header_style) for column in columns]]
    for row in build_rows(records, columns):
        data.append([Paragraph(_escape(value), cell_style) for value in row])

    total_width = sum(column.width for column in columns) or 1
    col_widths = [doc.width * column.width / total_width for column in columns]

    table = Table(data, colWidths=col_widths, repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.Color(*(c / 255 for c in HEADER_FILL_RGB))),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.Color(0.96, 0.96, 0.96)]),
    ]))
    story.append(table)

    doc.build(story)
    return buffer.getvalue()


def _escape(value: str) -> str:
    return value.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def render_report(
    records: Sequence[Any],
    fmt: ReportFormat,
    columns: Sequence[ColumnSpec],
    title: str,
    filename_stem: str,
    sheet_name: str = "Report",
    subtitle: Optional[str] = None,
    landscape: bool = False,
    font_size: int = 8,
) -> RenderedReport:
    """Render records into one file. Raises NoReportDataError on an empty list."""
    if not records:
        raise NoReportDataError("No data available for the selected filters")

    fmt = ReportFormat(fmt)
    if fmt == ReportFormat.CSV:
        content = render_csv(records, columns)
    elif fmt == ReportFormat.XLSX:
        content = render_xlsx(records, columns, sheet_name)
    else:
        content = render_pdf(records, columns, title, subtitle=subtitle, landscape=landscape, font_size=font_size)

    logger.info(f"Rendered {fmt.value} report '{title}' with {len(records)} rows")
    return RenderedReport(
        content=content,
        filename=f"{filename_stem}.{fmt.value}",
        media_type=MEDIA_TYPES[fmt],
    )
