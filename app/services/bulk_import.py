"""Parse a CSV or XLSX upload into inventory rows ready for insertion."""
import csv
import io
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from openpyxl import load_workbook

from app.models.department import Department
from app.services.inventory_aggregation import DEFAULT_LOW_STOCK_THRESHOLD

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("name", "department", "quantity")

# Header spellings accepted for each field, after lower-casing
SERIAL_NUMBER_HEADERS = ("serial_number", "serialnumber")
THRESHOLD_HEADERS = ("low_stock_threshold", "lowstockthreshold", "threshold")
CABIN_NUMBER_HEADERS = ("cabin_number", "cabinnumber")
SPECIFICATION_HEADERS = ("specifications", "specs")


class BulkImportError(Exception):
    pass


@dataclass
class ParsedImport:
    rows: List[Dict[str, Any]] = field(default_factory=list)
    skipped: int = 0


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _first(record: Dict[str, Any], headers: Sequence[str]) -> Optional[str]:
    for header in headers:
        value = _clean(record.get(header))
        if value is not None:
            return value
    return None


def _to_int(value: Optional[str], default: int) -> int:
    if value is None:
        return default
    try:
        # spreadsheets hand back 3.0 for 3
        return int(float(value))
    except (ValueError, OverflowError):
        return default


def _to_specifications(value: Optional[str]) -> Dict[str, Any]:
    if value is None:
        return {}
    try:
        parsed = json.loads(value)
    except ValueError:
        return {}
    return parsed if isinstance(parsed, dict) else {}


def _department(value: str, row_number: int) -> Department:
    for department in Department:
        if department.value.lower() == value.lower():
            return department
    raise BulkImportError(f"Row {row_number}: unknown department '{value}'")


def read_records(filename: str, content: bytes) -> List[Dict[str, Any]]:
    """Decode the upload into dicts keyed by lower-cased header."""
    extension = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""

    if extension == "csv":
        try:
            text = content.decode("utf-8-sig")
        except UnicodeDecodeError:
            raise BulkImportError("CSV file must be UTF-8 encoded")
        reader = csv.reader(io.StringIO(text))
        table = [row for row in reader]
    elif extension in ("xlsx", "xlsm"):
        try:
            workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
        except Exception as e:
            raise BulkImportError(f"Could not read spreadsheet: {str(e)}")
        worksheet = workbook.active
        table = [list(row) for row in worksheet.iter_rows(values_only=True)]
        workbook.close()
    else:
        raise BulkImportError("Unsupported file type. Upload a .csv or .xlsx file")

    if not table:
        raise BulkImportError("The file is empty")

    headers = [str(h).strip().lower() if h is not None else "" for h in table[0]]
    missing = [column for column in REQUIRED_COLUMNS if column not in headers]
    if missing:
        raise BulkImportError(f"Missing required columns: {', '.join(missing)}")

    records = []
    for row in table[1:]:
        if not any(_clean(value) for value in row):
            continue
        records.append({header: value for header, value in zip(headers, row) if header})
    return records


def parse_records(records: List[Dict[str, Any]]) -> ParsedImport:
    parsed = ParsedImport()
    # Header is row 1 in the user's file
    for row_number, record in enumerate(records, start=2):
        name = _clean(record.get("name"))
        department_value = _clean(record.get("department"))
        if not name or not department_value:
            parsed.skipped += 1
            continue

        quantity = _to_int(_clean(record.get("quantity")), 1)
        threshold = _to_int(_first(record, THRESHOLD_HEADERS), DEFAULT_LOW_STOCK_THRESHOLD)
        if quantity < 0 or threshold < 0:
            raise BulkImportError(f"Row {row_number}: quantity and threshold cannot be negative")

        parsed.rows.append({
            "name": name,
            "department": _department(department_value, row_number),
            "quantity": quantity,
            "category": _clean(record.get("category")),
            "model": _clean(record.get("model")),
            "serial_number": _first(record, SERIAL_NUMBER_HEADERS),
            "location": _clean(record.get("location")),
            "cabin_number": _first(record, CABIN_NUMBER_HEADERS),
            "low_stock_threshold": threshold,
            "specifications": _to_specifications(_first(record, SPECIFICATION_HEADERS)),
            "status": "available",
        })

    if not parsed.rows:
        raise BulkImportError("No valid items found in file")
    return parsed


def parse_upload(filename: str, content: bytes) -> ParsedImport:
    parsed = parse_records(read_records(filename, content))
    logger.info(f"Parsed {len(parsed.rows)} inventory rows from {filename} ({parsed.skipped} skipped)")
    return parsed
