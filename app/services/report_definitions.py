"""The three downloadable reports: which rows, which columns, which file name."""
import enum
from datetime import date
from typing import Any, List, Optional

from sqlalchemy.orm import Session

from app import crud
from app.models.department import Department
from app.services.inventory_aggregation import items_needing_restock
from app.services.report_export import ColumnSpec, RenderedReport, ReportFormat, render_report


class InventoryReportType(str, enum.Enum):
    INVENTORY = "inventory"
    LOW_STOCK = "low-stock"


def _value(value: Any) -> Any:
    return getattr(value, "value", value)


def _timestamp(value: Any) -> str:
    return value.strftime("%Y-%m-%d %H:%M") if value else ""


INVENTORY_COLUMNS = [
    ColumnSpec("Name", lambda i: i.name, 30),
    ColumnSpec("Model", lambda i: i.model, 15),
    ColumnSpec("Serial Number", lambda i: i.serial_number, 20),
    ColumnSpec("Quantity", lambda i: i.quantity, 20),
    ColumnSpec("Cabin Number", lambda i: i.cabin_number, 10),
    ColumnSpec("Location", lambda i: i.location, 20),
    ColumnSpec("Department", lambda i: _value(i.department), 15),
    ColumnSpec("Status", lambda i: i.status, 15),
]

SERVICE_COLUMNS = [
    ColumnSpec("Equipment Name", lambda s: s.equipment_name, 25),
    ColumnSpec("Model", lambda s: s.equipment.model if s.equipment else None, 20),
    ColumnSpec("Serial Number", lambda s: s.equipment.serial_number if s.equipment else None, 20),
    ColumnSpec("Department", lambda s: _value(s.department), 15),
    ColumnSpec("Service Date", lambda s: s.service_date.isoformat() if s.service_date else None, 15),
    ColumnSpec("Service Type", lambda s: _value(s.service_type), 15),
    ColumnSpec("Nature of Service", lambda s: _value(s.nature_of_service), 18),
    ColumnSpec("Technician/Vendor", lambda s: s.technician_vendor_name, 25),
    ColumnSpec("Cost", lambda s: s.cost if s.cost is not None else 0, 12),
    ColumnSpec("Status", lambda s: _value(s.status), 15),
    ColumnSpec("Remarks", lambda s: s.remarks, 40),
]

ALERT_COLUMNS = [
    ColumnSpec("Alert Type", lambda a: a.alert_type, 15),
    ColumnSpec("Message", lambda a: a.message, 50),
    ColumnSpec("Severity", lambda a: a.severity, 10),
    ColumnSpec("Item", lambda a: a.item_name or "N/A", 25),
    ColumnSpec("Department", lambda a: a.item_department or "N/A", 15),
    ColumnSpec("Status", lambda a: "Resolved" if a.is_resolved else "Pending", 10),
    ColumnSpec("Created At", lambda a: _timestamp(a.created_at), 20),
]


def _department_label(department: Optional[Department]) -> str:
    return department.value if department else "All Departments"


def report_filename(kind: str, department: Optional[Department] = None, today: Optional[date] = None) -> str:
    today = today or date.today()
    scope = department.value if department else "all"
    return f"{kind}-report-{scope}-{today.isoformat()}"


def inventory_report(
    db: Session,
    fmt: ReportFormat,
    department: Optional[Department] = None,
    report_type: InventoryReportType = InventoryReportType.INVENTORY,
) -> RenderedReport:
    items: List[Any] = crud.inventory_item.get_filtered(db, department=department)
    if report_type == InventoryReportType.LOW_STOCK:
        items = items_needing_restock(items)
        title = "Low Stock Report"
        kind = "low-stock"
    else:
        title = "Inventory Report"
        kind = "inventory"

    return render_report(
        items,
        fmt,
        INVENTORY_COLUMNS,
        title=title,
        sheet_name=title,
        subtitle=f"Department: {_department_label(department)}",
        filename_stem=report_filename(kind, department),
    )


def services_report(db: Session, fmt: ReportFormat, department: Optional[Department] = None) -> RenderedReport:
    services = crud.service.get_filtered(db, department=department)
    return render_report(
        services,
        fmt,
        SERVICE_COLUMNS,
        title="Services Report",
        sheet_name="Services",
        subtitle=f"Department: {_department_label(department)}",
        landscape=True,
        filename_stem=report_filename("services", department),
    )


def alerts_report(db: Session, fmt: ReportFormat) -> RenderedReport:
    alerts = crud.alert.get_all(db)
    return render_report(
        alerts,
        fmt,
        ALERT_COLUMNS,
        title="Alerts Report",
        sheet_name="Alerts",
        landscape=True,
        filename_stem=f"alerts-report-{date.today().isoformat()}",
    )
