"""Keep stock alerts in step with the aggregated quantity of each catalog entry."""
import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from app import crud
from app.models.alert import Alert, AlertSeverity, AlertType
from app.models.department import Department
from app.services.inventory_aggregation import StockStatus, aggregate_items, classify

logger = logging.getLogger(__name__)

ALERT_FOR_STATUS = {
    StockStatus.LOW_STOCK: (AlertType.LOW_STOCK, AlertSeverity.MEDIUM),
    StockStatus.OUT_OF_STOCK: (AlertType.OUT_OF_STOCK, AlertSeverity.HIGH),
}


def _message(alert_type: AlertType, name: str, department: str, quantity: int) -> str:
    if alert_type == AlertType.OUT_OF_STOCK:
        return f"{name} in {department} is out of stock (quantity: {quantity})"
    return f"{name} in {department} is running low (quantity: {quantity})"


def sync_stock_alerts(db: Session, department: Department, name: str) -> Optional[Alert]:
    """Raise, keep or resolve the open stock alert of one (department, name) group.

    Returns the alert created by this call, if any.
    """
    items = crud.inventory_item.get_group(db, department=department, name=name)
    open_alerts = crud.alert.get_unresolved_for_group(db, department=department, name=name)

    status = StockStatus.IN_STOCK
    summary = None
    if items:
        summary = next(iter(aggregate_items(items).values()))
        status = classify(summary)

    wanted = ALERT_FOR_STATUS.get(status)
    wanted_type = wanted[0].value if wanted else None

    kept = False
    for alert in open_alerts:
        if alert.alert_type == wanted_type and not kept:
            kept = True
            continue
        # Stale: the group recovered or moved between low and out of stock
        crud.alert.update(db, db_obj=alert, obj_in={"is_resolved": True, "resolved_at": datetime.now(timezone.utc)})
        logger.info(f"Auto-resolved {alert.alert_type} alert {alert.id} for {name} ({department.value})")

    if wanted is None or kept:
        return None

    alert_type, severity = wanted
    alert = crud.alert.create(db, obj_in={
        "item_id": items[0].id,
        "alert_type": alert_type.value,
        "severity": severity.value,
        "message": _message(alert_type, name, department.value, summary.total_quantity),
        "is_resolved": False,
    })
    logger.info(f"Raised {alert_type.value} alert for {name} ({department.value}), total {summary.total_quantity}")
    return alert


def sync_groups(db: Session, groups: Iterable[Tuple[Department, str]]) -> List[Alert]:
    created = []
    for department, name in dict.fromkeys(groups):
        alert = sync_stock_alerts(db, department, name)
        if alert is not None:
            created.append(alert)
    return created


def release_item_alerts(db: Session, item) -> None:
    """Before an item is deleted, hand its open stock alerts to another row of
    the same group, or resolve them when the group disappears with it."""
    department, name = item.department, item.name
    others = [row for row in crud.inventory_item.get_group(db, department=department, name=name) if row.id != item.id]
    for alert in crud.alert.get_unresolved_for_group(db, department=department, name=name):
        if alert.item_id != item.id:
            continue
        if others:
            crud.alert.update(db, db_obj=alert, obj_in={"item_id": others[0].id})
        else:
            crud.alert.update(db, db_obj=alert, obj_in={"is_resolved": True, "resolved_at": datetime.now(timezone.utc)})
            logger.info(f"Resolved {alert.alert_type} alert {alert.id}: {name} ({department.value}) no longer stocked")
