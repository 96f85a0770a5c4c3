from app.models.alert import Alert, AlertType
from app.models.department import Department
from app.services.alert_service import release_item_alerts, sync_stock_alerts


def open_alerts(db):
    return db.query(Alert).filter(Alert.is_resolved.is_(False)).all()


def test_low_stock_group_raises_medium_alert(db, make_item):
    item = make_item("Multimeter", quantity=3)

    alert = sync_stock_alerts(db, Department.IT, "Multimeter")

    assert alert.alert_type == AlertType.LOW_STOCK.value
    assert alert.severity == "medium"
    assert alert.item_id == item.id
    assert "Multimeter" in alert.message and "IT" in alert.message and "3" in alert.message


def test_out_of_stock_raises_high_alert(db, make_item):
    make_item("Pipette", quantity=0)

    alert = sync_stock_alerts(db, Department.IT, "Pipette")

    assert alert.alert_type == AlertType.OUT_OF_STOCK.value
    assert alert.severity == "high"


def test_no_duplicate_alert_while_one_is_open(db, make_item):
    make_item("Pipette", quantity=1)

    sync_stock_alerts(db, Department.IT, "Pipette")
    assert sync_stock_alerts(db, Department.IT, "Pipette") is None
    assert len(open_alerts(db)) == 1


def test_group_total_decides_not_single_rows(db, make_item):
    make_item("Laptop", quantity=3)
    make_item("Laptop", quantity=4)

    assert sync_stock_alerts(db, Department.IT, "Laptop") is None
    assert open_alerts(db) == []


def test_recovery_resolves_stale_alert(db, make_item):
    item = make_item("Beaker", quantity=2)
    sync_stock_alerts(db, Department.IT, "Beaker")

    item.quantity = 50
    db.commit()
    sync_stock_alerts(db, Department.IT, "Beaker")

    assert open_alerts(db) == []


def test_low_to_out_replaces_alert_type(db, make_item):
    item = make_item("Beaker", quantity=2)
    sync_stock_alerts(db, Department.IT, "Beaker")

    item.quantity = 0
    db.commit()
    created = sync_stock_alerts(db, Department.IT, "Beaker")

    assert created.alert_type == AlertType.OUT_OF_STOCK.value
    assert [a.alert_type for a in open_alerts(db)] == [AlertType.OUT_OF_STOCK.value]


def test_deleting_last_row_resolves_its_alert(db, make_item):
    item = make_item("Burette", quantity=1)
    sync_stock_alerts(db, Department.IT, "Burette")

    release_item_alerts(db, item)

    assert open_alerts(db) == []


def test_deleting_one_row_moves_alert_to_sibling(db, make_item):
    first = make_item("Flask", quantity=1)
    second = make_item("Flask", quantity=1)
    alert = sync_stock_alerts(db, Department.IT, "Flask")
    owner, sibling = (first, second) if alert.item_id == first.id else (second, first)

    release_item_alerts(db, owner)

    db.refresh(alert)
    assert alert.item_id == sibling.id
    assert not alert.is_resolved
