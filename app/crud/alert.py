from datetime import datetime, timezone
from typing import List
from pydantic import BaseModel
from sqlalchemy.orm import Session, joinedload
from app.crud.base import CRUDBase
from app.models.alert import Alert, AlertType
from app.models.department import Department
from app.models.inventory import InventoryItem

STOCK_ALERT_TYPES = [AlertType.LOW_STOCK.value, AlertType.OUT_OF_STOCK.value]


class CRUDAlert(CRUDBase[Alert, BaseModel, BaseModel]):

    def get_all(self, db: Session) -> List[Alert]:
        return (
            db.query(Alert)
            .options(joinedload(Alert.item))
            .order_by(Alert.created_at.desc())
            .all()
        )

    def get_recent(self, db: Session, *, limit: int, unresolved_only: bool = False) -> List[Alert]:
        query = db.query(Alert).options(joinedload(Alert.item))
        if unresolved_only:
            query = query.filter(Alert.is_resolved.is_(False))
        return query.order_by(Alert.created_at.desc()).limit(limit).all()

    def count_unresolved(self, db: Session) -> int:
        return db.query(Alert).filter(Alert.is_resolved.is_(False)).count()

    def get_unresolved_for_group(self, db: Session, *, department: Department, name: str) -> List[Alert]:
        """Open stock alerts raised for any row of a (department, name) group."""
        return (
            db.query(Alert)
            .join(InventoryItem, Alert.item_id == InventoryItem.id)
            .filter(
                InventoryItem.department == department,
                InventoryItem.name == name,
                Alert.is_resolved.is_(False),
                Alert.alert_type.in_(STOCK_ALERT_TYPES),
            )
            .all()
        )

    def resolve(self, db: Session, *, db_obj: Alert, resolved_by: str) -> Alert:
        return self.update(db, db_obj=db_obj, obj_in={
            "is_resolved": True,
            "resolved_by": resolved_by,
            "resolved_at": datetime.now(timezone.utc),
        })


alert = CRUDAlert(Alert)
