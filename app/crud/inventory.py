from typing import Any, Dict, List, Optional, Tuple
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel
from sqlalchemy import func, or_
from sqlalchemy.orm import Query, Session
from app.crud.audit_log import audit_log
from app.crud.base import CRUDBase
from app.models.alert import Alert
from app.models.department import Department
from app.models.inventory import InventoryItem, next_creation_seq
from app.models.service import Service

TABLE_NAME = "inventory_items"


def snapshot(item: InventoryItem) -> Dict[str, Any]:
    return jsonable_encoder({c.name: getattr(item, c.name) for c in InventoryItem.__table__.columns})


class CRUDInventoryItem(CRUDBase[InventoryItem, BaseModel, BaseModel]):

    def _filtered(self, db: Session, department: Optional[Department] = None, search: Optional[str] = None) -> Query:
        query = db.query(InventoryItem)
        if department is not None:
            query = query.filter(InventoryItem.department == department)
        if search and search.strip():
            pattern = f"%{search.strip()}%"
            query = query.filter(or_(
                InventoryItem.name.ilike(pattern),
                InventoryItem.category.ilike(pattern),
                InventoryItem.model.ilike(pattern),
                InventoryItem.serial_number.ilike(pattern),
                InventoryItem.cabin_number.ilike(pattern),
            ))
        return query

    def get_filtered(
        self, db: Session, *, department: Optional[Department] = None, search: Optional[str] = None
    ) -> List[InventoryItem]:
        # Oldest first: the first row of a group supplies its threshold
        return (
            self._filtered(db, department, search)
            .order_by(InventoryItem.creation_seq, InventoryItem.id)
            .all()
        )

    def get_group(self, db: Session, *, department: Department, name: str) -> List[InventoryItem]:
        return (
            db.query(InventoryItem)
            .filter(InventoryItem.department == department, InventoryItem.name == name)
            .order_by(InventoryItem.creation_seq, InventoryItem.id)
            .all()
        )

    def get_page(
        self,
        db: Session,
        *,
        page: int,
        per_page: int,
        department: Optional[Department] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[InventoryItem], int]:
        query = self._filtered(db, department, search)
        total = query.count()
        items = (
            query.order_by(InventoryItem.creation_seq.desc(), InventoryItem.id)
            .offset((page - 1) * per_page)
            .limit(per_page)
            .all()
        )
        return items, total

    def count_by_department(self, db: Session) -> Dict[str, int]:
        rows = (
            db.query(InventoryItem.department, func.count(InventoryItem.id))
            .group_by(InventoryItem.department)
            .all()
        )
        counts = {department.value: 0 for department in Department}
        for department, count in rows:
            counts[department.value] = count
        return counts

    def create_item(self, db: Session, *, obj_in: Dict[str, Any], user_id: Optional[str]) -> InventoryItem:
        db_obj = InventoryItem(**obj_in, created_by=user_id)
        db.add(db_obj)
        db.flush()
        audit_log.record(
            db, table_name=TABLE_NAME, action="INSERT", record_id=db_obj.id,
            user_id=user_id, new_data=snapshot(db_obj),
        )
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def create_many(self, db: Session, *, rows: List[Dict[str, Any]], user_id: Optional[str]) -> List[InventoryItem]:
        """Insert every row or none of them."""
        created = []
        for row in rows:
            db_obj = InventoryItem(**row, created_by=user_id, creation_seq=next_creation_seq())
            db.add(db_obj)
            created.append(db_obj)
        db.flush()
        for db_obj in created:
            audit_log.record(
                db, table_name=TABLE_NAME, action="INSERT", record_id=db_obj.id,
                user_id=user_id, new_data=snapshot(db_obj),
            )
        db.commit()
        for db_obj in created:
            db.refresh(db_obj)
        return created

    def update_item(
        self, db: Session, *, db_obj: InventoryItem, obj_in: Dict[str, Any], user_id: Optional[str]
    ) -> InventoryItem:
        old_data = snapshot(db_obj)
        for field, value in obj_in.items():
            setattr(db_obj, field, value)
        db.flush()
        audit_log.record(
            db, table_name=TABLE_NAME, action="UPDATE", record_id=db_obj.id,
            user_id=user_id, old_data=old_data, new_data=snapshot(db_obj),
        )
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def remove_item(self, db: Session, *, db_obj: InventoryItem, user_id: Optional[str]) -> None:
        # Alerts and service records outlive the item; only their reference is cleared
        db.query(Alert).filter(Alert.item_id == db_obj.id).update(
            {Alert.item_id: None}, synchronize_session=False
        )
        db.query(Service).filter(Service.equipment_id == db_obj.id).update(
            {Service.equipment_id: None}, synchronize_session=False
        )
        audit_log.record(
            db, table_name=TABLE_NAME, action="DELETE", record_id=db_obj.id,
            user_id=user_id, old_data=snapshot(db_obj),
        )
        db.delete(db_obj)
        db.commit()


inventory_item = CRUDInventoryItem(InventoryItem)
