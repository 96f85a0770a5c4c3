from typing import Any, Callable, Dict, List, Optional
from pydantic import BaseModel
from sqlalchemy.orm import Session, joinedload
from app.crud.base import CRUDBase
from app.models.department import Department
from app.models.service import Service, ServiceStatus, ServiceType


class CRUDService(CRUDBase[Service, BaseModel, BaseModel]):

    def get_filtered(
        self,
        db: Session,
        *,
        service_type: Optional[ServiceType] = None,
        status: Optional[ServiceStatus] = None,
        department: Optional[Department] = None,
    ) -> List[Service]:
        query = db.query(Service).options(joinedload(Service.equipment))
        if service_type is not None:
            query = query.filter(Service.service_type == service_type)
        if status is not None:
            query = query.filter(Service.status == status)
        if department is not None:
            query = query.filter(Service.department == department)
        return query.order_by(Service.service_date.desc(), Service.created_at.desc()).all()


    def save_with_photo(
        self,
        db: Session,
        *,
        obj_in: Dict[str, Any],
        store_photo: Callable[[], Optional[str]],
        db_obj: Optional[Service] = None,
    ) -> Service:
        """Create or update a record, storing the bill photo only once the row has been flushed.

        A failed insert never leaves an uploaded object behind; a failed upload rolls the row back.
        """
        if db_obj is None:
            db_obj = Service(**obj_in)
            db.add(db_obj)
        else:
            for field, value in obj_in.items():
                setattr(db_obj, field, value)
        db.flush()

        try:
            photo_url = store_photo()
        except Exception:
            db.rollback()
            raise
        if photo_url:
            db_obj.bill_photo_url = photo_url

        db.commit()
        db.refresh(db_obj)
        return db_obj


service = CRUDService(Service)
