from typing import Any, Dict, List, Optional
from pydantic import BaseModel
from sqlalchemy.orm import Session
from app.crud.base import CRUDBase
from app.models.audit_log import AuditLog


class CRUDAuditLog(CRUDBase[AuditLog, BaseModel, BaseModel]):

    def record(
        self,
        db: Session,
        *,
        table_name: str,
        action: str,
        record_id: Optional[str],
        user_id: Optional[str],
        old_data: Optional[Dict[str, Any]] = None,
        new_data: Optional[Dict[str, Any]] = None,
    ) -> AuditLog:
        """Stage an audit row; it commits together with the mutation it describes."""
        entry = AuditLog(
            table_name=table_name,
            action=action,
            record_id=record_id,
            user_id=user_id,
            old_data=old_data,
            new_data=new_data,
        )
        db.add(entry)
        return entry

    def get_for_record(self, db: Session, *, table_name: str, record_id: str) -> List[AuditLog]:
        return (
            db.query(AuditLog)
            .filter(AuditLog.table_name == table_name, AuditLog.record_id == record_id)
            .order_by(AuditLog.created_at)
            .all()
        )


audit_log = CRUDAuditLog(AuditLog)
