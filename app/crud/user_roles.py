from typing import Optional
from pydantic import BaseModel
from sqlalchemy.orm import Session
from app.crud.base import CRUDBase
from app.db.upsert import upsert
from app.models.department import Department
from app.models.user_roles import UserRole, AppRole


class CRUDUserRole(CRUDBase[UserRole, BaseModel, BaseModel]):

    def get_by_user(self, db: Session, *, user_id: str) -> Optional[UserRole]:
        return db.query(UserRole).filter(UserRole.user_id == user_id).first()

    def upsert(
        self, db: Session, *, user_id: str, role: AppRole, department: Optional[Department]
    ) -> UserRole:
        """Set the single role row of an account in one statement."""
        upsert(
            db,
            UserRole,
            {"user_id": user_id, "role": role, "department": department},
            index_elements=["user_id"],
            update_columns=["role", "department"],
        )
        db.commit()
        return self.get_by_user(db, user_id=user_id)


user_role = CRUDUserRole(UserRole)
