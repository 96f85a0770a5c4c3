from typing import List, Optional
from pydantic import BaseModel
from sqlalchemy.orm import Session
from app.crud.base import CRUDBase
from app.db.upsert import upsert
from app.models.department import Department
from app.models.profile import Profile
from app.models.user_roles import UserRole


class CRUDProfile(CRUDBase[Profile, BaseModel, BaseModel]):

    def upsert(
        self,
        db: Session,
        *,
        user_id: str,
        email: str,
        full_name: str,
        department: Optional[Department],
        approved: bool,
    ) -> Profile:
        """Insert or overwrite the profile of an account in one statement."""
        upsert(
            db,
            Profile,
            {
                "id": user_id,
                "email": email,
                "full_name": full_name,
                "department": department,
                "approved": approved,
            },
            index_elements=["id"],
            update_columns=["email", "full_name", "department", "approved"],
        )
        db.commit()
        return self.get(db, user_id)

    def create_unapproved(
        self, db: Session, *, user_id: str, email: str, full_name: str, department: Department
    ) -> Profile:
        return self.create(db, obj_in={
            "id": user_id,
            "email": email,
            "full_name": full_name,
            "department": department,
            "approved": False,
        })

    def get_approved(self, db: Session) -> List[Profile]:
        return (
            db.query(Profile)
            .filter(Profile.approved.is_(True))
            .order_by(Profile.created_at.desc())
            .all()
        )

    def get_deactivated(self, db: Session) -> List[Profile]:
        """Unapproved profiles that already hold a role, i.e. switched off by an admin."""
        return (
            db.query(Profile)
            .join(UserRole, UserRole.user_id == Profile.id)
            .filter(Profile.approved.is_(False))
            .order_by(Profile.created_at.desc())
            .all()
        )

    def set_approved(self, db: Session, *, profile: Profile, approved: bool) -> Profile:
        return self.update(db, db_obj=profile, obj_in={"approved": approved})

    def count(self, db: Session) -> int:
        return db.query(Profile).count()


profile = CRUDProfile(Profile)
