import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple
from pydantic import BaseModel
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.crud.base import CRUDBase
from app.models.user import User
from app.core.security import get_password_hash, verify_password, generate_random_password

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class CRUDUser(CRUDBase[User, BaseModel, BaseModel]):

    def get_by_email(self, db: Session, *, email: str) -> Optional[User]:
        return db.query(User).filter(func.lower(User.email) == normalize_email(email)).first()

    def create_account(
        self,
        db: Session,
        *,
        email: str,
        password: Optional[str] = None,
        full_name: Optional[str] = None,
        email_confirmed: bool = False,
    ) -> Tuple[User, bool]:
        """Create an account, or return the existing one for this email.

        Returns (account, created). Without a password a random one is set;
        its owner regains access through the password reset flow. The unique
        email constraint decides races: the loser re-reads the winner's row.
        """
        existing = self.get_by_email(db, email=email)
        if existing:
            return existing, False

        db_obj = User(
            email=normalize_email(email),
            hashed_password=get_password_hash(password or generate_random_password()),
            full_name=full_name,
            email_confirmed=email_confirmed,
            email_confirmed_at=datetime.now(timezone.utc) if email_confirmed else None,
        )
        db.add(db_obj)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            existing = self.get_by_email(db, email=email)
            if existing is None:
                raise
            logger.info(f"Account for {email} was created concurrently, reusing it")
            return existing, False
        db.refresh(db_obj)
        return db_obj, True

    def confirm_email(self, db: Session, *, user: User) -> User:
        if user.email_confirmed:
            return user
        return self.update(db, db_obj=user, obj_in={
            "email_confirmed": True,
            "email_confirmed_at": datetime.now(timezone.utc),
        })

    def set_password(self, db: Session, *, user: User, password: str) -> User:
        return self.update(db, db_obj=user, obj_in={"hashed_password": get_password_hash(password)})

    def authenticate(self, db: Session, *, email: str, password: str) -> Optional[User]:
        user = self.get_by_email(db, email=email)
        if not user:
            return None
        if not verify_password(password, user.hashed_password):
            return None
        return user

    def record_login(self, db: Session, *, user: User) -> User:
        return self.update(db, db_obj=user, obj_in={"last_login": datetime.now(timezone.utc)})

    def update(self, db: Session, *, db_obj: User, obj_in: Dict[str, Any]) -> User:
        if "password" in obj_in:
            obj_in = dict(obj_in)
            obj_in["hashed_password"] = get_password_hash(obj_in.pop("password"))
        return super().update(db, db_obj=db_obj, obj_in=obj_in)


user = CRUDUser(User)
