from datetime import datetime, timezone
from typing import List, Optional
from pydantic import BaseModel
from sqlalchemy import func
from sqlalchemy.orm import Session
from app.crud.base import CRUDBase
from app.models.registration_request import RegistrationRequest, RequestStatus


class CRUDRegistrationRequest(CRUDBase[RegistrationRequest, BaseModel, BaseModel]):

    def get_all(self, db: Session, *, status: Optional[str] = None) -> List[RegistrationRequest]:
        query = db.query(RegistrationRequest)
        if status:
            query = query.filter(RegistrationRequest.status == status)
        return query.order_by(RegistrationRequest.created_at.desc()).all()

    def count_pending(self, db: Session) -> int:
        return (
            db.query(RegistrationRequest)
            .filter(RegistrationRequest.status == RequestStatus.PENDING.value)
            .count()
        )

    def get_pending_by_email(self, db: Session, *, email: str) -> Optional[RegistrationRequest]:
        return (
            db.query(RegistrationRequest)
            .filter(
                func.lower(RegistrationRequest.email) == email.strip().lower(),
                RegistrationRequest.status == RequestStatus.PENDING.value,
            )
            .first()
        )

    def transition(
        self,
        db: Session,
        *,
        request_id: str,
        from_status: RequestStatus,
        to_status: RequestStatus,
        reviewer_id: Optional[str],
        user_id: Optional[str] = None,
    ) -> bool:
        """Conditionally move a request between states.

        Returns False when the request was not in from_status, which means a
        concurrent caller already moved it.
        """
        values = {
            RegistrationRequest.status: to_status.value,
            RegistrationRequest.reviewed_by: reviewer_id,
            RegistrationRequest.reviewed_at: datetime.now(timezone.utc),
        }
        if user_id is not None:
            values[RegistrationRequest.user_id] = user_id
        updated = (
            db.query(RegistrationRequest)
            .filter(
                RegistrationRequest.id == request_id,
                RegistrationRequest.status == from_status.value,
            )
            .update(values, synchronize_session=False)
        )
        db.commit()
        return updated == 1

    def approve_pending_for_email(self, db: Session, *, email: str, reviewer_id: Optional[str], user_id: str) -> int:
        updated = (
            db.query(RegistrationRequest)
            .filter(
                func.lower(RegistrationRequest.email) == email.strip().lower(),
                RegistrationRequest.status == RequestStatus.PENDING.value,
            )
            .update(
                {
                    RegistrationRequest.status: RequestStatus.APPROVED.value,
                    RegistrationRequest.reviewed_by: reviewer_id,
                    RegistrationRequest.reviewed_at: datetime.now(timezone.utc),
                    RegistrationRequest.user_id: user_id,
                },
                synchronize_session=False,
            )
        )
        db.commit()
        return updated


registration_request = CRUDRegistrationRequest(RegistrationRequest)
