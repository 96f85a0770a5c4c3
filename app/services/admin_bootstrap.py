"""Create or promote the first administrator, who cannot be approved by anyone else."""
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app import crud
from app.models.department import Department
from app.models.user_roles import AppRole

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_NAME = "Admin User"


class AdminBootstrapError(Exception):
    pass


@dataclass
class BootstrapResult:
    user_id: str
    email: str
    account_created: bool
    requests_approved: int = 0


def bootstrap_admin(
    db: Session,
    email: str,
    full_name: Optional[str] = None,
    password: Optional[str] = None,
    department: Optional[Department] = None,
) -> BootstrapResult:
    if not email or not email.strip():
        raise AdminBootstrapError("Email is required")

    if password:
        account, created = crud.user.create_account(
            db, email=email, password=password, full_name=full_name, email_confirmed=True
        )
        if not created:
            logger.info(f"Account {email} already exists, promoting it to admin")
            crud.user.confirm_email(db, user=account)
    else:
        account = crud.user.get_by_email(db, email=email)
        if account is None:
            raise AdminBootstrapError(f"User {email} not found; pass a password to create it")
        created = False

    crud.profile.upsert(
        db,
        user_id=account.id,
        email=account.email,
        full_name=full_name or account.full_name or DEFAULT_ADMIN_NAME,
        department=department,
        approved=True,
    )
    crud.user_role.upsert(db, user_id=account.id, role=AppRole.ADMIN, department=department)

    requests_approved = 0
    try:
        requests_approved = crud.registration_request.approve_pending_for_email(
            db, email=account.email, reviewer_id=account.id, user_id=account.id
        )
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning(f"Could not mark registration requests for {email} approved: {str(e)}")

    logger.info(f"Admin ready: {account.email} (new account: {created})")
    return BootstrapResult(
        user_id=account.id,
        email=account.email,
        account_created=created,
        requests_approved=requests_approved,
    )
