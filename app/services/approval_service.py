"""
Registration approval workflow.

State machine over RegistrationRequest.status::

    pending -> approved
    pending -> rejected -> (deleted)

Approval is safe to re-run. The account is found or created behind a unique
email constraint, profile and role are upserted in single statements, and
the status flip is a conditional update that exactly one caller wins. Only
that caller sends the notification email.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from app import crud
from app.core.email_service import email_service
from app.models.registration_request import RegistrationRequest, RequestStatus

logger = logging.getLogger(__name__)


class ApprovalError(Exception):
    pass


class RequestNotFoundError(ApprovalError):
    pass


class InvalidTransitionError(ApprovalError):
    pass


@dataclass
class ApprovalOutcome:
    request_id: str
    user_id: str
    account_created: bool
    already_approved: bool = False
    email_sent: bool = False


def _get_request(db: Session, request_id: str) -> RegistrationRequest:
    request = crud.registration_request.get(db, request_id)
    if request is None:
        raise RequestNotFoundError(f"Registration request {request_id} not found")
    return request


def approve_request(db: Session, request_id: str, reviewer_id: Optional[str]) -> ApprovalOutcome:
    request = _get_request(db, request_id)

    if request.status == RequestStatus.REJECTED.value:
        raise InvalidTransitionError("A rejected request cannot be approved")

    if request.status == RequestStatus.APPROVED.value and request.user_id:
        logger.info(f"Registration request {request_id} already approved, nothing to do")
        return ApprovalOutcome(
            request_id=request.id,
            user_id=request.user_id,
            account_created=False,
            already_approved=True,
        )

    # 1. account: reuse by email, otherwise create with an unusable random password
    account, created = crud.user.create_account(
        db,
        email=request.email,
        full_name=request.full_name,
        email_confirmed=True,
    )
    if not created:
        crud.user.confirm_email(db, user=account)

    # 2-3. profile and role, each a single upsert
    crud.profile.upsert(
        db,
        user_id=account.id,
        email=account.email,
        full_name=request.full_name,
        department=request.department,
        approved=True,
    )
    crud.user_role.upsert(
        db,
        user_id=account.id,
        role=request.requested_role,
        department=request.department,
    )

    # 4. the one caller that flips pending -> approved owns the notification
    transitioned = crud.registration_request.transition(
        db,
        request_id=request.id,
        from_status=RequestStatus.PENDING,
        to_status=RequestStatus.APPROVED,
        reviewer_id=reviewer_id,
        user_id=account.id,
    )
    if not transitioned:
        logger.info(f"Registration request {request_id} was approved by a concurrent call")
        return ApprovalOutcome(
            request_id=request.id,
            user_id=account.id,
            account_created=created,
            already_approved=True,
        )

    # 5. best-effort; send_email logs and swallows delivery failures
    email_sent = email_service.send_approval_email(
        to_email=account.email,
        full_name=request.full_name,
        department=request.department.value,
        role=request.requested_role.value,
        is_new_account=created,
    )
    if not email_sent:
        logger.error(f"Approval email to {account.email} failed; approval stands")

    logger.info(f"Approved registration request {request_id} for {account.email} (new account: {created})")
    return ApprovalOutcome(
        request_id=request.id,
        user_id=account.id,
        account_created=created,
        email_sent=email_sent,
    )


def reject_request(db: Session, request_id: str, reviewer_id: Optional[str]) -> RegistrationRequest:
    request = _get_request(db, request_id)
    if request.status != RequestStatus.PENDING.value:
        raise InvalidTransitionError(f"Only pending requests can be rejected (status: {request.status})")

    transitioned = crud.registration_request.transition(
        db,
        request_id=request.id,
        from_status=RequestStatus.PENDING,
        to_status=RequestStatus.REJECTED,
        reviewer_id=reviewer_id,
    )
    if not transitioned:
        raise InvalidTransitionError("Request was reviewed by someone else")

    db.refresh(request)
    logger.info(f"Rejected registration request {request_id}")
    return request


def delete_request(db: Session, request_id: str) -> None:
    request = _get_request(db, request_id)
    if request.status != RequestStatus.REJECTED.value:
        raise InvalidTransitionError("Only rejected requests can be deleted")
    crud.registration_request.remove(db, id=request.id)
    logger.info(f"Deleted rejected registration request {request_id}")
