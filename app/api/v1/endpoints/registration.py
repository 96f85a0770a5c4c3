from typing import Any
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app import crud, schemas
from app.db.database import get_db
from app.models.registration_request import RequestStatus
import logging

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/signup", response_model=schemas.RegistrationRequestOut, status_code=status.HTTP_201_CREATED)
def sign_up(
    *,
    db: Session = Depends(get_db),
    signup_in: schemas.SignUpRequest,
) -> Any:
    """Request access. An administrator has to approve the request before login works."""
    if crud.user.get_by_email(db, email=signup_in.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="An account with this email already exists"
        )
    if crud.registration_request.get_pending_by_email(db, email=signup_in.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="A registration request for this email is already pending"
        )

    if signup_in.password:
        account, created = crud.user.create_account(
            db,
            email=signup_in.email,
            password=signup_in.password,
            full_name=signup_in.full_name,
        )
        if not created:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="An account with this email already exists"
            )
        crud.profile.create_unapproved(
            db,
            user_id=account.id,
            email=account.email,
            full_name=signup_in.full_name,
            department=signup_in.department,
        )

    request = crud.registration_request.create(db, obj_in={
        "email": signup_in.email.lower(),
        "full_name": signup_in.full_name,
        "department": signup_in.department,
        "requested_role": signup_in.requested_role,
        "justification": signup_in.justification,
        "status": RequestStatus.PENDING.value,
    })
    logger.info(f"Registration request {request.id} from {request.email} ({request.department.value})")
    return request
