from typing import Any
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app import crud, schemas
from app.db.database import get_db
from app.core.config import settings
from app.core.email_service import email_service
from app.core.security import create_password_reset_token, decode_token, PASSWORD_RESET_TOKEN_TYPE
import logging

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/forgot", response_model=schemas.Message)
def forgot_password(
    *,
    db: Session = Depends(get_db),
    request: schemas.ForgotPasswordRequest,
    background_tasks: BackgroundTasks,
) -> Any:
    """Email a reset link. The answer is the same whether or not the email is known."""
    user = crud.user.get_by_email(db, email=request.email)
    if user:
        token = create_password_reset_token(user.id, user.email)
        reset_url = f"{settings.FRONTEND_URL.rstrip('/')}/reset-password?token={token}"
        background_tasks.add_task(email_service.send_password_reset_email, user.email, reset_url)
        logger.info(f"Password reset requested for {user.email}")
    else:
        logger.info(f"Password reset requested for unknown email {request.email}")

    return {"message": "If an account exists for this email, a reset link has been sent"}


@router.post("/reset", response_model=schemas.Message)
def reset_password(
    *,
    db: Session = Depends(get_db),
    reset_in: schemas.ResetPasswordRequest,
) -> Any:
    payload = decode_token(reset_in.token, expected_type=PASSWORD_RESET_TOKEN_TYPE)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid or expired reset token"
        )

    user = crud.user.get(db, payload.get("sub"))
    if user is None or user.email != payload.get("email"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid or expired reset token"
        )

    crud.user.set_password(db, user=user, password=reset_in.password)
    # Completing a reset proves ownership of the mailbox
    crud.user.confirm_email(db, user=user)
    logger.info(f"Password reset completed for {user.email}")
    return {"message": "Password has been reset"}
