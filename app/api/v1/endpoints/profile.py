from typing import Any
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app import crud, schemas
from app.api import deps
from app.db.database import get_db
from app.models.user import User
import logging

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/me", response_model=schemas.ProfileOut)
def read_my_profile(
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    profile = crud.profile.get(db, current_user.id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return profile


@router.post("/password", response_model=schemas.Message)
def change_password(
    *,
    db: Session = Depends(get_db),
    password_in: schemas.PasswordConfirmation,
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    crud.user.set_password(db, user=current_user, password=password_in.password)
    logger.info(f"User {current_user.email} changed their password")
    return {"message": "Password updated successfully"}
