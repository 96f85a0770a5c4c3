from dataclasses import asdict
from typing import Any
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session
from app import crud, schemas
from app.api import deps
from app.core import permissions, security
from app.db.database import get_db
import logging

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/login", response_model=schemas.Token)
def login_access_token(
    db: Session = Depends(get_db),
    form_data: OAuth2PasswordRequestForm = Depends()
) -> Any:
    """OAuth2 compatible token login. The token carries the session context."""
    user = crud.user.authenticate(db, email=form_data.username, password=form_data.password)
    if not user:
        logger.info(f"Failed login for {form_data.username}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password"
        )

    ctx = deps.build_session_context(db, user)
    if not permissions.can_login(ctx.role, ctx.approved):
        logger.info(f"Blocked login for unapproved account {user.email}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Your account is pending approval"
        )

    crud.user.record_login(db, user=user)
    access_token = security.create_access_token(user.id, claims=ctx.to_claims())
    logger.info(f"User {user.email} logged in as {ctx.role.value if ctx.role else 'no role'}")

    return {
        "access_token": access_token,
        "token_type": "bearer",
        "session": schemas.SessionInfo(**asdict(ctx)),
    }


@router.post("/logout", response_model=schemas.Message)
def logout(ctx: deps.SessionContext = Depends(deps.get_session_context)) -> Any:
    """Tokens are stateless; the client discards its copy."""
    logger.info(f"User {ctx.email} logged out")
    return {"message": "Logged out"}


@router.get("/me", response_model=schemas.SessionInfo)
def read_session(ctx: deps.SessionContext = Depends(deps.get_session_context)) -> Any:
    return schemas.SessionInfo(**asdict(ctx))
