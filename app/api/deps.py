from dataclasses import dataclass
from typing import Any, Dict, Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from app import crud
from app.core import permissions
from app.core.security import decode_token
from app.db.database import get_db
from app.models.department import Department
from app.models.user import User
from app.models.user_roles import AppRole

security = HTTPBearer()

ACCESS_DENIED = "Access denied"


@dataclass(frozen=True)
class SessionContext:
    """The signed-in user as established at login.

    Carried inside the access token so routers never re-query role or
    department per request. It ends when the token expires or the client
    discards it at logout.
    """
    user_id: str
    email: str
    full_name: Optional[str]
    role: Optional[AppRole]
    department: Optional[Department]
    approved: bool

    @property
    def is_admin(self) -> bool:
        return permissions.is_admin(self.role)

    def can_manage(self, department: Any) -> bool:
        return permissions.can_manage(self.role, self.department, department)

    def to_claims(self) -> Dict[str, Any]:
        return {
            "email": self.email,
            "name": self.full_name,
            "role": self.role.value if self.role else None,
            "department": self.department.value if self.department else None,
            "approved": self.approved,
        }

    @classmethod
    def from_claims(cls, user_id: str, claims: Dict[str, Any]) -> "SessionContext":
        role = claims.get("role")
        department = claims.get("department")
        return cls(
            user_id=user_id,
            email=claims.get("email") or "",
            full_name=claims.get("name"),
            role=AppRole(role) if role else None,
            department=Department(department) if department else None,
            approved=bool(claims.get("approved")),
        )


def build_session_context(db: Session, user: User) -> SessionContext:
    """Read profile and role once, at login."""
    profile = crud.profile.get(db, user.id)
    user_role = crud.user_role.get_by_user(db, user_id=user.id)
    return SessionContext(
        user_id=user.id,
        email=user.email,
        full_name=profile.full_name if profile else user.full_name,
        role=user_role.role if user_role else None,
        department=(user_role.department if user_role and user_role.department else
                    profile.department if profile else None),
        approved=bool(profile and profile.approved),
    )


def get_session_context(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> SessionContext:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_token(credentials.credentials)
    if payload is None or not payload.get("sub"):
        raise credentials_exception

    try:
        return SessionContext.from_claims(payload["sub"], payload)
    except ValueError:
        # Role or department no longer part of the closed sets
        raise credentials_exception


def get_current_user(
    db: Session = Depends(get_db),
    ctx: SessionContext = Depends(get_session_context),
) -> User:
    user = crud.user.get(db, ctx.user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Could not validate credentials")
    return user


def require_admin(ctx: SessionContext = Depends(get_session_context)) -> SessionContext:
    if not ctx.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=ACCESS_DENIED)
    return ctx


def require_item_manager(ctx: SessionContext = Depends(get_session_context)) -> SessionContext:
    if not permissions.can_add_items(ctx.role):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=ACCESS_DENIED)
    return ctx


def ensure_can_manage(ctx: SessionContext, department: Any) -> None:
    if not ctx.can_manage(department):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=ACCESS_DENIED)
