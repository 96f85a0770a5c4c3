from pydantic import BaseModel, EmailStr, validator
from typing import Optional
from datetime import datetime
from app.core.config import settings
from app.models.department import Department
from app.models.user_roles import AppRole


class SignUpRequest(BaseModel):
    email: EmailStr
    full_name: str
    department: Department
    requested_role: AppRole = AppRole.STAFF
    justification: Optional[str] = None
    password: Optional[str] = None
    confirm_password: Optional[str] = None

    @validator("full_name")
    def full_name_required(cls, v):
        if not v or not v.strip():
            raise ValueError("Full name is required")
        return v.strip()

    @validator("password")
    def password_long_enough(cls, v):
        if v is not None and len(v) < settings.MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters")
        return v

    @validator("confirm_password", always=True)
    def passwords_match(cls, v, values):
        if values.get("password") is not None and v != values.get("password"):
            raise ValueError("Passwords do not match")
        return v


class RegistrationRequestOut(BaseModel):
    id: str
    email: str
    full_name: str
    department: Department
    requested_role: AppRole
    justification: Optional[str] = None
    status: str
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ApprovalResult(BaseModel):
    request_id: str
    user_id: str
    account_created: bool
    already_approved: bool = False
    email_sent: bool = False
