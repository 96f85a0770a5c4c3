from pydantic import BaseModel, validator
from typing import Optional
from app.core.config import settings
from app.models.department import Department
from app.models.user_roles import AppRole


class SessionInfo(BaseModel):
    """Who is signed in. Built once at login and carried in the token."""
    user_id: str
    email: str
    full_name: Optional[str] = None
    role: Optional[AppRole] = None
    department: Optional[Department] = None
    approved: bool = False


class Token(BaseModel):
    access_token: str
    token_type: str
    session: Optional[SessionInfo] = None


class Message(BaseModel):
    message: str


class ForgotPasswordRequest(BaseModel):
    email: str


class PasswordConfirmation(BaseModel):
    password: str
    confirm_password: str

    @validator("password")
    def password_long_enough(cls, v):
        if len(v) < settings.MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters")
        return v

    @validator("confirm_password")
    def passwords_match(cls, v, values):
        if "password" in values and v != values["password"]:
            raise ValueError("Passwords do not match")
        return v


class ResetPasswordRequest(PasswordConfirmation):
    token: str
