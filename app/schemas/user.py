from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from app.models.department import Department
from app.models.user_roles import AppRole


class ProfileOut(BaseModel):
    id: str
    email: str
    full_name: str
    department: Optional[Department] = None
    approved: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserWithRole(BaseModel):
    """Row of the user management screens: profile joined with its role."""
    id: str
    email: str
    full_name: str
    department: Optional[Department] = None
    approved: bool
    role: AppRole = AppRole.STAFF
    role_department: Optional[Department] = None
    created_at: Optional[datetime] = None


class RoleUpdate(BaseModel):
    role: AppRole
    department: Optional[Department] = None
