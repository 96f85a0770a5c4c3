from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from app.models.base import BaseModel
from app.models.department import Department, enum_column
from app.models.user_roles import AppRole
import enum


class RequestStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class RegistrationRequest(BaseModel):
    __tablename__ = "registration_requests"

    email = Column(String(255), nullable=False, index=True)
    full_name = Column(String(255), nullable=False)
    department = Column(enum_column(Department, "department"), nullable=False)
    requested_role = Column(enum_column(AppRole, "app_role"), nullable=False)
    justification = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=RequestStatus.PENDING.value, index=True)
    reviewed_by = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    # Account linked on approval
    user_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
