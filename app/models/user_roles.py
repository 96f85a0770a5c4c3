from sqlalchemy import Column, String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.models.base import BaseModel
from app.models.department import Department, enum_column
import enum


class AppRole(str, enum.Enum):
    ADMIN = "admin"
    HOD = "hod"
    STAFF = "staff"


class UserRole(BaseModel):
    __tablename__ = "user_roles"
    __table_args__ = (UniqueConstraint("user_id", name="uq_user_roles_user_id"),)

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(enum_column(AppRole, "app_role"), nullable=False)
    department = Column(enum_column(Department, "department"), nullable=True)

    # Relationships
    user = relationship("User", back_populates="role")
