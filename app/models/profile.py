from sqlalchemy import Column, String, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from app.models.base import BaseModel
from app.models.department import Department, enum_column


class Profile(BaseModel):
    __tablename__ = "profiles"

    # Shares its primary key with the account: one profile per account
    id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    email = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=False)
    department = Column(enum_column(Department, "department"), nullable=True)
    approved = Column(Boolean, default=False, nullable=False)

    user = relationship("User", back_populates="profile")
