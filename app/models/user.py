# File: app/models/user.py
from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from app.models.base import BaseModel


class User(BaseModel):
    """Identity account. Access to the application is governed by the linked
    Profile (approval flag) and UserRole rows, not by this table."""
    __tablename__ = "users"

    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=True)
    email_confirmed = Column(Boolean, default=False, nullable=False)
    email_confirmed_at = Column(DateTime(timezone=True), nullable=True)
    last_login = Column(DateTime(timezone=True), nullable=True)

    profile = relationship("Profile", back_populates="user", uselist=False)
    role = relationship("UserRole", back_populates="user", uselist=False)
