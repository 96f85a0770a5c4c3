from sqlalchemy import Column, String, JSON, ForeignKey
from app.models.base import BaseModel


class AuditLog(BaseModel):
    __tablename__ = "audit_log"

    table_name = Column(String(100), nullable=False)
    action = Column(String(20), nullable=False)  # INSERT, UPDATE, DELETE
    record_id = Column(String(36), nullable=True, index=True)
    old_data = Column(JSON, nullable=True)
    new_data = Column(JSON, nullable=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
