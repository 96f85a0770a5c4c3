from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.models.base import BaseModel
import enum


class AlertSeverity(str, enum.Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class AlertType(str, enum.Enum):
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"


class Alert(BaseModel):
    __tablename__ = "alerts"

    # Nullable: the item may be deleted after the alert was raised
    item_id = Column(String(36), ForeignKey("inventory_items.id", ondelete="SET NULL"), nullable=True, index=True)
    alert_type = Column(String(50), nullable=False)
    message = Column(Text, nullable=False)
    severity = Column(String(20), nullable=True, default=AlertSeverity.MEDIUM.value)
    is_resolved = Column(Boolean, nullable=False, default=False, index=True)
    resolved_by = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    resolved_at = Column(DateTime(timezone=True), nullable=True)

    item = relationship("InventoryItem")

    @property
    def item_name(self):
        return self.item.name if self.item else None

    @property
    def item_department(self):
        if self.item is None:
            return None
        return self.item.department.value
