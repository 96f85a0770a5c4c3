from sqlalchemy import Column, String, Text, Date, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from app.models.base import BaseModel
from app.models.department import Department, enum_column
import enum


class ServiceType(str, enum.Enum):
    INTERNAL = "internal"
    EXTERNAL = "external"


class NatureOfService(str, enum.Enum):
    MAINTENANCE = "maintenance"
    REPAIR = "repair"
    CALIBRATION = "calibration"
    INSTALLATION = "installation"


class ServiceStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Service(BaseModel):
    """Maintenance / repair event logged against a piece of equipment."""
    __tablename__ = "services"

    equipment_id = Column(String(36), ForeignKey("inventory_items.id", ondelete="SET NULL"), nullable=True, index=True)
    department = Column(enum_column(Department, "department"), nullable=False, index=True)
    service_type = Column(enum_column(ServiceType, "service_type"), nullable=False)
    nature_of_service = Column(enum_column(NatureOfService, "nature_of_service"), nullable=False)
    service_date = Column(Date, nullable=False)
    status = Column(enum_column(ServiceStatus, "service_status"), nullable=False, default=ServiceStatus.PENDING)
    technician_vendor_name = Column(String(200), nullable=False)
    cost = Column(Numeric(12, 2), nullable=True)
    remarks = Column(Text, nullable=True)
    bill_photo_url = Column(String(500), nullable=True)
    created_by = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    equipment = relationship("InventoryItem")

    @property
    def equipment_name(self):
        return self.equipment.name if self.equipment else None
