from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field
from app.models.department import Department
from app.models.service import ServiceType, NatureOfService, ServiceStatus


class ServiceBase(BaseModel):
    equipment_id: Optional[str] = None
    department: Department
    service_type: ServiceType
    nature_of_service: NatureOfService
    service_date: date
    status: ServiceStatus = ServiceStatus.PENDING
    technician_vendor_name: str = Field(..., min_length=1, max_length=200)
    cost: Optional[Decimal] = Field(None, ge=0)
    remarks: Optional[str] = None


class ServiceCreate(ServiceBase):
    pass


class ServiceUpdate(BaseModel):
    equipment_id: Optional[str] = None
    department: Optional[Department] = None
    service_type: Optional[ServiceType] = None
    nature_of_service: Optional[NatureOfService] = None
    service_date: Optional[date] = None
    status: Optional[ServiceStatus] = None
    technician_vendor_name: Optional[str] = Field(None, min_length=1, max_length=200)
    cost: Optional[Decimal] = Field(None, ge=0)
    remarks: Optional[str] = None


class Service(ServiceBase):
    id: str
    bill_photo_url: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    equipment_name: Optional[str] = None

    class Config:
        from_attributes = True
