from .base import BaseModel
from .department import Department, CABIN_DEPARTMENTS
from .user import User
from .profile import Profile
from .user_roles import UserRole, AppRole
from .registration_request import RegistrationRequest, RequestStatus
from .inventory import InventoryItem
from .alert import Alert, AlertSeverity, AlertType
from .service import Service, ServiceType, NatureOfService, ServiceStatus
from .audit_log import AuditLog

__all__ = [
    "BaseModel", "Department", "CABIN_DEPARTMENTS", "User", "Profile", "UserRole", "AppRole",
    "RegistrationRequest", "RequestStatus", "InventoryItem", "Alert", "AlertSeverity", "AlertType",
    "Service", "ServiceType", "NatureOfService", "ServiceStatus", "AuditLog",
]
