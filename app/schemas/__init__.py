from .auth import (
    SessionInfo, Token, Message, ForgotPasswordRequest, PasswordConfirmation, ResetPasswordRequest,
)
from .user import ProfileOut, UserWithRole, RoleUpdate
from .registration import SignUpRequest, RegistrationRequestOut, ApprovalResult
from .inventory import (
    InventoryItem, InventoryItemCreate, InventoryItemUpdate, CabinUpdate,
    BulkImportResult, ItemSummaryOut,
)
from .alert import Alert
from .service import Service, ServiceCreate, ServiceUpdate
from .dashboard import (
    DashboardStats, DepartmentTotal, DepartmentOverview, AdminStats, AdminDashboard,
)

__all__ = [
    "SessionInfo", "Token", "Message", "ForgotPasswordRequest", "PasswordConfirmation",
    "ResetPasswordRequest", "ProfileOut", "UserWithRole", "RoleUpdate", "SignUpRequest",
    "RegistrationRequestOut", "ApprovalResult", "InventoryItem", "InventoryItemCreate",
    "InventoryItemUpdate", "CabinUpdate", "BulkImportResult", "ItemSummaryOut", "Alert",
    "Service", "ServiceCreate", "ServiceUpdate", "DashboardStats", "DepartmentTotal",
    "DepartmentOverview", "AdminStats", "AdminDashboard",
]
