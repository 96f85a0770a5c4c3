from .user import user
from .profile import profile
from .user_roles import user_role
from .registration_request import registration_request
from .inventory import inventory_item
from .alert import alert
from .service import service
from .audit_log import audit_log

__all__ = [
    "user", "profile", "user_role", "registration_request", "inventory_item",
    "alert", "service", "audit_log",
]
