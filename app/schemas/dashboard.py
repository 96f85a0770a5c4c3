from pydantic import BaseModel
from typing import Dict, List
from app.schemas.alert import Alert
from app.schemas.inventory import InventoryItem


class DashboardStats(BaseModel):
    total_items: int
    low_stock_items: int
    departments: int
    active_alerts: int


class DepartmentTotal(BaseModel):
    department: str
    quantity: int


class DepartmentOverview(BaseModel):
    department: str
    total_quantity: int
    low_stock_count: int
    cabin_tracked: bool


class AdminStats(BaseModel):
    total_users: int
    pending_requests: int
    total_items: int
    active_alerts: int
    low_stock_items: int


class AdminDashboard(BaseModel):
    stats: AdminStats
    department_item_counts: Dict[str, int]
    recent_activity: List[Alert]
    items: List[InventoryItem]
    page: int
    per_page: int
    total: int
    total_pages: int
