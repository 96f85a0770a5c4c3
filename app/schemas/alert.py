from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class Alert(BaseModel):
    id: str
    item_id: Optional[str] = None
    alert_type: str
    message: str
    severity: Optional[str] = None
    is_resolved: bool
    resolved_by: Optional[str] = None
    resolved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    # Joined from the referenced item, None once the item is deleted
    item_name: Optional[str] = None
    item_department: Optional[str] = None

    class Config:
        from_attributes = True
