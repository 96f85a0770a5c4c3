import json
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, validator
from app.models.department import Department


def parse_specifications(value: Any) -> Dict[str, Any]:
    """Accept a JSON object or its string form; anything else is rejected."""
    if value is None or value == "":
        return {}
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            raise ValueError("Invalid JSON format for specifications")
    if not isinstance(value, dict):
        raise ValueError("Invalid JSON format for specifications")
    return value


class InventoryItemBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    department: Department
    quantity: int = Field(0, ge=0)
    category: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    location: Optional[str] = None
    cabin_number: Optional[str] = None
    low_stock_threshold: Optional[int] = Field(5, ge=0)
    status: Optional[str] = "available"
    specifications: Dict[str, Any] = {}
    unit_price: Optional[Decimal] = Field(None, ge=0)
    image_url: Optional[str] = None

    @validator("specifications", pre=True)
    def specifications_object(cls, v):
        return parse_specifications(v)


class InventoryItemCreate(InventoryItemBase):
    pass


class InventoryItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    department: Optional[Department] = None
    quantity: Optional[int] = Field(None, ge=0)
    category: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    location: Optional[str] = None
    cabin_number: Optional[str] = None
    low_stock_threshold: Optional[int] = Field(None, ge=0)
    status: Optional[str] = None
    specifications: Optional[Dict[str, Any]] = None
    unit_price: Optional[Decimal] = Field(None, ge=0)
    image_url: Optional[str] = None

    @validator("specifications", pre=True)
    def specifications_object(cls, v):
        if v is None:
            return v
        return parse_specifications(v)


class CabinUpdate(BaseModel):
    cabin_number: Optional[str] = None


class InventoryItem(InventoryItemBase):
    id: str
    specifications: Optional[Dict[str, Any]] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BulkImportResult(BaseModel):
    imported: int
    skipped: int = 0
    items: List[InventoryItem] = []


class ItemSummaryOut(BaseModel):
    department: str
    name: str
    total_quantity: int
    low_stock_threshold: int
    status: str
    item_count: int
    items: List[InventoryItem] = []
