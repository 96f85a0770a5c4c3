# File: app/models/inventory.py
import threading
import time
from sqlalchemy import BigInteger, Column, Integer, String, Numeric, ForeignKey, JSON, CheckConstraint
from app.models.base import BaseModel
from app.models.department import Department, enum_column

_sequence_lock = threading.Lock()
_last_sequence = 0


def next_creation_seq() -> int:
    """Nanosecond stamp, strictly increasing within the process."""
    global _last_sequence
    with _sequence_lock:
        _last_sequence = max(time.time_ns(), _last_sequence + 1)
        return _last_sequence


class InventoryItem(BaseModel):
    __tablename__ = "inventory_items"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_inventory_items_quantity_non_negative"),
        CheckConstraint("low_stock_threshold >= 0", name="ck_inventory_items_threshold_non_negative"),
    )

    name = Column(String(255), nullable=False, index=True)
    category = Column(String(100), nullable=True)
    model = Column(String(255), nullable=True)
    serial_number = Column(String(255), nullable=True)
    quantity = Column(Integer, nullable=False, default=0)
    department = Column(enum_column(Department, "department"), nullable=False, index=True)
    location = Column(String(255), nullable=True)
    cabin_number = Column(String(50), nullable=True)
    low_stock_threshold = Column(Integer, nullable=True, default=5)
    status = Column(String(50), nullable=True, default="available")
    specifications = Column(JSON, nullable=True, default=dict)
    unit_price = Column(Numeric(12, 2), nullable=True)
    image_url = Column(String(500), nullable=True)
    created_by = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    # Creation order; created_at ties for rows written in one transaction
    creation_seq = Column(BigInteger, nullable=False, default=next_creation_seq, index=True)
