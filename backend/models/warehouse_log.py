# backend/models/warehouse_log.py
import enum
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Enum, func
from sqlalchemy.orm import relationship
from database import Base


class WarehouseLogType(str, enum.Enum):
    RECEIVED = "received"
    SHIPPED = "shipped"
    DAMAGED = "damaged"
    SPOILED = "spoiled"
    MISSING = "missing"
    RETURNED = "returned"
    ADJUSTMENT = "adjustment"


class WarehouseLogStatus(str, enum.Enum):
    PENDING = "pending"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    RECEIVED = "received"
    MISSING = "missing"
    DAMAGED = "damaged"
    SPOILED = "spoiled"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


# Append-only ledger of stock-affecting events
class WarehouseLog(Base):
    __tablename__ = "warehouse_logs"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(Enum(WarehouseLogType, name="warehouse_log_type", values_callable=_enum_values), nullable=False, index=True)
    status = Column(
        Enum(WarehouseLogStatus, name="warehouse_log_status", values_callable=_enum_values),
        nullable=False, default=WarehouseLogStatus.PENDING, index=True,
    )

    # Signed delta for adjustments, non-negative for every other type
    quantity = Column(Integer, nullable=False)

    note = Column(Text, nullable=True)
    reference_number = Column(String(100), nullable=True)
    location = Column(String(100), nullable=True)

    order_id = Column(Integer, ForeignKey("orders.id"), nullable=True, index=True)
    item_id = Column(String(50), ForeignKey("items.id"), nullable=True, index=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    order = relationship("Order")
    item = relationship("Item")
    creator = relationship("User")
