# backend/models/item.py
import time
import uuid

from sqlalchemy import Column, Integer, String, Text, Numeric, Boolean, DateTime, ForeignKey, CheckConstraint, func
from sqlalchemy.orm import relationship
from database import Base


def generate_item_id() -> str:
    return f"sku-{int(time.time() * 1000)}{uuid.uuid4().hex[:4]}"


# Model Item
# A stocked inventory item. Stock is only changed through the warehouse ledger
# (services/stock.py) so every adjustment is paired with a WarehouseLog entry.
class Item(Base):
    __tablename__ = "items"
    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_items_stock_non_negative"),
        CheckConstraint("price >= 0", name="ck_items_price_non_negative"),
        CheckConstraint("min_stock_level >= 0", name="ck_items_min_stock_non_negative"),
    )

    id = Column(String(50), primary_key=True, default=generate_item_id)
    name = Column(String(200), nullable=False, index=True)
    category = Column(String(50), nullable=False, index=True)
    description = Column(Text, nullable=True)

    stock = Column(Integer, nullable=False, default=0)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    cost = Column(Numeric(10, 2), nullable=True)

    sku = Column(String(50), unique=True, nullable=True)
    barcode = Column(String(50), unique=True, nullable=True)

    min_stock_level = Column(Integer, nullable=False, default=10)
    max_stock_level = Column(Integer, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    distributor_id = Column(Integer, ForeignKey("distributors.id"), nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    distributor = relationship("Distributor", back_populates="items")
    order_items = relationship("OrderItem", back_populates="item")
