from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from models.order import OrderPriority, OrderStatus
from schemas.common import CustomerBrief, ItemBrief, ORMBase, Pagination, UserBrief


# Input schema for a single order line
class OrderLineCreate(BaseModel):
    item_id: str = Field(min_length=1)
    quantity: int = Field(ge=1)
    unit_price: Decimal = Field(ge=0, decimal_places=2)
    discount: Decimal = Field(default=Decimal("0"), ge=0, le=100, decimal_places=2)
    notes: Optional[str] = None


# Input schema for placing a new order
class OrderCreate(BaseModel):
    customer_id: int = Field(gt=0)
    priority: Optional[OrderPriority] = None
    required_date: Optional[datetime] = None
    notes: Optional[str] = None
    assigned_to: Optional[int] = Field(default=None, gt=0)
    items: List[OrderLineCreate] = Field(min_length=1)


# Fields that may be patched after placement
class OrderUpdate(BaseModel):
    status: Optional[OrderStatus] = None
    priority: Optional[OrderPriority] = None
    required_date: Optional[datetime] = None
    notes: Optional[str] = None
    assigned_to: Optional[int] = Field(default=None, gt=0)


# Schema for updating order status
class OrderStatusPatch(BaseModel):
    status: OrderStatus


# Output schema for an individual order line item
class OrderLineOut(ORMBase):
    id: int
    item_id: str
    quantity: int
    unit_price: float
    discount: float
    total_price: float
    notes: Optional[str] = None
    item: Optional[ItemBrief] = None


# Output schema representing the full order details
class OrderOut(ORMBase):
    id: int
    order_number: Optional[str] = None
    customer_id: int
    status: OrderStatus
    priority: OrderPriority
    total_amount: float
    discount_amount: float
    tax_amount: float
    final_amount: float
    order_date: Optional[datetime] = None
    required_date: Optional[datetime] = None
    shipped_date: Optional[datetime] = None
    delivered_date: Optional[datetime] = None
    created_by: int
    assigned_to: Optional[int] = None
    notes: Optional[str] = None
    customer: Optional[CustomerBrief] = None
    creator: Optional[UserBrief] = None
    assignee: Optional[UserBrief] = None
    items: List[OrderLineOut] = []


class OrderData(BaseModel):
    order: OrderOut


class OrderListData(BaseModel):
    orders: List[OrderOut]
    pagination: Pagination
