from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

from models.order import OrderStatus
from schemas.common import ORMBase, Pagination


class CustomerBase(BaseModel):
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=20)
    address: Optional[str] = None
    contact_person: Optional[str] = Field(default=None, max_length=100)
    notes: Optional[str] = None


class CustomerCreate(CustomerBase):
    name: str = Field(min_length=1, max_length=100)


# Partial update; only fields present in the request are applied
class CustomerUpdate(CustomerBase):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)


class CustomerOut(ORMBase):
    id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    contact_person: Optional[str] = None
    notes: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None


class CustomerOrderSummary(ORMBase):
    id: int
    order_number: Optional[str] = None
    status: OrderStatus
    order_date: Optional[datetime] = None
    total_amount: float
    final_amount: float


# List entry with per-customer order statistics
class CustomerListEntry(CustomerOut):
    order_count: int
    last_order: Optional[datetime] = None
    total_spent: float


class CustomerDetail(CustomerOut):
    orders: List[CustomerOrderSummary]
    total_orders: int
    total_spent: float
    last_order: Optional[datetime] = None


class CustomerData(BaseModel):
    customer: CustomerOut


class CustomerDetailData(BaseModel):
    customer: CustomerDetail


class CustomerListData(BaseModel):
    customers: List[CustomerListEntry]
    pagination: Pagination
