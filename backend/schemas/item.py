# backend/schemas/item.py
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from schemas.common import DistributorBrief, ORMBase, Pagination


# Shared editable attributes for inventory items
class ItemBase(BaseModel):
    description: Optional[str] = None
    cost: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    sku: Optional[str] = Field(default=None, max_length=50)
    barcode: Optional[str] = Field(default=None, max_length=50)
    min_stock_level: Optional[int] = Field(default=None, ge=0)
    max_stock_level: Optional[int] = Field(default=None, ge=0)
    distributor_id: Optional[int] = Field(default=None, gt=0)
    notes: Optional[str] = None


# Schema for creating a new item; the opening stock is set here, later changes go through the ledger
class ItemCreate(ItemBase):
    id: Optional[str] = Field(default=None, min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=200)
    category: str = Field(min_length=1, max_length=50)
    stock: int = Field(default=0, ge=0)
    price: Decimal = Field(ge=0, decimal_places=2)


# Schema for partial item updates; stock is changed only via PUT /inventory/{id}/stock
class ItemUpdate(ItemBase):
    """Schema for PUT requests - all fields optional."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    category: Optional[str] = Field(default=None, min_length=1, max_length=50)
    price: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    is_active: Optional[bool] = None


class ItemOut(ORMBase):
    id: str
    name: str
    category: str
    description: Optional[str] = None
    stock: int
    price: float
    cost: Optional[float] = None
    sku: Optional[str] = None
    barcode: Optional[str] = None
    min_stock_level: int
    max_stock_level: Optional[int] = None
    is_active: bool
    distributor_id: Optional[int] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    distributor: Optional[DistributorBrief] = None


class ItemData(BaseModel):
    item: ItemOut


class ItemListData(BaseModel):
    items: List[ItemOut]
    pagination: Pagination


class CategoryListData(BaseModel):
    categories: List[str]


# Direct stock set request
class StockUpdate(BaseModel):
    stock: int = Field(ge=0, strict=True)
    note: Optional[str] = None


class StockUpdateResult(BaseModel):
    id: str
    name: str
    stock: int
    old_stock: int


class StockUpdateData(BaseModel):
    item: StockUpdateResult
