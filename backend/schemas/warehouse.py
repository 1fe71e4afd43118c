# backend/schemas/warehouse.py
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from models.order import OrderStatus
from models.warehouse_log import WarehouseLogStatus, WarehouseLogType
from schemas.common import ItemBrief, ORMBase, Pagination, UserBrief


# Schema for appending a ledger entry
class WarehouseLogCreate(BaseModel):
    type: WarehouseLogType
    status: WarehouseLogStatus = WarehouseLogStatus.PENDING
    quantity: int
    note: Optional[str] = None
    reference_number: Optional[str] = Field(default=None, max_length=100)
    location: Optional[str] = Field(default=None, max_length=100)
    order_id: Optional[int] = Field(default=None, gt=0)
    item_id: Optional[str] = None

    @field_validator("quantity")
    @classmethod
    def _signed_only_for_adjustment(cls, v: int, info: ValidationInfo) -> int:
        # Only adjustments carry a signed delta
        if v < 0 and info.data.get("type") != WarehouseLogType.ADJUSTMENT:
            raise ValueError("quantity must be greater than or equal to 0 unless type is adjustment")
        return v


# Administrative correction of an existing entry; never touches item stock
class WarehouseLogUpdate(BaseModel):
    type: Optional[WarehouseLogType] = None
    status: Optional[WarehouseLogStatus] = None
    quantity: Optional[int] = None
    note: Optional[str] = None
    reference_number: Optional[str] = Field(default=None, max_length=100)
    location: Optional[str] = Field(default=None, max_length=100)
    order_id: Optional[int] = Field(default=None, gt=0)
    item_id: Optional[str] = None


class OrderRef(ORMBase):
    id: int
    order_number: Optional[str] = None
    status: OrderStatus


class WarehouseLogOut(ORMBase):
    id: int
    type: WarehouseLogType
    status: WarehouseLogStatus
    quantity: int
    note: Optional[str] = None
    reference_number: Optional[str] = None
    location: Optional[str] = None
    order_id: Optional[int] = None
    item_id: Optional[str] = None
    created_by: int
    created_at: Optional[datetime] = None
    order: Optional[OrderRef] = None
    item: Optional[ItemBrief] = None
    creator: Optional[UserBrief] = None


class WarehouseLogData(BaseModel):
    log: WarehouseLogOut


class WarehouseLogListData(BaseModel):
    logs: List[WarehouseLogOut]
    pagination: Pagination


# Aggregated view over the ledger
class WarehouseSummary(BaseModel):
    type_counts: Dict[str, int]
    status_counts: Dict[str, int]
    quantity_by_type: Dict[str, int]
    recent_activity: List[WarehouseLogOut]
