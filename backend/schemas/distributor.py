from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

from schemas.common import ORMBase, Pagination


class DistributorBase(BaseModel):
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = Field(default=None, max_length=20)
    contact_person: Optional[str] = Field(default=None, max_length=100)
    location: Optional[str] = Field(default=None, max_length=200)
    address: Optional[str] = None
    notes: Optional[str] = None


class DistributorCreate(DistributorBase):
    name: str = Field(min_length=1, max_length=100)


class DistributorUpdate(DistributorBase):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)


class DistributorOut(ORMBase):
    id: int
    name: str
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_person: Optional[str] = None
    location: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None


class DistributorListEntry(DistributorOut):
    item_count: int


class DistributorData(BaseModel):
    distributor: DistributorOut


class DistributorListData(BaseModel):
    distributors: List[DistributorListEntry]
    pagination: Pagination


# Active item as listed on the distributor detail view
class DistributorItem(ORMBase):
    id: str
    name: str
    category: str
    stock: int
    price: float
    sku: Optional[str] = None


class DistributorDetail(DistributorOut):
    items: List[DistributorItem]
    item_count: int
    # Sum of stock * price over the active items
    total_value: float


class DistributorDetailData(BaseModel):
    distributor: DistributorDetail
