# backend/schemas/common.py
import math
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Uniform response envelope used by every endpoint
class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None


class ErrorItem(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    errors: Optional[List[ErrorItem]] = None


class Pagination(BaseModel):
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int


def build_pagination(page: int, limit: int, total: int) -> Pagination:
    return Pagination(
        current_page=page,
        total_pages=math.ceil(total / limit) if limit else 0,
        total_items=total,
        items_per_page=limit,
    )


# Compact references embedded in other resources
class UserBrief(ORMBase):
    id: int
    username: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class CustomerBrief(ORMBase):
    id: int
    name: str
    email: Optional[str] = None


class ItemBrief(ORMBase):
    id: str
    name: str
    category: str
    sku: Optional[str] = None


class DistributorBrief(ORMBase):
    id: int
    name: str
    location: Optional[str] = None
