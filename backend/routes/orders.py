# backend/routes/orders.py
from datetime import datetime
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from database import get_db
from models.customer import Customer
from models.order import Order, OrderStatus
from models.users import User
from schemas.common import ApiResponse, build_pagination
from schemas.order import OrderCreate, OrderData, OrderListData, OrderStatusPatch, OrderUpdate
from services import orders as order_service
from utils.tokenJWT import get_current_user, require_staff

router = APIRouter(prefix="/orders", tags=["Orders"])


# List orders with filtering, sorting and pagination
@router.get("", response_model=ApiResponse[OrderListData])
def list_orders(
    status_filter: Optional[OrderStatus] = Query(None, alias="status"),
    customer_id: Optional[int] = Query(None, gt=0),
    search: Optional[str] = Query(None, description="Customer name or email"),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort_by: Literal["order_date", "status", "total_amount", "created_at"] = "order_date",
    sort_order: Literal["asc", "desc"] = "desc",
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = order_service.order_query(db)

    if status_filter:
        query = query.filter(Order.status == status_filter)
    if customer_id:
        query = query.filter(Order.customer_id == customer_id)
    if start_date:
        query = query.filter(Order.order_date >= start_date)
    if end_date:
        query = query.filter(Order.order_date <= end_date)
    if search:
        like = f"%{search}%"
        query = query.filter(Order.customer.has(or_(Customer.name.ilike(like), Customer.email.ilike(like))))

    col = getattr(Order, sort_by)
    query = query.order_by(col.asc() if sort_order == "asc" else col.desc(), Order.id.desc())

    total = query.count()
    rows = query.offset((page - 1) * limit).limit(limit).all()
    return {"data": {"orders": rows, "pagination": build_pagination(page, limit, total)}}


@router.get("/{order_id}", response_model=ApiResponse[OrderData])
def get_order(order_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return {"data": {"order": order_service.get_order(db, order_id)}}


# Place a new order with its lines
@router.post("", response_model=ApiResponse[OrderData], status_code=status.HTTP_201_CREATED)
def create_order(payload: OrderCreate, db: Session = Depends(get_db), current_user: User = Depends(require_staff)):
    order = order_service.place_order(db, payload, current_user)
    return {"message": "Order created successfully", "data": {"order": order}}


@router.put("/{order_id}", response_model=ApiResponse[OrderData])
def update_order(
    order_id: int,
    payload: OrderUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
):
    order = order_service.update_order(db, order_id, payload)
    return {"message": "Order updated successfully", "data": {"order": order}}


@router.put("/{order_id}/status", response_model=ApiResponse[OrderData])
def update_order_status(
    order_id: int,
    payload: OrderStatusPatch,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
):
    order = order_service.set_order_status(db, order_id, payload.status)
    return {"message": "Order status updated successfully", "data": {"order": order}}


# Cancel order; orders are never physically deleted
@router.delete("/{order_id}", response_model=ApiResponse[None])
def cancel_order(order_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_staff)):
    order_service.cancel_order(db, order_id)
    return {"message": "Order cancelled successfully"}
