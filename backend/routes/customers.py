# backend/routes/customers.py
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from database import get_db
from models.customer import Customer
from models.order import Order, OrderStatus
from models.users import User
from schemas.common import ApiResponse, build_pagination
from schemas.customer import (
    CustomerCreate, CustomerData, CustomerDetail, CustomerDetailData, CustomerOrderSummary,
    CustomerListData, CustomerListEntry, CustomerOut, CustomerUpdate,
)
from schemas.order import OrderListData
from services.orders import order_query
from services.soft_delete import DeleteOutcome, delete_or_deactivate
from utils.errors import ConflictError, NotFoundError
from utils.tokenJWT import get_current_user, require_manager, require_staff

router = APIRouter(prefix="/customers", tags=["Customers"])


def _get_customer(db: Session, customer_id: int) -> Customer:
    customer = db.query(Customer).filter(Customer.id == customer_id).first()
    if not customer:
        raise NotFoundError("Customer not found")
    return customer


def _ensure_unique_email(db: Session, email: Optional[str], exclude_id: Optional[int] = None):
    if not email:
        return
    query = db.query(Customer).filter(func.lower(Customer.email) == email.lower())
    if exclude_id is not None:
        query = query.filter(Customer.id != exclude_id)
    if query.first():
        raise ConflictError("Customer with this email already exists")


# List active customers with order statistics
@router.get("", response_model=ApiResponse[CustomerListData])
def list_customers(
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort_by: Literal["name", "created_at", "updated_at"] = "name",
    sort_order: Literal["asc", "desc"] = "asc",
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(Customer).filter(Customer.is_active.is_(True))
    if search:
        like = f"%{search}%"
        query = query.filter(or_(
            Customer.name.ilike(like), Customer.email.ilike(like), Customer.contact_person.ilike(like),
        ))

    col = getattr(Customer, sort_by)
    query = query.order_by(col.asc() if sort_order == "asc" else col.desc())

    total = query.count()
    rows = query.offset((page - 1) * limit).limit(limit).all()

    # Order statistics for the customers on this page
    stats = {}
    if rows:
        stats = {
            customer_id: (count, last_order, spent)
            for customer_id, count, last_order, spent in db.query(
                Order.customer_id, func.count(Order.id), func.max(Order.order_date), func.sum(Order.total_amount),
            ).filter(Order.customer_id.in_([c.id for c in rows])).group_by(Order.customer_id).all()
        }

    customers = []
    for c in rows:
        count, last_order, spent = stats.get(c.id, (0, None, 0))
        data = CustomerOut.model_validate(c).model_dump()
        customers.append(CustomerListEntry(**data, order_count=count, last_order=last_order, total_spent=float(spent or 0)))

    return {"data": {"customers": customers, "pagination": build_pagination(page, limit, total)}}


@router.get("/{customer_id}", response_model=ApiResponse[CustomerDetailData])
def get_customer(customer_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    customer = _get_customer(db, customer_id)
    orders = db.query(Order).filter(Order.customer_id == customer.id).order_by(Order.order_date.desc(), Order.id.desc()).all()

    detail = CustomerDetail(
        **CustomerOut.model_validate(customer).model_dump(),
        orders=[CustomerOrderSummary.model_validate(o) for o in orders],
        total_orders=len(orders),
        total_spent=float(sum(o.final_amount or 0 for o in orders)),
        last_order=orders[0].order_date if orders else None,
    )
    return {"data": {"customer": detail}}


@router.post("", response_model=ApiResponse[CustomerData], status_code=status.HTTP_201_CREATED)
def create_customer(payload: CustomerCreate, db: Session = Depends(get_db), current_user: User = Depends(require_staff)):
    _ensure_unique_email(db, payload.email)

    customer = Customer(**payload.model_dump())
    db.add(customer)
    db.commit()
    db.refresh(customer)
    return {"message": "Customer created successfully", "data": {"customer": customer}}


@router.put("/{customer_id}", response_model=ApiResponse[CustomerData])
def update_customer(
    customer_id: int,
    payload: CustomerUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
):
    customer = _get_customer(db, customer_id)
    data = payload.model_dump(exclude_unset=True)
    if data.get("name", "") is None:
        data.pop("name")
    if data.get("email") and data["email"] != customer.email:
        _ensure_unique_email(db, data["email"], exclude_id=customer.id)

    for field, value in data.items():
        setattr(customer, field, value)
    db.commit()
    db.refresh(customer)
    return {"message": "Customer updated successfully", "data": {"customer": customer}}


# Delete customer, or deactivate it when it already has orders
@router.delete("/{customer_id}", response_model=ApiResponse[None])
def delete_customer(customer_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_manager)):
    customer = _get_customer(db, customer_id)
    outcome = delete_or_deactivate(
        db, customer,
        lambda: db.query(Order.id).filter(Order.customer_id == customer.id).first() is not None,
    )
    if outcome == DeleteOutcome.DEACTIVATED:
        return {"message": "Customer deactivated successfully (has existing orders)"}
    return {"message": "Customer deleted successfully"}


@router.get("/{customer_id}/orders", response_model=ApiResponse[OrderListData])
def list_customer_orders(
    customer_id: int,
    status_filter: Optional[OrderStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    customer = _get_customer(db, customer_id)

    query = order_query(db).filter(Order.customer_id == customer.id)
    if status_filter:
        query = query.filter(Order.status == status_filter)

    total = query.count()
    rows = query.order_by(Order.order_date.desc(), Order.id.desc()).offset((page - 1) * limit).limit(limit).all()
    return {"data": {"orders": rows, "pagination": build_pagination(page, limit, total)}}
