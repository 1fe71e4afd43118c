# backend/routes/warehouse.py
from datetime import datetime
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from database import get_db
from models.item import Item
from models.users import User
from models.warehouse_log import WarehouseLog, WarehouseLogStatus, WarehouseLogType
from schemas.common import ApiResponse, build_pagination
from schemas.warehouse import (
    WarehouseLogCreate, WarehouseLogData, WarehouseLogListData, WarehouseLogUpdate, WarehouseSummary,
)
from services import stock as stock_service
from utils.errors import NotFoundError
from utils.tokenJWT import get_current_user, require_manager, require_staff

router = APIRouter(prefix="/warehouse", tags=["Warehouse"])


def _date_range(query, start_date: Optional[datetime], end_date: Optional[datetime]):
    if start_date:
        query = query.filter(WarehouseLog.created_at >= start_date)
    if end_date:
        query = query.filter(WarehouseLog.created_at <= end_date)
    return query


def _key(value) -> str:
    return value.value if hasattr(value, "value") else str(value)


# List ledger entries with filters
@router.get("", response_model=ApiResponse[WarehouseLogListData])
def list_logs(
    type: Optional[WarehouseLogType] = Query(None),
    status_filter: Optional[WarehouseLogStatus] = Query(None, alias="status"),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort_by: Literal["created_at", "type", "status", "quantity"] = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = stock_service.warehouse_log_query(db)
    if type:
        query = query.filter(WarehouseLog.type == type)
    if status_filter:
        query = query.filter(WarehouseLog.status == status_filter)
    query = _date_range(query, start_date, end_date)

    col = getattr(WarehouseLog, sort_by)
    query = query.order_by(col.asc() if sort_order == "asc" else col.desc(), WarehouseLog.id.desc())

    total = query.count()
    rows = query.offset((page - 1) * limit).limit(limit).all()
    return {"data": {"logs": rows, "pagination": build_pagination(page, limit, total)}}


# Counts and quantities per type/status plus the latest entries
@router.get("/summary", response_model=ApiResponse[WarehouseSummary])
def get_summary(
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    type_counts = _date_range(
        db.query(WarehouseLog.type, func.count(WarehouseLog.id)), start_date, end_date,
    ).group_by(WarehouseLog.type).all()
    status_counts = _date_range(
        db.query(WarehouseLog.status, func.count(WarehouseLog.id)), start_date, end_date,
    ).group_by(WarehouseLog.status).all()
    quantity_by_type = _date_range(
        db.query(WarehouseLog.type, func.sum(WarehouseLog.quantity)), start_date, end_date,
    ).group_by(WarehouseLog.type).all()

    recent = _date_range(stock_service.warehouse_log_query(db), start_date, end_date).order_by(
        WarehouseLog.created_at.desc(), WarehouseLog.id.desc(),
    ).limit(10).all()

    return {"data": {
        "type_counts": {_key(t): int(c) for t, c in type_counts},
        "status_counts": {_key(s): int(c) for s, c in status_counts},
        "quantity_by_type": {_key(t): int(q or 0) for t, q in quantity_by_type},
        "recent_activity": recent,
    }}


# Ledger history for a single item
@router.get("/items/{item_id}", response_model=ApiResponse[WarehouseLogListData])
def list_item_logs(
    item_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if db.get(Item, item_id) is None:
        raise NotFoundError("Item not found")

    query = stock_service.warehouse_log_query(db).filter(WarehouseLog.item_id == item_id)
    total = query.count()
    rows = query.order_by(WarehouseLog.created_at.desc(), WarehouseLog.id.desc()).offset((page - 1) * limit).limit(limit).all()
    return {"data": {"logs": rows, "pagination": build_pagination(page, limit, total)}}


@router.get("/{log_id}", response_model=ApiResponse[WarehouseLogData])
def get_log(log_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return {"data": {"log": stock_service.get_warehouse_log(db, log_id)}}


# Append a ledger entry; adjustments also move the referenced item's stock
@router.post("", response_model=ApiResponse[WarehouseLogData], status_code=status.HTTP_201_CREATED)
def create_log(payload: WarehouseLogCreate, db: Session = Depends(get_db), current_user: User = Depends(require_staff)):
    log = stock_service.create_warehouse_log(db, payload, current_user)
    return {"message": "Warehouse log created successfully", "data": {"log": log}}


@router.put("/{log_id}", response_model=ApiResponse[WarehouseLogData])
def update_log(
    log_id: int,
    payload: WarehouseLogUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
):
    log = stock_service.update_warehouse_log(db, log_id, payload)
    return {"message": "Warehouse log updated successfully", "data": {"log": log}}


@router.delete("/{log_id}", response_model=ApiResponse[None])
def delete_log(log_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_manager)):
    stock_service.delete_warehouse_log(db, log_id)
    return {"message": "Warehouse log deleted successfully"}
