# backend/routes/inventory.py
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from database import get_db
from models.distributor import Distributor
from models.item import Item, generate_item_id
from models.order import OrderItem
from models.users import User
from models.warehouse_log import WarehouseLog
from schemas.common import ApiResponse, build_pagination
from schemas.item import (
    CategoryListData, ItemCreate, ItemData, ItemListData, ItemUpdate,
    StockUpdate, StockUpdateData,
)
from services.soft_delete import DeleteOutcome, delete_or_deactivate
from services.stock import set_item_stock
from utils.errors import ConflictError, NotFoundError
from utils.tokenJWT import get_current_user, require_manager, require_staff

router = APIRouter(prefix="/inventory", tags=["Inventory"])


# ---- HELPERS ----
def _get_item(db: Session, item_id: str) -> Item:
    item = db.query(Item).options(joinedload(Item.distributor)).filter(Item.id == item_id).first()
    if not item:
        raise NotFoundError("Item not found")
    return item


def _ensure_unique_codes(db: Session, sku: Optional[str], barcode: Optional[str], exclude_id: Optional[str] = None):
    clauses = []
    if sku:
        clauses.append(Item.sku == sku)
    if barcode:
        clauses.append(Item.barcode == barcode)
    if not clauses:
        return
    query = db.query(Item.id).filter(or_(*clauses))
    if exclude_id is not None:
        query = query.filter(Item.id != exclude_id)
    if query.first():
        raise ConflictError("Item with this SKU or barcode already exists")


def _ensure_distributor(db: Session, distributor_id: Optional[int]):
    if distributor_id is not None and db.get(Distributor, distributor_id) is None:
        raise NotFoundError("Distributor not found")


# =========================
# LIST
# =========================
@router.get("", response_model=ApiResponse[ItemListData])
def list_items(
    search: Optional[str] = Query(None, description="Name, category, SKU or barcode"),
    category: Optional[str] = Query(None),
    supplier: Optional[str] = Query(None, description="Distributor name"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort_by: Literal["name", "category", "stock", "price", "created_at"] = "name",
    sort_order: Literal["asc", "desc"] = "asc",
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(Item).options(joinedload(Item.distributor))

    if search:
        like = f"%{search}%"
        query = query.filter(or_(
            Item.name.ilike(like), Item.category.ilike(like), Item.sku.ilike(like), Item.barcode.ilike(like),
        ))
    if category:
        query = query.filter(Item.category.ilike(f"%{category}%"))
    if supplier:
        query = query.join(Item.distributor).filter(Distributor.name.ilike(f"%{supplier}%"))

    col = getattr(Item, sort_by)
    query = query.order_by(col.asc() if sort_order == "asc" else col.desc())

    total = query.count()
    rows: List[Item] = query.offset((page - 1) * limit).limit(limit).all()
    return {"data": {"items": rows, "pagination": build_pagination(page, limit, total)}}


@router.get("/categories", response_model=ApiResponse[CategoryListData])
def list_categories(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    rows = db.query(Item.category).distinct().order_by(Item.category.asc()).all()
    return {"data": {"categories": [r[0] for r in rows]}}


# =========================
# SINGLE ITEM
# =========================
@router.get("/{item_id}", response_model=ApiResponse[ItemData])
def get_item(item_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return {"data": {"item": _get_item(db, item_id)}}


@router.post("", response_model=ApiResponse[ItemData], status_code=status.HTTP_201_CREATED)
def create_item(payload: ItemCreate, db: Session = Depends(get_db), current_user: User = Depends(require_staff)):
    _ensure_unique_codes(db, payload.sku, payload.barcode)
    _ensure_distributor(db, payload.distributor_id)

    data = payload.model_dump(exclude_none=True)
    if "id" in data and db.get(Item, data["id"]) is not None:
        raise ConflictError("Item with this ID already exists")
    data.setdefault("id", generate_item_id())

    item = Item(**data)
    db.add(item)
    db.commit()
    return {"message": "Item created successfully", "data": {"item": _get_item(db, item.id)}}


@router.put("/{item_id}", response_model=ApiResponse[ItemData])
def update_item(
    item_id: str,
    payload: ItemUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
):
    item = _get_item(db, item_id)
    data = payload.model_dump(exclude_unset=True)
    for field in ("name", "category", "price", "min_stock_level", "is_active"):
        if data.get(field, "") is None:
            data.pop(field)

    _ensure_unique_codes(db, data.get("sku"), data.get("barcode"), exclude_id=item.id)
    _ensure_distributor(db, data.get("distributor_id"))

    for field, value in data.items():
        setattr(item, field, value)
    db.commit()
    return {"message": "Item updated successfully", "data": {"item": _get_item(db, item_id)}}


# Delete item, or deactivate it when orders or ledger entries reference it
@router.delete("/{item_id}", response_model=ApiResponse[None])
def delete_item(item_id: str, db: Session = Depends(get_db), current_user: User = Depends(require_manager)):
    item = _get_item(db, item_id)

    def _has_dependents() -> bool:
        if db.query(OrderItem.id).filter(OrderItem.item_id == item.id).first() is not None:
            return True
        return db.query(WarehouseLog.id).filter(WarehouseLog.item_id == item.id).first() is not None

    outcome = delete_or_deactivate(db, item, _has_dependents)
    if outcome == DeleteOutcome.DEACTIVATED:
        return {"message": "Item deactivated successfully (has existing orders or warehouse history)"}
    return {"message": "Item deleted successfully"}


# =========================
# STOCK
# =========================
@router.put("/{item_id}/stock", response_model=ApiResponse[StockUpdateData])
def update_stock(
    item_id: str,
    payload: StockUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
):
    item, old_stock = set_item_stock(db, item_id, payload.stock, payload.note, current_user)
    return {
        "message": "Stock updated successfully",
        "data": {"item": {"id": item.id, "name": item.name, "stock": item.stock, "old_stock": old_stock}},
    }
