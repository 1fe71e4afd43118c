# backend/routes/distributors.py
from decimal import Decimal
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from database import get_db
from models.distributor import Distributor
from models.item import Item
from models.users import User
from schemas.common import ApiResponse, build_pagination
from schemas.distributor import (
    DistributorCreate, DistributorData, DistributorDetail, DistributorDetailData, DistributorItem,
    DistributorListData, DistributorListEntry, DistributorOut, DistributorUpdate,
)
from schemas.item import ItemListData
from services.soft_delete import DeleteOutcome, delete_or_deactivate
from utils.errors import NotFoundError
from utils.tokenJWT import get_current_user, require_manager, require_staff

router = APIRouter(prefix="/distributors", tags=["Distributors"])


def _get_distributor(db: Session, distributor_id: int) -> Distributor:
    distributor = db.query(Distributor).filter(Distributor.id == distributor_id).first()
    if not distributor:
        raise NotFoundError("Distributor not found")
    return distributor


# List active distributors with the number of active items they supply
@router.get("", response_model=ApiResponse[DistributorListData])
def list_distributors(
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort_by: Literal["name", "location", "created_at"] = "name",
    sort_order: Literal["asc", "desc"] = "asc",
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(Distributor).filter(Distributor.is_active.is_(True))
    if search:
        like = f"%{search}%"
        query = query.filter(or_(
            Distributor.name.ilike(like), Distributor.location.ilike(like), Distributor.contact_person.ilike(like),
        ))

    col = getattr(Distributor, sort_by)
    query = query.order_by(col.asc() if sort_order == "asc" else col.desc())

    total = query.count()
    rows = query.offset((page - 1) * limit).limit(limit).all()

    counts = {}
    if rows:
        counts = dict(
            db.query(Item.distributor_id, func.count(Item.id))
            .filter(Item.distributor_id.in_([d.id for d in rows]), Item.is_active.is_(True))
            .group_by(Item.distributor_id)
            .all()
        )

    distributors = [
        DistributorListEntry(**DistributorOut.model_validate(d).model_dump(), item_count=counts.get(d.id, 0))
        for d in rows
    ]
    return {"data": {"distributors": distributors, "pagination": build_pagination(page, limit, total)}}


# Distributor with its active items and their stock value
@router.get("/{distributor_id}", response_model=ApiResponse[DistributorDetailData])
def get_distributor(distributor_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    distributor = _get_distributor(db, distributor_id)
    items = (
        db.query(Item)
        .filter(Item.distributor_id == distributor.id, Item.is_active.is_(True))
        .order_by(Item.name.asc())
        .all()
    )

    detail = DistributorDetail(
        **DistributorOut.model_validate(distributor).model_dump(),
        items=[DistributorItem.model_validate(i) for i in items],
        item_count=len(items),
        total_value=float(sum((Decimal(i.stock) * (i.price or 0) for i in items), Decimal("0"))),
    )
    return {"data": {"distributor": detail}}


@router.post("", response_model=ApiResponse[DistributorData], status_code=status.HTTP_201_CREATED)
def create_distributor(
    payload: DistributorCreate, db: Session = Depends(get_db), current_user: User = Depends(require_staff),
):
    distributor = Distributor(**payload.model_dump())
    db.add(distributor)
    db.commit()
    db.refresh(distributor)
    return {"message": "Distributor created successfully", "data": {"distributor": distributor}}


@router.put("/{distributor_id}", response_model=ApiResponse[DistributorData])
def update_distributor(
    distributor_id: int,
    payload: DistributorUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
):
    distributor = _get_distributor(db, distributor_id)
    data = payload.model_dump(exclude_unset=True)
    if data.get("name", "") is None:
        data.pop("name")

    for field, value in data.items():
        setattr(distributor, field, value)
    db.commit()
    db.refresh(distributor)
    return {"message": "Distributor updated successfully", "data": {"distributor": distributor}}


# Delete distributor, or deactivate it when items still reference it
@router.delete("/{distributor_id}", response_model=ApiResponse[None])
def delete_distributor(distributor_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_manager)):
    distributor = _get_distributor(db, distributor_id)
    outcome = delete_or_deactivate(
        db, distributor,
        lambda: db.query(Item.id).filter(Item.distributor_id == distributor.id).first() is not None,
    )
    if outcome == DeleteOutcome.DEACTIVATED:
        return {"message": "Distributor deactivated successfully (has associated items)"}
    return {"message": "Distributor deleted successfully"}


@router.get("/{distributor_id}/items", response_model=ApiResponse[ItemListData])
def list_distributor_items(
    distributor_id: int,
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    distributor = _get_distributor(db, distributor_id)

    query = db.query(Item).options(joinedload(Item.distributor)).filter(
        Item.distributor_id == distributor.id, Item.is_active.is_(True),
    )
    if category:
        query = query.filter(Item.category.ilike(f"%{category}%"))
    if search:
        like = f"%{search}%"
        query = query.filter(or_(Item.name.ilike(like), Item.sku.ilike(like)))

    total = query.count()
    rows = query.order_by(Item.name.asc()).offset((page - 1) * limit).limit(limit).all()
    return {"data": {"items": rows, "pagination": build_pagination(page, limit, total)}}
