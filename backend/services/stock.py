"""
Stock ledger.

Every stock change made here is written in the same transaction as the
WarehouseLog entry that explains it.
"""
import logging
from typing import Optional, Tuple

from sqlalchemy import case
from sqlalchemy.orm import Session, joinedload

from models.item import Item
from models.order import Order
from models.users import User
from models.warehouse_log import WarehouseLog, WarehouseLogStatus, WarehouseLogType
from schemas.warehouse import WarehouseLogCreate, WarehouseLogUpdate
from utils.errors import InputValidationError, NotFoundError

logger = logging.getLogger(__name__)


def warehouse_log_query(db: Session):
    return db.query(WarehouseLog).options(
        joinedload(WarehouseLog.order),
        joinedload(WarehouseLog.item),
        joinedload(WarehouseLog.creator),
    )


def get_warehouse_log(db: Session, log_id: int) -> WarehouseLog:
    log = warehouse_log_query(db).populate_existing().filter(WarehouseLog.id == log_id).first()
    if not log:
        raise NotFoundError("Warehouse log not found")
    return log


def apply_stock_delta(db: Session, item_id: str, delta: int):
    """stock = max(0, stock + delta) as one UPDATE, so concurrent adjustments cannot lose an update."""
    new_stock = Item.stock + delta
    db.query(Item).filter(Item.id == item_id).update(
        {Item.stock: case((new_stock < 0, 0), else_=new_stock)},
        synchronize_session=False,
    )


def set_item_stock(db: Session, item_id: str, stock: int, note: Optional[str], current_user: User) -> Tuple[Item, int]:
    """
    Set an item's stock to an exact value and record the signed difference as an
    adjustment entry. Returns the item and its previous stock.
    """
    if isinstance(stock, bool) or not isinstance(stock, int) or stock < 0:
        raise InputValidationError("Stock must be a non-negative number")

    try:
        # Row lock so the old value used for the delta cannot change underneath us
        item = db.query(Item).filter(Item.id == item_id).with_for_update().first()
        if not item:
            raise NotFoundError("Item not found")

        old_stock = item.stock
        item.stock = stock
        db.add(WarehouseLog(
            type=WarehouseLogType.ADJUSTMENT,
            status=WarehouseLogStatus.RECEIVED,
            quantity=stock - old_stock,
            note=note or f"Stock adjusted from {old_stock} to {stock}",
            item_id=item.id,
            created_by=current_user.id,
        ))
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(item)
    logger.info("Stock for item %s set %s -> %s by user %s", item_id, old_stock, stock, current_user.id)
    return item, old_stock


def _check_references(db: Session, item_id: Optional[str], order_id: Optional[int]):
    if item_id is not None and db.get(Item, item_id) is None:
        raise NotFoundError("Item not found")
    if order_id is not None and db.get(Order, order_id) is None:
        raise NotFoundError("Order not found")


def create_warehouse_log(db: Session, payload: WarehouseLogCreate, current_user: User) -> WarehouseLog:
    """
    Append a ledger entry. An adjustment that references an item also moves that
    item's stock by the entry's quantity, floored at zero; the entry keeps the
    requested quantity even when the floor applies.
    """
    _check_references(db, payload.item_id, payload.order_id)

    try:
        log = WarehouseLog(**payload.model_dump(), created_by=current_user.id)
        db.add(log)
        db.flush()

        if log.type == WarehouseLogType.ADJUSTMENT and log.item_id is not None:
            apply_stock_delta(db, log.item_id, log.quantity)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        "Warehouse log %s (%s, qty %s, item %s) created by user %s",
        log.id, log.type.value, log.quantity, log.item_id, current_user.id,
    )
    return get_warehouse_log(db, log.id)


def update_warehouse_log(db: Session, log_id: int, payload: WarehouseLogUpdate) -> WarehouseLog:
    """Administrative correction of an entry. Item stock is left as it is."""
    log = db.get(WarehouseLog, log_id)
    if not log:
        raise NotFoundError("Warehouse log not found")

    data = payload.model_dump(exclude_unset=True)
    for field in ("type", "status", "quantity"):
        if data.get(field, "") is None:
            data.pop(field)
    _check_references(db, data.get("item_id"), data.get("order_id"))

    new_type = data.get("type", log.type)
    new_quantity = data.get("quantity", log.quantity)
    if new_quantity < 0 and new_type != WarehouseLogType.ADJUSTMENT:
        raise InputValidationError(
            "Validation error",
            errors=[{"field": "quantity", "message": "quantity must be greater than or equal to 0 unless type is adjustment"}],
        )

    for field, value in data.items():
        setattr(log, field, value)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Warehouse log %s updated: %s", log_id, sorted(data))
    return get_warehouse_log(db, log_id)


def delete_warehouse_log(db: Session, log_id: int):
    log = db.get(WarehouseLog, log_id)
    if not log:
        raise NotFoundError("Warehouse log not found")
    try:
        db.delete(log)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Warehouse log %s deleted", log_id)
