import logging
from datetime import datetime, timezone
from typing import Dict, List

from sqlalchemy.orm import Session, joinedload, selectinload

from models.customer import Customer
from models.item import Item
from models.order import Order, OrderItem, OrderPriority, OrderStatus
from models.users import User
from schemas.order import OrderCreate, OrderLineCreate, OrderUpdate
from services import pricing
from utils.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)

# Statuses after which an order can no longer be cancelled
NON_CANCELLABLE = {OrderStatus.SHIPPED, OrderStatus.DELIVERED}


def format_order_number(order_id: int) -> str:
    return f"ORD-{order_id:06d}"


def order_query(db: Session):
    """Order query with customer, users and lines (with their items) eagerly loaded."""
    return db.query(Order).options(
        joinedload(Order.customer),
        joinedload(Order.creator),
        joinedload(Order.assignee),
        selectinload(Order.items).joinedload(OrderItem.item),
    )


def get_order(db: Session, order_id: int) -> Order:
    order = order_query(db).populate_existing().filter(Order.id == order_id).first()
    if not order:
        raise NotFoundError("Order not found")
    return order


def _get_order_row(db: Session, order_id: int) -> Order:
    order = db.query(Order).filter(Order.id == order_id).first()
    if not order:
        raise NotFoundError("Order not found")
    return order


def _resolve_assignee(db: Session, user_id: int) -> User:
    assignee = db.get(User, user_id)
    if not assignee:
        raise NotFoundError("Assigned user not found")
    return assignee


def _resolve_items(db: Session, lines: List[OrderLineCreate]) -> Dict[str, Item]:
    # Fail on the first missing item, in request order
    resolved: Dict[str, Item] = {}
    for line in lines:
        if line.item_id in resolved:
            continue
        item = db.get(Item, line.item_id)
        if not item:
            raise NotFoundError(f"Item with ID {line.item_id} not found")
        resolved[line.item_id] = item
    return resolved


def _apply_status(order: Order, status: OrderStatus):
    order.status = status
    now = datetime.now(timezone.utc)
    if status == OrderStatus.SHIPPED:
        order.shipped_date = now
    elif status == OrderStatus.DELIVERED:
        order.delivered_date = now


def place_order(db: Session, payload: OrderCreate, current_user: User) -> Order:
    """
    Validate references, price the request and persist the header plus one line
    per requested item in a single transaction.

    Every reference is resolved before the first write, and the header and lines
    are committed together, so a failure leaves no partial order behind.
    """
    customer = db.get(Customer, payload.customer_id)
    if not customer:
        raise NotFoundError("Customer not found")

    if payload.assigned_to is not None:
        _resolve_assignee(db, payload.assigned_to)

    _resolve_items(db, payload.items)

    totals = pricing.price_order(payload.items)

    try:
        order = Order(
            customer_id=customer.id,
            status=OrderStatus.PENDING,
            priority=payload.priority or OrderPriority.MEDIUM,
            required_date=payload.required_date,
            notes=payload.notes,
            assigned_to=payload.assigned_to,
            total_amount=totals.total_amount,
            discount_amount=totals.discount_amount,
            tax_amount=totals.tax_amount,
            final_amount=totals.final_amount,
            created_by=current_user.id,
        )
        db.add(order)
        db.flush()
        order.order_number = format_order_number(order.id)

        for line in payload.items:
            db.add(OrderItem(
                order_id=order.id,
                item_id=line.item_id,
                quantity=line.quantity,
                unit_price=line.unit_price,
                discount=line.discount,
                total_price=pricing.line_total(line.quantity, line.unit_price, line.discount),
                notes=line.notes,
            ))
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        "Order %s placed by user %s: %d lines, final amount %s",
        order.id, current_user.id, len(payload.items), totals.final_amount,
    )
    return get_order(db, order.id)


def update_order(db: Session, order_id: int, payload: OrderUpdate) -> Order:
    order = _get_order_row(db, order_id)
    data = payload.model_dump(exclude_unset=True)

    if data.get("assigned_to") is not None:
        _resolve_assignee(db, data["assigned_to"])

    status = data.pop("status", None)
    # Non-nullable columns are only changed when a value is given
    if data.get("priority", "") is None:
        data.pop("priority")

    for field, value in data.items():
        setattr(order, field, value)
    if status is not None:
        _apply_status(order, status)

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Order %s updated: %s", order_id, sorted(payload.model_dump(exclude_unset=True)))
    return get_order(db, order_id)


def set_order_status(db: Session, order_id: int, status: OrderStatus) -> Order:
    order = _get_order_row(db, order_id)
    old_status = order.status
    _apply_status(order, status)

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Order %s status %s -> %s", order_id, old_status.value, status.value)
    return get_order(db, order_id)


def cancel_order(db: Session, order_id: int) -> Order:
    order = _get_order_row(db, order_id)
    if order.status in NON_CANCELLABLE:
        raise ConflictError("Cannot cancel order that has been shipped or delivered")

    order.status = OrderStatus.CANCELLED
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Order %s cancelled", order_id)
    return order
