import logging
import random
from decimal import Decimal

from config import get_settings
from database import build_engine, create_session_factory, init_db
from models.customer import Customer
from models.distributor import Distributor
from models.item import Item
from models.order import OrderPriority, OrderStatus
from models.users import Role, User
from models.warehouse_log import WarehouseLogStatus, WarehouseLogType
from schemas.order import OrderCreate, OrderLineCreate
from schemas.warehouse import WarehouseLogCreate
from services.orders import place_order, set_order_status
from services.stock import create_warehouse_log
from utils.hashing import get_password_hash

logger = logging.getLogger(__name__)

# Configuration
ORDER_COUNT = 25
RANDOM_SEED = 42

USERS = [
    ("admin", "admin123", Role.ADMIN, "System", "Admin"),
    ("csr1", "password123", Role.CSR, "Casey", "Service"),
    ("tl1", "password123", Role.TL, "Taylor", "Lead"),
    ("accounting1", "password123", Role.ACCOUNTING, "Alex", "Books"),
]

DISTRIBUTORS = [
    {"name": "Northwind Supply", "contact_email": "sales@northwind.example", "location": "Chicago"},
    {"name": "Blue Ridge Wholesale", "contact_email": "orders@blueridge.example", "location": "Denver"},
    {"name": "Harbor Foods", "contact_email": "hello@harborfoods.example", "location": "Seattle"},
]

CUSTOMERS = [
    {"name": "Acme Retail", "email": "buyer@acme.example", "contact_person": "Jordan Lee"},
    {"name": "Corner Market", "email": "owner@cornermarket.example", "contact_person": "Sam Patel"},
    {"name": "Green Grocer", "email": "info@greengrocer.example", "contact_person": "Robin Diaz"},
    {"name": "City Cafe", "email": "manager@citycafe.example", "contact_person": "Morgan Kim"},
]

# (name, category, price, stock, distributor index)
ITEMS = [
    ("Arabica Coffee 1kg", "Beverages", "24.99", 120, 0),
    ("Green Tea 100 bags", "Beverages", "8.50", 300, 0),
    ("Olive Oil 1L", "Pantry", "12.75", 80, 1),
    ("Basmati Rice 5kg", "Pantry", "15.40", 60, 1),
    ("Sea Salt 500g", "Pantry", "2.10", 400, 1),
    ("Smoked Salmon 200g", "Seafood", "9.95", 40, 2),
    ("Tuna Can 160g", "Seafood", "1.85", 500, 2),
    ("Paper Cups x50", "Supplies", "4.60", 5, None),
]


def seed_users(session):
    users = {}
    for username, password, role, first_name, last_name in USERS:
        user = session.query(User).filter(User.username == username).first()
        if not user:
            user = User(
                username=username,
                email=f"{username}@inventory.example",
                password_hash=get_password_hash(password),
                first_name=first_name,
                last_name=last_name,
                role=role.value,
            )
            session.add(user)
        users[username] = user
    session.commit()
    return users


def seed_reference_data(session):
    distributors = [Distributor(**data) for data in DISTRIBUTORS]
    customers = [Customer(**data) for data in CUSTOMERS]
    session.add_all(distributors + customers)
    session.flush()

    items = []
    for index, (name, category, price, stock, dist_index) in enumerate(ITEMS, start=1):
        items.append(Item(
            id=f"item-{index:03d}",
            name=name,
            category=category,
            price=Decimal(price),
            cost=(Decimal(price) * Decimal("0.7")).quantize(Decimal("0.01")),
            stock=stock,
            sku=f"SKU-{index:04d}",
            distributor_id=distributors[dist_index].id if dist_index is not None else None,
        ))
    session.add_all(items)
    session.commit()
    return customers, items


def seed_orders(session, users, customers, items):
    rng = random.Random(RANDOM_SEED)
    placed = []
    for _ in range(ORDER_COUNT):
        picks = rng.sample(items, k=rng.randint(1, 4))
        payload = OrderCreate(
            customer_id=rng.choice(customers).id,
            priority=rng.choice(list(OrderPriority)),
            assigned_to=users["tl1"].id,
            items=[
                OrderLineCreate(
                    item_id=item.id,
                    quantity=rng.randint(1, 10),
                    unit_price=item.price,
                    discount=Decimal(rng.choice([0, 0, 5, 10, 15])),
                )
                for item in picks
            ],
        )
        placed.append(place_order(session, payload, users["csr1"]))

    # Move some orders along the pipeline
    for order in placed[: ORDER_COUNT // 3]:
        status = rng.choice([OrderStatus.CONFIRMED, OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.DELIVERED])
        set_order_status(session, order.id, status)
    return placed


def seed_warehouse_logs(session, users, items, orders):
    staff = users["tl1"]
    for item in items[:4]:
        create_warehouse_log(session, WarehouseLogCreate(
            type=WarehouseLogType.RECEIVED,
            status=WarehouseLogStatus.RECEIVED,
            quantity=50,
            item_id=item.id,
            reference_number=f"PO-{item.id}",
            location="A1-01",
        ), staff)

    create_warehouse_log(session, WarehouseLogCreate(
        type=WarehouseLogType.DAMAGED,
        status=WarehouseLogStatus.DAMAGED,
        quantity=3,
        item_id=items[5].id,
        note="Broken cold chain on delivery",
    ), staff)
    create_warehouse_log(session, WarehouseLogCreate(
        type=WarehouseLogType.SHIPPED,
        status=WarehouseLogStatus.SHIPPED,
        quantity=1,
        order_id=orders[0].id,
        note="Dispatched with courier",
    ), staff)
    create_warehouse_log(session, WarehouseLogCreate(
        type=WarehouseLogType.ADJUSTMENT,
        status=WarehouseLogStatus.RECEIVED,
        quantity=-2,
        item_id=items[6].id,
        note="Cycle count correction",
    ), staff)


def load_all_data():
    """Seeds users, customers, distributors, items, orders and ledger entries."""
    settings = get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")

    engine = build_engine(settings.DATABASE_URL)
    init_db(engine)
    session = create_session_factory(engine)()

    try:
        users = seed_users(session)
        if session.query(Item).first() is not None:
            logger.info("Inventory already populated, only users were checked")
            return

        customers, items = seed_reference_data(session)
        orders = seed_orders(session, users, customers, items)
        seed_warehouse_logs(session, users, items, orders)
        logger.info(
            "Seeded %d users, %d customers, %d items, %d orders",
            len(users), len(customers), len(items), len(orders),
        )
    finally:
        session.close()
        engine.dispose()


if __name__ == "__main__":
    load_all_data()
