"""Pytest configuration and fixtures."""

from collections.abc import Generator
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from config import Settings
from main import create_app
from models.customer import Customer
from models.distributor import Distributor
from models.item import Item
from models.users import Role, User
from utils.hashing import get_password_hash
from utils.tokenJWT import create_access_token

# Low bcrypt cost keeps the suite fast
TEST_ROUNDS = 4
TEST_PASSWORD = "secret123"


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at a private in-memory database."""
    return Settings(DATABASE_URL="sqlite://", SECRET_KEY="test-secret", LOG_LEVEL="WARNING")


@pytest.fixture
def app(settings):
    application = create_app(settings)
    yield application
    application.state.engine.dispose()


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    """Create sync test client."""
    with TestClient(app) as c:
        yield c


@pytest.fixture
def lenient_client(app) -> Generator[TestClient, None, None]:
    """Client that returns 500 envelopes instead of re-raising server errors."""
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture
def db(app):
    """Session bound to the same engine as the app, for arranging and asserting state."""
    session = app.state.session_factory()
    yield session
    session.close()


def _make_user(db, username: str, role: Role) -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        password_hash=get_password_hash(TEST_PASSWORD, rounds=TEST_ROUNDS),
        role=role.value,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def csr_user(db) -> User:
    return _make_user(db, "csr1", Role.CSR)


@pytest.fixture
def tl_user(db) -> User:
    return _make_user(db, "tl1", Role.TL)


@pytest.fixture
def accounting_user(db) -> User:
    return _make_user(db, "accounting1", Role.ACCOUNTING)


def _headers(settings: Settings, user: User) -> dict:
    token = create_access_token(settings, {"sub": user.username, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def csr_headers(settings, csr_user) -> dict:
    return _headers(settings, csr_user)


@pytest.fixture
def tl_headers(settings, tl_user) -> dict:
    return _headers(settings, tl_user)


@pytest.fixture
def accounting_headers(settings, accounting_user) -> dict:
    return _headers(settings, accounting_user)


@pytest.fixture
def customer(db) -> Customer:
    row = Customer(name="Acme Retail", email="buyer@acme.com", contact_person="Jordan Lee")
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@pytest.fixture
def distributor(db) -> Distributor:
    row = Distributor(name="Northwind Supply", contact_email="sales@northwind.com")
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@pytest.fixture
def make_item(db):
    """Factory for inventory items with a predictable id."""
    def _make(item_id: str = "item-001", stock: int = 10, price: str = "24.99", **kwargs) -> Item:
        row = Item(
            id=item_id,
            name=kwargs.pop("name", f"Item {item_id}"),
            category=kwargs.pop("category", "Beverages"),
            stock=stock,
            price=Decimal(price),
            **kwargs,
        )
        db.add(row)
        db.commit()
        db.refresh(row)
        return row
    return _make


@pytest.fixture
def item(make_item) -> Item:
    return make_item()
