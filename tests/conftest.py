"""Shared fixtures: in-memory SQLite store and fake collaborators, no redis/stripe/smtp needed."""
import os
import threading
from datetime import datetime, timedelta, timezone
from decimal import Decimal

# set env BEFORE any storefront imports
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_KEY", "test-key")

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.api import create_app
from storefront.api.deps import (
    get_identity_verifier,
    get_lock_service,
    get_notification_service,
    get_payment_gateway,
)
from storefront.data.database import Base, get_db
from storefront.data.models import (
    CartItemModel,
    CustomerModel,
    ProductModel,
    ShippingModel,
    TaxModel,
)
from storefront.services.identity import IdentityVerifier
from storefront.services.payment_gateway import FakeGateway

JWT_TEST_KEY = "test-key"


# ---------- fakes ----------

class InMemoryLockService:
    """Same contract as LockService, backed by a dict."""

    def __init__(self):
        self._locks: dict[str, str] = {}
        self._mutex = threading.Lock()

    def acquire(self, key: str, owner: str, ttl: int) -> bool:
        with self._mutex:
            if key in self._locks:
                return False
            self._locks[key] = owner
            return True

    def release(self, key: str, owner: str) -> bool:
        with self._mutex:
            if self._locks.get(key) != owner:
                return False
            del self._locks[key]
            return True

    def is_locked(self, key: str) -> bool:
        return key in self._locks


class RecordingNotifications:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: list[tuple] = []

    def send_payment_receipt(self, email: str, name: str, order_id: int):
        if self.fail:
            raise ConnectionError("broker unreachable")
        self.sent.append((email, name, order_id))


# ---------- store ----------

@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def catalog(db):
    """Customers, products and reference rows used across tests."""
    db.add_all(
        [
            CustomerModel(customer_id=1, name="Ada Obi", email="ada@example.com"),
            CustomerModel(customer_id=2, name="Sam Lee", email="sam@example.com"),
            ProductModel(product_id=1, name="Arc d'Triomphe", price=Decimal("10.00"), discounted_price=Decimal("0.00")),
            ProductModel(product_id=2, name="Chartres Cathedral", price=Decimal("16.95"), discounted_price=Decimal("5.00")),
            ProductModel(product_id=3, name="Coat of Arms", price=Decimal("14.50"), discounted_price=Decimal("0.00")),
            ShippingModel(shipping_id=1, shipping_type="Next Day Delivery", shipping_cost=Decimal("3.00")),
            ShippingModel(shipping_id=2, shipping_type="Free", shipping_cost=Decimal("0.00")),
            TaxModel(tax_id=1, tax_type="Sales Tax at 10%", tax_percentage=Decimal("10.00")),
            TaxModel(tax_id=2, tax_type="No Tax", tax_percentage=Decimal("0.00")),
        ]
    )
    db.commit()
    return db


@pytest.fixture
def add_line(db):
    def _add(cart_id: str, product_id: int, quantity: int, attributes: str = "") -> CartItemModel:
        item = CartItemModel(cart_id=cart_id, product_id=product_id, quantity=quantity, attributes=attributes)
        db.add(item)
        db.commit()
        db.refresh(item)
        return item

    return _add


@pytest.fixture
def sample_cart(catalog, add_line):
    """qty 1 @ 10.00 and qty 2 @ discounted 5.00"""
    add_line("cart_sample", 1, 1, "blue")
    add_line("cart_sample", 2, 2, "large")
    return "cart_sample"


# ---------- collaborators ----------

@pytest.fixture
def lock_service():
    return InMemoryLockService()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def notifications():
    return RecordingNotifications()


# ---------- http ----------

def make_token(customer_id: int = 1, name: str = "Ada Obi", email: str = "ada@example.com", expires_in: int = 3600) -> str:
    claims = {
        "customer_id": customer_id,
        "name": name,
        "email": email,
        "exp": datetime.now(timezone.utc) + timedelta(seconds=expires_in),
    }
    return jwt.encode(claims, JWT_TEST_KEY, algorithm="HS256")


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def client(session_factory, lock_service, gateway, notifications):
    app = create_app()

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_lock_service] = lambda: lock_service
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_notification_service] = lambda: notifications
    app.dependency_overrides[get_identity_verifier] = lambda: IdentityVerifier(key=JWT_TEST_KEY, algorithm="HS256")

    with TestClient(app) as c:
        yield c


@pytest.fixture
def token_for():
    def _headers(customer_id: int = 1, **kwargs) -> dict:
        return {"Authorization": f"Bearer {make_token(customer_id, **kwargs)}"}

    return _headers
