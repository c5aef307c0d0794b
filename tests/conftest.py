"""Pytest fixtures for wholesale checkout tests."""

import os

# przed importem wholesale: silnik bazy tworzony jest przy imporcie modulu
os.environ.setdefault("DATABASE_URL", "sqlite://")

from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import wholesale.data.models  # noqa: F401
from wholesale.celery_worker import celery_app
from wholesale.data.database import Base
from wholesale.data.models.category import CategoryModel
from wholesale.data.models.product import ProductModel
from wholesale.domain.models import Product, ShopSettings, UserIdentity
from wholesale.errors import AuthError
from wholesale.repos.shipping_address_repo import ShippingAddressRepo
from wholesale.services import notification_service
from wholesale.services.cart_service import CartService
from wholesale.services.category_moq import CategoryMOQResolver
from wholesale.services.checkout_service import CheckoutService
from wholesale.services.notification_service import NotificationService
from wholesale.services.order_service import OrderService
from wholesale.services.pricing_service import PricingService
from wholesale.services.shipping_service import ShippingCalculator
from wholesale.stores.cart_store import CartStore, CheckoutStore

celery_app.conf.task_always_eager = True


class FakeRedis:
    """Minimal in-memory stand-in for the redis commands the stores use."""

    def __init__(self):
        self.data = {}
        self.expiry = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value, ex=None):
        self.data[key] = value
        self.expiry[key] = ex
        return True

    def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
            self.expiry.pop(key, None)
        return removed


class RecordingEmailClient:
    """Collects outgoing emails instead of calling the email API."""

    def __init__(self):
        self.sent = []
        self.fail_for = set()

    def send(self, to, subject, html, text=None, sender=None):
        if any(addr in self.fail_for for addr in to):
            return False
        self.sent.append({"to": list(to), "subject": subject, "html": html, "text": text})
        return True


class FakeAuthClient:
    def __init__(self, users):
        self.users = users

    def resolve(self, token):
        if token not in self.users:
            raise AuthError("Invalid or expired session")
        return self.users[token]


CUSTOMER = UserIdentity(id="user-1", email="buyer@gymco.com.au", name="Gym Co", roles=[])
OTHER_CUSTOMER = UserIdentity(id="user-2", email="other@example.com", name="Other Pty Ltd", roles=[])
ADMIN = UserIdentity(id="admin-1", email="admin@ppprotein.com.au", name="Admin", roles=["admin"])

TOKENS = {
    "customer-token": CUSTOMER,
    "other-token": OTHER_CUSTOMER,
    "admin-token": ADMIN,
}


@pytest.fixture
def db_session():
    """SQLite in-memory database shared by all connections of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def catalog(db_session):
    """Two categories and a handful of products."""
    protein = CategoryModel(id=1, name="Protein Powder")
    accessories = CategoryModel(id=2, name="Accessories")
    db_session.add_all([protein, accessories])
    db_session.add_all(
        [
            ProductModel(
                id="wpi-1kg", name="Whey Protein Isolate 1kg", price=Decimal("45.00"),
                stock=100, category_id=1, min_quantity=1, weight=Decimal("1.0"),
            ),
            ProductModel(
                id="pea-1kg", name="Pea Protein 1kg", price=Decimal("40.00"),
                stock=100, category_id=1, min_quantity=6, weight=Decimal("1.0"),
            ),
            ProductModel(
                id="shaker", name="Shaker Bottle", price=Decimal("8.50"),
                stock=200, category_id=2, min_quantity=1, weight=Decimal("0.2"),
            ),
        ]
    )
    db_session.commit()
    return db_session


@pytest.fixture
def redis_client():
    return FakeRedis()


@pytest.fixture
def email_client(monkeypatch):
    client = RecordingEmailClient()
    monkeypatch.setattr(notification_service, "email_client", client)
    return client


@pytest.fixture
def shop_settings():
    return ShopSettings(
        email={"admin_email": "sales@ppprotein.com.au", "notify_admin": True, "notify_customer": True}
    )


@pytest.fixture
def whey():
    return Product(
        id="wpi-1kg", name="Whey Protein Isolate 1kg", price=Decimal("45.00"),
        category={"id": "1", "name": "Protein Powder"}, min_quantity=1, weight=Decimal("1.0"),
    )


@pytest.fixture
def pea():
    return Product(
        id="pea-1kg", name="Pea Protein 1kg", price=Decimal("40.00"),
        category={"id": "1", "name": "Protein Powder"}, min_quantity=6, weight=Decimal("1.0"),
    )


@pytest.fixture
def shaker():
    return Product(
        id="shaker", name="Shaker Bottle", price=Decimal("8.50"),
        category={"id": "2", "name": "Accessories"}, min_quantity=1, weight=Decimal("0.2"),
    )


@pytest.fixture
def cart_service(redis_client, shop_settings):
    return CartService(store=CartStore(redis_client), moq=CategoryMOQResolver(shop_settings))


@pytest.fixture
def checkout_service(catalog, redis_client, shop_settings, cart_service, email_client):
    return CheckoutService(
        cart=cart_service,
        store=CheckoutStore(redis_client),
        addresses=ShippingAddressRepo(catalog),
        shipping=ShippingCalculator(shop_settings),
        pricing=PricingService(catalog),
        orders=OrderService(catalog),
        notifications=NotificationService(shop_settings.email),
    )


@pytest.fixture
def api_client(catalog, redis_client, email_client):
    """TestClient wired to the in-memory database, fake redis and fake auth."""
    from fastapi.testclient import TestClient

    from wholesale.api import deps
    from wholesale.data.database import get_db
    from wholesale.main import app

    def override_get_db():
        yield catalog

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[deps.get_redis] = lambda: redis_client
    app.dependency_overrides[deps.get_auth_client] = lambda: FakeAuthClient(TOKENS)

    client = TestClient(app)
    client.headers.update({"X-Session-Id": "session-test-0001"})
    try:
        yield client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def customer():
    return CUSTOMER


@pytest.fixture
def other_customer():
    return OTHER_CUSTOMER


@pytest.fixture
def admin_user():
    return ADMIN


@pytest.fixture
def customer_headers():
    return {"Authorization": "Bearer customer-token"}


@pytest.fixture
def admin_headers():
    return {"Authorization": "Bearer admin-token"}
