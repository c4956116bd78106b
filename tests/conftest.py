import os

# przed importem order_service - engine tworzony przy imporcie
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ORDER_STATUS_POLICY", "permissive")

from contextlib import contextmanager
from decimal import Decimal

import pytest
from fastapi import Header
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import order_service.data.models  # noqa: F401
from order_service.api import create_app
from order_service.api import deps
from order_service.data.database import Base, get_db
from order_service.domain.errors import (
    CatalogUnavailable,
    InsufficientStock,
    ProductNotFound,
    Unauthorized,
)
from order_service.domain.status_policy import OrderStatusPolicy
from order_service.services import notification_service as notification_module
from order_service.services.notification_service import NotificationService
from order_service.services.product_client import ProductSnapshot


class FakeCatalog:
    """Katalog w pamieci z tym samym interfejsem co ProductClient."""

    def __init__(self, products=None):
        self.products = {pid: dict(p) for pid, p in (products or {}).items()}
        self.unavailable = set()
        self.fail_decrease = {}
        self.fail_increase = {}
        self.calls = []

    def get_product(self, product_id):
        if product_id in self.unavailable:
            raise CatalogUnavailable("Catalog unavailable: timeout")
        product = self.products.get(product_id)
        if product is None:
            raise ProductNotFound(product_id)
        return ProductSnapshot(
            id=product_id,
            name=product["name"],
            price=Decimal(str(product["price"])),
            stock=product["stock"],
            image=product.get("image"),
        )

    def adjust_stock(self, product_id, quantity, direction):
        self.calls.append((product_id, quantity, direction))
        failures = self.fail_decrease if direction == "decrease" else self.fail_increase
        if product_id in failures:
            raise failures[product_id]

        product = self.products.get(product_id)
        if product is None:
            raise ProductNotFound(product_id)
        if direction == "decrease":
            if product["stock"] < quantity:
                raise InsufficientStock(product_id, product_id=product_id)
            product["stock"] -= quantity
        else:
            product["stock"] += quantity
        return product["stock"]

    def stock(self, product_id):
        return self.products[product_id]["stock"]


class FakeLockService:
    def __init__(self):
        self.acquired = []

    @contextmanager
    def user_lock(self, user_id):
        self.acquired.append(user_id)
        yield


class DispatchRecorder:
    def __init__(self):
        self.sent = []
        self.error = None

    def __call__(self, *args):
        if self.error is not None:
            raise self.error
        self.sent.append(args)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def catalog():
    return FakeCatalog(
        {
            "p1": {"name": "Keyboard", "price": 10, "stock": 5, "image": "kb.png"},
            "p2": {"name": "Mouse", "price": "4.50", "stock": 10},
            "p3": {"name": "Monitor", "price": 200, "stock": 1},
        }
    )


@pytest.fixture
def lock_service():
    return FakeLockService()


@pytest.fixture
def dispatched(monkeypatch):
    recorder = DispatchRecorder()
    monkeypatch.setattr(notification_module.send_notification_task, "delay", recorder)
    return recorder


@pytest.fixture
def notifications(dispatched):
    return NotificationService()


@pytest.fixture
def status_policy():
    return OrderStatusPolicy("permissive")


def _user_from_header(authorization: str | None = None):
    # w testach token == user id
    if not authorization or not authorization.startswith("Bearer "):
        raise Unauthorized("Missing Authorization header")
    return authorization.split(" ", 1)[1]


@pytest.fixture
def app(session_factory, catalog, lock_service, notifications, status_policy):
    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    def override_current_user(authorization: str | None = Header(None)):
        return _user_from_header(authorization)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[deps.get_product_client] = lambda: catalog
    app.dependency_overrides[deps.get_lock_service] = lambda: lock_service
    app.dependency_overrides[deps.get_notification_service] = lambda: notifications
    app.dependency_overrides[deps.get_status_policy] = lambda: status_policy
    app.dependency_overrides[deps.get_current_user] = override_current_user
    return app


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def auth():
    def _auth(user_id="user-1"):
        return {"Authorization": f"Bearer {user_id}"}

    return _auth


@pytest.fixture
def shipping():
    return {
        "name": "Jan Kowalski",
        "street": "Marszalkowska 1",
        "city": "Warszawa",
        "state": "Mazowieckie",
        "zipCode": "00-001",
        "country": "PL",
    }
