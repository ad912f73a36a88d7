"""Pytest fixtures for order_engine tests."""

import os

# przed importem order_engine - engine i celery czytaja env przy imporcie
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("CELERY_BROKER_URL", "memory://")
os.environ.setdefault("CELERY_RESULT_BACKEND", "cache+memory://")
os.environ.setdefault("ORDER_SEQUENCE_BACKEND", "database")

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy import create_engine, event, select
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from order_engine.data.database import Base
from order_engine.data import models  # noqa: F401
from order_engine.data.models.product import ProductModel
from order_engine.domain.errors import InvalidCouponError
from order_engine.domain.schemas import Address, CartLine, CartSnapshot, CouponResult
from order_engine.services.order_service import OrderService
from order_engine.services.pricing import PricingCalculator

FIXED_NOW = datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc)


class FakeCartProvider:
    def __init__(self):
        self.carts = {}
        self.cleared = []
        self.fail_on_clear = False

    def put(self, user_id, lines):
        self.carts[user_id] = CartSnapshot(
            items=lines,
            total_amount=sum((item.unit_price * item.quantity for item in lines), Decimal("0")),
        )

    def get_cart(self, user_id):
        return self.carts.get(user_id)

    def clear(self, user_id):
        if self.fail_on_clear:
            raise ConnectionError("cart-service down")
        self.cleared.append(user_id)
        self.carts.pop(user_id, None)


class FakeAddressProvider:
    def __init__(self):
        self.addresses = {}

    def add(self, user_id, address_id):
        self.addresses[(user_id, address_id)] = Address(
            id=address_id, user_id=user_id, full_name="Jan Kowalski", city="Krakow"
        )

    def find_for_user(self, user_id, address_id):
        return self.addresses.get((user_id, address_id))


class FakeCouponValidator:
    def __init__(self):
        self.coupons = {}
        self.calls = []
        self.usages = []
        self.fail_on_usage = False

    def add(self, code, discount, free_shipping=False):
        self.coupons[code] = CouponResult(
            discount_amount=Decimal(discount),
            is_free_shipping=free_shipping,
            coupon_id=f"coupon-{code}",
        )

    def apply(self, code, user_id, subtotal, items):
        self.calls.append((code, user_id, subtotal))
        if code not in self.coupons:
            raise InvalidCouponError(code, "nieznany kod")
        return self.coupons[code]

    def record_usage(self, coupon_id, user_id, order_id, discount_amount):
        if self.fail_on_usage:
            raise RuntimeError("coupon-service down")
        self.usages.append((coupon_id, user_id, order_id, discount_amount))


class FakeNotifier:
    def __init__(self):
        self.sent = []
        self.fail = False

    def notify_status_change(self, user_id, order_id, new_status):
        if self.fail:
            raise RuntimeError("push gateway down")
        self.sent.append((user_id, order_id, new_status))


def line(product_id, price, quantity, name=None):
    return CartLine(
        product_id=product_id,
        product_name=name or f"Product {product_id}",
        product_image=f"https://cdn.example.com/{product_id}.jpg",
        unit_price=Decimal(price),
        quantity=quantity,
    )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def file_engine(tmp_path):
    """Plik SQLite z BEGIN IMMEDIATE - transakcje z roznych watkow ida po kolei."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'orders.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )

    @event.listens_for(engine, "connect")
    def _connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def seed_stock(db):
    def _seed(**stock):
        for product_id, quantity in stock.items():
            db.add(ProductModel(id=product_id, name=f"Product {product_id}", stock_quantity=quantity))
        db.commit()

    return _seed


@pytest.fixture
def stock_of(db):
    def _stock(product_id):
        return db.execute(
            select(ProductModel.stock_quantity).where(ProductModel.id == product_id)
        ).scalar_one()

    return _stock


@pytest.fixture
def carts():
    return FakeCartProvider()


@pytest.fixture
def addresses():
    provider = FakeAddressProvider()
    provider.add("user-1", "addr-1")
    provider.add("user-2", "addr-2")
    return provider


@pytest.fixture
def coupons():
    return FakeCouponValidator()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def pricing():
    return PricingCalculator(
        tax_rate=Decimal("0.10"),
        free_delivery_threshold=Decimal("500"),
        delivery_charge=Decimal("50"),
    )


@pytest.fixture
def make_service(carts, addresses, coupons, notifier, pricing):
    def _make(session, **kwargs):
        kwargs.setdefault("clock", lambda: FIXED_NOW)
        return OrderService(
            db=session,
            cart_provider=carts,
            address_provider=addresses,
            notifier=notifier,
            coupon_validator=coupons,
            pricing=pricing,
            **kwargs,
        )

    return _make


@pytest.fixture
def service(db, make_service):
    return make_service(db)
