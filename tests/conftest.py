"""
Shared fixtures: in-memory SQLite database, FastAPI test client,
seeded users/store/products and mocks for the outbound channels.
"""
import os

# settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENV", "test")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-pytest-only")

from datetime import date
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import catering_api.models  # noqa: F401
from catering_api.database import get_session
from catering_api.main import app
from catering_api.models.order import Order
from catering_api.models.order_item import OrderItem
from catering_api.models.product import Product
from catering_api.models.store import Store
from catering_api.models.user import User
from catering_api.utils.hash import hash_password
from catering_api.utils.token import create_access_token


# ── Database ─────────────────────────────────────────────────────────


@pytest.fixture(name="session")
def session_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)

    with Session(engine) as session:
        yield session

    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(name="client")
def client_fixture(session: Session):
    def override_get_session():
        yield session

    app.dependency_overrides[get_session] = override_get_session

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


# ── Outbound channels ────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def outbound():
    """No SMS, alimtalk or push leaves the test process."""
    with patch("catering_api.services.aligo_client.send_sms", return_value=True) as sms, \
         patch("catering_api.services.aligo_client.send_alimtalk", return_value=True) as alimtalk, \
         patch(
             "catering_api.services.fcm_service.send_order_push",
             return_value={"success": True, "messageId": "msg-1"},
         ) as push, \
         patch(
             "catering_api.services.fcm_service.send_chat_push",
             return_value={"success": True, "messageId": "msg-2"},
         ) as chat_push:
        yield {"sms": sms, "alimtalk": alimtalk, "push": push, "chat_push": chat_push}


# ── Seed data ────────────────────────────────────────────────────────


def _user(session, *, email, name, role, phone=None, point=0):
    user = User(
        email=email,
        password=hash_password("secret123"),
        name=name,
        role=role,
        phone=phone,
        point=point,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def consumer(session):
    return _user(session, email="kim@example.com", name="김고객", role="consumer",
                 phone="01011112222", point=5000)


@pytest.fixture
def partner(session):
    return _user(session, email="shop@example.com", name="파트너", role="partner", phone="01033334444")


@pytest.fixture
def admin(session):
    return _user(session, email="admin@example.com", name="관리자", role="admin")


@pytest.fixture
def store(session, partner):
    store = Store(
        owner_id=partner.id,
        name="행복케이터링",
        phone="0212345678",
        city="서울",
        district="강남구",
        dong="역삼동",
        address_detail="1층",
        categories=["도시락", "디저트"],
    )
    session.add(store)
    session.commit()
    session.refresh(store)
    return store


@pytest.fixture
def product(session, store):
    product = Product(
        store_id=store.id,
        name="샌드위치 세트",
        price=12000,
        description="회의용 샌드위치",
        categories=["도시락"],
        event_tags=["회의·업무 행사"],
    )
    session.add(product)
    session.commit()
    session.refresh(product)
    return product


def make_order(session, *, user, store, status="pending", payment_status="paid", **fields):
    order = Order(
        order_number=fields.pop("order_number", "ABCD1234"),
        user_id=user.id,
        store_id=store.id,
        partner_id=store.owner_id,
        store_name=store.name,
        product_name="샌드위치 세트",
        phone=user.phone,
        total_product_price=fields.pop("total_product_price", 24000),
        total_quantity=2,
        total_price=fields.pop("total_price", 24000),
        status=status,
        payment_status=payment_status,
        delivery_date=fields.pop("delivery_date", date(2026, 11, 2)),
        delivery_time=fields.pop("delivery_time", "11:30"),
        **fields,
    )
    session.add(order)
    session.commit()
    session.refresh(order)

    session.add(OrderItem(order_id=order.id, product_name="샌드위치 세트", quantity=2, item_price=24000))
    session.commit()
    session.refresh(order)
    return order


@pytest.fixture
def order(session, consumer, store):
    return make_order(session, user=consumer, store=store)


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token({'user_id': user.id})}"}
