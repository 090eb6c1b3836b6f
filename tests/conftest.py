"""Pytest fixtures for foodorder tests."""

import os

# Must be set before foodorder.core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from foodorder.core.config import settings
from foodorder.core.database import SessionLocal, create_tables, drop_tables
from foodorder.core.sessions import session_store
from foodorder.main import app
from foodorder.models.order import OrderCreate, OrderItem
from foodorder.repositories.order_repository import SqlAlchemyOrderRepository
from foodorder.services.lifecycle import OrderLifecycle


PIZZA_ORDER = {
    "items": [{"name": "Pizza", "quantity": 2, "price": 380}],
    "total": 836,
    "deliveryAddress": "12 MG Road, Bengaluru",
    "paymentMethod": "cash",
    "customerName": "Asha Rao",
    "customerPhone": "+91 90000 00001",
}


@pytest.fixture
def db_session():
    """A session on a freshly created schema."""
    create_tables()
    db = SessionLocal()
    yield db
    db.close()
    drop_tables()
    session_store.clear()


@pytest.fixture
def repo(db_session):
    return SqlAlchemyOrderRepository(db_session)


@pytest.fixture
def lifecycle(repo):
    return OrderLifecycle(repo)


@pytest.fixture
def order_input():
    return OrderCreate(**PIZZA_ORDER)


@pytest.fixture
def client():
    """Test client; entering it runs startup, which creates tables and seeds the admin."""
    with TestClient(app) as test_client:
        yield test_client
    drop_tables()
    session_store.clear()


def register(client, email, first_name="Test", password="secret123"):
    response = client.post(
        "/api/auth/register",
        json={
            "email": email,
            "first_name": first_name,
            "last_name": "User",
            "phone": "+91 90000 00000",
            "password": password,
        },
    )
    assert response.status_code == 200, response.text
    return {settings.SESSION_HEADER: response.headers[settings.SESSION_HEADER]}


@pytest.fixture
def customer_headers(client):
    return register(client, "asha@example.com", "Asha")


@pytest.fixture
def other_customer_headers(client):
    return register(client, "ravi@example.com", "Ravi")


@pytest.fixture
def admin_headers(client):
    response = client.post(
        "/api/auth/login",
        json={"email": settings.ADMIN_EMAIL, "password": settings.ADMIN_PASSWORD},
    )
    assert response.status_code == 200, response.text
    return {settings.SESSION_HEADER: response.json()["session_id"]}


@pytest.fixture
def placed_order(client, customer_headers):
    response = client.post("/api/orders", json=PIZZA_ORDER, headers=customer_headers)
    assert response.status_code == 201, response.text
    return response.json()


def make_items(*entries):
    return [OrderItem(name=name, quantity=qty, price=price) for name, qty, price in entries]


def order_values(created_at=None, **overrides):
    """Raw repository values for an order."""
    created_at = created_at or datetime.now()
    values = {
        "user_id": None,
        "items": make_items(("Pizza", 2, 380)),
        "total": 836,
        "status": "confirmed",
        "delivery_address": "12 MG Road",
        "payment_method": "cash",
        "customer_name": "Asha",
        "customer_phone": "900",
        "estimated_delivery_time": 35,
        "created_at": created_at,
        "updated_at": created_at,
    }
    values.update(overrides)
    return values
