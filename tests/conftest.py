import os

# settings are read at import time, so the environment has to be in place first
os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-for-jwt"
os.environ["PAYMENTS_PROVIDER"] = "mock"
os.environ["PAYMENTS_CURRENCY"] = "INR"
os.environ["RAZORPAY_KEY_ID"] = "rzp_test_key_id"
os.environ["RAZORPAY_KEY_SECRET"] = "rzp_test_key_secret"

from datetime import datetime
from typing import Callable, Dict, Tuple

import pytest
from fastapi.testclient import TestClient

from orderdesk import models
from orderdesk.core.security import create_access_token
from orderdesk.db.base import Base
from orderdesk.db.session import SessionLocal, engine
from orderdesk.main import app

TEST_KEY_ID = os.environ["RAZORPAY_KEY_ID"]
TEST_KEY_SECRET = os.environ["RAZORPAY_KEY_SECRET"]


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db) -> Callable[..., Tuple[models.User, Dict[str, str]]]:
    """create a user and return it with ready-to-use auth headers."""
    counter = {"n": 0}

    def _make(role: str = "user", name: str | None = None):
        counter["n"] += 1
        n = counter["n"]
        user = models.User(name=name or f"User {n}", email=f"user{n}@example.com", role=role)
        db.add(user)
        db.commit()
        db.refresh(user)
        token = create_access_token(str(user.id), role=role)
        return user, {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture
def make_order(db):
    def _make(user: models.User, total: float = 100.0, created_at: datetime | None = None, **overrides):
        order = models.Order(
            user_id=user.id,
            shipping_address={
                "full_name": user.name,
                "address": "12 MG Road",
                "city": "Kochi",
                "postal_code": "682001",
                "country": "India",
            },
            payment_method="Razorpay",
            items_price=total,
            shipping_price=0,
            tax_price=0,
            total_price=total,
            is_paid=False,
            is_delivered=False,
            **overrides,
        )
        if created_at is not None:
            order.created_at = created_at
        order.items.append(models.OrderItem(name="Slim Shirt", quantity=1, price=total))
        db.add(order)
        db.commit()
        db.refresh(order)
        return order

    return _make
