# tests/conftest.py
import os

# Settings are read at import time; point them at throwaway values first.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["JWT_ALG"] = "HS256"

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from storefront.core.notifications import NotificationHub
from storefront.database import get_session
from storefront.main import create_app
from storefront.models.product import Product
from storefront.models.user import User

SHIPPING_ADDRESS = {
    "street": "1 Main St",
    "city": "Springfield",
    "state": "IL",
    "zip_code": "62701",
    "country": "US",
}


class RecordingHub(NotificationHub):
    """Real hub that also keeps every publish call for assertions."""

    def __init__(self):
        super().__init__()
        self.published: list[tuple[str, str, dict]] = []

    def publish(self, room, event, data):
        self.published.append((room, event, data))
        return super().publish(room, event, data)


@pytest.fixture
def session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def app(session):
    app = create_app()
    app.state.notifier = RecordingHub()

    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def hub(app) -> RecordingHub:
    return app.state.notifier


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def make_token():
    def _make(user_id, email, **extra_claims):
        claims = {
            "sub": str(user_id),
            "email": email,
            "exp": datetime.now(timezone.utc) + timedelta(hours=1),
            **extra_claims,
        }
        return jwt.encode(claims, "test-secret", algorithm="HS256")

    return _make


@pytest.fixture
def make_user(session):
    def _make(role="user", email=None, is_active=True):
        user_id = uuid.uuid4()
        user = User(
            id=user_id,
            email=email or f"{user_id.hex[:8]}@example.com",
            name="Test User",
            role=role,
            is_active=is_active,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make


@pytest.fixture
def auth_headers(make_token):
    def _headers(user):
        return {"Authorization": f"Bearer {make_token(user.id, user.email)}"}

    return _headers


@pytest.fixture
def customer(make_user):
    return make_user()


@pytest.fixture
def admin(make_user):
    return make_user(role="admin")


@pytest.fixture
def make_product(session):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        data = {
            "name": f"Wireless Mouse {counter['n']}",
            "slug": f"wireless-mouse-{counter['n']}",
            "description": "A reliable wireless mouse",
            "price": 25.0,
            "category": "electronics",
            "brand": "Logi",
            "images": [{"url": "https://img.example.com/mouse.png", "alt": "mouse"}],
            "inventory_quantity": 10,
        }
        data.update(overrides)
        product = Product(**data)
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _make


@pytest.fixture
def add_to_cart(client, auth_headers):
    def _add(user, product, quantity=1, options=None):
        resp = client.post(
            "/api/cart",
            json={
                "product_id": str(product.id),
                "quantity": quantity,
                "options": options or {},
            },
            headers=auth_headers(user),
        )
        assert resp.status_code == 200, resp.text
        return resp.json()["data"]

    return _add


@pytest.fixture
def place_order(client, auth_headers, add_to_cart):
    def _place(user, product, quantity=1):
        add_to_cart(user, product, quantity)
        resp = client.post(
            "/api/orders",
            json={"shipping_address": SHIPPING_ADDRESS, "payment_method": "credit_card"},
            headers=auth_headers(user),
        )
        assert resp.status_code == 201, resp.text
        return resp.json()["data"]

    return _place


@pytest.fixture
def shipping_address():
    return dict(SHIPPING_ADDRESS)
