import os
import uuid

# Settings are read once at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine, select

from app.core.security import create_access_token
from app.database import get_session
from app.main import app
from app.models.product import ProductVariant
from app.models.user import Role, User
from app.routers import auth as auth_routes
from tests.utils import API, auth_headers


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def outbox(monkeypatch):
    """OTP codes that would have been emailed, as (email, code) pairs."""
    sent: list[tuple[str, str]] = []
    monkeypatch.setattr(
        auth_routes.service, "otp_sender", lambda email, code: sent.append((email, code))
    )
    return sent


@pytest.fixture
def client(engine, outbox):
    def _get_session_override():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session_override
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    """Register an account through the API and return the response body."""

    def _register(email="alice@example.com", username="alice", password="secret123", **extra):
        resp = client.post(
            f"{API}/auth/register",
            json={"email": email, "username": username, "password": password, **extra},
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _register


@pytest.fixture
def user_token(register):
    return register()["token"]


@pytest.fixture
def admin_token(engine, register):
    body = register(email="admin@example.com", username="admin")
    with Session(engine) as session:
        user = session.get(User, uuid.UUID(body["user"]["id"]))
        user.roles = [Role.ADMIN.value]
        session.add(user)
        session.commit()
        return create_access_token(user.id, user.roles)


@pytest.fixture
def make_product(client, user_token):
    """Create a product through the API; returns the response body."""

    def _make(name="T-Shirt", price=10.0, variants=None, **extra):
        if variants is None:
            variants = [{"sku": "TS-M-RED", "size": "M", "color": "Red", "stock": 5}]
        resp = client.post(
            f"{API}/products",
            json={
                "name": name,
                "description": f"{name} description",
                "price": price,
                "variants": variants,
                **extra,
            },
            headers=auth_headers(user_token),
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make


@pytest.fixture
def stock_of(engine):
    """Current stock of a variant, read straight from the database."""

    def _stock(sku: str) -> int:
        with Session(engine) as session:
            variant = session.exec(select(ProductVariant).where(ProductVariant.sku == sku)).one()
            return variant.stock

    return _stock


@pytest.fixture
def set_stock(engine):
    def _set(sku: str, stock: int) -> None:
        with Session(engine) as session:
            variant = session.exec(select(ProductVariant).where(ProductVariant.sku == sku)).one()
            variant.stock = stock
            session.add(variant)
            session.commit()

    return _set
