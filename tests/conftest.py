"""
Shared fixtures: an in-memory SQLite database wired into the FastAPI app,
plus factories for catalog rows and JWT-authenticated headers.
"""
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from reweara.core.config import get_settings
from reweara.database import get_session
from reweara.main import app
from reweara.models.catalog import Category, Product
from reweara.models.coupon import Coupon
from reweara.models.user import User


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_token(user_id: uuid.UUID, email: str, **claims) -> str:
    settings = get_settings()
    payload = {
        "sub": str(user_id),
        "email": email,
        "exp": datetime.now(timezone.utc) + timedelta(hours=1),
        **claims,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


@pytest.fixture
def guest_headers():
    return {get_settings().SESSION_HEADER: f"guest-{uuid.uuid4()}"}


@pytest.fixture
def user_headers():
    token = make_token(uuid.uuid4(), "shopper@example.com", first_name="Asha")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_user_headers():
    token = make_token(uuid.uuid4(), "second@example.com", first_name="Ravi")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(db):
    admin = User(id=uuid.uuid4(), email="admin@reweara.test", role="admin")
    db.add(admin)
    db.commit()
    return {"Authorization": f"Bearer {make_token(admin.id, admin.email)}"}


@pytest.fixture
def category(db):
    category = Category(name="Thrift", slug="thrift")
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


@pytest.fixture
def make_product(db, category):
    def _make(name: str = "Denim Jacket", price: float = 100.0, **kwargs) -> Product:
        kwargs.setdefault("stock", 10)
        kwargs.setdefault("category_id", category.id)
        kwargs.setdefault("images", [f"https://cdn.reweara.test/{name}.jpg"])
        product = Product(
            name=name,
            slug=kwargs.pop("slug", f"{name.lower().replace(' ', '-')}-{uuid.uuid4().hex[:6]}"),
            price=price,
            **kwargs,
        )
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make


@pytest.fixture
def make_coupon(db):
    def _make(code: str = "GREEN10", **kwargs) -> Coupon:
        kwargs.setdefault("discount_type", "percentage")
        kwargs.setdefault("discount_value", 10.0)
        coupon = Coupon(code=code, **kwargs)
        db.add(coupon)
        db.commit()
        db.refresh(coupon)
        return coupon

    return _make


@pytest.fixture
def shipping_address():
    return {
        "full_name": "Asha Rao",
        "email": "asha@example.com",
        "phone": "9876543210",
        "address": "12 Green Lane",
        "city": "Bengaluru",
        "state": "KA",
        "pincode": "560001",
    }
