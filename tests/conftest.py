import asyncio
import os
import tempfile

import pytest

# The application engine is built at import time; point it somewhere harmless.
os.environ.setdefault(
    "DATABASE_URL",
    f"sqlite+aiosqlite:///{os.path.join(tempfile.mkdtemp(), 'shop.db')}",
)

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from shop_service.auth_utils import create_access_token  # noqa: E402
from shop_service.db.database import get_db  # noqa: E402
from shop_service.db.functions import (  # noqa: E402
    create_category,
    create_item,
    create_user,
    create_voucher,
)
from shop_service.db.init_db import init_db  # noqa: E402
from shop_service.db.models import RoleEnum  # noqa: E402
from shop_service.db.schemas import City, CourierOption, ItemCreate  # noqa: E402
from shop_service.main import app as shop_app  # noqa: E402
from shop_service.shipping import ShippingError, get_shipping_client  # noqa: E402


class FakeShipping:
    """Stands in for RajaOngkir in API tests."""

    def __init__(self):
        self.cost_requests = []
        self.fail = False

    async def get_cities(self):
        if self.fail:
            raise ShippingError("Shipping service is unavailable")
        return [
            City(value="151", label="Jakarta Barat"),
            City(value="444", label="Surabaya"),
        ]

    async def get_costs(self, destination, weight, courier=None):
        if self.fail:
            raise ShippingError("Shipping service is unavailable")
        self.cost_requests.append((destination, weight, courier))
        return [
            CourierOption(name="JNE OKE", cost=18000, etd="2-3"),
            CourierOption(name="JNE REG", cost=20000, etd="1-2"),
        ]


@pytest.fixture()
def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'shop.db'}", poolclass=NullPool)
    asyncio.run(init_db(engine))
    yield engine
    asyncio.run(engine.dispose())


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture()
def db_call(session_factory):
    """Run ``fn(session, *args)`` against the test database and return its result."""

    def call(fn, *args, **kwargs):
        async def run():
            async with session_factory() as session:
                return await fn(session, *args, **kwargs)

        return asyncio.run(run())

    return call


@pytest.fixture()
def shipping():
    return FakeShipping()


@pytest.fixture()
def app(session_factory, shipping):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    shop_app.dependency_overrides[get_db] = override_get_db
    shop_app.dependency_overrides[get_shipping_client] = lambda: shipping
    yield shop_app
    shop_app.dependency_overrides.clear()


@pytest.fixture()
def client(app):
    return TestClient(app)


@pytest.fixture()
def seed(db_call):
    user = db_call(create_user, "buyer@example.com", "Buyer")
    other = db_call(create_user, "other@example.com", "Other")
    admin = db_call(create_user, "admin@example.com", "Admin", RoleEnum.admin)
    category = db_call(create_category, "Laptops")
    laptop = db_call(create_item, ItemCreate(name="Laptop", price=50000, stock=10, category_id=category.id))
    mouse = db_call(create_item, ItemCreate(name="Mouse", price=10000, stock=50, category_id=category.id))
    db_call(create_voucher, "HEMAT10", 10)
    return {
        "user": user,
        "other": other,
        "admin": admin,
        "category": category,
        "laptop": laptop,
        "mouse": mouse,
    }


def token_for(user):
    return create_access_token({"sub": user.email, "id": user.id})


def auth(user):
    return {"Authorization": f"Bearer {token_for(user)}"}


@pytest.fixture()
def headers():
    """``headers(user)`` -> Authorization header for that user."""
    return auth
