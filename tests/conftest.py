import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "1"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from storefront.main import app
from storefront.api.routers.guest_carts import get_guest_storage
from storefront.data.database import Base, SessionLocal, engine
from storefront.data.models import ProductModel, UserModel
from storefront.services.local_cart import InMemoryCartStorage, LocalCartStore


@pytest.fixture(autouse=True)
def fresh_schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def products(db):
    rows = {
        "serum": ProductModel(id="p-serum", name="Niacinamide Serum", sku="SER-1", price=Decimal("12500.00"), quantity=25),
        "cleanser": ProductModel(id="p-cleanser", name="Foaming Cleanser", sku="CLN-1", price=Decimal("8500.00"), quantity=40),
        "last_one": ProductModel(id="p-last", name="Retinol Night Cream", sku="RET-1", price=Decimal("18000.00"), quantity=1),
        "draft": ProductModel(id="p-draft", name="Unreleased Toner", sku="TON-1", price=Decimal("6000.00"), quantity=10, status="DRAFT"),
        "gift": ProductModel(id="p-gift", name="Gift Card", sku="GFT-1", price=Decimal("20000.00"), quantity=0, track_quantity=False),
    }
    db.add_all(rows.values())
    db.add_all([UserModel(id="u1", name="Ada", email="ada@example.com"), UserModel(id="u2", name="Tunde")])
    db.commit()
    return rows


@pytest.fixture
def guest_storage():
    storage = InMemoryCartStorage()
    app.dependency_overrides[get_guest_storage] = lambda: storage
    yield storage
    app.dependency_overrides.pop(get_guest_storage, None)


@pytest.fixture
def client(guest_storage):
    return TestClient(app)


@pytest.fixture
def local_store():
    return LocalCartStore(InMemoryCartStorage())

