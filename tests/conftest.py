import os
import tempfile
from decimal import Decimal

# konfiguracja musi byc ustawiona zanim app.* wczyta settings
_DB_DIR = tempfile.mkdtemp(prefix="storefront-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["LOCK_BACKEND"] = "local"
os.environ["LOCK_TIMEOUT_SECONDS"] = "5"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "1"

import pytest
from fastapi.testclient import TestClient

from app.api import create_app
from app.data.database import Base, SessionLocal, engine
from app.data.models import CategoryModel, CustomerModel, ProductModel
from app.services.lock_service import LocalLockService


@pytest.fixture(autouse=True)
def schema():
    import app.data.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture()
def locks():
    return LocalLockService(timeout=5)


@pytest.fixture()
def client():
    return TestClient(create_app())


@pytest.fixture()
def make_category(db):
    def _make(name="Electronics"):
        category = CategoryModel(name=name)
        db.add(category)
        db.commit()
        return category

    return _make


@pytest.fixture()
def make_product(db):
    def _make(
        name="Wireless Headphones",
        price="299.99",
        stock=10,
        sale_price=None,
        description="",
        category=None,
        is_active=True,
        rating="0.0",
        **extra,
    ):
        product = ProductModel(
            name=name,
            description=description,
            price=Decimal(price),
            sale_price=Decimal(sale_price) if sale_price is not None else None,
            stock=stock,
            category=category,
            is_active=is_active,
            rating=Decimal(rating),
            **extra,
        )
        db.add(product)
        db.commit()
        return product

    return _make


@pytest.fixture()
def make_customer(db):
    def _make(name="John Smith", email="john.smith@example.com"):
        customer = CustomerModel(name=name, email=email)
        db.add(customer)
        db.commit()
        return customer

    return _make
