"""Shared fixtures: both storage backends, a fixed clock and an API client."""

import os

# Settings are read at import time; keep tests off any real database
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from spartec.database import Base
from spartec import models  # noqa: F401
from spartec.services.dependency import get_storage, get_current_user
from spartec.storage.database import DatabaseStorage
from spartec.storage.memory import MemoryStorage


class FixedClock:
    """Callable clock that tests can move"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return FixedClock(datetime(2025, 3, 15, 10, 30))


@pytest.fixture
def memory_storage(clock):
    return MemoryStorage(clock)


@pytest.fixture
def sql_storage(clock):
    """DatabaseStorage on a private in-memory SQLite database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield DatabaseStorage(session, clock)
    session.close()
    engine.dispose()


@pytest.fixture(params=["memory", "database"])
def storage(request):
    """Every storage-level test runs against both backends."""
    if request.param == "memory":
        return request.getfixturevalue("memory_storage")
    return request.getfixturevalue("sql_storage")


@pytest.fixture
def make_customer(storage):
    def _make(**overrides):
        draft = {
            "name": "Jansen Installatie",
            "type": "Zakelijk",
            "street": "Dorpsstraat 1",
            "postal_code": "1234 AB",
            "city": "Utrecht",
            "email": "info@jansen.nl",
            "phone": "030-1234567",
        }
        draft.update(overrides)
        return storage.customers.create(draft)
    return _make


@pytest.fixture
def make_material(storage):
    def _make(**overrides):
        draft = {
            "name": "Thermostaatkraan",
            "brand": "Danfoss",
            "category": "Verwarming",
            "price": 24.95,
            "stock": 10,
            "min_stock": 2,
            "supplier": "Technische Unie",
        }
        draft.update(overrides)
        return storage.materials.create(draft)
    return _make


@pytest.fixture
def make_work_order(storage):
    def _make(customer_id, **overrides):
        draft = {
            "title": "CV-ketel onderhoud",
            "description": "Jaarlijkse controle",
            "customer_id": customer_id,
            "date": datetime(2025, 3, 20, 9, 0),
        }
        draft.update(overrides)
        return storage.work_orders.create(draft)
    return _make


@pytest.fixture
def make_invoice(storage):
    def _make(customer_id, **overrides):
        draft = {
            "customer_id": customer_id,
            "date": datetime(2025, 3, 1),
            "due_date": datetime(2025, 3, 31),
            "amount": 150.0,
            "status": "Verzonden",
            "items": [{"description": "Arbeid", "quantity": 2, "price": 75.0}],
        }
        draft.update(overrides)
        return storage.invoices.create(draft)
    return _make


@pytest.fixture
def current_user():
    return {
        "id": 1,
        "username": "beheerder",
        "full_name": "Test Beheerder",
        "email": None,
        "phone": None,
        "role": "beheerder",
    }


@pytest.fixture
def client(storage, current_user):
    """TestClient on the selected backend with authentication stubbed out."""
    from main import app

    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_current_user] = lambda: current_user
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(memory_storage):
    """TestClient with real token checks against the memory backend."""
    from main import app

    app.dependency_overrides[get_storage] = lambda: memory_storage
    yield TestClient(app)
    app.dependency_overrides.clear()
