"""
Pytest configuration and shared fixtures
"""

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from src.common.db import Person, get_session


# ============================================================================
# Fake model collaborator
# ============================================================================

class FakeModel:
    """ActiveRecord-style model that records every call it receives."""

    rows = []
    total = None
    calls = []

    @classmethod
    def all(cls, options):
        cls.calls.append(("all", options))
        return list(cls.rows)

    @classmethod
    def count(cls, options):
        cls.calls.append(("count", options))
        return len(cls.rows) if cls.total is None else cls.total


@pytest.fixture
def make_model():
    """Return a factory building a fresh FakeModel subclass per test"""
    def make(rows=None, total=None, name="FakePerson"):
        return type(name, (FakeModel,), {"rows": list(rows or []), "total": total, "calls": []})
    return make


@pytest.fixture
def people_records():
    """Return record-like objects with attribute access"""
    return [
        SimpleNamespace(person_id="1", name="Alice", age=30, age_next=31),
        SimpleNamespace(person_id="2", name="Bob", age=25, age_next=26),
    ]


@pytest.fixture
def base_params():
    """Return a minimal two-column DataTables request"""
    return {
        "sEcho": "5",
        "iColumns": "2",
        "iDisplayStart": "0",
        "iDisplayLength": "10",
        "iSortingCols": "0",
        "sSearch": "",
    }


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
def engine():
    """Return an in-memory SQLite engine with the tables created"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    """Return a session with three people in the table"""
    with Session(engine) as session:
        session.add(Person(person_id="p1", name="Alice", age=30, email="alice@example.com"))
        session.add(Person(person_id="p2", name="Bob", age=25, email="bob@example.com"))
        session.add(Person(person_id="p3", name="Carol", age=41, email=None))
        session.commit()
        yield session


@pytest.fixture
def client(session):
    """Return a TestClient whose requests use the in-memory session"""
    from src.main import app

    def override_get_session():
        yield session

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()
