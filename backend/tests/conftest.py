"""Shared pytest fixtures for agamotto tests."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from agamotto.database import get_db, init_db
from agamotto.services.record_store import SQLRecordStore
from agamotto.services.tag_palette import COLOR_PALETTE, DEFAULT_TAGS
from tests.helpers import FakeRecordStore, make_tag


@pytest.fixture
def fake_store():
    return FakeRecordStore()


@pytest.fixture
def seeded_store():
    """Fake store holding the three default tags."""
    store = FakeRecordStore()
    for name, color in DEFAULT_TAGS:
        store.tags[name] = make_tag(name, color)
    return store


@pytest.fixture
def full_store():
    """Fake store whose tags use every palette color."""
    store = FakeRecordStore()
    for index, color in enumerate(COLOR_PALETTE):
        store.tags[f"tag{index}"] = make_tag(f"tag{index}", color)
    return store


@pytest.fixture
def db_session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    engine.dispose()


@pytest.fixture
def sql_store(db_session_factory):
    store = SQLRecordStore(db_session_factory())
    yield store
    store.close()


@pytest.fixture
def client(db_session_factory):
    from agamotto.main import app

    def override_get_db():
        db = db_session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
