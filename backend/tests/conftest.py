"""Shared fixtures: every test gets its own snapshot file and a fresh store handle."""

import pytest

import store
from config import reset_settings_cache
from repositories import DocumentStore


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point DATABASE_FILE at a temp file and drop cached settings/handles around each test."""
    monkeypatch.setenv("DATABASE_FILE", str(tmp_path / "data" / "database.json"))
    monkeypatch.setenv("DEFAULT_USER_EMAIL", "founder@example.com")
    monkeypatch.delenv("FEATURE_FLAGS", raising=False)
    reset_settings_cache()
    store.reset_database()
    yield
    store.reset_database()
    reset_settings_cache()


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "data" / "database.json"


@pytest.fixture
def db(db_path):
    """The process-wide handle, built against the temp snapshot path."""
    handle = store.get_database()
    assert handle.path == db_path
    return handle


@pytest.fixture
def fresh_store(tmp_path):
    """Factory for standalone stores at arbitrary paths under tmp_path."""
    def _make(name="other.json"):
        return DocumentStore(tmp_path / name)
    return _make


@pytest.fixture
def client(db):
    from fastapi.testclient import TestClient

    from api.deps import get_store
    from main import create_app

    app = create_app()
    app.dependency_overrides[get_store] = lambda: db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
