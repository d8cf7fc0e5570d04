"""
Shared fixtures. The environment is set before any app module is imported so
the engine binds to an in-memory database.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["OPENAI_API_KEY"] = ""
os.environ["LANGSMITH_TRACING"] = "false"

import pytest
from fastapi.testclient import TestClient

from app.db.base import Base, SessionLocal, engine
import app.models  # noqa: F401


@pytest.fixture
def db():
    """Fresh schema for every test."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def registry(monkeypatch):
    from app.services.session_registry import AssessmentSessionRegistry

    fresh = AssessmentSessionRegistry()
    monkeypatch.setattr("app.main.session_registry", fresh)
    return fresh


@pytest.fixture
def client(db, registry):
    from app.core.dependencies import get_session_registry
    from app.main import app

    app.dependency_overrides[get_session_registry] = lambda: registry
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
