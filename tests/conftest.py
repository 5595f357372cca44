"""
Pytest configuration and fixtures.
"""

from __future__ import annotations

import os
import tempfile

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from tests.test_constants import TEST_SECRET_KEY, TEST_WEBHOOK_SECRET

# Force an in-memory test DB when pytest runs; don't inherit from .env
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = TEST_SECRET_KEY
os.environ["CLERK_WEBHOOK_SECRET"] = TEST_WEBHOOK_SECRET
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="taskhub-test-uploads-"))


@pytest.fixture
def _schema():
    """Create all tables before each test and drop them afterwards."""
    import taskhub.models  # noqa: F401
    from taskhub.db.session import Base, engine

    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)


@pytest.fixture
def db(_schema: None) -> Session:
    """Database session for service and API tests."""
    from taskhub.db.session import SessionLocal

    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def client() -> TestClient:
    """FastAPI test client."""
    from taskhub.main import app

    return TestClient(app)


@pytest.fixture
def client_with_db(db: Session) -> TestClient:
    """TestClient with get_db overridden to use the test db session."""
    from taskhub.db.session import get_db
    from taskhub.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    c = TestClient(app)
    yield c
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def upload_dir(tmp_path, monkeypatch: pytest.MonkeyPatch):
    """Point the blob area at a fresh temporary directory."""
    from taskhub.config import get_settings

    monkeypatch.setenv("UPLOAD_DIR", str(tmp_path))
    get_settings.cache_clear()
    yield tmp_path
    get_settings.cache_clear()
