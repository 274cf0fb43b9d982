"""Test fixtures for API tests."""
import pytest
from fastapi.testclient import TestClient

from app.database import get_db
from app.main import app
from app.services.settings_cache import TTLCache


@pytest.fixture
def client(engine, db):
    """Create a TestClient with overridden database dependency.

    Requires both engine (to ensure tables are created) and db (the session).
    The client is not entered as a context manager, so the startup hook that
    initialises the configured database file does not run.
    """

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.state.settings_cache = TTLCache(300)

    yield TestClient(app)

    # Clean up
    app.dependency_overrides.clear()
