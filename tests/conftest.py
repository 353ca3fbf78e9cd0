"""
Pytest configuration and shared fixtures.
"""

import pytest
from fastapi.testclient import TestClient

from api.auth import TokenService
from api.config import APIConfig
from api.main import create_app
from api.service import BookService
from api.access import OwnedBookAccess
from api.store import BookStore

TEST_SECRET = "test-secret-key"
USER1 = "user1@example.com"


@pytest.fixture
def api_config():
    """Create API configuration for testing."""
    return APIConfig(
        _env_file=None,
        secret_key=TEST_SECRET,
        enable_test_login="true",
        log_level="WARNING",
        log_format="console",
        log_file=None,
        debug=False
    )


@pytest.fixture
def book_store():
    """Create an empty book store, cleared again after the test."""
    store = BookStore()
    yield store
    store.clear()


@pytest.fixture
def book_service(book_store):
    """Create a book service backed by the test store."""
    return BookService(book_store)


@pytest.fixture
def owned_access(book_store):
    """Create ownership-scoped access backed by the test store."""
    return OwnedBookAccess(book_store)


@pytest.fixture
def token_service(api_config):
    """Create a token service using the test secret."""
    return TokenService(api_config)


@pytest.fixture
def app(api_config, book_store):
    """Create the FastAPI application around the test store."""
    return create_app(config=api_config, store=book_store)


@pytest.fixture
def client(app):
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def auth_headers(token_service):
    """Build Authorization headers for a subject."""
    def _headers(subject: str = USER1, secret: str = None):
        return {"Authorization": f"Bearer {token_service.issue(subject, secret=secret)}"}
    return _headers
