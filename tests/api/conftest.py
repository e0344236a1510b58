"""API test fixtures: the assembled app over mocked storage backends."""

from datetime import timedelta
from unittest.mock import Mock
from uuid import UUID

import pytest
from starlette.testclient import TestClient

from auth.config import AuthConfig
from auth.service import AuthService
from auth.session import SessionManager
from auth.types import Session
from clients.postgres_client import PostgresClient
from clients.storage_client import StorageClient, StorageConfig
from invoicing.services.invoice_service import InvoiceService
from invoicing.view_cache import ViewCache
from main import create_app
from utils.timezone import now_utc

TEST_USER_ID = UUID("00000000-0000-0000-0000-000000000001")


# =============================================================================
# BACKEND FIXTURES
# =============================================================================


@pytest.fixture
def postgres():
    mock = Mock(spec=PostgresClient)
    mock.execute.return_value = []
    mock.execute_returning.return_value = []
    mock.execute_single.return_value = None
    return mock


@pytest.fixture
def view_cache():
    mock = Mock(spec=ViewCache)
    mock.get.return_value = None
    mock.generation.return_value = [0, 0]
    return mock


@pytest.fixture
def invoice_service(postgres, view_cache):
    return InvoiceService(postgres, view_cache)


@pytest.fixture
def storage():
    mock = Mock(spec=StorageClient)
    mock.config = StorageConfig(bucket_name="receipts-bucket", region="us-east-1")
    return mock


# =============================================================================
# AUTH FIXTURES
# =============================================================================


@pytest.fixture
def mock_session_manager():
    now = now_utc()
    mock = Mock(spec=SessionManager)
    mock.validate_session.return_value = Session(
        token="test-token",
        user_id=TEST_USER_ID,
        created_at=now,
        expires_at=now + timedelta(hours=24),
        last_activity_at=now,
    )
    return mock


# =============================================================================
# APP & CLIENT FIXTURES
# =============================================================================


@pytest.fixture
def app(mock_session_manager, invoice_service, view_cache, storage):
    return create_app(
        auth_service=Mock(spec=AuthService),
        session_manager=mock_session_manager,
        auth_config=AuthConfig(cookie_secure=False),
        invoice_service=invoice_service,
        view_cache=view_cache,
        storage=storage,
    )


@pytest.fixture
def client(app):
    """Authenticated test client that does not follow redirects."""
    c = TestClient(app, raise_server_exceptions=False, follow_redirects=False)
    c.cookies.set("session_token", "test-token")
    return c


@pytest.fixture
def unauthed_client(app):
    """Unauthenticated test client (no session cookie)."""
    return TestClient(app, raise_server_exceptions=False, follow_redirects=False)
