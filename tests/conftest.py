"""Shared pytest fixtures and configuration."""

import os
import pytest
from unittest.mock import Mock
from freezegun import freeze_time

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-key")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from src.utils.config import get_settings  # noqa: E402
from src.services import supabase_client  # noqa: E402
from tests.utils.fake_supabase import FakeSupabase  # noqa: E402
from tests.utils.factories import create_user_data  # noqa: E402
from tests.utils.helpers import auth_headers  # noqa: E402


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached per process; every test starts from the environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def mock_supabase_client():
    """Mock Supabase client for testing."""
    client = Mock()
    client.table = Mock(return_value=Mock())
    return client


@pytest.fixture
def fake_supabase():
    """In-memory backend installed as the Supabase client singleton."""
    fake = FakeSupabase()
    previous = supabase_client._client
    supabase_client._client = fake
    yield fake
    supabase_client._client = previous


@pytest.fixture
def app():
    from src.app import create_app
    return create_app()


@pytest.fixture
def client(app, fake_supabase):
    from fastapi.testclient import TestClient
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def owner(fake_supabase):
    """A registered user who creates listings."""
    return fake_supabase.seed("users", create_user_data())


@pytest.fixture
def other_user(fake_supabase):
    return fake_supabase.seed("users", create_user_data())


@pytest.fixture
def owner_headers(owner):
    return auth_headers(owner)


@pytest.fixture
def other_headers(other_user):
    return auth_headers(other_user)


@pytest.fixture
def freeze_time_fixture():
    """Fixture for freezing time in tests."""
    with freeze_time("2024-12-09 12:00:00") as frozen_time:
        yield frozen_time

