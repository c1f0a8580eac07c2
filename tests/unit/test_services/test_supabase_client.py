"""Tests for the Supabase client singleton."""

import pytest
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from src.services import supabase_client
from src.services.supabase_client import SupabaseClient, first_row, get_supabase_client
from src.utils.errors import NotFoundError, SupabaseError


@pytest.fixture
def no_client():
    previous = supabase_client._client
    supabase_client._client = None
    yield
    supabase_client._client = previous


@pytest.mark.unit
def test_client_is_created_once(no_client):
    with patch("src.services.supabase_client.create_client") as mock_create:
        mock_create.return_value = MagicMock()

        first = get_supabase_client()
        second = get_supabase_client()

    assert first is second
    mock_create.assert_called_once()
    url, key, _options = mock_create.call_args[0]
    assert url == "https://test.supabase.co"
    assert key == "test-key"


@pytest.mark.unit
def test_missing_credentials(no_client, monkeypatch):
    monkeypatch.delenv("SUPABASE_URL")

    with pytest.raises(SupabaseError):
        get_supabase_client()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_context_manager_yields_singleton(mock_supabase_client):
    with patch("src.services.supabase_client.get_supabase_client", return_value=mock_supabase_client):
        async with SupabaseClient() as client:
            assert client is mock_supabase_client


@pytest.mark.unit
@pytest.mark.asyncio
async def test_context_manager_propagates_errors(mock_supabase_client):
    with patch("src.services.supabase_client.get_supabase_client", return_value=mock_supabase_client):
        with pytest.raises(NotFoundError):
            async with SupabaseClient():
                raise NotFoundError()


@pytest.mark.unit
def test_first_row():
    assert first_row(SimpleNamespace(data=[{"id": 1}, {"id": 2}])) == {"id": 1}
    assert first_row(SimpleNamespace(data=[])) is None
    assert first_row(SimpleNamespace(data=None)) is None
