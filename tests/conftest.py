"""
Pytest configuration for HaulOps backend tests.

Sets up test environment and global fixtures.
"""
import os
import pytest
from unittest.mock import MagicMock

# Disable config validation during tests
# This allows tests to run without requiring real environment variables
os.environ["VALIDATE_CONFIG"] = "false"

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_PUBLISHABLE_KEY", "test-publishable-key")
os.environ.setdefault("SCHEMA_PROBE_DELAY_SECONDS", "0")


@pytest.fixture
def supabase_client():
    """
    Mock Supabase client.
    Returns a MagicMock that simulates Supabase client behavior.
    """
    mock_client = MagicMock()
    return mock_client


@pytest.fixture
def data_context():
    """Isolated DataContext with no retry delay."""
    from haulops.context import DataContext
    from haulops.services.cache import ReadThroughCache
    from haulops.services.schema_service import ColumnAvailabilityMemo

    return DataContext(
        cache=ReadThroughCache(),
        columns=ColumnAvailabilityMemo(attempts=3, delay_seconds=0),
        operator_cache_ttl_ms=60_000,
    )


@pytest.fixture
def api_client(supabase_client, data_context):
    """
    TestClient with the Supabase client and DataContext dependencies overridden.
    """
    from fastapi.testclient import TestClient
    from haulops.context import get_data_context
    from haulops.db.client import get_supabase_client
    from haulops.main import app

    app.dependency_overrides[get_supabase_client] = lambda: supabase_client
    app.dependency_overrides[get_data_context] = lambda: data_context
    yield TestClient(app)
    app.dependency_overrides.clear()
