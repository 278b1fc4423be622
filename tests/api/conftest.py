"""Shared fixtures for API integration tests.

This module provides a TestClient with a fresh event store, layout cache
and default settings injected through FastAPI's dependency overrides.
"""

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_event_store, get_layout_cache, get_settings
from main import app
from tests.fixtures.settings import create_settings


@pytest.fixture
def client_with_store(fresh_store, fresh_cache):
    """Provide a TestClient with a fresh store and cache injected.

    Args:
        fresh_store: A pytest fixture providing an empty OptimisticEventStore.
        fresh_cache: A pytest fixture providing an empty LayoutCache.

    Yields:
        A tuple of (TestClient, OptimisticEventStore, LayoutCache).

    Example:
        def test_something(client_with_store):
            client, store, cache = client_with_store
            response = client.get("/events")
            assert response.status_code == 200
    """
    app.dependency_overrides[get_event_store] = lambda: fresh_store
    app.dependency_overrides[get_layout_cache] = lambda: fresh_cache
    app.dependency_overrides[get_settings] = lambda: create_settings()

    client = TestClient(app)

    yield client, fresh_store, fresh_cache

    app.dependency_overrides.clear()
