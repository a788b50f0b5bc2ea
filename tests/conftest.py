"""Pytest configuration and fixtures."""

import os

import pytest

# Pin the settings the app reads at import time
os.environ.setdefault("API_PREFIX", "/api")
os.environ.setdefault("PREMIUM_PRICE", "20")
os.environ.setdefault("DEFAULT_EARNINGS", "500")

from backend.core.models import MarketConfig  # noqa: E402
from backend.core.registry import JobRegistry, get_registry  # noqa: E402
from backend.main import app  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402


@pytest.fixture
def registry():
    """A fresh, empty registry."""
    return JobRegistry(config=MarketConfig(free_jobs_limit=3, premium_price=20, max_distance_km=10))


@pytest.fixture
def client(registry):
    """Create a test client bound to the fresh registry."""
    app.dependency_overrides[get_registry] = lambda: registry
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_registry, None)
