"""Pytest configuration and fixtures for API tests."""

import pytest
from fastapi.testclient import TestClient

from api import dependencies
from api.main import app
from core.infrastructure.adapters.persistence import InMemoryManualReviewStore
from core.settings import get_app_settings
from orchestration.bus import InMemoryOrderQueue
from orchestration.models import FulfillmentResult


class FakeKitchenClient:
    """Fake kitchen client for the weather proxy."""

    def __init__(self, result: FulfillmentResult | None = None) -> None:
        self.result = result or FulfillmentResult.success(298.15)
        self.requested: list[float] = []

    async def get_kelvin_temperature(self, celsius: float) -> FulfillmentResult:
        self.requested.append(celsius)
        return self.result

    async def close(self) -> None:
        pass


@pytest.fixture
def queue():
    return InMemoryOrderQueue()


@pytest.fixture
def review_store():
    return InMemoryManualReviewStore()


@pytest.fixture
def kitchen_client():
    return FakeKitchenClient()


@pytest.fixture
def client(queue, review_store, kitchen_client):
    """Test client with in-memory dependencies (lifespan not started)."""
    app.dependency_overrides[dependencies.get_publisher] = lambda: queue
    app.dependency_overrides[dependencies.get_manual_review_store] = lambda: review_store
    app.dependency_overrides[dependencies.get_kitchen_client] = lambda: kitchen_client
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def clean_settings():
    get_app_settings.cache_clear()
    dependencies.reset_dependencies()
    yield
    get_app_settings.cache_clear()
    dependencies.reset_dependencies()
