"""Tests for the order, weather and health endpoints."""

import asyncio
import json
from datetime import datetime, timezone

from fastapi.testclient import TestClient

from api import dependencies
from api.main import WORKER_STOP_GRACE_SECONDS, app, worker_stop_timeout
from core.settings import get_app_settings
from orchestration.models import FailedOrder, FulfillmentResult, ManualReviewReason
from orchestration.orchestrator import OrderOrchestrator
from orchestration.worker import OrderEventWorker


class FailingKitchenClient:
    """Kitchen whose weather endpoint is down."""

    async def get_kelvin_temperature(self, celsius: float) -> FulfillmentResult:
        return FulfillmentResult.failure(True, "Server error (503): down", 503)


class RefusingPublisher:
    """Publisher whose broker is always down."""

    async def publish(self, event_name, payload, occurrences=1) -> bool:
        return False


# =============================================================================
# MANUAL TRIGGER
# =============================================================================

def test_make_lemonade_publishes_event(client, queue):
    response = client.post("/api/orders/lemonade", json={"sugarSpoons": 2})

    assert response.status_code == 202
    assert response.json() == {
        "status": "accepted",
        "event_name": "MAKE_LEMONADE",
        "occurrences": 1,
    }
    message = asyncio.run(queue.receive_no_wait())
    assert json.loads(message.body) == {
        "eventName": "MAKE_LEMONADE",
        "payload": {"sugarSpoons": 2},
        "occurrences": 1,
    }


def test_make_lemonade_validates_body(client, queue):
    response = client.post("/api/orders/lemonade", json={"sugar": 2})

    assert response.status_code == 422
    assert len(queue) == 0


def test_make_lemonade_returns_503_when_queue_down(client):
    app.dependency_overrides[dependencies.get_publisher] = lambda: RefusingPublisher()

    response = client.post("/api/orders/lemonade", json={"sugarSpoons": 2})

    assert response.status_code == 503


# =============================================================================
# MANUAL REVIEW
# =============================================================================

def test_list_manual_review(client, review_store):
    for n in (1, 2):
        asyncio.run(
            review_store.record(
                FailedOrder(
                    event_name="MAKE_PIZZA",
                    payload={"name": "Margherita", "ingredients": [f"item-{n}"]},
                    occurrences=n,
                    reason=ManualReviewReason.REJECTED,
                    failed_at=datetime(2024, 5, 1, 12, n, tzinfo=timezone.utc),
                    status_code=400,
                    error_message="Client error (400)",
                    correlation_id=f"corr-{n}",
                )
            )
        )

    response = client.get("/api/orders/manual-review", params={"limit": 1})

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 1
    assert body["orders"] == [
        {
            "event_name": "MAKE_PIZZA",
            "payload": {"name": "Margherita", "ingredients": ["item-2"]},
            "occurrences": 2,
            "reason": "rejected",
            "status_code": 400,
            "error_message": "Client error (400)",
            "correlation_id": "corr-2",
            "failed_at": "2024-05-01T12:02:00+00:00",
        }
    ]


def test_list_manual_review_rejects_bad_limit(client):
    assert client.get("/api/orders/manual-review", params={"limit": 0}).status_code == 422


# =============================================================================
# WEATHER
# =============================================================================

def test_kelvin_proxy(client, kitchen_client):
    response = client.get("/api/weather/kelvin/25")

    assert response.status_code == 200
    assert response.json() == {"celsius": 25.0, "kelvin": 298.15}
    assert kitchen_client.requested == [25.0]


def test_kelvin_proxy_maps_remote_failure_to_502(client):
    app.dependency_overrides[dependencies.get_kitchen_client] = lambda: FailingKitchenClient()

    response = client.get("/api/weather/kelvin/25")

    assert response.status_code == 502
    assert response.json()["detail"] == "Server error (503): down"


# =============================================================================
# HEALTH
# =============================================================================

def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_ready_without_worker(client):
    response = client.get("/health/ready")

    assert response.status_code == 200
    assert response.json()["checks"]["worker"] == "disabled"


# =============================================================================
# LIFESPAN
# =============================================================================

def test_lifespan_runs_and_stops_worker(
    monkeypatch, tmp_path, clean_settings, queue, review_store, kitchen_client
):
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'orders.db'}")
    monkeypatch.setenv("WORKER_ENABLED", "true")

    orchestrator = OrderOrchestrator(
        kitchen_client=kitchen_client,
        publisher=queue,
        manual_review=review_store,
    )
    worker = OrderEventWorker(queue, orchestrator, drain_interval=60.0)
    monkeypatch.setattr(dependencies, "get_worker", lambda: worker)

    with TestClient(app) as client:
        response = client.get("/health/ready")
        assert response.json()["checks"]["worker"] == "running"
        assert response.json()["status"] == "ready"

    assert worker.stopping
    assert not queue.connected


def test_lifespan_with_worker_disabled(monkeypatch, tmp_path, clean_settings):
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'orders.db'}")
    monkeypatch.setenv("WORKER_ENABLED", "false")

    with TestClient(app) as client:
        response = client.get("/health/ready")

    assert response.json()["checks"]["worker"] == "disabled"


def test_worker_stop_timeout_outlasts_kitchen_timeout(monkeypatch, clean_settings):
    """Shutdown waits for an in-flight kitchen call before cancelling the worker."""
    monkeypatch.setenv("KITCHEN_API_TIMEOUT_SECONDS", "45")

    timeout = worker_stop_timeout(get_app_settings())

    assert timeout == 45.0 + WORKER_STOP_GRACE_SECONDS
    assert timeout > get_app_settings().kitchen_api.timeout_seconds
