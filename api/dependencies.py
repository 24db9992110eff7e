"""
FastAPI Dependencies.

Provides dependency injection for the publisher, kitchen client,
manual-review store and queue worker.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING
from dotenv import load_dotenv

# Load environment variables ONCE before any settings objects are created
_PROJECT_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(dotenv_path=_PROJECT_ROOT / ".env")

from core.settings import AppSettings, get_app_settings

if TYPE_CHECKING:
    from core.application.interfaces import IManualReviewStore, IOrderPublisher
    from kitchen_sdk import KitchenApiClient
    from orchestration import OrderEventWorker

logger = logging.getLogger(__name__)


# =============================================================================
# SINGLETON INSTANCES
# =============================================================================

_publisher = None
_kitchen_client = None
_manual_review_store = None
_worker = None


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_settings() -> AppSettings:
    return get_app_settings()


def get_publisher() -> IOrderPublisher:
    global _publisher
    if _publisher is None:
        from core.infrastructure.bus import RedisStreamPublisher
        _publisher = RedisStreamPublisher.from_settings(get_settings().queue)
        logger.info(f"Created RedisStreamPublisher (stream: {_publisher.stream_name})")
    return _publisher


def get_kitchen_client() -> KitchenApiClient:
    global _kitchen_client
    if _kitchen_client is None:
        from kitchen_sdk import KitchenApiClient
        _kitchen_client = KitchenApiClient.from_settings(get_settings().kitchen_api)
        logger.info(f"Created KitchenApiClient ({_kitchen_client.base_url})")
    return _kitchen_client


def get_manual_review_store() -> IManualReviewStore:
    global _manual_review_store
    if _manual_review_store is None:
        from core.infrastructure.database import get_session_factory
        from core.infrastructure.database.repositories import SQLAlchemyManualReviewStore
        _manual_review_store = SQLAlchemyManualReviewStore(get_session_factory())
        logger.info("Created SQLAlchemyManualReviewStore instance")
    return _manual_review_store


def get_worker() -> OrderEventWorker:
    global _worker
    if _worker is None:
        from core.infrastructure.bus import RedisStreamConsumer
        from orchestration import OrderEventWorker, OrderOrchestrator

        settings = get_settings()
        orchestrator = OrderOrchestrator(
            kitchen_client=get_kitchen_client(),
            publisher=get_publisher(),
            manual_review=get_manual_review_store(),
            max_occurrences=settings.worker.max_occurrences,
        )
        _worker = OrderEventWorker(
            queue=RedisStreamConsumer.from_settings(settings.queue),
            orchestrator=orchestrator,
            drain_interval=settings.worker.drain_interval_seconds,
            reconnect_cooldown=settings.worker.reconnect_cooldown_seconds,
        )
        logger.info("Created OrderEventWorker with RedisStreamConsumer")
    return _worker


# =============================================================================
# RESET (for testing)
# =============================================================================

def reset_dependencies():
    global _publisher, _kitchen_client, _manual_review_store, _worker

    _publisher = None
    _kitchen_client = None
    _manual_review_store = None
    _worker = None

    logger.info("Dependencies reset")
