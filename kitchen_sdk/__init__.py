"""Kitchen SDK - client for the remote fulfillment service."""
from .client import KitchenApiClient, classify_status, is_retryable_status

__all__ = ["KitchenApiClient", "classify_status", "is_retryable_status"]
