"""Application layer - ports implemented by infrastructure adapters."""

from .interfaces import IKitchenClient, IManualReviewStore, IOrderPublisher

__all__ = [
    "IKitchenClient",
    "IManualReviewStore",
    "IOrderPublisher",
]
