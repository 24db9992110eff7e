"""Persistence adapters."""
from .in_memory_manual_review_store import InMemoryManualReviewStore

__all__ = ["InMemoryManualReviewStore"]
