"""Database repositories."""
from .sqlalchemy_manual_review_store import SQLAlchemyManualReviewStore

__all__ = ["SQLAlchemyManualReviewStore"]
