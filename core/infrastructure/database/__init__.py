"""Database infrastructure - manual-review persistence."""
from .lifecycle import close_database, get_session_factory, init_database
from .models import Base, FailedOrderModel

__all__ = [
    "Base",
    "FailedOrderModel",
    "close_database",
    "get_session_factory",
    "init_database",
]
