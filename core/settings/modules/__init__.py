# Settings modules
from .app_settings import AppSettings, get_app_settings
from .database_settings import DatabaseSettings
from .kitchen_api_settings import KitchenApiSettings
from .logging_settings import LoggingSettings
from .queue_settings import QueueSettings
from .worker_settings import WorkerSettings

__all__ = [
    "AppSettings",
    "get_app_settings",
    "DatabaseSettings",
    "KitchenApiSettings",
    "LoggingSettings",
    "QueueSettings",
    "WorkerSettings",
]
