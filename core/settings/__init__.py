# Settings package
from core.settings.modules import (
    AppSettings,
    DatabaseSettings,
    KitchenApiSettings,
    LoggingSettings,
    QueueSettings,
    WorkerSettings,
    get_app_settings,
)

__all__ = [
    "get_app_settings",
    "AppSettings",
    "DatabaseSettings",
    "KitchenApiSettings",
    "LoggingSettings",
    "QueueSettings",
    "WorkerSettings",
]
