from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, ConfigDict

from core.settings.modules.database_settings import DatabaseSettings
from core.settings.modules.kitchen_api_settings import KitchenApiSettings
from core.settings.modules.logging_settings import LoggingSettings
from core.settings.modules.queue_settings import QueueSettings
from core.settings.modules.worker_settings import WorkerSettings


class AppSettings(BaseModel):
    """Application settings aggregator."""

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="ignore")

    queue: QueueSettings
    worker: WorkerSettings
    kitchen_api: KitchenApiSettings
    database: DatabaseSettings
    logging: LoggingSettings


@lru_cache()
def get_app_settings() -> AppSettings:
    return AppSettings(
        queue=QueueSettings(),
        worker=WorkerSettings(),
        kitchen_api=KitchenApiSettings(),
        database=DatabaseSettings(),
        logging=LoggingSettings(),
    )
