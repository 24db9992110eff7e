from __future__ import annotations

from pydantic import Field

from core.settings.base_settings import OrderServiceBaseSettings


class DatabaseSettings(OrderServiceBaseSettings):
    """
    Manual-review store database settings.
    Loaded from .env file with exact variable name matching.
    """

    database_url: str = Field("sqlite+aiosqlite:///./orders.db", alias="DATABASE_URL")
    echo_sql: bool = Field(False, alias="DATABASE_ECHO")
