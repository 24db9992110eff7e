# core/settings/base_settings.py
from pydantic_settings import BaseSettings, SettingsConfigDict


class OrderServiceBaseSettings(BaseSettings):
    """
    Base class for every settings section.

    Values come from the process environment first, then from `.env`.
    Every field declares its exact environment variable name as an alias.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )
