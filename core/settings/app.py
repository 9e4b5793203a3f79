# core/settings/app.py
from functools import lru_cache

from pydantic import BaseModel, ConfigDict

from core.settings.sections import (
    DatabaseSettings,
    ProcessorSettings,
    RedisSettings,
    ServiceSettings,
)


class AppSettings(BaseModel):
    """
    Central application settings aggregator.
    Each section is loaded from its own env prefix.
    """

    model_config = ConfigDict(extra="ignore")

    service: ServiceSettings
    database: DatabaseSettings
    redis: RedisSettings
    processor: ProcessorSettings

    @classmethod
    def load(cls) -> "AppSettings":
        """Load every section from the environment (and .env)."""
        return cls(
            service=ServiceSettings(),
            database=DatabaseSettings(),
            redis=RedisSettings(),
            processor=ProcessorSettings(),
        )


@lru_cache()
def get_app_settings() -> AppSettings:
    """Return cached global settings for the entire app."""
    return AppSettings.load()
