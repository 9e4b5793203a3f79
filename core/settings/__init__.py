# Settings package
from core.settings.app import AppSettings, get_app_settings
from core.settings.sections import (
    DatabaseSettings,
    ProcessorSettings,
    RedisSettings,
    ServiceSettings,
)

__all__ = [
    "AppSettings",
    "DatabaseSettings",
    "ProcessorSettings",
    "RedisSettings",
    "ServiceSettings",
    "get_app_settings",
]
