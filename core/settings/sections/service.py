from typing import Literal

from pydantic_settings import SettingsConfigDict

from core.settings.base import OrdersBaseSettings


class ServiceSettings(OrdersBaseSettings):
    """
    Service-wide settings.
    Loaded automatically from .env with prefix ORDERS_*
    """

    service_name: str = "orders-service"
    log_level: str = "INFO"

    # Which adapters back the order store and the event channel
    store_backend: Literal["sqlalchemy", "memory"] = "sqlalchemy"
    channel_backend: Literal["redis", "memory"] = "redis"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ORDERS_",
        extra="ignore",
    )
