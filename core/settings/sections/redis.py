from pydantic_settings import SettingsConfigDict

from core.settings.base import OrdersBaseSettings


class RedisSettings(OrdersBaseSettings):
    """
    Redis Streams event channel settings.
    Loaded automatically from .env with prefix REDIS_*
    """

    url: str = "redis://localhost:6379/0"
    stream_name: str = "orders:events"
    consumer_group: str = "orders:processors"
    consumer_name: str = "order-processor-1"
    dead_letter_stream: str = "orders:events:dlq"

    # Approximate cap on stream length (XADD MAXLEN ~)
    max_stream_length: int = 10000

    # Seconds before a Redis call is abandoned
    socket_timeout: float = 5.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="REDIS_",
        extra="ignore",
    )
