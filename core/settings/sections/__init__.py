"""Settings sections."""
from .database import DatabaseSettings
from .processor import ProcessorSettings
from .redis import RedisSettings
from .service import ServiceSettings

__all__ = ["DatabaseSettings", "ProcessorSettings", "RedisSettings", "ServiceSettings"]
