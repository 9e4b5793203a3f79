"""Message bus infrastructure - Redis Streams integration."""
from .in_memory_event_channel import InMemoryEventChannel
from .redis_stream_consumer import RedisStreamConsumer
from .redis_stream_publisher import RedisStreamPublisher

__all__ = [
    "InMemoryEventChannel",
    "RedisStreamConsumer",
    "RedisStreamPublisher",
]
