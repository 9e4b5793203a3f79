"""
Redis Streams Publisher for Event-Driven Architecture.

Publishes order lifecycle events to a Redis Stream for reliable,
at-least-once delivery to the order processor.
"""
import logging
from typing import Any, Dict, Optional

import redis.asyncio as aioredis

from core.domain.event_channel import EventChannel
from core.domain.events.base import DomainEvent


logger = logging.getLogger(__name__)


class RedisStreamPublisher(EventChannel):
    """
    Publishes events to Redis Streams.

    Uses Redis Streams for reliable message delivery with:
    - Persistence (messages survive Redis restart)
    - Consumer groups (load balancing)
    - Message acknowledgment (reliability)
    - Time-ordered delivery

    Stream entry fields:
        body       JSON {"type", "timestamp", "detail"}
        eventType  e.g. "OrderCreated"
        orderId    order id
        timestamp  ISO-8601 event time
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        stream_name: str = "orders:events",
        max_stream_length: int = 10000,
        socket_timeout: Optional[float] = 5.0,
        client: Optional[aioredis.Redis] = None,
    ):
        """
        Initialize Redis Stream Publisher.

        Args:
            redis_url: Redis connection URL
            stream_name: Redis Stream name
            max_stream_length: Approximate cap on stream length
            socket_timeout: Seconds before a Redis call is abandoned
            client: Pre-built client (tests, shared pools)
        """
        self.redis_url = redis_url
        self.stream_name = stream_name
        self.max_stream_length = max_stream_length
        self.socket_timeout = socket_timeout
        self._redis_client: Optional[aioredis.Redis] = client

    async def connect(self) -> None:
        """Establish Redis connection."""
        if self._redis_client is None:
            try:
                self._redis_client = aioredis.from_url(
                    self.redis_url,
                    encoding="utf-8",
                    decode_responses=True,
                    socket_timeout=self.socket_timeout,
                    socket_connect_timeout=self.socket_timeout,
                )
                await self._redis_client.ping()
                logger.info(f"Connected to Redis: {self.redis_url}")
            except Exception as e:
                logger.error(f"Failed to connect to Redis: {e}")
                self._redis_client = None
                raise

    async def disconnect(self) -> None:
        """Close Redis connection."""
        if self._redis_client:
            await self._redis_client.aclose()
            self._redis_client = None
            logger.info("Disconnected from Redis")

    async def close(self) -> None:
        await self.disconnect()

    async def publish(self, event: DomainEvent) -> str:
        """
        Publish a domain event to the Redis Stream.

        Args:
            event: Domain event to publish

        Returns:
            Message ID from Redis Stream
        """
        if self._redis_client is None:
            await self.connect()

        fields: Dict[str, Any] = {"body": event.to_json(), **event.attributes()}

        try:
            msg_id = await self._redis_client.xadd(
                self.stream_name,
                fields,
                maxlen=self.max_stream_length,
                approximate=True,
            )
        except Exception as e:
            logger.error(
                f"Failed to publish {event.event_type} for {event.aggregate_id} "
                f"to Redis Stream: {e}",
                exc_info=True,
            )
            raise

        logger.info(
            f"Published {event.event_type} event: "
            f"order={event.aggregate_id}, stream={self.stream_name}, msg_id={msg_id}"
        )
        return msg_id

    async def health_check(self) -> Dict[str, Any]:
        if self._redis_client is None:
            await self.connect()
        message_count = await self._redis_client.xlen(self.stream_name)
        return {
            "status": "healthy",
            "backend": "redis",
            "streamName": self.stream_name,
            "messageCount": str(message_count),
            "message": "Redis connection successful",
        }
