"""
Redis Streams Consumer for Event-Driven Architecture.

Reads OrderCreated events from the orders stream through a consumer group
and hands them to the order processor. Decouples order intake from the
status decision.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

import redis.asyncio as aioredis

from core.domain.event_channel import ChannelMessage, MessageSource


logger = logging.getLogger(__name__)


class RedisStreamConsumer(MessageSource):
    """
    Consumes events from Redis Streams.

    Features:
    - Consumer groups for load balancing
    - Message acknowledgment (ACK) after successful processing
    - Stale pending messages reclaimed with XAUTOCLAIM (redelivery)
    - Dead letter stream for permanent or exhausted failures

    Stream: orders:events
    Consumer Group: orders:processors
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        stream_name: str = "orders:events",
        consumer_group: str = "orders:processors",
        consumer_name: str = "order-processor-1",
        dead_letter_stream: str = "orders:events:dlq",
        block_ms: int = 1000,
        claim_idle_ms: int = 30000,
        socket_timeout: Optional[float] = 5.0,
        client: Optional[aioredis.Redis] = None,
    ):
        """
        Initialize Redis Stream Consumer.

        Args:
            redis_url: Redis connection URL
            stream_name: Redis Stream name
            consumer_group: Consumer group name
            consumer_name: Unique consumer name (for load balancing)
            dead_letter_stream: Stream receiving dead-lettered messages
            block_ms: Blocking time in milliseconds for XREADGROUP
            claim_idle_ms: Idle time after which a pending message is reclaimed
            socket_timeout: Seconds before a Redis call is abandoned
            client: Pre-built client (tests, shared pools)
        """
        self.redis_url = redis_url
        self.stream_name = stream_name
        self.consumer_group = consumer_group
        self.consumer_name = consumer_name
        self.dead_letter_stream = dead_letter_stream
        self.block_ms = block_ms
        self.claim_idle_ms = claim_idle_ms
        self.socket_timeout = socket_timeout
        self._redis_client: Optional[aioredis.Redis] = client
        self._group_ready = False

    async def connect(self) -> None:
        """Establish Redis connection and create consumer group."""
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

        if not self._group_ready:
            await self._ensure_group()

    async def _ensure_group(self) -> None:
        try:
            await self._redis_client.xgroup_create(
                name=self.stream_name,
                groupname=self.consumer_group,
                id="0",
                mkstream=True,
            )
            logger.info(f"Created consumer group: {self.consumer_group}")
        except aioredis.ResponseError as e:
            if "BUSYGROUP" not in str(e):
                raise
            logger.info(f"Consumer group {self.consumer_group} already exists")
        self._group_ready = True

    async def disconnect(self) -> None:
        """Close Redis connection."""
        if self._redis_client:
            await self._redis_client.aclose()
            self._redis_client = None
            self._group_ready = False
            logger.info("Disconnected from Redis")

    async def close(self) -> None:
        await self.disconnect()

    async def receive(self, max_messages: int) -> List[ChannelMessage]:
        """
        Read up to `max_messages` from the stream.

        Stale pending messages (idle longer than `claim_idle_ms`) are
        reclaimed first, so retryable failures get redelivered; the rest of
        the batch is filled with new messages.
        """
        await self.connect()

        messages = await self._reclaim_stale(max_messages)
        remaining = max_messages - len(messages)
        if remaining <= 0:
            return messages

        response = await self._redis_client.xreadgroup(
            groupname=self.consumer_group,
            consumername=self.consumer_name,
            streams={self.stream_name: ">"},
            count=remaining,
            block=self.block_ms,
        )
        for _stream, entries in response or []:
            for msg_id, fields in entries:
                if fields is None:
                    continue
                messages.append(to_channel_message(msg_id, fields, delivery_count=1))

        return messages

    async def _reclaim_stale(self, count: int) -> List[ChannelMessage]:
        if count <= 0:
            return []

        response = await self._redis_client.xautoclaim(
            name=self.stream_name,
            groupname=self.consumer_group,
            consumername=self.consumer_name,
            min_idle_time=self.claim_idle_ms,
            start_id="0-0",
            count=count,
        )
        entries: List[Tuple[str, Optional[Dict[str, Any]]]] = response[1] if response else []

        reclaimed = []
        for msg_id, fields in entries:
            if fields is None:
                # Trimmed out of the stream while pending; nothing to redeliver.
                await self._redis_client.xack(self.stream_name, self.consumer_group, msg_id)
                continue
            delivery_count = await self._delivery_count(msg_id)
            reclaimed.append(to_channel_message(msg_id, fields, delivery_count))

        if reclaimed:
            logger.info(f"Reclaimed {len(reclaimed)} stale message(s) from {self.stream_name}")
        return reclaimed

    async def _delivery_count(self, msg_id: str) -> int:
        pending = await self._redis_client.xpending_range(
            name=self.stream_name,
            groupname=self.consumer_group,
            min=msg_id,
            max=msg_id,
            count=1,
        )
        if not pending:
            return 1
        return int(pending[0].get("times_delivered", 1))

    async def acknowledge(self, message_ids: List[str]) -> None:
        """
        Acknowledge message processing (ACK).

        This removes the messages from the pending list, ensuring they won't
        be reprocessed.
        """
        if not message_ids:
            return
        await self.connect()
        try:
            await self._redis_client.xack(self.stream_name, self.consumer_group, *message_ids)
            logger.debug(f"Acknowledged {len(message_ids)} message(s): {message_ids}")
        except Exception as e:
            logger.error(f"Failed to ACK messages {message_ids}: {e}")
            raise

    async def dead_letter(self, message: ChannelMessage, reason: str) -> None:
        """Copy the message to the dead-letter stream, then ACK the original."""
        await self.connect()
        fields = {
            **message.attributes,
            "body": message.body,
            "originalId": message.message_id,
            "deliveryCount": str(message.delivery_count),
            "reason": reason,
        }
        await self._redis_client.xadd(self.dead_letter_stream, fields)
        await self._redis_client.xack(self.stream_name, self.consumer_group, message.message_id)
        logger.warning(
            f"Dead-lettered message {message.message_id} to {self.dead_letter_stream}: {reason}"
        )


def to_channel_message(msg_id: str, fields: Dict[str, Any], delivery_count: int) -> ChannelMessage:
    """Split a stream entry into body and attributes."""
    attributes = {k: str(v) for k, v in fields.items() if k != "body"}
    return ChannelMessage(
        message_id=msg_id,
        body=fields.get("body", ""),
        attributes=attributes,
        delivery_count=delivery_count,
    )
