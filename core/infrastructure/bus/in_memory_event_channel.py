"""
In-memory Event Channel.

Both ends of the channel in one object, for local development and tests.
Keeps the at-least-once contract: a delivered message stays pending until
it is acknowledged or dead-lettered, and is redelivered on the next
receive() with its delivery count bumped.
"""
import itertools
import logging
from collections import OrderedDict, deque
from dataclasses import replace
from typing import Any, Deque, Dict, List, Optional, Tuple

from core.domain.event_channel import ChannelMessage, EventChannel, MessageSource
from core.domain.events.base import DomainEvent


logger = logging.getLogger(__name__)


class InMemoryEventChannel(EventChannel, MessageSource):
    """Queue-backed channel with pending tracking and a dead-letter list."""

    def __init__(self):
        self._ids = itertools.count(1)
        self._queue: Deque[ChannelMessage] = deque()
        self._pending: "OrderedDict[str, ChannelMessage]" = OrderedDict()
        self.published: List[ChannelMessage] = []
        self.dead_letters: List[Tuple[ChannelMessage, str]] = []

    async def publish(self, event: DomainEvent) -> str:
        message_id = self.put_raw(event.to_json(), event.attributes())
        logger.info(
            f"Published {event.event_type} event: order={event.aggregate_id}, msg_id={message_id}"
        )
        return message_id

    def put_raw(self, body: str, attributes: Optional[Dict[str, str]] = None) -> str:
        """Enqueue a body as-is, bypassing event serialization."""
        message = ChannelMessage(
            message_id=f"{next(self._ids)}-0",
            body=body,
            attributes=dict(attributes or {}),
        )
        self._queue.append(message)
        self.published.append(message)
        return message.message_id

    async def receive(self, max_messages: int) -> List[ChannelMessage]:
        batch: List[ChannelMessage] = []

        for message_id in list(self._pending)[:max_messages]:
            redelivered = replace(
                self._pending[message_id],
                delivery_count=self._pending[message_id].delivery_count + 1,
            )
            self._pending[message_id] = redelivered
            batch.append(redelivered)

        while self._queue and len(batch) < max_messages:
            message = self._queue.popleft()
            self._pending[message.message_id] = message
            batch.append(message)

        return batch

    async def acknowledge(self, message_ids: List[str]) -> None:
        for message_id in message_ids:
            self._pending.pop(message_id, None)

    async def dead_letter(self, message: ChannelMessage, reason: str) -> None:
        self._pending.pop(message.message_id, None)
        self.dead_letters.append((message, reason))
        logger.warning(f"Dead-lettered message {message.message_id}: {reason}")

    @property
    def pending_ids(self) -> List[str]:
        return list(self._pending)

    async def health_check(self) -> Dict[str, Any]:
        return {
            "status": "healthy",
            "backend": "memory",
            "messageCount": str(len(self._queue) + len(self._pending)),
            "message": "In-memory channel available",
        }
