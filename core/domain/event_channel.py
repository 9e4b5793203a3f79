"""
Event Channel Interface (Domain Layer).

Pure interface definitions - no implementation details.

The channel is at-least-once and ordered at best effort: a consumer may
see the same message more than once, and must acknowledge each message it
is done with. Messages that should never be retried are dead-lettered.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List

from .events.base import DomainEvent


@dataclass(frozen=True)
class ChannelMessage:
    """One delivery of a message, as handed to a consumer."""

    message_id: str
    body: str
    attributes: Dict[str, str] = field(default_factory=dict)
    delivery_count: int = 1


class EventChannel(ABC):
    """Publishing side of the channel."""

    @abstractmethod
    async def publish(self, event: DomainEvent) -> str:
        """
        Publish a single domain event.

        Args:
            event: Domain event to publish

        Returns:
            Channel-assigned message id
        """
        pass

    @abstractmethod
    async def health_check(self) -> Dict[str, Any]:
        """Report connectivity and approximate backlog."""
        pass

    async def close(self) -> None:
        return None


class MessageSource(ABC):
    """Consuming side of the channel."""

    @abstractmethod
    async def receive(self, max_messages: int) -> List[ChannelMessage]:
        """Fetch up to `max_messages` deliveries, new or redelivered."""
        pass

    @abstractmethod
    async def acknowledge(self, message_ids: List[str]) -> None:
        """Mark messages as done; they will not be delivered again."""
        pass

    @abstractmethod
    async def dead_letter(self, message: ChannelMessage, reason: str) -> None:
        """Move a message to the dead-letter path and acknowledge it."""
        pass

    async def close(self) -> None:
        return None
