"""
Base Domain Event.

All domain events inherit from this base class.
Foundation for the asynchronous order workflow: events are serialized into
channel messages by the intake service and parsed back by the processor.
"""
import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from ..exceptions import MalformedMessageError
from ..value_objects import to_iso, utc_now


@dataclass
class DomainEvent:
    """
    Base class for all domain events.

    Events are immutable records of things that have happened.

    Wire format:
        {"type": "<EventType>", "timestamp": "<ISO-8601>", "detail": {...}}
    """

    event_type: str = field(init=False)
    aggregate_id: str = field(default="")
    occurred_at: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        """Derive event type from class name: OrderCreatedEvent -> OrderCreated."""
        event_name = self.__class__.__name__
        if event_name.endswith("Event"):
            event_name = event_name[:-5]
        object.__setattr__(self, "event_type", event_name)

    @property
    def timestamp(self) -> str:
        return to_iso(self.occurred_at)

    def _get_event_data(self) -> Dict[str, Any]:
        """
        Get event-specific payload.

        Override in subclasses to provide the `detail` block.
        """
        return {}

    def to_message(self) -> Dict[str, Any]:
        """Message body published to the event channel."""
        return {
            "type": self.event_type,
            "timestamp": self.timestamp,
            "detail": self._get_event_data(),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_message())

    def attributes(self) -> Dict[str, str]:
        """
        Message attributes carried next to the body.

        Used by channel infrastructure for filtering and tracing without
        parsing the body.
        """
        return {
            "eventType": self.event_type,
            "orderId": self.aggregate_id,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class EventEnvelope:
    """A parsed message body whose `type` has not been dispatched yet."""

    type: str
    detail: Dict[str, Any]
    timestamp: Optional[str] = None

    @classmethod
    def parse(cls, body: Any) -> "EventEnvelope":
        """
        Parse a raw message body.

        Raises:
            MalformedMessageError: body is not JSON, not an object, or lacks
                `type`/`detail`.
        """
        if isinstance(body, (bytes, bytearray)):
            body = body.decode("utf-8", errors="replace")
        if isinstance(body, str):
            try:
                data = json.loads(body)
            except (TypeError, ValueError) as e:
                raise MalformedMessageError(f"Failed to parse message body: {e}") from e
        else:
            data = body

        if not isinstance(data, dict):
            raise MalformedMessageError("Message body must be a JSON object")

        event_type = data.get("type")
        detail = data.get("detail")
        if not event_type or not detail:
            raise MalformedMessageError(
                f"Invalid message structure (type={event_type!r}, "
                f"has_detail={bool(detail)})"
            )
        if not isinstance(detail, dict):
            raise MalformedMessageError("Message detail must be a JSON object")

        return cls(type=str(event_type), detail=detail, timestamp=data.get("timestamp"))
