"""Domain events for the order workflow."""
from .base import DomainEvent, EventEnvelope
from .order_events import ORDER_CREATED, OrderCreatedDetail, OrderCreatedEvent

__all__ = [
    "DomainEvent",
    "EventEnvelope",
    "ORDER_CREATED",
    "OrderCreatedDetail",
    "OrderCreatedEvent",
]
