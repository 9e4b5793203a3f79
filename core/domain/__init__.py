"""Domain layer - pure domain models and interfaces."""

from .entities import Order, OrderItem
from .enums import OrderStatus
from .event_channel import ChannelMessage, EventChannel, MessageSource
from .policies import OrderTriagePolicy, TriageDecision
from .repositories import OrderPage, OrderRepository
from .value_objects import OrderId, RequestID

__all__ = [
    "ChannelMessage",
    "EventChannel",
    "MessageSource",
    "Order",
    "OrderId",
    "OrderItem",
    "OrderPage",
    "OrderRepository",
    "OrderStatus",
    "OrderTriagePolicy",
    "RequestID",
    "TriageDecision",
]
