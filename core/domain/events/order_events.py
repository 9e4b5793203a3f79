"""
Order Domain Events.

Events that occur during the order lifecycle.

- Published to the event channel by the intake service
- Consumed by the order processor
"""
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..entities.order import Order, OrderItem
from ..exceptions import MalformedMessageError
from ..value_objects import to_iso
from .base import DomainEvent, EventEnvelope

ORDER_CREATED = "OrderCreated"


@dataclass
class OrderCreatedEvent(DomainEvent):
    """
    Order was created in the system.

    Trigger: successful conditional create by the intake service
    Consumers: order processor
    """

    order_id: str = ""
    customer_name: str = ""
    items: List[OrderItem] = field(default_factory=list)
    created_at: str = ""

    def __post_init__(self):
        """Set aggregate_id to order_id."""
        if not self.aggregate_id and self.order_id:
            object.__setattr__(self, "aggregate_id", self.order_id)
        super().__post_init__()

    @classmethod
    def from_order(cls, order: Order) -> "OrderCreatedEvent":
        return cls(
            order_id=order.id,
            customer_name=order.customer_name,
            items=list(order.items),
            created_at=to_iso(order.created_at),
            occurred_at=order.created_at,
        )

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "id": self.order_id,
            "customerName": self.customer_name,
            "items": [item.to_dict() for item in self.items],
            "createdAt": self.created_at,
        }


@dataclass(frozen=True)
class OrderCreatedDetail:
    """
    The `detail` block of an OrderCreated message, as the processor sees it.

    Items are read leniently: a missing or non-finite qty or price counts as
    zero, the same way totals are computed at read time.
    """

    order_id: str
    customer_name: str
    items: List[OrderItem]

    @classmethod
    def from_envelope(cls, envelope: EventEnvelope) -> "OrderCreatedDetail":
        detail = envelope.detail
        order_id = detail.get("id")
        if not order_id:
            raise MalformedMessageError("Missing order ID in OrderCreated event")

        raw_items = detail.get("items") or []
        if not isinstance(raw_items, list):
            raise MalformedMessageError("OrderCreated items must be a list")

        items = []
        for raw in raw_items:
            if not isinstance(raw, dict):
                raise MalformedMessageError("OrderCreated item must be an object")
            items.append(
                OrderItem(
                    sku=str(raw.get("sku", "")),
                    qty=_number(raw.get("qty")),
                    price=_number(raw.get("price")),
                )
            )

        return cls(
            order_id=str(order_id),
            customer_name=str(detail.get("customerName", "")),
            items=items,
        )


def _number(value: Any):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    return value
