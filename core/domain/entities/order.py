"""
Order aggregate root.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional, Union

from ..enums import OrderStatus
from ..value_objects import OrderId, parse_iso, to_iso, utc_now

Number = Union[int, float]


@dataclass(frozen=True)
class OrderItem:
    """Individual line item within an order."""
    sku: str
    qty: Number
    price: Number = 0

    @property
    def line_total(self) -> Number:
        return self.qty * self.price

    def to_dict(self) -> Dict[str, Any]:
        return {"sku": self.sku, "qty": self.qty, "price": self.price}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrderItem":
        return cls(sku=data["sku"], qty=data["qty"], price=data.get("price") or 0)


def calculate_total(items: List[OrderItem]) -> Number:
    """Raw sum of qty x price over all items."""
    return sum((item.line_total for item in items), 0)


def round_money(value: Number) -> float:
    """Round to 2 decimals the way a cashier would (half up)."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


@dataclass
class Order:
    """
    Order aggregate root.

    Created PENDING by the intake service, mutated exactly once by the
    processor, read any number of times. `order_total` and `item_count` are
    derived on every read and never persisted.
    """
    id: str
    customer_name: str
    items: List[OrderItem] = field(default_factory=list)
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    processing_notes: Optional[str] = None

    @classmethod
    def create(
        cls,
        customer_name: str,
        items: List[OrderItem],
        now: Optional[datetime] = None,
    ) -> "Order":
        """Factory for a brand new order with a fresh id."""
        timestamp = now or utc_now()
        return cls(
            id=OrderId.generate().value,
            customer_name=customer_name.strip(),
            items=list(items),
            status=OrderStatus.PENDING,
            created_at=timestamp,
            updated_at=timestamp,
        )

    @property
    def item_count(self) -> int:
        return len(self.items)

    @property
    def total_value(self) -> Number:
        return calculate_total(self.items)

    @property
    def order_total(self) -> float:
        return round_money(self.total_value)

    def apply_processing_outcome(
        self,
        status: OrderStatus,
        notes: str,
        now: Optional[datetime] = None,
    ) -> None:
        """Business rule: record the processor's decision."""
        self.status = status
        self.processing_notes = notes
        self.updated_at = now or utc_now()

    def to_dict(self) -> Dict[str, Any]:
        """Persisted document shape (no derived fields)."""
        data: Dict[str, Any] = {
            "id": self.id,
            "customerName": self.customer_name,
            "items": [item.to_dict() for item in self.items],
            "status": self.status.value,
            "createdAt": to_iso(self.created_at),
            "updatedAt": to_iso(self.updated_at),
        }
        if self.processing_notes is not None:
            data["processingNotes"] = self.processing_notes
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Order":
        return cls(
            id=data["id"],
            customer_name=data["customerName"],
            items=[OrderItem.from_dict(item) for item in data.get("items", [])],
            status=OrderStatus(data["status"]),
            created_at=parse_iso(data["createdAt"]),
            updated_at=parse_iso(data["updatedAt"]),
            processing_notes=data.get("processingNotes"),
        )
