"""
Order Status Enum.

Lifecycle states of an order.
"""
from enum import Enum
from typing import Optional


class OrderStatus(str, Enum):
    """
    Order status values.

    PENDING is the only initial state. The processor moves an order to
    CONFIRMED, PENDING_REVIEW or PENDING_APPROVAL. CANCELLED has no
    producing transition in this service.
    """

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PENDING_REVIEW = "PENDING_REVIEW"
    PENDING_APPROVAL = "PENDING_APPROVAL"
    CANCELLED = "CANCELLED"

    @classmethod
    def parse(cls, value: object) -> Optional["OrderStatus"]:
        """Return the matching status, or None for anything unknown."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None
