"""
Order triage policy.

Decides where a freshly created order goes next. Pure function of the
order's line items, so replaying the same OrderCreated event always lands
on the same outcome.
"""
from dataclasses import dataclass
from typing import List

from ..entities.order import Number, OrderItem, calculate_total
from ..enums import OrderStatus

DEFAULT_REVIEW_ITEM_THRESHOLD = 10
DEFAULT_APPROVAL_VALUE_THRESHOLD = 10000

CONFIRMED_NOTE = "Order processed successfully"
REVIEW_NOTE = "Large order requires manual review"
APPROVAL_NOTE = "High-value order requires approval"


@dataclass(frozen=True)
class TriageDecision:
    """Outcome of triaging one order."""
    status: OrderStatus
    notes: str
    item_count: int
    total_value: Number


@dataclass(frozen=True)
class OrderTriagePolicy:
    """
    Business rules for order confirmation.

    Rules, in evaluation order:
    1. Default: CONFIRMED.
    2. More than `review_item_threshold` items: PENDING_REVIEW.
    3. Total value above `approval_value_threshold`: PENDING_APPROVAL.

    Rule 3 runs after rule 2 and overrides it, so value-based approval
    wins over item-count review when both hold.
    """
    review_item_threshold: int = DEFAULT_REVIEW_ITEM_THRESHOLD
    approval_value_threshold: Number = DEFAULT_APPROVAL_VALUE_THRESHOLD

    def evaluate(self, items: List[OrderItem]) -> TriageDecision:
        status = OrderStatus.CONFIRMED
        notes = CONFIRMED_NOTE

        item_count = len(items)
        if item_count > self.review_item_threshold:
            status = OrderStatus.PENDING_REVIEW
            notes = REVIEW_NOTE

        total_value = calculate_total(items)
        if total_value > self.approval_value_threshold:
            status = OrderStatus.PENDING_APPROVAL
            notes = APPROVAL_NOTE

        return TriageDecision(
            status=status,
            notes=notes,
            item_count=item_count,
            total_value=total_value,
        )
