"""Domain policies."""
from .order_triage import (
    APPROVAL_NOTE,
    CONFIRMED_NOTE,
    REVIEW_NOTE,
    OrderTriagePolicy,
    TriageDecision,
)

__all__ = [
    "APPROVAL_NOTE",
    "CONFIRMED_NOTE",
    "REVIEW_NOTE",
    "OrderTriagePolicy",
    "TriageDecision",
]
