"""Application services."""
from .order_intake_service import OrderIntakeService
from .order_processor import BatchResult, MessageOutcome, MessageResult, OrderProcessor
from .order_query_service import ListOrdersQuery, OrderQueryService

__all__ = [
    "BatchResult",
    "ListOrdersQuery",
    "MessageOutcome",
    "MessageResult",
    "OrderIntakeService",
    "OrderProcessor",
    "OrderQueryService",
]
