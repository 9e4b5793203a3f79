"""Application layer - services and DTOs."""

from .dtos import CreateOrderRequest, CreateOrderResponse, OrderDTO, OrderItemDTO, OrderListDTO
from .services import (
    BatchResult,
    ListOrdersQuery,
    MessageOutcome,
    MessageResult,
    OrderIntakeService,
    OrderProcessor,
    OrderQueryService,
)

__all__ = [
    # DTOs
    "CreateOrderRequest",
    "CreateOrderResponse",
    "OrderDTO",
    "OrderItemDTO",
    "OrderListDTO",
    # Services
    "OrderIntakeService",
    "OrderQueryService",
    "OrderProcessor",
    "ListOrdersQuery",
    "BatchResult",
    "MessageOutcome",
    "MessageResult",
]
