"""Application DTOs."""

from .order_dto import (
    CreateOrderRequest,
    CreateOrderResponse,
    OrderDTO,
    OrderFiltersDTO,
    OrderItemDTO,
    OrderListDTO,
    PaginationDTO,
    validate_create_order_payload,
)

__all__ = [
    "CreateOrderRequest",
    "CreateOrderResponse",
    "OrderDTO",
    "OrderFiltersDTO",
    "OrderItemDTO",
    "OrderListDTO",
    "PaginationDTO",
    "validate_create_order_payload",
]
