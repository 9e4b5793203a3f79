"""Application DTOs for Order operations."""

import math
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from core.domain.entities.order import Order, OrderItem
from core.domain.enums import OrderStatus
from core.domain.exceptions import ValidationError
from core.domain.value_objects import to_iso

Number = Union[int, float]


class OrderItemDTO(BaseModel):
    """DTO for order item."""

    sku: str = Field(..., min_length=1, description="Product SKU")
    qty: Number = Field(..., gt=0, description="Quantity ordered")
    price: Number = Field(default=0, ge=0, description="Unit price")

    model_config = {"frozen": True}

    def to_domain(self) -> OrderItem:
        return OrderItem(sku=self.sku, qty=self.qty, price=self.price)


class CreateOrderRequest(BaseModel):
    """Request DTO for creating an order."""

    customer_name: str = Field(..., min_length=1, description="Customer display name")
    items: List[OrderItemDTO] = Field(..., min_length=1, description="Order items")

    model_config = {"frozen": True}

    @classmethod
    def from_payload(cls, payload: Any) -> "CreateOrderRequest":
        """
        Validate a decoded JSON body and build the request.

        Every violation is collected before raising, so a client sees all of
        its mistakes in one response.

        Raises:
            ValidationError: listing each violated field
        """
        errors = validate_create_order_payload(payload)
        if errors:
            raise ValidationError(errors)

        try:
            return cls(
                customer_name=payload["customerName"].strip(),
                items=[
                    OrderItemDTO(
                        sku=item["sku"],
                        qty=item["qty"],
                        price=item.get("price", 0),
                    )
                    for item in payload["items"]
                ],
            )
        except PydanticValidationError as e:
            raise ValidationError([
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                for err in e.errors()
            ]) from e


def _is_finite(value: Any) -> bool:
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return _is_finite(value)


def _total_is_finite(items: List[Dict[str, Any]]) -> bool:
    try:
        return _is_finite(sum(item["qty"] * item.get("price", 0) for item in items))
    except OverflowError:
        return False


def validate_create_order_payload(payload: Any) -> List[str]:
    """Return every validation error in `payload`; empty when valid."""
    if payload is None:
        return ["Request body is required"]
    if not isinstance(payload, dict):
        return ["Request body must be a JSON object"]

    errors = []

    customer_name = payload.get("customerName")
    if not isinstance(customer_name, str) or not customer_name.strip():
        errors.append("customerName is required and must be a non-empty string")

    items = payload.get("items")
    if not isinstance(items, list) or not items:
        errors.append("items must be a non-empty array")
        return errors

    for index, item in enumerate(items):
        if not isinstance(item, dict):
            item = {}
        sku = item.get("sku")
        if not isinstance(sku, str) or not sku:
            errors.append(f"Item {index}: sku is required and must be a string")
        qty = item.get("qty")
        if not _is_number(qty) or qty <= 0:
            errors.append(f"Item {index}: qty is required and must be a positive number")
        if "price" in item:
            price = item["price"]
            if not _is_number(price) or price < 0:
                errors.append(f"Item {index}: price must be a non-negative number")

    if not errors and not _total_is_finite(items):
        errors.append("Order total is too large")

    return errors


class CreateOrderResponse(BaseModel):
    """Response DTO for a freshly created order."""

    id: str
    status: OrderStatus
    created_at: str = Field(..., serialization_alias="createdAt")

    model_config = {"frozen": True}

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class OrderDTO(BaseModel):
    """Response DTO for order details, with derived totals."""

    id: str
    customer_name: str = Field(..., serialization_alias="customerName")
    items: List[OrderItemDTO] = Field(default_factory=list)
    status: OrderStatus
    created_at: str = Field(..., serialization_alias="createdAt")
    updated_at: str = Field(..., serialization_alias="updatedAt")
    processing_notes: Optional[str] = Field(None, serialization_alias="processingNotes")
    item_count: int = Field(..., ge=0, serialization_alias="itemCount")
    order_total: float = Field(..., serialization_alias="orderTotal")

    model_config = {"frozen": True}

    @classmethod
    def from_entity(cls, order: Order) -> "OrderDTO":
        return cls.model_construct(
            id=order.id,
            customer_name=order.customer_name,
            items=[
                OrderItemDTO.model_construct(sku=i.sku, qty=i.qty, price=i.price)
                for i in order.items
            ],
            status=order.status,
            created_at=to_iso(order.created_at),
            updated_at=to_iso(order.updated_at),
            processing_notes=order.processing_notes,
            item_count=order.item_count,
            order_total=order.order_total,
        )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class PaginationDTO(BaseModel):
    """Pagination block of a list response."""

    limit: int
    count: int
    has_more: bool = Field(..., serialization_alias="hasMore")
    next_token: Optional[str] = Field(None, serialization_alias="nextToken")

    model_config = {"frozen": True}


class OrderFiltersDTO(BaseModel):
    """Filters actually applied to a list request."""

    status: Optional[OrderStatus] = None
    sort_order: str = Field("desc", serialization_alias="sortOrder")

    model_config = {"frozen": True}


class OrderListDTO(BaseModel):
    """DTO for listing orders."""

    orders: List[OrderDTO] = Field(default_factory=list, description="List of orders")
    pagination: PaginationDTO
    filters: OrderFiltersDTO

    model_config = {"frozen": True}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "orders": [order.to_dict() for order in self.orders],
            "pagination": self.pagination.model_dump(mode="json", by_alias=True),
            "filters": self.filters.model_dump(mode="json", by_alias=True),
        }
