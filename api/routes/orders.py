"""
Orders endpoints.

Create, fetch and list orders. Failures are raised as domain exceptions and
rendered by the handlers registered in api.main.
"""
import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse

from api.dependencies import get_intake_service, get_query_service
from core.application.services import ListOrdersQuery, OrderIntakeService, OrderQueryService
from core.domain.exceptions import ValidationError


logger = logging.getLogger(__name__)
router = APIRouter()


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


# =============================================================================
# CREATE ORDER
# =============================================================================

@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Create an order",
    description="Validate and store a new order, then queue it for processing",
)
async def create_order(
    request: Request,
    service: OrderIntakeService = Depends(get_intake_service),
):
    """
    Create a new order.

    **Body:**
    - `customerName`: non-empty string
    - `items`: non-empty list of `{sku, qty, price?}`

    **Returns:**
    - `{id, status: PENDING, createdAt}`
    """
    request_id = request.state.request_id

    raw = await request.body()
    payload = None
    if raw.strip():
        try:
            payload = json.loads(raw, parse_constant=_reject_constant)
        except ValueError as e:
            logger.warning(f"[{request_id}] Invalid JSON in request body: {e}")
            raise ValidationError(
                ["Request body must be valid JSON"], error="Invalid JSON format"
            ) from e

    try:
        created = await service.create_order(payload, request_id=request_id)
    except ValidationError as e:
        logger.warning(f"[{request_id}] Order validation failed: {e.errors}")
        raise

    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content={
            "success": True,
            "data": created.to_dict(),
            "message": "Order created successfully",
        },
    )


# =============================================================================
# LIST ORDERS
# =============================================================================

@router.get(
    "",
    status_code=status.HTTP_200_OK,
    summary="List orders",
    description="List orders, optionally filtered by status, with cursor pagination",
)
async def list_orders(
    request: Request,
    order_status: Optional[str] = Query(default=None, alias="status"),
    limit: Optional[str] = Query(default=None, description="1-100, default 10"),
    sort_order: Optional[str] = Query(default=None, alias="sortOrder"),
    next_token: Optional[str] = Query(default=None, alias="nextToken"),
    service: OrderQueryService = Depends(get_query_service),
):
    """
    List orders.

    **Query Parameters:**
    - `status`: one of the order statuses; anything else is ignored
    - `limit`: page size, clamped to 1-100 (default: 10)
    - `sortOrder`: `asc` or `desc` by createdAt (default: desc)
    - `nextToken`: opaque token from the previous page
    """
    query = ListOrdersQuery.from_params(
        status=order_status,
        limit=limit,
        sort_order=sort_order,
        next_token=next_token,
    )
    result = await service.list_orders(query, request_id=request.state.request_id)

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={"success": True, "data": result.to_dict()},
        headers={"Cache-Control": "no-cache"},
    )


# =============================================================================
# GET ORDER BY ID
# =============================================================================

@router.get(
    "/{order_id}",
    status_code=status.HTTP_200_OK,
    summary="Get order by ID",
    description="Get an order with its derived total and item count",
)
async def get_order(
    order_id: str,
    request: Request,
    service: OrderQueryService = Depends(get_query_service),
):
    order = await service.get_order(order_id, request_id=request.state.request_id)
    return {"success": True, "data": order.to_dict()}
