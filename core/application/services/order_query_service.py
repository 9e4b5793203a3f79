"""Application service for reading orders."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from core.application.dtos.order_dto import (
    OrderDTO,
    OrderFiltersDTO,
    OrderListDTO,
    PaginationDTO,
)
from core.domain.enums import OrderStatus
from core.domain.exceptions import NotFoundError, ValidationError
from core.domain.repositories import (
    INDEX_KEY_FIELDS,
    SCAN_KEY_FIELDS,
    InvalidPageToken,
    OrderPage,
    OrderRepository,
    decode_page_token,
    encode_page_token,
)
from core.domain.value_objects import OrderId, RequestID


logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10
MAX_LIMIT = 100


@dataclass(frozen=True)
class ListOrdersQuery:
    """Normalized list parameters. Build with `from_params`."""

    status: Optional[OrderStatus] = None
    limit: int = DEFAULT_LIMIT
    sort_order: str = "desc"
    next_token: Optional[str] = None

    @property
    def ascending(self) -> bool:
        return self.sort_order == "asc"

    @classmethod
    def from_params(
        cls,
        status: Optional[str] = None,
        limit: Optional[Any] = None,
        sort_order: Optional[str] = None,
        next_token: Optional[str] = None,
    ) -> "ListOrdersQuery":
        """
        Normalize raw query-string values. Never raises.

        - unknown status: no filter
        - limit: clamped to 1..100, default 10 when missing or not an integer
        - sortOrder: asc/desc in any case, default desc
        """
        return cls(
            status=OrderStatus.parse(status) if status else None,
            limit=_parse_limit(limit),
            sort_order=_parse_sort_order(sort_order),
            next_token=next_token or None,
        )


def _parse_limit(raw: Optional[Any]) -> int:
    if raw is None or isinstance(raw, bool):
        return DEFAULT_LIMIT
    try:
        value = int(str(raw).strip())
    except ValueError:
        return DEFAULT_LIMIT
    return max(1, min(MAX_LIMIT, value))


def _parse_sort_order(raw: Optional[str]) -> str:
    if raw and raw.lower() in ("asc", "desc"):
        return raw.lower()
    return "desc"


class OrderQueryService:
    """
    Application service for order reads.

    Responsibilities:
    - Point lookups with id format checks
    - Filtered, paginated listing (status index or bounded scan)
    - Enrichment with derived totals
    """

    def __init__(self, repository: OrderRepository) -> None:
        self._repository = repository

    async def get_order(
        self,
        order_id: str,
        request_id: Optional[str] = None,
    ) -> OrderDTO:
        """Get order by ID.

        Raises:
            ValidationError: `order_id` is not a UUID
            NotFoundError: no order with that id
        """
        request_id = request_id or str(RequestID.generate())

        if not order_id:
            raise ValidationError(
                ["Order ID is required in the URL path"], error="Bad Request"
            )
        if not OrderId.is_valid(order_id):
            logger.warning(f"[{request_id}] Invalid order ID format: {order_id}")
            raise ValidationError(
                ["Invalid order ID format. Must be a valid UUID."], error="Bad Request"
            )

        order = await self._repository.get(order_id)
        if order is None:
            logger.info(f"[{request_id}] Order {order_id} not found")
            raise NotFoundError(f"Order with ID {order_id} was not found")

        logger.info(f"[{request_id}] Order {order_id} retrieved ({order.status.value})")
        return OrderDTO.from_entity(order)

    async def list_orders(
        self,
        query: ListOrdersQuery,
        request_id: Optional[str] = None,
    ) -> OrderListDTO:
        """List orders, newest first unless `sort_order` is asc."""
        request_id = request_id or str(RequestID.generate())
        logger.info(
            f"[{request_id}] Listing orders: status={query.status and query.status.value}, "
            f"limit={query.limit}, sortOrder={query.sort_order}"
        )

        start_key = self._resume_key(query, request_id)
        try:
            page = await self._fetch(query, start_key)
        except InvalidPageToken as e:
            logger.warning(f"[{request_id}] Pagination token rejected by store, restarting: {e}")
            page = await self._fetch(query, None)

        orders = page.items
        if query.status is None:
            # Scan pages come back in key order; only this page is sorted.
            orders = sorted(orders, key=lambda o: o.created_at, reverse=not query.ascending)

        dtos = [OrderDTO.from_entity(order) for order in orders]
        next_token = encode_page_token(page.last_evaluated_key)

        logger.info(
            f"[{request_id}] Listed {len(dtos)} order(s), hasMore={next_token is not None}"
        )
        return OrderListDTO(
            orders=dtos,
            pagination=PaginationDTO(
                limit=query.limit,
                count=len(dtos),
                has_more=next_token is not None,
                next_token=next_token,
            ),
            filters=OrderFiltersDTO(status=query.status, sort_order=query.sort_order),
        )

    async def _fetch(
        self,
        query: ListOrdersQuery,
        start_key: Optional[Dict[str, str]],
    ) -> OrderPage:
        if query.status is not None:
            return await self._repository.query_by_status(
                query.status,
                limit=query.limit,
                ascending=query.ascending,
                start_key=start_key,
            )
        return await self._repository.scan(limit=query.limit, start_key=start_key)

    def _resume_key(
        self,
        query: ListOrdersQuery,
        request_id: str,
    ) -> Optional[Dict[str, str]]:
        """Decode `next_token`; a bad token is logged and the list restarts."""
        if not query.next_token:
            return None

        required = INDEX_KEY_FIELDS if query.status is not None else SCAN_KEY_FIELDS
        try:
            key = decode_page_token(query.next_token, required)
        except InvalidPageToken as e:
            logger.warning(f"[{request_id}] Invalid pagination token provided: {e}")
            return None

        if query.status is not None and key["status"] != query.status.value:
            logger.warning(
                f"[{request_id}] Pagination token is for status {key['status']}, "
                f"not {query.status.value}; ignoring it"
            )
            return None
        return key
