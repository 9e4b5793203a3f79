"""
In-memory Order Repository Implementation.

Dictionary-backed store for tests, local development and demos. Mirrors
the conditional-write semantics of the SQL store exactly.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from core.domain.entities.order import Order
from core.domain.enums import OrderStatus
from core.domain.exceptions import ConflictError, NotFoundError, StatusPreconditionFailed
from core.domain.repositories import OrderPage, OrderRepository


logger = logging.getLogger(__name__)

Document = Dict[str, Any]


class InMemoryOrderRepository(OrderRepository):
    """
    In-memory implementation of OrderRepository.

    Orders are kept as serialized documents (`Order.to_dict`), so callers
    never share state with the store and every read rebuilds a fresh entity.
    """

    def __init__(self):
        """Initialize empty storage."""
        self._documents: Dict[str, Document] = {}
        logger.info("InMemoryOrderRepository initialized (in-memory storage)")

    async def create(self, order: Order) -> None:
        if order.id in self._documents:
            raise ConflictError("Order with this ID already exists")
        self._documents[order.id] = order.to_dict()
        logger.debug(f"Order stored in memory: {order.id} (status: {order.status.value})")

    async def get(self, order_id: str) -> Optional[Order]:
        document = self._documents.get(order_id)
        return Order.from_dict(document) if document else None

    async def update_status(
        self,
        order_id: str,
        status: OrderStatus,
        processing_notes: str,
        updated_at: datetime,
        expected_status: Optional[OrderStatus] = None,
    ) -> Order:
        document = self._documents.get(order_id)
        if document is None:
            raise NotFoundError(f"Order with ID {order_id} was not found")

        order = Order.from_dict(document)
        if expected_status is not None and order.status != expected_status:
            raise StatusPreconditionFailed(order_id, expected_status.value, order.status.value)

        order.apply_processing_outcome(status, processing_notes, updated_at)
        self._documents[order_id] = order.to_dict()
        return Order.from_dict(self._documents[order_id])

    async def query_by_status(
        self,
        status: OrderStatus,
        limit: int,
        ascending: bool = False,
        start_key: Optional[Dict[str, str]] = None,
    ) -> OrderPage:
        matching = sorted(
            (d for d in self._documents.values() if d["status"] == status.value),
            key=_index_key,
            reverse=not ascending,
        )
        if start_key:
            resume = (start_key["createdAt"], start_key["id"])
            if ascending:
                matching = [d for d in matching if _index_key(d) > resume]
            else:
                matching = [d for d in matching if _index_key(d) < resume]

        return _page(matching, limit, lambda d: {
            "status": d["status"],
            "createdAt": d["createdAt"],
            "id": d["id"],
        })

    async def scan(
        self,
        limit: int,
        start_key: Optional[Dict[str, str]] = None,
    ) -> OrderPage:
        ordered = sorted(self._documents.values(), key=lambda d: d["id"])
        if start_key:
            ordered = [d for d in ordered if d["id"] > start_key["id"]]
        return _page(ordered, limit, lambda d: {"id": d["id"]})

    async def health_check(self) -> Dict[str, Any]:
        return {
            "status": "healthy",
            "backend": "memory",
            "itemCount": len(self._documents),
            "message": "In-memory store available",
        }

    def get_all(self) -> List[Order]:
        """Get all orders (for demo/testing)."""
        return [Order.from_dict(d) for d in self._documents.values()]


def _index_key(document: Document):
    return (document["createdAt"], document["id"])


def _page(ordered: List[Document], limit: int, key_of) -> OrderPage:
    window = ordered[:limit]
    last_key = key_of(window[-1]) if len(ordered) > limit and window else None
    return OrderPage(
        items=[Order.from_dict(d) for d in window],
        last_evaluated_key=last_key,
    )
