"""Repository interfaces for Order aggregate."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..entities.order import Order
from ..enums import OrderStatus

# Resume-key shapes shared by every store implementation.
SCAN_KEY_FIELDS = ("id",)
INDEX_KEY_FIELDS = ("status", "createdAt", "id")


@dataclass
class OrderPage:
    """One page of a scan or index query."""

    items: List[Order] = field(default_factory=list)
    last_evaluated_key: Optional[Dict[str, str]] = None

    @property
    def has_more(self) -> bool:
        return self.last_evaluated_key is not None


class OrderRepository(ABC):
    """
    Abstract order store.

    Keyed by order id. The only concurrency control is conditional writes:
    create-if-absent and update-if-exists. Point reads are strongly
    consistent.
    """

    @abstractmethod
    async def create(self, order: Order) -> None:
        """Persist a new order.

        Args:
            order: Order aggregate to persist

        Raises:
            ConflictError: an order with the same id already exists
            ThrottlingError: the store is overloaded
        """
        pass

    @abstractmethod
    async def get(self, order_id: str) -> Optional[Order]:
        """Strongly consistent read by id.

        Args:
            order_id: Order identifier

        Returns:
            Order if found, None otherwise
        """
        pass

    @abstractmethod
    async def update_status(
        self,
        order_id: str,
        status: OrderStatus,
        processing_notes: str,
        updated_at: datetime,
        expected_status: Optional[OrderStatus] = None,
    ) -> Order:
        """Conditionally update status, notes and updatedAt.

        Args:
            order_id: Order identifier
            status: New status
            processing_notes: Processor annotation
            updated_at: Mutation timestamp
            expected_status: When given, the order must currently be in it

        Returns:
            The order as stored after the update

        Raises:
            NotFoundError: the order does not exist
            StatusPreconditionFailed: `expected_status` did not hold
        """
        pass

    @abstractmethod
    async def query_by_status(
        self,
        status: OrderStatus,
        limit: int,
        ascending: bool = False,
        start_key: Optional[Dict[str, str]] = None,
    ) -> OrderPage:
        """Query the status index, ordered by (createdAt, id).

        Args:
            status: Index partition to read
            limit: Maximum number of orders to return
            ascending: Oldest first when True
            start_key: Resume key from a previous page (INDEX_KEY_FIELDS)
        """
        pass

    @abstractmethod
    async def scan(
        self,
        limit: int,
        start_key: Optional[Dict[str, str]] = None,
    ) -> OrderPage:
        """Bounded scan in primary-key order.

        Args:
            limit: Maximum number of orders to return
            start_key: Resume key from a previous page (SCAN_KEY_FIELDS)
        """
        pass

    @abstractmethod
    async def health_check(self) -> Dict[str, Any]:
        """Report connectivity. Raises if the store is unreachable."""
        pass

    async def close(self) -> None:
        """Release connections. Default is a no-op."""
        return None
