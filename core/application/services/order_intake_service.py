"""Application service for order intake."""

import logging
from typing import Any, Optional

from core.application.dtos.order_dto import CreateOrderRequest, CreateOrderResponse
from core.domain.entities.order import Order
from core.domain.event_channel import EventChannel
from core.domain.events import OrderCreatedEvent
from core.domain.exceptions import InternalError
from core.domain.repositories import OrderRepository
from core.domain.value_objects import RequestID, to_iso


logger = logging.getLogger(__name__)


class OrderIntakeService:
    """
    Application service for accepting new orders.

    Responsibilities:
    - Validate the incoming payload once, at the boundary
    - Persist the order as PENDING with a conditional create
    - Publish OrderCreated for the processor
    """

    def __init__(self, repository: OrderRepository, channel: EventChannel) -> None:
        """Initialize intake service.

        Args:
            repository: Order store
            channel: Event channel to publish OrderCreated on
        """
        self._repository = repository
        self._channel = channel

    async def create_order(
        self,
        payload: Any,
        request_id: Optional[str] = None,
    ) -> CreateOrderResponse:
        """Validate, persist and announce a new order.

        Args:
            payload: Decoded JSON request body
            request_id: Request id for log correlation

        Returns:
            CreateOrderResponse with id, status and createdAt

        Raises:
            ValidationError: payload violates the order schema
            ConflictError: an order with the generated id already exists
            InternalError: the order was stored but the event could not be published
        """
        request_id = request_id or str(RequestID.generate())

        request = CreateOrderRequest.from_payload(payload)
        order = Order.create(
            customer_name=request.customer_name,
            items=[item.to_domain() for item in request.items],
        )

        logger.info(
            f"[{request_id}] Creating order {order.id} "
            f"(customer={order.customer_name}, items={order.item_count})"
        )
        await self._repository.create(order)
        logger.info(f"[{request_id}] Order {order.id} stored as {order.status.value}")

        event = OrderCreatedEvent.from_order(order)
        try:
            message_id = await self._channel.publish(event)
        except Exception as e:
            # The stored order stays PENDING; nothing compensates for it.
            logger.error(
                f"[{request_id}] Order {order.id} persisted but OrderCreated publish failed: {e}",
                exc_info=True,
            )
            raise InternalError() from e

        logger.info(f"[{request_id}] OrderCreated sent for {order.id} (msg_id={message_id})")

        return CreateOrderResponse(
            id=order.id,
            status=order.status,
            created_at=to_iso(order.created_at),
        )
