"""
Order processor.

Consumes OrderCreated messages, applies the triage policy and records the
outcome on the order. Each message in a batch is handled on its own; one
bad message never stops the rest.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from core.domain.enums import OrderStatus
from core.domain.event_channel import ChannelMessage
from core.domain.events import ORDER_CREATED, EventEnvelope, OrderCreatedDetail
from core.domain.exceptions import (
    MalformedMessageError,
    NotFoundError,
    StatusPreconditionFailed,
    ValidationError,
)
from core.domain.policies import OrderTriagePolicy
from core.domain.repositories import OrderRepository
from core.domain.value_objects import utc_now


logger = logging.getLogger(__name__)


class MessageOutcome(str, Enum):
    """What should happen to a message after processing."""

    SUCCESS = "SUCCESS"
    RETRYABLE = "RETRYABLE"
    PERMANENT = "PERMANENT"


@dataclass(frozen=True)
class MessageResult:
    """Result of processing a single message."""

    message_id: str
    outcome: MessageOutcome
    order_id: Optional[str] = None
    status: Optional[OrderStatus] = None
    reason: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.outcome is not MessageOutcome.SUCCESS


@dataclass
class BatchResult:
    """Aggregated results of one batch, in delivery order."""

    results: List[MessageResult] = field(default_factory=list)

    @property
    def batch_item_failures(self) -> List[str]:
        """Ids of every failed message, permanent and retryable alike."""
        return [r.message_id for r in self.results if r.failed]

    @property
    def succeeded(self) -> List[MessageResult]:
        return [r for r in self.results if r.outcome is MessageOutcome.SUCCESS]

    @property
    def permanent_failures(self) -> List[MessageResult]:
        return [r for r in self.results if r.outcome is MessageOutcome.PERMANENT]

    @property
    def retryable_failures(self) -> List[MessageResult]:
        return [r for r in self.results if r.outcome is MessageOutcome.RETRYABLE]


class OrderProcessor:
    """
    Applies triage decisions to orders announced on the event channel.

    Failure classes:
    - permanent: unparsable body, missing type/detail, unknown type,
      OrderCreated without an order id, order not found, store validation
      fault. Never retried.
    - retryable: anything else (timeouts, throttling, connection loss).

    Reprocessing the same message re-evaluates the same rules and writes the
    same status again. With `require_pending`, the update only applies to an
    order still PENDING; a redelivery for an order that already moved on is
    treated as done.
    """

    def __init__(
        self,
        repository: OrderRepository,
        policy: Optional[OrderTriagePolicy] = None,
        require_pending: bool = False,
    ) -> None:
        self._repository = repository
        self._policy = policy or OrderTriagePolicy()
        self._require_pending = require_pending

    async def process_batch(self, messages: List[ChannelMessage]) -> BatchResult:
        logger.info(f"Starting order processor batch ({len(messages)} message(s))")

        batch = BatchResult()
        for message in messages:
            batch.results.append(await self.process_message(message))

        logger.info(
            f"Order processor batch completed: total={len(messages)}, "
            f"succeeded={len(batch.succeeded)}, failed={len(batch.batch_item_failures)}, "
            f"batchItemFailures={batch.batch_item_failures}"
        )
        return batch

    async def process_message(self, message: ChannelMessage) -> MessageResult:
        message_id = message.message_id
        order_id = None

        try:
            envelope = EventEnvelope.parse(message.body)

            if envelope.type != ORDER_CREATED:
                logger.warning(
                    f"[{message_id}] Unknown message type received: {envelope.type}"
                )
                return MessageResult(
                    message_id,
                    MessageOutcome.PERMANENT,
                    reason=f"Unknown message type: {envelope.type}",
                )

            detail = OrderCreatedDetail.from_envelope(envelope)
            order_id = detail.order_id
            logger.info(
                f"[{message_id}] Processing OrderCreated event: "
                f"order={order_id}, customer={detail.customer_name}"
            )
            return await self._apply_triage(message_id, detail)

        except MalformedMessageError as e:
            logger.error(f"[{message_id}] Discarding malformed message: {e}")
            return MessageResult(message_id, MessageOutcome.PERMANENT, order_id, reason=str(e))

        except NotFoundError as e:
            logger.warning(
                f"[{message_id}] Order {order_id} not found for update, message will be discarded"
            )
            return MessageResult(message_id, MessageOutcome.PERMANENT, order_id, reason=e.message)

        except ValidationError as e:
            logger.warning(
                f"[{message_id}] Store validation error for order {order_id}, "
                f"message will be discarded: {e.message}"
            )
            return MessageResult(message_id, MessageOutcome.PERMANENT, order_id, reason=e.message)

        except Exception as e:
            logger.error(
                f"[{message_id}] Transient error processing order {order_id}, "
                f"message will be retried: {e}",
                exc_info=True,
            )
            return MessageResult(message_id, MessageOutcome.RETRYABLE, order_id, reason=str(e))

    async def _apply_triage(self, message_id: str, detail: OrderCreatedDetail) -> MessageResult:
        decision = self._policy.evaluate(detail.items)

        if decision.status is OrderStatus.PENDING_REVIEW:
            logger.warning(
                f"[{message_id}] Large order flagged for review: "
                f"order={detail.order_id}, itemCount={decision.item_count}"
            )
        elif decision.status is OrderStatus.PENDING_APPROVAL:
            logger.warning(
                f"[{message_id}] High-value order flagged for approval: "
                f"order={detail.order_id}, totalValue={decision.total_value}"
            )

        expected = OrderStatus.PENDING if self._require_pending else None
        try:
            updated = await self._repository.update_status(
                detail.order_id,
                decision.status,
                decision.notes,
                updated_at=utc_now(),
                expected_status=expected,
            )
        except StatusPreconditionFailed as e:
            logger.info(
                f"[{message_id}] Order {detail.order_id} already {e.actual}, skipping update"
            )
            return MessageResult(
                message_id,
                MessageOutcome.SUCCESS,
                detail.order_id,
                status=OrderStatus(e.actual),
                reason="already processed",
            )

        logger.info(
            f"[{message_id}] Order status updated: order={detail.order_id}, "
            f"newStatus={updated.status.value}, notes={updated.processing_notes}"
        )
        return MessageResult(
            message_id,
            MessageOutcome.SUCCESS,
            detail.order_id,
            status=updated.status,
        )
