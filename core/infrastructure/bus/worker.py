"""
Order processor worker.

Long-running loop: read a batch from the event channel, run the order
processor over it, then settle each message:

- success: ACK
- permanent failure: dead-letter immediately
- retryable failure: leave pending for redelivery, or dead-letter once
  its delivery count reaches `max_deliveries`
"""
import asyncio
import logging
from typing import List, Optional

from dotenv import load_dotenv

from core.application.services.order_processor import (
    BatchResult,
    OrderProcessor,
)
from core.domain.event_channel import ChannelMessage, MessageSource
from core.domain.policies import OrderTriagePolicy
from core.domain.repositories import OrderRepository
from core.infrastructure.factory import create_message_source, create_order_repository
from core.infrastructure.logging import configure_logging
from core.settings import AppSettings, get_app_settings


logger = logging.getLogger(__name__)


async def dispatch_batch(
    messages: List[ChannelMessage],
    source: MessageSource,
    processor: OrderProcessor,
    max_deliveries: int,
) -> BatchResult:
    """Process one batch and settle every message in it."""
    batch = await processor.process_batch(messages)
    by_id = {m.message_id: m for m in messages}

    acked = [r.message_id for r in batch.succeeded]
    if acked:
        await source.acknowledge(acked)

    for result in batch.permanent_failures:
        await source.dead_letter(by_id[result.message_id], result.reason or "permanent failure")

    for result in batch.retryable_failures:
        message = by_id[result.message_id]
        if message.delivery_count >= max_deliveries:
            await source.dead_letter(
                message,
                f"exceeded {max_deliveries} deliveries: {result.reason}",
            )
        else:
            logger.info(
                f"Message {message.message_id} left pending for retry "
                f"(delivery {message.delivery_count}/{max_deliveries})"
            )

    return batch


def build_processor(repository: OrderRepository, settings: AppSettings) -> OrderProcessor:
    return OrderProcessor(
        repository,
        policy=OrderTriagePolicy(
            review_item_threshold=settings.processor.review_item_threshold,
            approval_value_threshold=settings.processor.approval_value_threshold,
        ),
        require_pending=settings.processor.require_pending,
    )


async def run_worker(
    source: MessageSource,
    processor: OrderProcessor,
    batch_size: int = 10,
    max_deliveries: int = 3,
    poll_interval: float = 1.0,
    stop_event: Optional[asyncio.Event] = None,
) -> None:
    """
    Start the order processor worker (long-running process).

    Args:
        source: Consuming side of the event channel
        processor: Order processor
        batch_size: Maximum messages per batch
        max_deliveries: Deliveries before a retryable message is dead-lettered
        poll_interval: Time to wait between empty polls or after a loop fault (seconds)
        stop_event: Set to stop the loop after the current batch
    """
    stop_event = stop_event or asyncio.Event()
    logger.info(f"Starting order processor worker (batch_size={batch_size})")

    while not stop_event.is_set():
        try:
            messages = await source.receive(batch_size)
            if not messages:
                await asyncio.sleep(poll_interval)
                continue

            logger.info(f"Received {len(messages)} message(s)")
            await dispatch_batch(messages, source, processor, max_deliveries)

        except Exception as e:
            logger.error(f"Worker error: {e}", exc_info=True)
            await asyncio.sleep(poll_interval)

    logger.info("Order processor worker stopped")


async def _main(settings: AppSettings) -> None:
    repository = await create_order_repository(settings)
    source = create_message_source(settings)
    try:
        await run_worker(
            source,
            build_processor(repository, settings),
            batch_size=settings.processor.batch_size,
            max_deliveries=settings.processor.max_deliveries,
            poll_interval=settings.processor.poll_interval,
        )
    finally:
        await source.close()
        await repository.close()


def main() -> None:
    """Console entry point: `orders-worker`."""
    load_dotenv()
    settings = get_app_settings()
    configure_logging(settings.service.log_level)
    try:
        asyncio.run(_main(settings))
    except KeyboardInterrupt:
        logger.info("Stopping order processor worker...")


if __name__ == "__main__":
    main()
