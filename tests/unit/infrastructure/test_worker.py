"""Tests for the order processor worker loop and message settlement."""

import asyncio
import json
import uuid
from unittest.mock import AsyncMock

import pytest

from core.application.services import OrderProcessor
from core.domain.entities.order import OrderItem
from core.domain.enums import OrderStatus
from core.domain.events import OrderCreatedEvent
from core.domain.repositories import OrderRepository
from core.infrastructure.bus import InMemoryEventChannel
from core.infrastructure.bus.worker import build_processor, dispatch_batch, run_worker


@pytest.mark.asyncio
async def test_success_is_acked_and_permanent_failure_dead_lettered(
    repository, channel, make_order
):
    order = make_order()
    await repository.create(order)
    await channel.publish(OrderCreatedEvent.from_order(order))
    channel.put_raw("{not json")

    messages = await channel.receive(10)
    batch = await dispatch_batch(messages, channel, OrderProcessor(repository), max_deliveries=3)

    assert len(batch.succeeded) == 1
    assert channel.pending_ids == []
    assert [reason for _, reason in channel.dead_letters] == [batch.permanent_failures[0].reason]
    assert (await repository.get(order.id)).status == OrderStatus.CONFIRMED


@pytest.mark.asyncio
async def test_retryable_failure_is_dead_lettered_after_max_deliveries(channel, order_created_body):
    repository = AsyncMock(spec=OrderRepository)
    repository.update_status.side_effect = ConnectionError("database unreachable")
    processor = OrderProcessor(repository)
    channel.put_raw(json.dumps(order_created_body(str(uuid.uuid4()), [{"sku": "A", "qty": 1}])))

    for expected_delivery in (1, 2):
        messages = await channel.receive(10)
        assert messages[0].delivery_count == expected_delivery
        await dispatch_batch(messages, channel, processor, max_deliveries=3)
        assert len(channel.pending_ids) == 1
        assert channel.dead_letters == []

    messages = await channel.receive(10)
    await dispatch_batch(messages, channel, processor, max_deliveries=3)

    assert channel.pending_ids == []
    [(message, reason)] = channel.dead_letters
    assert message.delivery_count == 3
    assert reason.startswith("exceeded 3 deliveries")


@pytest.mark.asyncio
async def test_run_worker_processes_until_stopped(repository, make_order):
    stop = asyncio.Event()

    class StoppingChannel(InMemoryEventChannel):
        async def acknowledge(self, message_ids):
            await super().acknowledge(message_ids)
            stop.set()

    channel = StoppingChannel()
    order = make_order(items=[OrderItem(sku=f"S{i}", qty=1, price=1) for i in range(11)])
    await repository.create(order)
    await channel.publish(OrderCreatedEvent.from_order(order))

    await asyncio.wait_for(
        run_worker(channel, OrderProcessor(repository), poll_interval=0.01, stop_event=stop),
        timeout=5,
    )

    assert (await repository.get(order.id)).status == OrderStatus.PENDING_REVIEW
    assert channel.pending_ids == []


@pytest.mark.asyncio
async def test_run_worker_survives_receive_errors(repository):
    stop = asyncio.Event()
    source = AsyncMock()
    calls = {"n": 0}

    async def flaky_receive(max_messages):
        calls["n"] += 1
        if calls["n"] == 1:
            raise ConnectionError("redis went away")
        stop.set()
        return []

    source.receive.side_effect = flaky_receive

    await asyncio.wait_for(
        run_worker(source, OrderProcessor(repository), poll_interval=0.01, stop_event=stop),
        timeout=5,
    )

    assert calls["n"] == 2


def test_build_processor_uses_settings(memory_settings, repository):
    settings = memory_settings.model_copy(
        update={
            "processor": memory_settings.processor.model_copy(
                update={"review_item_threshold": 3, "require_pending": True}
            )
        }
    )

    processor = build_processor(repository, settings)

    assert processor._policy.review_item_threshold == 3
    assert processor._require_pending is True
