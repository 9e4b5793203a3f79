"""Shared fixtures for the order service tests."""

import json
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Union

import pytest

from core.domain.entities.order import Order, OrderItem
from core.domain.enums import OrderStatus
from core.domain.event_channel import ChannelMessage
from core.domain.value_objects import OrderId
from core.infrastructure.adapters.persistence.in_memory_order_repository import (
    InMemoryOrderRepository,
)
from core.infrastructure.bus import InMemoryEventChannel
from core.settings import (
    AppSettings,
    DatabaseSettings,
    ProcessorSettings,
    RedisSettings,
    ServiceSettings,
)

BASE_TIME = datetime(2026, 1, 15, 9, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def memory_settings() -> AppSettings:
    """Settings wired to the in-memory store and channel."""
    return AppSettings(
        service=ServiceSettings(store_backend="memory", channel_backend="memory"),
        database=DatabaseSettings(database_url="sqlite+aiosqlite:///:memory:"),
        redis=RedisSettings(),
        processor=ProcessorSettings(),
    )


@pytest.fixture
def repository() -> InMemoryOrderRepository:
    return InMemoryOrderRepository()


@pytest.fixture
def channel() -> InMemoryEventChannel:
    return InMemoryEventChannel()


@pytest.fixture
def make_order():
    """Factory for PENDING orders with controllable timestamps."""

    def _make(
        minutes: int = 0,
        status: OrderStatus = OrderStatus.PENDING,
        items: Optional[List[OrderItem]] = None,
        customer_name: str = "Alice",
    ) -> Order:
        created_at = BASE_TIME + timedelta(minutes=minutes)
        return Order(
            id=OrderId.generate().value,
            customer_name=customer_name,
            items=items or [OrderItem(sku="SKU-A", qty=2, price=5)],
            status=status,
            created_at=created_at,
            updated_at=created_at,
        )

    return _make


@pytest.fixture
def make_message():
    """Factory for channel messages; dict bodies are JSON-encoded."""
    counter = {"n": 0}

    def _make(
        body: Union[Dict[str, Any], str],
        message_id: Optional[str] = None,
        delivery_count: int = 1,
    ) -> ChannelMessage:
        counter["n"] += 1
        return ChannelMessage(
            message_id=message_id or f"msg-{counter['n']}",
            body=body if isinstance(body, str) else json.dumps(body),
            delivery_count=delivery_count,
        )

    return _make


@pytest.fixture
def order_created_body():
    """Factory for OrderCreated message bodies."""

    def _make(order_id: str, items: List[Dict[str, Any]], customer_name: str = "Alice"):
        return {
            "type": "OrderCreated",
            "timestamp": "2026-01-15T09:30:00.000Z",
            "detail": {
                "id": order_id,
                "customerName": customer_name,
                "items": items,
                "createdAt": "2026-01-15T09:30:00.000Z",
            },
        }

    return _make
