"""Integration tests for SQLAlchemyOrderRepository against SQLite."""

import uuid
from datetime import datetime, timezone

import pytest

from core.domain.entities.order import OrderItem
from core.domain.enums import OrderStatus
from core.domain.exceptions import ConflictError, NotFoundError, StatusPreconditionFailed
from core.domain.repositories import InvalidPageToken


LATER = datetime(2026, 2, 1, 12, 0, 0, 250000, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_create_and_get_round_trip(sql_repository, make_order):
    order = make_order(items=[OrderItem(sku="A", qty=2, price=5.5), OrderItem(sku="B", qty=1)])
    await sql_repository.create(order)

    stored = await sql_repository.get(order.id)

    assert stored == order
    assert stored.created_at.tzinfo is not None
    assert stored.order_total == 11.0


@pytest.mark.asyncio
async def test_get_unknown_returns_none(sql_repository):
    assert await sql_repository.get(str(uuid.uuid4())) is None


@pytest.mark.asyncio
async def test_duplicate_id_raises_conflict(sql_repository, make_order):
    order = make_order()
    await sql_repository.create(order)

    with pytest.raises(ConflictError):
        await sql_repository.create(order)


@pytest.mark.asyncio
async def test_update_status_returns_stored_order(sql_repository, make_order):
    order = make_order()
    await sql_repository.create(order)

    updated = await sql_repository.update_status(
        order.id, OrderStatus.PENDING_APPROVAL, "High-value order requires approval", LATER
    )

    assert updated.status == OrderStatus.PENDING_APPROVAL
    assert updated.processing_notes == "High-value order requires approval"
    assert updated.updated_at == LATER
    assert (await sql_repository.get(order.id)) == updated


@pytest.mark.asyncio
async def test_update_missing_order_raises_not_found(sql_repository):
    with pytest.raises(NotFoundError):
        await sql_repository.update_status(str(uuid.uuid4()), OrderStatus.CONFIRMED, "x", LATER)


@pytest.mark.asyncio
async def test_update_precondition(sql_repository, make_order):
    order = make_order()
    await sql_repository.create(order)

    await sql_repository.update_status(
        order.id, OrderStatus.CONFIRMED, "ok", LATER, expected_status=OrderStatus.PENDING
    )
    with pytest.raises(StatusPreconditionFailed) as exc_info:
        await sql_repository.update_status(
            order.id, OrderStatus.PENDING_REVIEW, "again", LATER, expected_status=OrderStatus.PENDING
        )

    assert exc_info.value.actual == "CONFIRMED"
    assert (await sql_repository.get(order.id)).status == OrderStatus.CONFIRMED


@pytest.mark.asyncio
async def test_query_by_status_pages_in_created_at_order(sql_repository, make_order):
    orders = [make_order(minutes=i, status=OrderStatus.CONFIRMED) for i in range(5)]
    for order in orders + [make_order(minutes=50)]:
        await sql_repository.create(order)

    seen = []
    start_key = None
    while True:
        page = await sql_repository.query_by_status(
            OrderStatus.CONFIRMED, limit=2, start_key=start_key
        )
        seen += [o.id for o in page.items]
        start_key = page.last_evaluated_key
        if start_key is None:
            break

    assert seen == [o.id for o in reversed(orders)]


@pytest.mark.asyncio
async def test_query_by_status_ascending(sql_repository, make_order):
    orders = [make_order(minutes=i, status=OrderStatus.PENDING_REVIEW) for i in range(3)]
    for order in reversed(orders):
        await sql_repository.create(order)

    page = await sql_repository.query_by_status(OrderStatus.PENDING_REVIEW, limit=10, ascending=True)

    assert [o.id for o in page.items] == [o.id for o in orders]
    assert page.last_evaluated_key is None


@pytest.mark.asyncio
async def test_orders_created_in_same_millisecond_are_not_skipped(sql_repository, make_order):
    orders = [make_order(minutes=0, status=OrderStatus.CONFIRMED) for _ in range(4)]
    for order in orders:
        await sql_repository.create(order)

    first = await sql_repository.query_by_status(OrderStatus.CONFIRMED, limit=2)
    second = await sql_repository.query_by_status(
        OrderStatus.CONFIRMED, limit=2, start_key=first.last_evaluated_key
    )

    ids = [o.id for o in first.items + second.items]
    assert sorted(ids) == sorted(o.id for o in orders)
    assert len(set(ids)) == 4


@pytest.mark.asyncio
async def test_bad_created_at_in_resume_key(sql_repository):
    with pytest.raises(InvalidPageToken):
        await sql_repository.query_by_status(
            OrderStatus.CONFIRMED,
            limit=2,
            start_key={"status": "CONFIRMED", "createdAt": "yesterday", "id": "x"},
        )


@pytest.mark.asyncio
async def test_scan_pages_in_id_order(sql_repository, make_order):
    orders = [make_order(minutes=i) for i in range(5)]
    for order in orders:
        await sql_repository.create(order)

    first = await sql_repository.scan(limit=3)
    second = await sql_repository.scan(limit=3, start_key=first.last_evaluated_key)

    assert first.has_more and not second.has_more
    assert [o.id for o in first.items + second.items] == sorted(o.id for o in orders)


@pytest.mark.asyncio
async def test_health_check(sql_repository):
    health = await sql_repository.health_check()

    assert health["status"] == "healthy"
    assert health["tableName"] == "orders"
