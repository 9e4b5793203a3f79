"""Tests for OrderQueryService: point reads and paginated listing."""

import logging
import uuid
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from core.application.services import ListOrdersQuery, OrderQueryService
from core.domain.entities.order import OrderItem
from core.domain.enums import OrderStatus
from core.domain.exceptions import NotFoundError, ValidationError
from core.domain.repositories import encode_page_token


@pytest.fixture
def service(repository) -> OrderQueryService:
    return OrderQueryService(repository)


@pytest_asyncio.fixture
async def confirmed_orders(repository, make_order):
    """Five CONFIRMED orders one minute apart, plus two PENDING ones."""
    orders = [make_order(minutes=i, status=OrderStatus.CONFIRMED) for i in range(5)]
    orders += [make_order(minutes=10 + i) for i in range(2)]
    for order in orders:
        await repository.create(order)
    return orders[:5]


# =============================================================================
# GET ORDER
# =============================================================================

@pytest.mark.asyncio
async def test_get_order_returns_enriched_order(service, repository, make_order):
    order = make_order(items=[OrderItem(sku="A", qty=2, price=5), OrderItem(sku="B", qty=1)])
    await repository.create(order)

    dto = await service.get_order(order.id)

    data = dto.to_dict()
    assert data["id"] == order.id
    assert data["status"] == "PENDING"
    assert data["customerName"] == "Alice"
    assert data["itemCount"] == 2
    assert data["orderTotal"] == 10.0
    assert data["createdAt"] == "2026-01-15T09:30:00.000Z"
    assert "processingNotes" not in data


@pytest.mark.asyncio
async def test_get_order_with_malformed_id(service):
    with pytest.raises(ValidationError) as exc_info:
        await service.get_order("not-a-uuid")

    assert exc_info.value.error == "Bad Request"
    assert exc_info.value.message == "Invalid order ID format. Must be a valid UUID."


@pytest.mark.asyncio
async def test_get_order_with_unknown_id(service):
    order_id = str(uuid.uuid4())

    with pytest.raises(NotFoundError) as exc_info:
        await service.get_order(order_id)

    assert exc_info.value.message == f"Order with ID {order_id} was not found"


# =============================================================================
# LIST ORDERS
# =============================================================================

@pytest.mark.asyncio
async def test_status_filter_uses_the_index(service, repository, confirmed_orders):
    repository.query_by_status = AsyncMock(wraps=repository.query_by_status)
    repository.scan = AsyncMock(wraps=repository.scan)

    result = await service.list_orders(ListOrdersQuery.from_params(status="CONFIRMED"))

    repository.query_by_status.assert_awaited_once()
    repository.scan.assert_not_awaited()
    assert {o.status for o in result.orders} == {OrderStatus.CONFIRMED}
    assert result.filters.status == OrderStatus.CONFIRMED


@pytest.mark.asyncio
async def test_no_status_filter_scans(service, repository, confirmed_orders):
    repository.query_by_status = AsyncMock(wraps=repository.query_by_status)
    repository.scan = AsyncMock(wraps=repository.scan)

    result = await service.list_orders(ListOrdersQuery.from_params(status="BOGUS"))

    repository.scan.assert_awaited_once()
    repository.query_by_status.assert_not_awaited()
    assert result.pagination.count == 7
    assert result.filters.status is None


@pytest.mark.asyncio
async def test_index_pages_newest_first_without_overlap(service, confirmed_orders):
    seen = []
    token = None
    pages = 0
    while True:
        result = await service.list_orders(
            ListOrdersQuery.from_params(status="CONFIRMED", limit="2", next_token=token)
        )
        pages += 1
        seen += [o.id for o in result.orders]
        token = result.pagination.next_token
        assert result.pagination.has_more is (token is not None)
        if token is None:
            break

    assert pages == 3
    assert seen == [o.id for o in reversed(confirmed_orders)]


@pytest.mark.asyncio
async def test_index_ascending(service, confirmed_orders):
    result = await service.list_orders(
        ListOrdersQuery.from_params(status="CONFIRMED", sort_order="ASC", limit="3")
    )

    assert [o.id for o in result.orders] == [o.id for o in confirmed_orders[:3]]
    assert result.filters.sort_order == "asc"


@pytest.mark.asyncio
async def test_scan_page_is_sorted_by_created_at(service, confirmed_orders):
    result = await service.list_orders(ListOrdersQuery.from_params(limit="100"))

    stamps = [o.created_at for o in result.orders]
    assert stamps == sorted(stamps, reverse=True)
    assert result.pagination.has_more is False
    assert result.pagination.next_token is None


@pytest.mark.asyncio
async def test_scan_pagination_visits_every_order(service, confirmed_orders):
    seen = set()
    token = None
    while True:
        result = await service.list_orders(ListOrdersQuery.from_params(limit="3", next_token=token))
        seen |= {o.id for o in result.orders}
        token = result.pagination.next_token
        if token is None:
            break

    assert len(seen) == 7


@pytest.mark.asyncio
async def test_malformed_token_restarts_listing(service, confirmed_orders, caplog):
    first = await service.list_orders(ListOrdersQuery.from_params(status="CONFIRMED", limit="2"))

    with caplog.at_level(logging.WARNING):
        restarted = await service.list_orders(
            ListOrdersQuery.from_params(status="CONFIRMED", limit="2", next_token="garbage!!")
        )

    assert [o.id for o in restarted.orders] == [o.id for o in first.orders]
    assert "Invalid pagination token" in caplog.text


@pytest.mark.asyncio
async def test_token_for_another_status_is_ignored(service, confirmed_orders):
    foreign = encode_page_token({
        "status": "PENDING",
        "createdAt": "2026-01-15T09:40:00.000Z",
        "id": str(uuid.uuid4()),
    })

    first = await service.list_orders(ListOrdersQuery.from_params(status="CONFIRMED", limit="2"))
    result = await service.list_orders(
        ListOrdersQuery.from_params(status="CONFIRMED", limit="2", next_token=foreign)
    )

    assert [o.id for o in result.orders] == [o.id for o in first.orders]


@pytest.mark.asyncio
async def test_list_response_shape(service, confirmed_orders):
    result = await service.list_orders(
        ListOrdersQuery.from_params(status="CONFIRMED", limit="500")
    )

    data = result.to_dict()
    assert data["pagination"] == {
        "limit": 100,
        "count": 5,
        "hasMore": False,
        "nextToken": None,
    }
    assert data["filters"] == {"status": "CONFIRMED", "sortOrder": "desc"}
    assert all("orderTotal" in o and "itemCount" in o for o in data["orders"])
