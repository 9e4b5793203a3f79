"""
SQLAlchemy Order Repository Implementation.

Implements OrderRepository using SQLAlchemy async (SQLite via aiosqlite or
PostgreSQL via asyncpg). Each operation runs in its own short session, so
point reads are always strongly consistent.
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator, Dict, List, Optional

from sqlalchemy import and_, or_, select, text, update
from sqlalchemy import exc as sa_exc
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from core.domain.entities.order import Order, OrderItem
from core.domain.enums import OrderStatus
from core.domain.exceptions import (
    ConflictError,
    NotFoundError,
    StatusPreconditionFailed,
    ThrottlingError,
    ValidationError,
)
from core.domain.repositories import InvalidPageToken, OrderPage, OrderRepository
from core.domain.value_objects import ensure_utc, parse_iso, to_iso
from core.infrastructure.database.models import OrderModel


logger = logging.getLogger(__name__)


class SQLAlchemyOrderRepository(OrderRepository):
    """
    SQLAlchemy implementation of OrderRepository.

    Conditional writes map onto the database:
    - create-if-absent: INSERT against the primary key
    - update-if-exists: UPDATE ... WHERE id = :id, checking rowcount
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        engine: Optional[AsyncEngine] = None,
    ):
        """
        Initialize repository with a session factory.

        Args:
            session_factory: SQLAlchemy async session factory
            engine: Engine to dispose of on close(), if this repository owns it
        """
        self._session_factory = session_factory
        self._engine = engine

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        """Open a session and translate backend faults into domain errors."""
        async with self._session_factory() as session:
            try:
                yield session
            except sa_exc.IntegrityError as e:
                await session.rollback()
                raise ConflictError("Order with this ID already exists") from e
            except sa_exc.DataError as e:
                await session.rollback()
                raise ValidationError([f"Store rejected the data: {e.orig}"]) from e
            except sa_exc.TimeoutError as e:
                await session.rollback()
                raise ThrottlingError() from e
            except sa_exc.OperationalError as e:
                await session.rollback()
                if "locked" in str(e.orig).lower():
                    raise ThrottlingError() from e
                raise

    async def create(self, order: Order) -> None:
        logger.info(f"Creating order: {order.id}")
        async with self._session() as session:
            session.add(_to_model(order))
            await session.commit()

    async def get(self, order_id: str) -> Optional[Order]:
        async with self._session() as session:
            model = await session.get(OrderModel, order_id)
            if model is None:
                logger.info(f"Order not found: {order_id}")
                return None
            return _to_domain_entity(model)

    async def update_status(
        self,
        order_id: str,
        status: OrderStatus,
        processing_notes: str,
        updated_at: datetime,
        expected_status: Optional[OrderStatus] = None,
    ) -> Order:
        async with self._session() as session:
            stmt = update(OrderModel).where(OrderModel.id == order_id)
            if expected_status is not None:
                stmt = stmt.where(OrderModel.status == expected_status.value)
            stmt = stmt.values(
                status=status.value,
                processing_notes=processing_notes,
                updated_at=ensure_utc(updated_at),
            )

            result = await session.execute(stmt)
            if result.rowcount == 0:
                await session.rollback()
                current = await session.get(OrderModel, order_id)
                if current is None:
                    raise NotFoundError(f"Order with ID {order_id} was not found")
                raise StatusPreconditionFailed(
                    order_id, expected_status.value, current.status
                )

            await session.commit()
            model = await session.get(OrderModel, order_id, populate_existing=True)
            return _to_domain_entity(model)

    async def query_by_status(
        self,
        status: OrderStatus,
        limit: int,
        ascending: bool = False,
        start_key: Optional[Dict[str, str]] = None,
    ) -> OrderPage:
        stmt = select(OrderModel).where(OrderModel.status == status.value)

        if start_key:
            try:
                created_at = parse_iso(start_key["createdAt"])
            except ValueError as e:
                raise InvalidPageToken(f"Bad createdAt in page token: {e}") from e
            last_id = start_key["id"]
            if ascending:
                stmt = stmt.where(or_(
                    OrderModel.created_at > created_at,
                    and_(OrderModel.created_at == created_at, OrderModel.id > last_id),
                ))
            else:
                stmt = stmt.where(or_(
                    OrderModel.created_at < created_at,
                    and_(OrderModel.created_at == created_at, OrderModel.id < last_id),
                ))

        if ascending:
            stmt = stmt.order_by(OrderModel.created_at.asc(), OrderModel.id.asc())
        else:
            stmt = stmt.order_by(OrderModel.created_at.desc(), OrderModel.id.desc())

        async with self._session() as session:
            result = await session.execute(stmt.limit(limit + 1))
            models = list(result.scalars().all())

        return _page(models, limit, lambda m: {
            "status": m.status,
            "createdAt": to_iso(m.created_at),
            "id": m.id,
        })

    async def scan(
        self,
        limit: int,
        start_key: Optional[Dict[str, str]] = None,
    ) -> OrderPage:
        stmt = select(OrderModel)
        if start_key:
            stmt = stmt.where(OrderModel.id > start_key["id"])
        stmt = stmt.order_by(OrderModel.id.asc()).limit(limit + 1)

        async with self._session() as session:
            result = await session.execute(stmt)
            models = list(result.scalars().all())

        return _page(models, limit, lambda m: {"id": m.id})

    async def health_check(self) -> Dict[str, Any]:
        async with self._session() as session:
            await session.execute(text("SELECT 1"))
        return {
            "status": "healthy",
            "backend": "sqlalchemy",
            "tableName": OrderModel.__tablename__,
            "message": "Database connection successful",
        }

    async def close(self) -> None:
        if self._engine is not None:
            logger.info("Closing database connections...")
            await self._engine.dispose()
            self._engine = None


# =============================================================================
# MAPPING
# =============================================================================

def _to_model(order: Order) -> OrderModel:
    return OrderModel(
        id=order.id,
        customer_name=order.customer_name,
        items=[item.to_dict() for item in order.items],
        status=order.status.value,
        processing_notes=order.processing_notes,
        created_at=ensure_utc(order.created_at),
        updated_at=ensure_utc(order.updated_at),
    )


def _to_domain_entity(model: OrderModel) -> Order:
    return Order(
        id=model.id,
        customer_name=model.customer_name,
        items=[OrderItem.from_dict(item) for item in (model.items or [])],
        status=OrderStatus(model.status),
        created_at=ensure_utc(model.created_at),
        updated_at=ensure_utc(model.updated_at),
        processing_notes=model.processing_notes,
    )


def _page(models: List[OrderModel], limit: int, key_of) -> OrderPage:
    window = models[:limit]
    last_key = key_of(window[-1]) if len(models) > limit and window else None
    return OrderPage(items=[_to_domain_entity(m) for m in window], last_evaluated_key=last_key)
