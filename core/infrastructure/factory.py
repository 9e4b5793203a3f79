"""
Adapter factories.

Turns settings into concrete store and channel clients. Both the API and
the worker build their clients here, once per process, and pass them down
explicitly.
"""
import logging

from core.domain.event_channel import EventChannel, MessageSource
from core.domain.repositories import OrderRepository
from core.infrastructure.adapters.persistence.in_memory_order_repository import (
    InMemoryOrderRepository,
)
from core.infrastructure.bus import InMemoryEventChannel, RedisStreamConsumer, RedisStreamPublisher
from core.infrastructure.database.config import create_engine, create_session_factory, init_database
from core.infrastructure.database.repositories.sqlalchemy_order_repository import (
    SQLAlchemyOrderRepository,
)
from core.settings import AppSettings


logger = logging.getLogger(__name__)


async def create_order_repository(settings: AppSettings) -> OrderRepository:
    """Build the order store selected by ORDERS_STORE_BACKEND."""
    if settings.service.store_backend == "memory":
        logger.info("Using InMemoryOrderRepository")
        return InMemoryOrderRepository()

    engine = create_engine(settings.database)
    if settings.database.create_schema:
        await init_database(engine)
    logger.info("Using SQLAlchemyOrderRepository")
    return SQLAlchemyOrderRepository(create_session_factory(engine), engine=engine)


def create_event_channel(settings: AppSettings) -> EventChannel:
    """Build the publishing side selected by ORDERS_CHANNEL_BACKEND."""
    if settings.service.channel_backend == "memory":
        logger.info("Using InMemoryEventChannel")
        return InMemoryEventChannel()

    redis = settings.redis
    logger.info(f"Using RedisStreamPublisher (stream={redis.stream_name})")
    return RedisStreamPublisher(
        redis_url=redis.url,
        stream_name=redis.stream_name,
        max_stream_length=redis.max_stream_length,
        socket_timeout=redis.socket_timeout,
    )


def create_message_source(settings: AppSettings) -> MessageSource:
    """Build the consuming side for the worker."""
    if settings.service.channel_backend == "memory":
        logger.warning(
            "Worker using InMemoryEventChannel: it only sees messages published "
            "in this same process"
        )
        return InMemoryEventChannel()

    redis = settings.redis
    return RedisStreamConsumer(
        redis_url=redis.url,
        stream_name=redis.stream_name,
        consumer_group=redis.consumer_group,
        consumer_name=redis.consumer_name,
        dead_letter_stream=redis.dead_letter_stream,
        block_ms=settings.processor.block_ms,
        claim_idle_ms=settings.processor.claim_idle_ms,
        socket_timeout=redis.socket_timeout,
    )
