"""
FastAPI Dependencies.

Provides dependency injection for services. Clients are built once per
process by the app lifespan and stored on `app.state.container`; routes
reach them through the accessors below.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv
from fastapi import Request

# Load environment variables ONCE before any settings objects are created
_PROJECT_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(dotenv_path=_PROJECT_ROOT / ".env")

from core.application.services import OrderIntakeService, OrderQueryService
from core.domain.event_channel import EventChannel
from core.domain.repositories import OrderRepository
from core.infrastructure.factory import create_event_channel, create_order_repository
from core.settings import AppSettings

logger = logging.getLogger(__name__)


# =============================================================================
# CONTAINER
# =============================================================================

@dataclass
class ServiceContainer:
    """Process-lifetime clients and the services built on them."""

    settings: AppSettings
    repository: OrderRepository
    channel: EventChannel
    intake_service: OrderIntakeService
    query_service: OrderQueryService

    @classmethod
    def from_clients(
        cls,
        settings: AppSettings,
        repository: OrderRepository,
        channel: EventChannel,
    ) -> "ServiceContainer":
        return cls(
            settings=settings,
            repository=repository,
            channel=channel,
            intake_service=OrderIntakeService(repository, channel),
            query_service=OrderQueryService(repository),
        )

    async def close(self) -> None:
        await self.channel.close()
        await self.repository.close()
        logger.info("Service container closed")


async def build_container(settings: AppSettings) -> ServiceContainer:
    """Create store and channel clients from settings."""
    repository = await create_order_repository(settings)
    channel = create_event_channel(settings)
    logger.info(
        f"Created ServiceContainer (store={settings.service.store_backend}, "
        f"channel={settings.service.channel_backend})"
    )
    return ServiceContainer.from_clients(settings, repository, channel)


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_intake_service(request: Request) -> OrderIntakeService:
    return get_container(request).intake_service


def get_query_service(request: Request) -> OrderQueryService:
    return get_container(request).query_service
