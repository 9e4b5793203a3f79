"""Pytest configuration and fixtures for integration tests."""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from api.dependencies import ServiceContainer
from api.main import create_app
from core.infrastructure.database.config import create_engine, create_session_factory, init_database
from core.infrastructure.database.repositories.sqlalchemy_order_repository import (
    SQLAlchemyOrderRepository,
)
from core.settings import DatabaseSettings


# Use in-memory SQLite for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def sql_repository():
    """SQLAlchemy repository over a fresh in-memory database."""
    engine = create_engine(DatabaseSettings(database_url=TEST_DATABASE_URL))
    await init_database(engine)

    repository = SQLAlchemyOrderRepository(create_session_factory(engine), engine=engine)
    yield repository

    await repository.close()


@pytest.fixture
def container(memory_settings, repository, channel) -> ServiceContainer:
    return ServiceContainer.from_clients(memory_settings, repository, channel)


@pytest.fixture
def test_client(container) -> TestClient:
    """FastAPI test client over in-memory store and channel."""
    return TestClient(create_app(container=container))
