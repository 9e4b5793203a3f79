"""
Database configuration.

Builds the async engine and session factory for the order store. Nothing
here is global: the caller owns the engine and disposes of it.
"""
import logging

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from core.settings import DatabaseSettings


logger = logging.getLogger(__name__)


# =============================================================================
# ENGINE CREATION
# =============================================================================

def create_engine(settings: DatabaseSettings) -> AsyncEngine:
    """
    Create async SQLAlchemy engine.

    Args:
        settings: Database settings

    Returns:
        Configured async engine
    """
    url = make_url(settings.database_url)
    logger.info(f"Creating database engine: {url.render_as_string(hide_password=True)}")

    kwargs = {"echo": settings.echo_sql}

    if url.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            # One shared connection, or every session sees an empty database
            kwargs["poolclass"] = StaticPool
        else:
            kwargs["pool_timeout"] = settings.pool_timeout
    else:
        kwargs["pool_timeout"] = settings.pool_timeout
        kwargs["pool_pre_ping"] = True

    return create_async_engine(url, **kwargs)


# =============================================================================
# SESSION FACTORY
# =============================================================================

def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Get session factory.

    Returns:
        Session factory for creating sessions
    """
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


# =============================================================================
# DATABASE INITIALIZATION
# =============================================================================

async def init_database(engine: AsyncEngine) -> None:
    """
    Initialize database.

    Creates all tables if they don't exist.
    """
    from core.infrastructure.database.models import Base

    logger.info("Initializing database...")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Database initialized successfully")
