"""Persistence: async engine and session factory for relational fetchers.

Engine and session factory are created lazily on first use
(get_session_factory) so import does not trigger Settings validation.
Applications that already own an engine pass their own async_sessionmaker
to SqlAlchemyRecordFetcher instead.
"""

from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from searchmodel.core.config import get_settings
from searchmodel.domain.exceptions import BackendNotConfiguredException
from searchmodel.shared.telemetry.logging import get_logger
from searchmodel.shared.telemetry.telemetry import get_telemetry

logger = get_logger(__name__)

# Set by _ensure_engine() on first use; avoids get_settings() at import time.
engine: AsyncEngine | None = None
AsyncSessionLocal: async_sessionmaker[AsyncSession] | None = None


def _ensure_engine() -> None:
    """Create engine and AsyncSessionLocal on first use (when database_url is set)."""
    global engine, AsyncSessionLocal
    if AsyncSessionLocal is not None:
        return
    settings = get_settings()
    if not settings.database_url:
        return
    engine_kwargs: dict[str, Any] = {
        "echo": settings.database_echo,
        "pool_pre_ping": True,
    }
    # SQLite (tests, local tools) uses a static pool without size options.
    if not settings.database_url.startswith("sqlite"):
        engine_kwargs["pool_size"] = (
            settings.db_pool_size if settings.db_pool_size is not None else 10
        )
        engine_kwargs["max_overflow"] = (
            settings.db_max_overflow if settings.db_max_overflow is not None else 20
        )
        engine_kwargs["pool_recycle"] = 3600
    engine = create_async_engine(settings.database_url, **engine_kwargs)
    AsyncSessionLocal = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    telemetry = get_telemetry()
    if telemetry is not None:
        telemetry.instrument_sqlalchemy(engine)
    logger.info("Relational backend engine created")


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the shared session factory; raise if no database_url is configured."""
    _ensure_engine()
    if AsyncSessionLocal is None:
        raise BackendNotConfiguredException("relational")
    return AsyncSessionLocal


async def dispose_engine() -> None:
    """Dispose the shared engine (application shutdown, tests)."""
    global engine, AsyncSessionLocal
    if engine is not None:
        await engine.dispose()
    engine = None
    AsyncSessionLocal = None
