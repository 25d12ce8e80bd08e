"""Database session and engine helpers."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from laundry_booking.core.config import get_settings
from laundry_booking.db.base import Base

_engine_cache: dict[str, AsyncEngine] = {}
_sessionmaker_cache: dict[str, async_sessionmaker[AsyncSession]] = {}


def _resolve_database_url(override: str | None = None) -> str:
    settings = get_settings()
    return override or settings.database_url


def _get_engine(url: str) -> AsyncEngine:
    engine = _engine_cache.get(url)
    if engine is None:
        connect_args: dict[str, object] = {}
        if url.startswith("sqlite"):
            # Writers wait for the file lock instead of failing immediately.
            connect_args["timeout"] = 30
        engine = create_async_engine(
            url, echo=False, future=True, connect_args=connect_args
        )
        _engine_cache[url] = engine
    return engine


def get_sessionmaker(
    database_url: str | None = None,
) -> async_sessionmaker[AsyncSession]:
    """Return (and cache) an async sessionmaker for the given database URL."""
    url = _resolve_database_url(database_url)
    sessionmaker = _sessionmaker_cache.get(url)
    if sessionmaker is None:
        sessionmaker = async_sessionmaker(
            _get_engine(url), expire_on_commit=False, class_=AsyncSession
        )
        _sessionmaker_cache[url] = sessionmaker
    return sessionmaker


async def create_schema(database_url: str | None = None) -> None:
    """Create missing tables directly from the ORM metadata.

    Used for local SQLite databases; deployed databases are migrated with
    Alembic instead.
    """
    # Register every mapped table on the metadata before creating it.
    import laundry_booking.models  # noqa: F401

    engine = _get_engine(_resolve_database_url(database_url))
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)


async def dispose_engine(database_url: str | None = None) -> None:
    """Dispose the cached engine/sessionmaker for the given database URL."""
    url = _resolve_database_url(database_url)
    engine = _engine_cache.pop(url, None)
    if engine is not None:
        await engine.dispose()
    _sessionmaker_cache.pop(url, None)
