"""Session factory lifecycle for the survey service.

The factory is built once in the app lifespan; request handlers receive a
session through the ``get_db`` dependency, which commits on success and rolls
back on any exception raised by the route.
"""
from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shared.database.postgres import Base, get_async_session_factory

# Registers users / surveys / survey_responses on Base.metadata.
import app.models  # noqa: F401

_session_factory: async_sessionmaker[AsyncSession] | None = None


def init_db(database_url: str) -> None:
    global _session_factory
    _session_factory = get_async_session_factory(database_url, expire_on_commit=False)


async def dispose_db() -> None:
    global _session_factory
    if _session_factory is not None:
        await _session_factory.kw["bind"].dispose()
        _session_factory = None


async def create_tables() -> None:
    """Create missing tables directly (local development without Alembic)."""
    engine = get_session_factory().kw["bind"]
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    if _session_factory is None:
        raise RuntimeError("Database not initialized")
    return _session_factory


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
