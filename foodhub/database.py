"""Database engine and session configuration module.

Sets up the async SQLAlchemy engine, session factory, and ORM base class.
PostgreSQL via asyncpg is the production target; any async SQLAlchemy URL
(e.g. sqlite+aiosqlite for tests) is accepted.
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from foodhub.config import settings


def _engine_options(url: str) -> dict[str, Any]:
    """Build engine keyword arguments appropriate for the database driver.

    Args:
        url: SQLAlchemy database URL

    Returns:
        dict[str, Any]: Keyword arguments for create_async_engine
    """
    options: dict[str, Any] = {"echo": settings.DEBUG, "pool_pre_ping": True}
    if url.startswith("postgresql"):
        options.update(
            pool_size=5,
            max_overflow=10,
            # Disable prepared statement caches for transaction-mode poolers
            connect_args={"statement_cache_size": 0},
        )
    return options


# Async database engine
engine: AsyncEngine = create_async_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

# Async session factory
# expire_on_commit=False: allows attribute access after commit without refresh
async_session: async_sessionmaker[AsyncSession] = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Declarative base class for all ORM models.

    All models inherit from this class to register with the metadata.
    """

    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that yields an async database session.

    The session is automatically closed after the request completes,
    ensuring no connection leaks.

    Yields:
        AsyncSession: Async session instance
    """
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()
