# File: user_api/db/session.py

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine


def build_engine(database_url: str) -> AsyncEngine:
    """
    Create the async engine for a database URL.

    The URL must name an async driver, e.g. ``postgresql+psycopg://`` or
    ``sqlite+aiosqlite://``.
    """
    return create_async_engine(database_url, pool_pre_ping="sqlite" not in database_url)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Objects stay readable after commit; no lazy refresh under asyncio
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)
