"""
Database initialization helpers.

Models are imported so their tables get registered on Base.metadata.
"""

from sqlalchemy.ext.asyncio import AsyncEngine

from user_api.models.base import Base
from user_api.models import user  # noqa: F401


async def init_db(engine: AsyncEngine) -> None:
    """
    Create all tables based on SQLAlchemy models.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
