"""
Bulk-populate the users table with synthetic records.

Run this from the project root:

    (.venv) python seed_users.py --count 5000

It creates the tables if needed, loads the emails already stored so new
ones do not collide, and inserts the generated users in one batch.
"""

import argparse
import asyncio
import logging
from typing import Optional, Sequence

from user_api.core.config import get_settings
from user_api.core.logging_setup import configure_logging
from user_api.db.init_db import init_db
from user_api.db.session import build_engine, build_session_factory
from user_api.repositories import UserRepository
from user_api.services.seed_service import SeedService

logger = logging.getLogger("seed_users")


async def seed(count: int, database_url: str) -> int:
    engine = build_engine(database_url)
    try:
        await init_db(engine)
        session_factory = build_session_factory(engine)
        async with session_factory() as session:
            created = await SeedService(UserRepository(session)).seed(count)
        return len(created)
    finally:
        await engine.dispose()


def main(argv: Optional[Sequence[str]] = None) -> int:
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Insert synthetic users.")
    parser.add_argument("--count", type=int, default=settings.seed_default_count)
    parser.add_argument("--database-url", default=settings.database_url)
    args = parser.parse_args(argv)

    configure_logging(settings.log_level)
    logger.info("Seeding %d users...", args.count)
    created = asyncio.run(seed(args.count, args.database_url))
    logger.info("Inserted %d new users", created)
    return created


if __name__ == "__main__":
    main()
