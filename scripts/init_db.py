"""Create tables and sync the exercise catalog from logged workouts.

Usage: python scripts/init_db.py
"""

import asyncio
import logging
import os
import sys

# Add parent directory to path so we can import app modules
sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from app import models  # noqa: E402,F401
from app.core.config import get_settings  # noqa: E402
from app.core.logging import configure_logging  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.db.session import async_session_maker, engine  # noqa: E402
from app.services.catalog import rebuild_catalog  # noqa: E402
from app.services.store import CatalogStore, WorkoutStore  # noqa: E402

logger = logging.getLogger("init_db")


async def main():
    configure_logging(get_settings().log_level)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Tables ensured: %s", ", ".join(Base.metadata.tables))

    async with async_session_maker() as session:
        added = await rebuild_catalog(WorkoutStore(session), CatalogStore(session))
        await session.commit()
    logger.info("Catalog entries added: %d", len(added))
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
