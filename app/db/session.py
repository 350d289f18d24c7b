"""Async database engine and session factory."""

from collections.abc import AsyncGenerator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import get_settings
from app.services.cache import invalidate_if_changed

settings = get_settings()


def _engine_options(url: str) -> dict:
    # SQLite (local dev/tests) uses its own pool classes without sizing knobs
    if make_url(url).get_backend_name() == "sqlite":
        return {"echo": settings.debug}
    return {
        "pool_size": settings.database_pool_size,
        "max_overflow": settings.database_max_overflow,
        "echo": settings.debug,
    }


engine = create_async_engine(
    settings.async_database_url,
    **_engine_options(settings.async_database_url),
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency that yields an async DB session; clears cached aggregates after a committed write."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
            invalidate_if_changed(session.sync_session)
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
