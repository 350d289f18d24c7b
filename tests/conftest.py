"""Pytest configuration and fixtures."""

import os

# Point the app at SQLite before any app module builds its engine
os.environ.setdefault("DATABASE_DSN", "sqlite+aiosqlite://")

from datetime import date  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app import models  # noqa: E402,F401
from app.db.base import Base  # noqa: E402
from app.db.session import get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.schemas.workout import WorkoutCreate  # noqa: E402
from app.services.cache import get_aggregate_cache, invalidate_if_changed  # noqa: E402
from app.services.store import CatalogStore, WorkoutStore  # noqa: E402


class Rec:
    """Minimal record for pure aggregation tests."""

    def __init__(self, workout_date, exercise="Bench Press", weight=50.0, sets=3, reps=10):
        self.workout_date = workout_date
        self.exercise = exercise
        self.weight = weight
        self.sets = sets
        self.reps = reps

    def __repr__(self):
        return f"Rec({self.workout_date}, {self.exercise!r}, {self.weight})"


@pytest.fixture
def make_record():
    return Rec


@pytest_asyncio.fixture
async def engine():
    """Fresh in-memory database per test (savepoints enabled for pysqlite/aiosqlite)."""
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)

    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def workout_store(db):
    return WorkoutStore(db)


@pytest.fixture
def catalog_store(db):
    return CatalogStore(db)


@pytest.fixture
def sample_workouts():
    """Three entries on 2025-03-10, two on 2025-03-12."""
    return [
        WorkoutCreate(workout_date=date(2025, 3, 10), exercise="Bench Press", sets=3, reps=10, weight=60),
        WorkoutCreate(workout_date=date(2025, 3, 10), exercise="Squat", sets=5, reps=5, weight=100),
        WorkoutCreate(workout_date=date(2025, 3, 10), exercise="Deadlift", sets=1, reps=5, weight=140.5),
        WorkoutCreate(workout_date=date(2025, 3, 12), exercise="Bench Press", sets=3, reps=8, weight=62.5),
        WorkoutCreate(workout_date=date(2025, 3, 12), exercise="Squat", sets=5, reps=5, weight=105),
    ]


@pytest_asyncio.fixture
async def client(session_maker):
    """HTTP client against the app with get_db bound to the test database."""

    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
                invalidate_if_changed(session.sync_session)
            except Exception:
                await session.rollback()
                raise

    get_aggregate_cache().invalidate()
    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
    get_aggregate_cache().invalidate()
