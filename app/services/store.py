"""Record store client over an async SQLAlchemy session.

Reads come back as ``WorkoutRead`` schemas (newest first) so callers never
touch ORM state. Any ``SQLAlchemyError`` is logged and re-raised as
``StoreError``. Writes are flushed, not committed: the request-scoped session
(``app.db.session.get_db``) commits or rolls back the whole unit of work, and
the aggregate cache is cleared only after that commit.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from datetime import date
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import StoreError
from app.models.exercise import Exercise
from app.models.workout import Workout
from app.schemas.workout import WorkoutCreate, WorkoutRead
from app.services.cache import mark_aggregates_changed

logger = logging.getLogger(__name__)

FILTERABLE_COLUMNS = ("id", "workout_date", "exercise", "sets", "reps", "weight")


class WorkoutStore:
    """list / range_list / insert / delete over the ``workouts`` table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _fetch(self, stmt) -> list[WorkoutRead]:
        stmt = stmt.order_by(Workout.workout_date.desc())
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            logger.warning("Error loading workouts: %s", e)
            raise StoreError("Failed to load workouts") from e
        return [WorkoutRead.model_validate(w) for w in result.scalars().all()]

    async def list(self, **filters: Any) -> list[WorkoutRead]:
        """All records matching every ``column=value`` equality filter."""
        unknown = set(filters) - set(FILTERABLE_COLUMNS)
        if unknown:
            raise ValueError(f"Unknown workout filter(s): {', '.join(sorted(unknown))}")
        stmt = select(Workout)
        for column, value in filters.items():
            stmt = stmt.where(getattr(Workout, column) == value)
        return await self._fetch(stmt)

    async def range_list(self, date_gte: date) -> list[WorkoutRead]:
        """Records dated on or after ``date_gte``."""
        return await self._fetch(select(Workout).where(Workout.workout_date >= date_gte))

    async def insert(self, records: WorkoutCreate | Iterable[WorkoutCreate]) -> list[WorkoutRead]:
        """Insert one record or a batch; the batch succeeds or fails as a whole."""
        batch = [records] if isinstance(records, WorkoutCreate) else list(records)
        rows = [Workout(**r.model_dump()) for r in batch]
        try:
            self.db.add_all(rows)
            await self.db.flush()
        except SQLAlchemyError as e:
            logger.warning("Error saving %d workout(s): %s", len(rows), e)
            raise StoreError("Failed to save workout") from e
        mark_aggregates_changed(self.db.sync_session)
        return [WorkoutRead.model_validate(w) for w in rows]

    async def delete(self, workout_id: uuid.UUID) -> bool:
        """Delete by id. Returns False when no such record exists."""
        try:
            result = await self.db.execute(delete(Workout).where(Workout.id == workout_id))
        except SQLAlchemyError as e:
            logger.warning("Error deleting workout %s: %s", workout_id, e)
            raise StoreError("Failed to delete workout") from e
        if not result.rowcount:
            return False
        mark_aggregates_changed(self.db.sync_session)
        return True


class CatalogStore:
    """list / insert over the ``exercises`` table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(self) -> list[str]:
        try:
            result = await self.db.execute(select(Exercise.name))
        except SQLAlchemyError as e:
            logger.warning("Error loading exercises: %s", e)
            raise StoreError("Failed to load exercises") from e
        return list(result.scalars().all())

    async def insert(self, name: str) -> None:
        """Append a name inside a savepoint so a failure leaves the outer work intact."""
        try:
            async with self.db.begin_nested():
                self.db.add(Exercise(name=name))
        except SQLAlchemyError as e:
            logger.warning("Error saving exercise %r: %s", name, e)
            raise StoreError(f"Failed to add exercise {name!r} to the catalog") from e

    @asynccontextmanager
    async def savepoint(self) -> AsyncIterator[None]:
        """Run catalog reads and writes in a SAVEPOINT.

        Any failure inside rolls back to the savepoint only, so the outer
        transaction (e.g. a just-inserted workout) can still commit on backends
        that abort the whole transaction after a failed statement.
        """
        try:
            async with self.db.begin_nested():
                yield
        except SQLAlchemyError as e:
            logger.warning("Catalog savepoint failed: %s", e)
            raise StoreError("Failed to update the exercise catalog") from e
