"""Workout loading, deletion and delete-then-insert editing."""

from __future__ import annotations

import logging
import uuid
from datetime import date, timedelta

from app.core.exceptions import NotFoundError
from app.schemas.workout import SaveResult, WorkoutCreate, WorkoutRead
from app.services.catalog import save_workout, validate_workout
from app.services.store import CatalogStore, WorkoutStore

logger = logging.getLogger(__name__)

DEFAULT_RECENT_DAYS = 45


async def load_workouts(
    store: WorkoutStore,
    recent_only: bool = False,
    today: date | None = None,
    recent_days: int = DEFAULT_RECENT_DAYS,
) -> list[WorkoutRead]:
    """All workouts newest first, or only those from the last ``recent_days`` days."""
    if not recent_only:
        return await store.list()
    since = (today or date.today()) - timedelta(days=recent_days)
    return await store.range_list(since)


async def delete_workout(store: WorkoutStore, workout_id: uuid.UUID) -> None:
    if not await store.delete(workout_id):
        raise NotFoundError("Workout not found")
    logger.info("Deleted workout %s", workout_id)


async def edit_workout(
    workouts: WorkoutStore,
    catalog: CatalogStore,
    workout_id: uuid.UUID,
    payload: WorkoutCreate,
) -> SaveResult:
    """Replace a record: delete the old row, save the new one (new id).

    Both steps share the caller's transaction; if the insert fails the delete
    is rolled back with it.
    """
    validate_workout(payload)
    await delete_workout(workouts, workout_id)
    return await save_workout(workouts, catalog, payload)
