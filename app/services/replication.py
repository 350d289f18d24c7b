"""Copy every workout logged on one day forward to today."""

from __future__ import annotations

import logging
from datetime import date

from app.core.exceptions import NotFoundError, ReplicationFailed, StoreError
from app.schemas.workout import WorkoutCreate
from app.services.store import WorkoutStore

logger = logging.getLogger(__name__)


async def replicate_day(store: WorkoutStore, source_date: date, today: date | None = None) -> int:
    """Insert a copy of each ``source_date`` record dated ``today``; returns the count.

    Raises NotFoundError when the day has no records (nothing is inserted) and
    ReplicationFailed when the store rejects the batch (nothing is kept).
    """
    records = await store.list(workout_date=source_date)
    if not records:
        raise NotFoundError(f"No workouts found for {source_date.isoformat()}")

    target = today or date.today()
    copies = [
        WorkoutCreate(
            workout_date=target,
            exercise=r.exercise,
            sets=r.sets,
            reps=r.reps,
            weight=r.weight,
        )
        for r in records
    ]
    try:
        created = await store.insert(copies)
    except StoreError as e:
        raise ReplicationFailed("Failed to replicate workouts") from e

    logger.info("Replicated %d workout(s) from %s to %s", len(created), source_date, target)
    return len(created)
