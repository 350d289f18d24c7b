"""Exercise catalog: name normalization and append-on-save."""

from __future__ import annotations

import logging

from app.core.exceptions import StoreError, ValidationError
from app.schemas.workout import SaveResult, WorkoutCreate
from app.services.aggregation import distinct_exercises
from app.services.store import CatalogStore, WorkoutStore

logger = logging.getLogger(__name__)


def normalize_exercise_name(name: str) -> str:
    """Trim and title-case ("  bench  press " -> "Bench Press")."""
    words = (name or "").split()
    if not words:
        raise ValidationError("empty exercise name")
    return " ".join(word[:1].upper() + word[1:].lower() for word in words)


def validate_workout(payload: WorkoutCreate) -> WorkoutCreate:
    """Check numeric ranges and return a copy carrying the normalized exercise name."""
    if payload.sets < 1:
        raise ValidationError("sets must be at least 1")
    if payload.reps < 1:
        raise ValidationError("reps must be at least 1")
    if payload.weight < 0:
        raise ValidationError("weight must not be negative")
    return payload.model_copy(update={"exercise": normalize_exercise_name(payload.exercise)})


async def get_exercise_list(catalog: CatalogStore) -> list[str]:
    return sorted(await catalog.list())


async def add_to_catalog(catalog: CatalogStore, name: str) -> bool:
    """Append ``name`` (already normalized) if missing. Returns True when added.

    The membership read and the append share one savepoint, so a failure in
    either leaves the caller's transaction usable.
    """
    async with catalog.savepoint():
        if name in await catalog.list():
            return False
        await catalog.insert(name)
    return True


async def save_workout(
    workouts: WorkoutStore,
    catalog: CatalogStore,
    payload: WorkoutCreate,
) -> SaveResult:
    """Persist a workout, then record its exercise name in the catalog.

    A failed workout insert raises ``StoreError``. A failed catalog append does
    not: the workout stays saved and the failure comes back as ``catalog_warning``.
    """
    payload = validate_workout(payload)
    (saved,) = await workouts.insert(payload)
    logger.info("Saved workout %s: %s %dx%d @ %s", saved.id, saved.exercise, saved.sets, saved.reps, saved.weight)

    warning = None
    try:
        if await add_to_catalog(catalog, saved.exercise):
            logger.info("Added %r to exercise catalog", saved.exercise)
    except StoreError as e:
        logger.warning("Workout %s saved but catalog update failed: %s", saved.id, e.message)
        warning = e.message
    return SaveResult(workout=saved, catalog_warning=warning)


async def rebuild_catalog(workouts: WorkoutStore, catalog: CatalogStore) -> list[str]:
    """Append every logged exercise name missing from the catalog."""
    known = set(await catalog.list())
    added = []
    for name in distinct_exercises(await workouts.list()):
        if name not in known:
            await catalog.insert(name)
            added.append(name)
    if added:
        logger.info("Catalog rebuild added %d exercise(s)", len(added))
    return added
