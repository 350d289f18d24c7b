"""Progress endpoints: per-exercise weight series and summary stats."""

from fastapi import APIRouter, Depends

from app.api.deps import get_workout_store
from app.schemas.progress import ExerciseProgress
from app.services.aggregation import compute_all_progress, compute_exercise_progress, with_bar_heights
from app.services.cache import AggregateCache, get_aggregate_cache
from app.services.catalog import normalize_exercise_name
from app.services.store import WorkoutStore

router = APIRouter()


@router.get("", response_model=dict[str, ExerciseProgress])
async def all_progress(
    store: WorkoutStore = Depends(get_workout_store),
    cache: AggregateCache = Depends(get_aggregate_cache),
):
    """Progress for every logged exercise, keyed by exercise name."""
    key = ("progress",)
    cached = cache.get(key)
    if cached is not None:
        return cached
    generation = cache.generation
    progress = {
        name: with_bar_heights(p) for name, p in compute_all_progress(await store.list()).items()
    }
    cache.set(key, progress, generation)
    return progress


@router.get("/{exercise}", response_model=ExerciseProgress)
async def exercise_progress(
    exercise: str,
    store: WorkoutStore = Depends(get_workout_store),
):
    """
    Weight series (oldest first, one point per entry) with chart bar heights, plus
    current / max / average / progress / progress_percent. Unknown exercise -> zeroed stats.
    """
    name = normalize_exercise_name(exercise)
    records = await store.list(exercise=name)
    return with_bar_heights(compute_exercise_progress(name, records))
