"""Exercise catalog endpoints."""

from fastapi import APIRouter, Depends

from app.api.deps import get_catalog_store, get_workout_store
from app.schemas.exercise import CatalogRebuildResult, ExerciseNameIn, ExerciseNameOut
from app.services.catalog import get_exercise_list, normalize_exercise_name, rebuild_catalog
from app.services.store import CatalogStore, WorkoutStore

router = APIRouter()


@router.get("", response_model=list[str])
async def list_exercises(catalog: CatalogStore = Depends(get_catalog_store)):
    """Known exercise names, sorted."""
    return await get_exercise_list(catalog)


@router.post("/normalize", response_model=ExerciseNameOut)
async def normalize_exercise(payload: ExerciseNameIn):
    """Preview the stored form of a name ("bench press" -> "Bench Press")."""
    return ExerciseNameOut(name=normalize_exercise_name(payload.name))


@router.post("/rebuild", response_model=CatalogRebuildResult)
async def rebuild_exercises(
    workouts: WorkoutStore = Depends(get_workout_store),
    catalog: CatalogStore = Depends(get_catalog_store),
):
    """Add any exercise name found in logged workouts but missing from the catalog."""
    return CatalogRebuildResult(added=await rebuild_catalog(workouts, catalog))
