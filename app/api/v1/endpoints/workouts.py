"""Workout endpoints: log, edit, delete, replicate, history and CSV export."""

from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Depends, Response

from app.api.deps import get_catalog_store, get_workout_store
from app.core.config import get_settings
from app.core.constants import ALL_EXERCISES, CSV_FILENAME
from app.schemas.workout import (
    DateGroupRead,
    HistoryRead,
    ReplicateRequest,
    ReplicateResult,
    SaveResult,
    WorkoutCreate,
    WorkoutRead,
)
from app.services.aggregation import (
    distinct_exercises,
    filter_workouts,
    group_by_date,
    search_workouts,
)
from app.services.cache import AggregateCache, get_aggregate_cache
from app.services.catalog import save_workout
from app.services.export import workouts_to_csv
from app.services.replication import replicate_day
from app.services.store import CatalogStore, WorkoutStore
from app.services.workouts import delete_workout, edit_workout, load_workouts

router = APIRouter()
settings = get_settings()


async def _filtered(
    store: WorkoutStore,
    search: str | None,
    exercise: str,
    start_date: date | None,
    end_date: date | None,
    recent: bool,
) -> tuple[list[WorkoutRead], list[WorkoutRead]]:
    """(all loaded workouts, those passing search + exercise + date filters)"""
    workouts = await load_workouts(store, recent_only=recent, recent_days=settings.recent_days)
    return workouts, filter_workouts(search_workouts(workouts, search), exercise, start_date, end_date)


@router.get("", response_model=list[WorkoutRead])
async def list_workouts(
    recent: bool = False,
    store: WorkoutStore = Depends(get_workout_store),
):
    """List workouts newest first; ``recent=true`` limits to the last 45 days."""
    return await load_workouts(store, recent_only=recent, recent_days=settings.recent_days)


@router.post("", response_model=SaveResult, status_code=201)
async def create_workout(
    payload: WorkoutCreate,
    store: WorkoutStore = Depends(get_workout_store),
    catalog: CatalogStore = Depends(get_catalog_store),
):
    """Log a workout. The exercise name is title-cased and added to the catalog if new."""
    return await save_workout(store, catalog, payload)


@router.get("/history", response_model=HistoryRead)
async def workout_history(
    search: str | None = None,
    exercise: str = ALL_EXERCISES,
    start_date: date | None = None,
    end_date: date | None = None,
    recent: bool = False,
    store: WorkoutStore = Depends(get_workout_store),
    cache: AggregateCache = Depends(get_aggregate_cache),
):
    """
    Workouts grouped by day, most recent first.
    Filters combine: search (substring), exercise (exact, "All" = any) and
    date range (applied only when both start_date and end_date are given).
    """
    key = ("history", search, exercise, start_date, end_date, recent, date.today())
    cached = cache.get(key)
    if cached is not None:
        return cached

    generation = cache.generation
    workouts, matching = await _filtered(store, search, exercise, start_date, end_date, recent)
    history = HistoryRead(
        groups=[DateGroupRead(date=day, workouts=items) for day, items in group_by_date(matching).items()],
        exercises=distinct_exercises(workouts),
        total=len(matching),
    )
    cache.set(key, history, generation)
    return history


@router.get("/export.csv")
async def export_workouts(
    search: str | None = None,
    exercise: str = ALL_EXERCISES,
    start_date: date | None = None,
    end_date: date | None = None,
    recent: bool = False,
    store: WorkoutStore = Depends(get_workout_store),
):
    """Download the filtered workouts as CSV (one row per record)."""
    _, matching = await _filtered(store, search, exercise, start_date, end_date, recent)
    return Response(
        content=workouts_to_csv(matching),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{CSV_FILENAME}"'},
    )


@router.post("/replicate", response_model=ReplicateResult, status_code=201)
async def replicate_workouts(
    payload: ReplicateRequest,
    store: WorkoutStore = Depends(get_workout_store),
):
    """Copy every workout from ``source_date`` to today."""
    today = date.today()
    created = await replicate_day(store, payload.source_date, today=today)
    return ReplicateResult(created=created, workout_date=today)


@router.put("/{workout_id}", response_model=SaveResult)
async def update_workout(
    workout_id: uuid.UUID,
    payload: WorkoutCreate,
    store: WorkoutStore = Depends(get_workout_store),
    catalog: CatalogStore = Depends(get_catalog_store),
):
    """Replace a workout (delete + insert in one transaction; the id changes)."""
    return await edit_workout(store, catalog, workout_id, payload)


@router.delete("/{workout_id}", status_code=204)
async def remove_workout(
    workout_id: uuid.UUID,
    store: WorkoutStore = Depends(get_workout_store),
):
    """Delete a workout."""
    await delete_workout(store, workout_id)
    return None
