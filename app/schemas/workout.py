"""Workout record schemas."""

from datetime import date as date_type
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class WorkoutBase(BaseModel):
    # Ranges and blank names are checked by app.services.catalog.validate_workout
    exercise: str = Field(..., max_length=255)
    sets: int
    reps: int
    weight: float = 0


class WorkoutCreate(WorkoutBase):
    """New entry; the date defaults to today when omitted."""

    workout_date: date_type = Field(default_factory=date_type.today)


class WorkoutRead(WorkoutBase):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    workout_date: date_type


class SaveResult(BaseModel):
    """Outcome of a save: the stored record plus any catalog side-effect warning."""

    workout: WorkoutRead
    catalog_warning: str | None = None


class DateGroupRead(BaseModel):
    date: date_type
    workouts: list[WorkoutRead] = []


class HistoryRead(BaseModel):
    """Filtered history grouped by day (most recent first)."""

    groups: list[DateGroupRead] = []
    exercises: list[str] = []
    total: int = 0


class ReplicateRequest(BaseModel):
    source_date: date_type


class ReplicateResult(BaseModel):
    created: int
    workout_date: date_type
