"""ORM models - import all so Base.metadata is complete for create_all."""

from app.models.exercise import Exercise
from app.models.workout import Workout

__all__ = [
    "Exercise",
    "Workout",
]
