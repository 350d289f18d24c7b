"""CSV export of a (filtered) workout list."""

from __future__ import annotations

from collections.abc import Iterable

from app.core.constants import CSV_HEADER
from app.schemas.workout import WorkoutRead


def _format_weight(weight: float) -> str:
    weight = float(weight)
    return str(int(weight)) if weight.is_integer() else str(weight)


def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def workouts_to_csv(workouts: Iterable[WorkoutRead]) -> str:
    """Header plus one row per record; the exercise field is always double-quoted."""
    lines = [CSV_HEADER]
    for w in workouts:
        lines.append(
            ",".join(
                [
                    w.workout_date.isoformat(),
                    _quote(w.exercise),
                    str(w.sets),
                    str(w.reps),
                    _format_weight(w.weight),
                ]
            )
        )
    return "\n".join(lines) + "\n"
