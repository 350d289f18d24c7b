"""Pure transforms over workout records: grouping, filtering, progress stats.

Nothing here performs I/O or keeps state. A record is anything exposing
``workout_date``, ``exercise`` and ``weight`` attributes (ORM rows or
``WorkoutRead`` schemas); ``workout_date`` may be a ``date`` or a ``datetime``.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, datetime, time
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, TypeVar

from app.core.constants import ALL_EXERCISES, MAX_BAR_FRACTION, MIN_BAR_FRACTION
from app.schemas.progress import ExerciseProgress, ProgressStats, SeriesPoint

R = TypeVar("R")

# Inclusive end of a calendar day (millisecond precision)
END_OF_DAY = time(23, 59, 59, 999000)


def round_half_away(value: float, places: int = 0) -> float:
    """Round half away from zero (``round()`` would use banker's rounding)."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def _calendar_day(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def _as_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    return datetime.combine(value, time.min)


def group_by_date(records: Iterable[R]) -> dict[date, list[R]]:
    """Partition records by calendar day, most recent day first.

    Records keep their input order inside each day.
    """
    groups: dict[date, list[R]] = {}
    for record in records:
        groups.setdefault(_calendar_day(record.workout_date), []).append(record)
    return {day: groups[day] for day in sorted(groups, reverse=True)}


def group_by_exercise(records: Iterable[R]) -> dict[str, list[R]]:
    """Partition records by exact exercise name, keeping input order."""
    groups: dict[str, list[R]] = {}
    for record in records:
        groups.setdefault(record.exercise, []).append(record)
    return groups


def distinct_exercises(records: Iterable[Any]) -> list[str]:
    return sorted({record.exercise for record in records})


def filter_workouts(
    records: Iterable[R],
    exercise_filter: str | None = ALL_EXERCISES,
    start_date: date | datetime | None = None,
    end_date: date | datetime | None = None,
) -> list[R]:
    """Keep records matching the exercise and, when BOTH bounds are given, the date range.

    The range is inclusive: start is taken at 00:00:00.000 of its day and end at
    23:59:59.999 of its day. A single bound disables date filtering.
    """
    start = end = None
    if start_date is not None and end_date is not None:
        start = datetime.combine(_calendar_day(start_date), time.min)
        end = datetime.combine(_calendar_day(end_date), END_OF_DAY)

    result: list[R] = []
    for record in records:
        if exercise_filter not in (None, ALL_EXERCISES) and record.exercise != exercise_filter:
            continue
        if start is not None:
            when = _as_datetime(record.workout_date)
            if when < start or when > end:
                continue
        result.append(record)
    return result


def search_workouts(records: Iterable[R], term: str | None) -> list[R]:
    """Case-insensitive substring match on the exercise name; blank term keeps all."""
    if not term:
        return list(records)
    needle = term.lower()
    return [record for record in records if needle in record.exercise.lower()]


def compute_exercise_progress(exercise: str, records: Iterable[Any]) -> ExerciseProgress:
    """Date-ordered weight series plus current/max/average/progress stats.

    Same-day entries each contribute a point. Empty input yields zeroed stats.
    """
    ordered = sorted(records, key=lambda r: _as_datetime(r.workout_date))
    series = [
        SeriesPoint(date=_calendar_day(r.workout_date), weight=float(r.weight))
        for r in ordered
    ]
    if not series:
        return ExerciseProgress(exercise=exercise)

    weights = [p.weight for p in series]
    first, current = weights[0], weights[-1]
    progress = round_half_away(current - first, 1)
    percent = int(round_half_away(progress / first * 100)) if first > 0 else 0
    stats = ProgressStats(
        current=current,
        max=max(weights),
        average=round_half_away(sum(weights) / len(weights), 1),
        progress=progress,
        progress_percent=percent,
    )
    return ExerciseProgress(exercise=exercise, series=series, stats=stats)


def compute_all_progress(records: Iterable[Any]) -> dict[str, ExerciseProgress]:
    """Progress for every exercise present, keyed by name (sorted)."""
    grouped = group_by_exercise(records)
    return {name: compute_exercise_progress(name, grouped[name]) for name in sorted(grouped)}


def bar_height_fraction(weight: float, weights: Sequence[float]) -> float:
    """Scale a weight into [0.2, 1.0] relative to the series' min and max.

    A flat series (max == min) divides by 1, so every bar sits at 0.2.
    """
    if not weights:
        return MIN_BAR_FRACTION
    low, high = min(weights), max(weights)
    span = (high - low) or 1
    fraction = (float(weight) - low) / span * (MAX_BAR_FRACTION - MIN_BAR_FRACTION) + MIN_BAR_FRACTION
    return min(MAX_BAR_FRACTION, max(MIN_BAR_FRACTION, fraction))


def with_bar_heights(progress: ExerciseProgress) -> ExerciseProgress:
    """Copy of ``progress`` whose points carry their chart bar height."""
    weights = [p.weight for p in progress.series]
    series = [
        p.model_copy(update={"bar_height": bar_height_fraction(p.weight, weights)})
        for p in progress.series
    ]
    return progress.model_copy(update={"series": series})
