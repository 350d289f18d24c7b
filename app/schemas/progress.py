"""Per-exercise progress schemas (chart series + summary stats)."""

from datetime import date as date_type

from pydantic import BaseModel


class SeriesPoint(BaseModel):
    date: date_type
    weight: float
    bar_height: float | None = None  # fraction of chart height in [0.2, 1.0]


class ProgressStats(BaseModel):
    current: float = 0
    max: float = 0
    average: float = 0
    progress: float = 0
    progress_percent: int = 0


class ExerciseProgress(BaseModel):
    exercise: str
    series: list[SeriesPoint] = []
    stats: ProgressStats = ProgressStats()
