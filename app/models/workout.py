"""Workout record model."""

from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import CheckConstraint, Date, Index, Integer, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class Workout(Base):
    """One logged entry: exercise with sets x reps at a weight on a calendar day.

    Rows are never updated in place; an edit deletes the row and inserts a new one.
    """

    __tablename__ = "workouts"
    __table_args__ = (
        Index("ix_workouts_workout_date", "workout_date"),
        Index("ix_workouts_exercise", "exercise"),
        CheckConstraint("sets >= 1", name="ck_workouts_sets_positive"),
        CheckConstraint("reps >= 1", name="ck_workouts_reps_positive"),
        CheckConstraint("weight >= 0", name="ck_workouts_weight_non_negative"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    workout_date: Mapped[date] = mapped_column(Date, nullable=False)
    exercise: Mapped[str] = mapped_column(String(255), nullable=False)
    sets: Mapped[int] = mapped_column(Integer, nullable=False)
    reps: Mapped[int] = mapped_column(Integer, nullable=False)
    weight: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False, default=0)
