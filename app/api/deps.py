"""Shared FastAPI dependencies: stores bound to the request session."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.services.store import CatalogStore, WorkoutStore


def get_workout_store(db: AsyncSession = Depends(get_db)) -> WorkoutStore:
    return WorkoutStore(db)


def get_catalog_store(db: AsyncSession = Depends(get_db)) -> CatalogStore:
    return CatalogStore(db)
