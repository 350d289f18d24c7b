"""Exercise catalog schemas."""

from pydantic import BaseModel, Field


class ExerciseNameIn(BaseModel):
    name: str = Field(..., max_length=255)


class ExerciseNameOut(BaseModel):
    name: str


class CatalogRebuildResult(BaseModel):
    added: list[str] = []
