"""Tests for the HTTP API."""

from datetime import date, timedelta

import pytest
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_workout_store
from app.core.exceptions import StoreError
from app.db.session import get_db
from app.main import app
from app.schemas.workout import HistoryRead
from app.services.cache import get_aggregate_cache, invalidate_if_changed
from app.services.store import WorkoutStore

API = "/api/v1"
HISTORY_KEY = ("history", None, "All", None, None, False)


class FailingInsertStore(WorkoutStore):
    """Workout store whose writes are always rejected."""

    async def insert(self, records):
        raise StoreError("Failed to save workout")


def failing_workout_store(db: AsyncSession = Depends(get_db)) -> WorkoutStore:
    return FailingInsertStore(db)


async def _log(client, exercise, weight, day, sets=3, reps=10):
    response = await client.post(
        f"{API}/workouts",
        json={"exercise": exercise, "sets": sets, "reps": reps, "weight": weight, "workout_date": day.isoformat()},
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get(f"{API}/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_create_workout_normalizes_and_catalogs(client):
    body = await _log(client, "bench press", 60, date(2025, 3, 10))
    assert body["workout"]["exercise"] == "Bench Press"
    assert body["catalog_warning"] is None

    response = await client.get(f"{API}/exercises")
    assert response.json() == ["Bench Press"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "field,value,message",
    [
        ("sets", 0, "sets must be at least 1"),
        ("reps", 0, "reps must be at least 1"),
        ("weight", -1, "weight must not be negative"),
    ],
)
async def test_create_workout_out_of_range(client, field, value, message):
    payload = {"exercise": "Squat", "sets": 3, "reps": 5, "weight": 10, field: value}
    response = await client.post(f"{API}/workouts", json=payload)
    assert response.status_code == 422
    assert response.json() == {"detail": message, "code": "ValidationError"}
    assert (await client.get(f"{API}/workouts")).json() == []


@pytest.mark.asyncio
async def test_create_workout_validation(client):
    response = await client.post(f"{API}/workouts", json={"exercise": "Squat", "sets": "many", "reps": 5})
    assert response.status_code == 422
    body = response.json()
    assert body["code"] == "ValidationError"
    assert body["detail"] == "Request validation failed"
    assert [e["field"] for e in body["errors"]] == ["body.sets"]

    response = await client.post(f"{API}/workouts", json={"exercise": "   ", "sets": 1, "reps": 5, "weight": 10})
    assert response.status_code == 422
    assert response.json() == {"detail": "empty exercise name", "code": "ValidationError"}


@pytest.mark.asyncio
async def test_list_recent_workouts(client):
    today = date.today()
    await _log(client, "Squat", 100, today)
    await _log(client, "Squat", 90, today - timedelta(days=60))

    response = await client.get(f"{API}/workouts")
    assert [w["weight"] for w in response.json()] == [100, 90]

    response = await client.get(f"{API}/workouts", params={"recent": True})
    assert [w["weight"] for w in response.json()] == [100]


@pytest.mark.asyncio
async def test_history_groups_and_filters(client):
    await _log(client, "Bench Press", 60, date(2025, 3, 10))
    await _log(client, "Squat", 100, date(2025, 3, 10))
    await _log(client, "Bench Press", 62.5, date(2025, 3, 12))

    response = await client.get(f"{API}/workouts/history")
    body = response.json()
    assert [g["date"] for g in body["groups"]] == ["2025-03-12", "2025-03-10"]
    assert body["exercises"] == ["Bench Press", "Squat"]
    assert body["total"] == 3

    response = await client.get(f"{API}/workouts/history", params={"search": "bench"})
    assert response.json()["total"] == 2

    response = await client.get(
        f"{API}/workouts/history",
        params={"exercise": "Bench Press", "start_date": "2025-03-11", "end_date": "2025-03-12"},
    )
    groups = response.json()["groups"]
    assert len(groups) == 1
    assert groups[0]["workouts"][0]["weight"] == 62.5

    # Start date alone does not filter
    response = await client.get(f"{API}/workouts/history", params={"start_date": "2025-03-11"})
    assert response.json()["total"] == 3


@pytest.mark.asyncio
async def test_history_cache_invalidated_by_writes(client):
    await _log(client, "Squat", 100, date(2025, 3, 10))
    assert (await client.get(f"{API}/workouts/history")).json()["total"] == 1
    assert len(get_aggregate_cache()) == 1

    created = await _log(client, "Squat", 105, date(2025, 3, 11))
    assert len(get_aggregate_cache()) == 0
    assert (await client.get(f"{API}/workouts/history")).json()["total"] == 2

    response = await client.delete(f"{API}/workouts/{created['workout']['id']}")
    assert response.status_code == 204
    assert (await client.get(f"{API}/workouts/history")).json()["total"] == 1


@pytest.mark.asyncio
async def test_history_read_before_commit_is_not_kept(client, session_maker):
    """A history read that lands between a write and its commit must not outlive the commit."""
    await _log(client, "Squat", 100, date(2025, 3, 10))
    cache = get_aggregate_cache()
    key = HISTORY_KEY + (date.today(),)

    async def get_db_with_read_before_commit():
        async with session_maker() as session:
            try:
                yield session
                # what a concurrent reader computes before the new row is committed
                cache.set(key, HistoryRead(total=1), cache.generation)
                await session.commit()
                invalidate_if_changed(session.sync_session)
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = get_db_with_read_before_commit
    await _log(client, "Squat", 105, date(2025, 3, 11))

    assert cache.get(key) is None
    assert (await client.get(f"{API}/workouts/history")).json()["total"] == 2


@pytest.mark.asyncio
async def test_delete_missing_workout(client):
    response = await client.delete(f"{API}/workouts/00000000-0000-0000-0000-000000000000")
    assert response.status_code == 404
    assert response.json()["code"] == "NotFoundError"


@pytest.mark.asyncio
async def test_edit_replaces_record(client):
    created = await _log(client, "Squat", 100, date(2025, 3, 10))
    old_id = created["workout"]["id"]

    response = await client.put(
        f"{API}/workouts/{old_id}",
        json={"exercise": "front squat", "sets": 4, "reps": 6, "weight": 80, "workout_date": "2025-03-10"},
    )
    assert response.status_code == 200
    new = response.json()["workout"]
    assert new["id"] != old_id
    assert new["exercise"] == "Front Squat"

    workouts = (await client.get(f"{API}/workouts")).json()
    assert [w["id"] for w in workouts] == [new["id"]]


@pytest.mark.asyncio
async def test_edit_with_invalid_payload_keeps_original(client):
    created = await _log(client, "Squat", 100, date(2025, 3, 10))
    response = await client.put(
        f"{API}/workouts/{created['workout']['id']}",
        json={"exercise": "  ", "sets": 4, "reps": 6, "weight": 80},
    )
    assert response.status_code == 422
    workouts = (await client.get(f"{API}/workouts")).json()
    assert [w["id"] for w in workouts] == [created["workout"]["id"]]


@pytest.mark.asyncio
async def test_replicate_day(client):
    for exercise in ("Bench Press", "Squat", "Deadlift"):
        await _log(client, exercise, 50, date(2025, 3, 10))

    response = await client.post(f"{API}/workouts/replicate", json={"source_date": "2025-03-10"})
    assert response.status_code == 201
    assert response.json() == {"created": 3, "workout_date": date.today().isoformat()}

    response = await client.post(f"{API}/workouts/replicate", json={"source_date": "2020-01-01"})
    assert response.status_code == 404
    assert response.json()["code"] == "NotFoundError"


@pytest.mark.asyncio
async def test_export_csv(client):
    await _log(client, "Bench Press", 60, date(2025, 3, 10))
    await _log(client, "Squat", 100.5, date(2025, 3, 12))

    response = await client.get(f"{API}/workouts/export.csv", params={"exercise": "Squat"})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.text.splitlines() == [
        "Date,Exercise,Sets,Reps,Weight (kg)",
        '2025-03-12,"Squat",3,10,100.5',
    ]


@pytest.mark.asyncio
async def test_progress_endpoints(client):
    for day, weight in enumerate([20, 22, 25, 24, 30], start=1):
        await _log(client, "Squat", weight, date(2025, 1, day))
    await _log(client, "Bench Press", 40, date(2025, 1, 1))

    response = await client.get(f"{API}/progress/squat")
    body = response.json()
    assert body["exercise"] == "Squat"
    assert body["stats"] == {"current": 30, "max": 30, "average": 24.2, "progress": 10, "progress_percent": 50}
    assert body["series"][0]["bar_height"] == pytest.approx(0.2)
    assert body["series"][-1]["bar_height"] == pytest.approx(1.0)

    response = await client.get(f"{API}/progress")
    body = response.json()
    assert list(body) == ["Bench Press", "Squat"]
    assert body["Bench Press"]["series"][0]["bar_height"] == pytest.approx(0.2)


@pytest.mark.asyncio
async def test_progress_unknown_exercise_is_zeroed(client):
    response = await client.get(f"{API}/progress/Curl")
    assert response.status_code == 200
    assert response.json()["series"] == []
    assert response.json()["stats"]["current"] == 0


@pytest.mark.asyncio
async def test_normalize_and_rebuild_catalog(client):
    response = await client.post(f"{API}/exercises/normalize", json={"name": "  lat   pulldown "})
    assert response.json() == {"name": "Lat Pulldown"}

    await _log(client, "Row", 40, date(2025, 3, 10))
    response = await client.post(f"{API}/exercises/rebuild")
    assert response.json() == {"added": []}


@pytest.mark.asyncio
async def test_store_failures_render_error_bodies(client):
    await _log(client, "Squat", 100, date(2025, 3, 10))
    app.dependency_overrides[get_workout_store] = failing_workout_store

    response = await client.post(f"{API}/workouts/replicate", json={"source_date": "2025-03-10"})
    assert response.status_code == 502
    assert response.json() == {"detail": "Failed to replicate workouts", "code": "ReplicationFailed"}

    response = await client.post(f"{API}/workouts", json={"exercise": "Squat", "sets": 3, "reps": 5, "weight": 100})
    assert response.status_code == 503
    assert response.json() == {"detail": "Failed to save workout", "code": "StoreError"}

    del app.dependency_overrides[get_workout_store]
    assert len((await client.get(f"{API}/workouts")).json()) == 1
