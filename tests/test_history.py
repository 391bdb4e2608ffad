import uuid
from datetime import date, datetime, timedelta, timezone

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession
from gym_coach.config import settings
from gym_coach.models.workout_history import HistoryImmutableError, WorkoutHistory
from gym_coach.services.history_service import HistoryService
from gym_coach.services.session_service import StudentSessionService

HISTORY_URL = f"{settings.API_V1_STR}/history"


async def _complete(db_session: AsyncSession, student, workout, moment: datetime | None = None) -> WorkoutHistory:
    clock = (lambda: moment) if moment else None
    service = StudentSessionService(db_session, clock) if clock else StudentSessionService(db_session)
    session = await service.load(student.id)
    for exercise in session.find_workout(workout.id).exercises:
        session.toggle_exercise(workout.id, exercise.id)
    return await service.complete_workout(session, workout.id)


@pytest.mark.asyncio
async def test_history_lists_newest_first_with_names(
    client: AsyncClient, admin_token_headers, db_session: AsyncSession, make_student, make_exercise, make_workout
):
    exercise = await make_exercise()
    ana = await make_student(username="ana", name="Ana")
    bia = await make_student(username="bia", name="Bia")
    ana_workout = await make_workout(ana, [exercise], name="Peito e Tríceps", workout_type="Treino C - Push")
    bia_workout = await make_workout(bia, [exercise], name="Pernas", workout_type="Treino E - Pernas")
    await _complete(db_session, ana, ana_workout, datetime(2026, 3, 9, 10, 0, tzinfo=timezone.utc))
    await _complete(db_session, bia, bia_workout, datetime(2026, 3, 10, 10, 0, tzinfo=timezone.utc))

    response = await client.get(HISTORY_URL, headers=admin_token_headers)
    assert response.status_code == 200
    entries = response.json()["data"]
    assert [e["student_name"] for e in entries] == ["Bia", "Ana"]
    assert entries[0]["workout_name"] == "Pernas"
    assert entries[0]["workout_type"] == "Treino E - Pernas"
    assert entries[1]["completion_date"] == "2026-03-09"

    by_student = await client.get(HISTORY_URL, params={"student_id": str(ana.id)}, headers=admin_token_headers)
    assert [e["student_name"] for e in by_student.json()["data"]] == ["Ana"]

    by_search = await client.get(HISTORY_URL, params={"search": "push"}, headers=admin_token_headers)
    assert [e["workout_name"] for e in by_search.json()["data"]] == ["Peito e Tríceps"]

    entry_id = entries[0]["id"]
    single = await client.get(f"{HISTORY_URL}/{entry_id}", headers=admin_token_headers)
    assert single.json()["data"]["student_name"] == "Bia"

@pytest.mark.asyncio
async def test_history_placeholders_for_missing_rows(db_session: AsyncSession):
    db_session.add(
        WorkoutHistory(
            student_id=uuid.uuid4(),
            workout_id=uuid.uuid4(),
            completion_date=date(2026, 3, 10),
            exercises_completed=[],
        )
    )
    await db_session.commit()

    entries = await HistoryService(db_session).list()
    assert len(entries) == 1
    assert entries[0].workout_name == "Treino"
    assert entries[0].workout_type == "Treino"
    assert entries[0].student_name == "Aluno"

@pytest.mark.asyncio
async def test_history_missing_entry(client: AsyncClient, admin_token_headers):
    response = await client.get(f"{HISTORY_URL}/{uuid.uuid4()}", headers=admin_token_headers)
    assert response.status_code == 404

@pytest.mark.asyncio
async def test_snapshot_survives_assignment_edits(
    client: AsyncClient, admin_token_headers, db_session: AsyncSession, make_student, make_exercise, make_workout
):
    student = await make_student()
    exercise = await make_exercise(name="Supino Reto")
    workout = await make_workout(student, [exercise])
    await _complete(db_session, student, workout)

    await client.put(
        f"{settings.API_V1_STR}/exercises/{exercise.id}",
        json={"name": "Supino Inclinado"},
        headers=admin_token_headers,
    )
    detail = await client.get(f"{settings.API_V1_STR}/workouts/{workout.id}", headers=admin_token_headers)
    assignment_id = detail.json()["data"]["exercises"][0]["id"]
    await client.delete(f"{settings.API_V1_STR}/workouts/{workout.id}/exercises/{assignment_id}", headers=admin_token_headers)

    response = await client.get(HISTORY_URL, headers=admin_token_headers)
    snapshot = response.json()["data"][0]["exercises_completed"]
    assert [item["name"] for item in snapshot] == ["Supino Reto"]
    assert snapshot[0]["id"] == assignment_id

@pytest.mark.asyncio
async def test_history_entries_cannot_be_updated(db_session: AsyncSession, make_student, make_exercise, make_workout):
    student = await make_student()
    workout = await make_workout(student, [await make_exercise()])
    entry = await _complete(db_session, student, workout)

    entry.notes = "edited"
    with pytest.raises(HistoryImmutableError):
        await db_session.commit()
    await db_session.rollback()

@pytest.mark.asyncio
async def test_history_summary_counts_last_seven_days(db_session: AsyncSession, make_student):
    student = await make_student()
    now = datetime(2026, 3, 20, 12, 0, tzinfo=timezone.utc)
    for days_ago, exercise_count in [(1, 2), (6, 3), (10, 4)]:
        completed_at = now - timedelta(days=days_ago)
        db_session.add(
            WorkoutHistory(
                student_id=student.id,
                workout_id=uuid.uuid4(),
                completed_at=completed_at,
                completion_date=completed_at.date(),
                exercises_completed=[{"name": f"ex{i}"} for i in range(exercise_count)],
            )
        )
    await db_session.commit()

    summary = await HistoryService(db_session).summary(student.id, now)
    assert summary.total_workouts == 3
    assert summary.total_exercises == 9
    assert summary.workouts_last_7_days == 2
