"""Read side of the workout history log.

Entries are written by the student session only; nothing here mutates them.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timedelta

from fastapi import HTTPException
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from gym_coach.models.fitness import Workout
from gym_coach.models.student import Student
from gym_coach.models.workout_history import WorkoutHistory
from gym_coach.schemas.history import HistorySummary, WorkoutHistoryResponse
from gym_coach.services.timezone_service import to_utc

DEFAULT_PAGE_SIZE = 10
WORKOUT_PLACEHOLDER = "Treino"
STUDENT_PLACEHOLDER = "Aluno"


def _snapshot(entry: WorkoutHistory) -> list:
    return entry.exercises_completed if isinstance(entry.exercises_completed, list) else []


class HistoryService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(
        self,
        *,
        student_id: uuid.UUID | None = None,
        search: str | None = None,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> list[WorkoutHistoryResponse]:
        stmt = select(WorkoutHistory)
        if student_id:
            stmt = stmt.where(WorkoutHistory.student_id == student_id)
        if search:
            pattern = f"%{search.strip().lower()}%"
            stmt = (
                stmt.outerjoin(Workout, Workout.id == WorkoutHistory.workout_id)
                .outerjoin(Student, Student.id == WorkoutHistory.student_id)
                .where(
                    or_(
                        func.lower(Student.name).like(pattern),
                        func.lower(Workout.name).like(pattern),
                        func.lower(Workout.workout_type).like(pattern),
                    )
                )
            )
        stmt = stmt.order_by(WorkoutHistory.completed_at.desc()).offset(offset).limit(limit)
        entries = list((await self.db.execute(stmt)).scalars().all())
        return await self.enrich(entries)

    async def get(self, entry_id: uuid.UUID) -> WorkoutHistoryResponse:
        entry = await self.db.get(WorkoutHistory, entry_id)
        if not entry:
            raise HTTPException(status_code=404, detail="History entry not found")
        return (await self.enrich([entry]))[0]

    async def enrich(self, entries: list[WorkoutHistory]) -> list[WorkoutHistoryResponse]:
        """Attach display names looked up by the distinct ids present in ``entries``.

        Workouts or students deleted since completion fall back to placeholders.
        """
        if not entries:
            return []

        workout_ids = {entry.workout_id for entry in entries}
        student_ids = {entry.student_id for entry in entries}

        workout_rows = await self.db.execute(
            select(Workout.id, Workout.name, Workout.workout_type).where(Workout.id.in_(list(workout_ids)))
        )
        workouts = {row.id: row for row in workout_rows}
        student_rows = await self.db.execute(
            select(Student.id, Student.name).where(Student.id.in_(list(student_ids)))
        )
        students = {row.id: row.name for row in student_rows}

        enriched = []
        for entry in entries:
            workout = workouts.get(entry.workout_id)
            enriched.append(
                WorkoutHistoryResponse(
                    id=entry.id,
                    student_id=entry.student_id,
                    workout_id=entry.workout_id,
                    completed_at=entry.completed_at,
                    completion_date=entry.completion_date,
                    exercises_completed=_snapshot(entry),
                    notes=entry.notes,
                    workout_name=workout.name if workout else WORKOUT_PLACEHOLDER,
                    workout_type=workout.workout_type if workout else WORKOUT_PLACEHOLDER,
                    student_name=students.get(entry.student_id, STUDENT_PLACEHOLDER),
                )
            )
        return enriched

    async def summary(self, student_id: uuid.UUID, now: datetime) -> HistorySummary:
        result = await self.db.execute(
            select(WorkoutHistory.completed_at, WorkoutHistory.exercises_completed)
            .where(WorkoutHistory.student_id == student_id)
        )
        rows = result.all()
        week_ago = to_utc(now) - timedelta(days=7)
        return HistorySummary(
            total_workouts=len(rows),
            total_exercises=sum(
                len(row.exercises_completed) for row in rows if isinstance(row.exercises_completed, list)
            ),
            workouts_last_7_days=sum(1 for row in rows if to_utc(row.completed_at) >= week_ago),
        )
