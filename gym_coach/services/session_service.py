"""Student session view.

A ``StudentSession`` is the per-visit state of one student's screen: the
workouts available today and which exercises have been ticked off. Exercise
progress lives only in this object until the whole workout is completed, at
which point ``StudentSessionService.complete_workout`` appends a history
entry. A completed workout stays visible for a short grace period and then
drops out of ``visible_workouts``; the next day's ``load`` brings it back
because today's history no longer covers it.
"""
from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from gym_coach.config import settings
from gym_coach.models.enums import ExerciseState
from gym_coach.models.fitness import Workout, WorkoutExercise
from gym_coach.models.workout_history import WorkoutHistory
from gym_coach.schemas.history import CompletedExerciseSnapshot
from gym_coach.services.timezone_service import gym_date, now_in_gym_tz, to_utc

logger = logging.getLogger(__name__)

EXERCISE_PLACEHOLDER = "Exercício"


@dataclass
class SessionExercise:
    id: uuid.UUID
    exercise_id: uuid.UUID
    name: str
    sets: int
    reps: str
    weight: float | None = None
    rest_time: int | None = None
    notes: str | None = None
    muscle_group: str | None = None
    equipment: str | None = None
    instructions: str | None = None
    state: ExerciseState = ExerciseState.PENDING

    @property
    def completed(self) -> bool:
        return self.state == ExerciseState.COMPLETED

    def toggle(self) -> None:
        self.state = ExerciseState.PENDING if self.completed else ExerciseState.COMPLETED

    def snapshot(self, completion_time: datetime) -> CompletedExerciseSnapshot:
        return CompletedExerciseSnapshot(
            id=self.id,
            exercise_id=self.exercise_id,
            name=self.name,
            sets=self.sets,
            reps=self.reps,
            weight=self.weight,
            rest_time=self.rest_time,
            notes=self.notes,
            muscle_group=self.muscle_group,
            equipment=self.equipment,
            instructions=self.instructions,
            completed=True,
            completion_time=completion_time,
        )


@dataclass
class SessionWorkout:
    id: uuid.UUID
    name: str
    workout_type: str
    description: str | None = None
    exercises: list[SessionExercise] = field(default_factory=list)
    completed_at: datetime | None = None

    @property
    def completed(self) -> bool:
        return all(exercise.completed for exercise in self.exercises)

    @property
    def completed_exercises(self) -> int:
        return sum(1 for exercise in self.exercises if exercise.completed)

    def find_exercise(self, assignment_id: uuid.UUID) -> SessionExercise | None:
        return next((exercise for exercise in self.exercises if exercise.id == assignment_id), None)


@dataclass
class SessionProgress:
    total_workouts: int
    completed_workouts: int


class StudentSession:
    def __init__(
        self,
        student_id: uuid.UUID,
        day: date,
        workouts: list[SessionWorkout],
        *,
        eviction_delay: timedelta | None = None,
    ):
        self.student_id = student_id
        self.day = day
        self.workouts = workouts
        self.eviction_delay = (
            eviction_delay
            if eviction_delay is not None
            else timedelta(seconds=settings.SESSION_EVICTION_DELAY_SECONDS)
        )

    def find_workout(self, workout_id: uuid.UUID) -> SessionWorkout | None:
        return next((workout for workout in self.workouts if workout.id == workout_id), None)

    def toggle_exercise(self, workout_id: uuid.UUID, assignment_id: uuid.UUID) -> SessionWorkout:
        workout = self.find_workout(workout_id)
        if workout is None:
            raise KeyError(f"Workout {workout_id} is not part of this session")
        exercise = workout.find_exercise(assignment_id)
        if exercise is None:
            raise KeyError(f"Exercise {assignment_id} is not part of workout {workout_id}")
        exercise.toggle()
        return workout

    def mark_completed(self, workout_id: uuid.UUID, at: datetime) -> None:
        workout = self.find_workout(workout_id)
        if workout is None:
            raise KeyError(f"Workout {workout_id} is not part of this session")
        for exercise in workout.exercises:
            exercise.state = ExerciseState.COMPLETED
        workout.completed_at = at

    def visible_workouts(self, now: datetime) -> list[SessionWorkout]:
        return [
            workout
            for workout in self.workouts
            if workout.completed_at is None or now < workout.completed_at + self.eviction_delay
        ]

    def progress(self) -> SessionProgress:
        return SessionProgress(
            total_workouts=len(self.workouts),
            completed_workouts=sum(1 for workout in self.workouts if workout.completed),
        )


def _session_exercise(assignment: WorkoutExercise) -> SessionExercise:
    exercise = assignment.exercise
    return SessionExercise(
        id=assignment.id,
        exercise_id=assignment.exercise_id,
        name=exercise.name if exercise else EXERCISE_PLACEHOLDER,
        sets=assignment.sets,
        reps=assignment.reps,
        weight=assignment.weight,
        rest_time=assignment.rest_time,
        notes=assignment.notes,
        muscle_group=exercise.muscle_group if exercise else None,
        equipment=exercise.equipment if exercise else None,
        instructions=exercise.instructions if exercise else None,
    )


class StudentSessionService:
    def __init__(
        self,
        db: AsyncSession,
        clock: Callable[[], datetime] = now_in_gym_tz,
        *,
        eviction_delay: timedelta | None = None,
    ):
        self.db = db
        self.clock = clock
        self.eviction_delay = eviction_delay

    async def completed_today(self, student_id: uuid.UUID, day: date) -> set[uuid.UUID]:
        stmt = select(WorkoutHistory.workout_id).where(
            WorkoutHistory.student_id == student_id,
            WorkoutHistory.completion_date == day,
        )
        result = await self.db.execute(stmt)
        return set(result.scalars().all())

    async def load(self, student_id: uuid.UUID) -> StudentSession:
        day = gym_date(self.clock())
        done = await self.completed_today(student_id, day)

        stmt = (
            select(Workout)
            .where(Workout.student_id == student_id, Workout.active.is_(True))
            .options(selectinload(Workout.exercises).selectinload(WorkoutExercise.exercise))
            .order_by(Workout.created_at.asc())
            .execution_options(populate_existing=True)
        )
        if done:
            stmt = stmt.where(Workout.id.not_in(list(done)))
        workouts = (await self.db.execute(stmt)).scalars().all()

        return StudentSession(
            student_id,
            day,
            [
                SessionWorkout(
                    id=workout.id,
                    name=workout.name,
                    workout_type=workout.workout_type,
                    description=workout.description,
                    exercises=[_session_exercise(assignment) for assignment in workout.exercises],
                )
                for workout in workouts
            ],
            eviction_delay=self.eviction_delay,
        )

    async def complete_workout(
        self,
        session: StudentSession,
        workout_id: uuid.UUID,
        *,
        notes: str | None = None,
    ) -> WorkoutHistory:
        """Persist a completed workout and start its eviction from the view.

        Every exercise must already be completed; otherwise nothing is written.
        """
        workout = session.find_workout(workout_id)
        if workout is None or workout.completed_at is not None:
            raise HTTPException(status_code=404, detail="Workout not available in this session")
        if not workout.completed:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=(
                    "All exercises must be completed before finishing the workout "
                    f"({workout.completed_exercises}/{len(workout.exercises)})"
                ),
            )

        now = self.clock()
        completed_at = to_utc(now)
        entry = WorkoutHistory(
            student_id=session.student_id,
            workout_id=workout.id,
            completed_at=completed_at,
            completion_date=gym_date(now),
            exercises_completed=[
                exercise.snapshot(completed_at).model_dump(mode="json") for exercise in workout.exercises
            ],
            notes=notes or f"Workout {workout.name} completed with {len(workout.exercises)} exercises",
        )
        self.db.add(entry)
        await self.db.commit()
        await self.db.refresh(entry)

        session.mark_completed(workout.id, now)
        logger.info("Student %s completed workout %s", session.student_id, workout.id)
        return entry
