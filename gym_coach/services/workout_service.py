"""Workout composer: workouts bound to one student and their ordered exercise assignments."""
from __future__ import annotations

import logging
import uuid

from fastapi import HTTPException
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from gym_coach.models.fitness import Exercise, Workout, WorkoutExercise
from gym_coach.models.student import Student
from gym_coach.models.user import Profile
from gym_coach.schemas.fitness import WorkoutCreate, WorkoutExerciseData, WorkoutUpdate
from gym_coach.services.audit_service import AuditService

logger = logging.getLogger(__name__)

_NON_NULLABLE_FIELDS = {"student_id", "name", "workout_type", "active"}


def _with_assignments(stmt):
    return stmt.options(
        selectinload(Workout.exercises).selectinload(WorkoutExercise.exercise)
    ).execution_options(populate_existing=True)


def _new_assignment(workout_id: uuid.UUID, data: WorkoutExerciseData, order_index: int) -> WorkoutExercise:
    return WorkoutExercise(
        workout_id=workout_id,
        exercise_id=data.exercise_id,
        sets=data.sets,
        reps=data.reps,
        weight=data.weight,
        rest_time=data.rest_time,
        notes=data.notes,
        order_index=order_index,
    )


class WorkoutService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _ensure_student_exists(self, student_id: uuid.UUID) -> None:
        if not await self.db.get(Student, student_id):
            raise HTTPException(status_code=404, detail="Student not found")

    async def _ensure_exercises_exist(self, exercise_ids: set[uuid.UUID]) -> None:
        if not exercise_ids:
            return
        result = await self.db.execute(select(Exercise.id).where(Exercise.id.in_(list(exercise_ids))))
        missing = exercise_ids - set(result.scalars().all())
        if missing:
            raise HTTPException(
                status_code=400,
                detail=f"Unknown exercise id(s): {', '.join(sorted(str(item) for item in missing))}",
            )

    async def list(
        self,
        *,
        student_id: uuid.UUID | None = None,
        active: bool | None = None,
    ) -> list[Workout]:
        stmt = select(Workout)
        if student_id:
            stmt = stmt.where(Workout.student_id == student_id)
        if active is not None:
            stmt = stmt.where(Workout.active.is_(active))
        stmt = _with_assignments(stmt.order_by(Workout.created_at.desc()))
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get(self, workout_id: uuid.UUID) -> Workout:
        stmt = _with_assignments(select(Workout).where(Workout.id == workout_id))
        workout = (await self.db.execute(stmt)).scalar_one_or_none()
        if not workout:
            raise HTTPException(status_code=404, detail="Workout not found")
        return workout

    async def create(self, data: WorkoutCreate, actor: Profile) -> Workout:
        """Write the workout and its assignments in a single transaction.

        ``order_index`` of each assignment is its position in ``data.exercises``.
        """
        await self._ensure_student_exists(data.student_id)
        await self._ensure_exercises_exist({item.exercise_id for item in data.exercises})

        workout = Workout(
            student_id=data.student_id,
            name=data.name,
            description=data.description,
            workout_type=data.workout_type,
            active=data.active,
        )
        self.db.add(workout)
        await self.db.flush()

        for index, item in enumerate(data.exercises):
            self.db.add(_new_assignment(workout.id, item, index))

        await AuditService.log_action(
            self.db,
            profile_id=actor.id,
            action="CREATE_WORKOUT",
            target_id=str(workout.id),
            details=f"Workout {workout.name} with {len(data.exercises)} exercise(s) for student {data.student_id}",
        )
        await self.db.commit()
        logger.info("Workout %s created with %d assignments", workout.id, len(data.exercises))
        return await self.get(workout.id)

    async def update(self, workout_id: uuid.UUID, data: WorkoutUpdate, actor: Profile) -> Workout:
        workout = await self.get(workout_id)
        update_data = data.model_dump(exclude_unset=True)
        for field in _NON_NULLABLE_FIELDS:
            if field in update_data and update_data[field] is None:
                update_data.pop(field)

        if "student_id" in update_data and update_data["student_id"] != workout.student_id:
            await self._ensure_student_exists(update_data["student_id"])

        for field, value in update_data.items():
            setattr(workout, field, value)

        await AuditService.log_action(
            self.db,
            profile_id=actor.id,
            action="UPDATE_WORKOUT",
            target_id=str(workout.id),
            details=f"Updated fields: {', '.join(sorted(update_data))}",
        )
        await self.db.commit()
        return await self.get(workout.id)

    async def delete(self, workout_id: uuid.UUID, actor: Profile) -> None:
        """Delete a workout with its assignments. History entries keep pointing at it."""
        workout = await self.get(workout_id)
        await self.db.delete(workout)
        await AuditService.log_action(
            self.db,
            profile_id=actor.id,
            action="DELETE_WORKOUT",
            target_id=str(workout_id),
            details=f"Deleted workout {workout.name}",
        )
        await self.db.commit()

    async def add_exercise(self, workout_id: uuid.UUID, data: WorkoutExerciseData, actor: Profile) -> WorkoutExercise:
        workout = await self.get(workout_id)
        await self._ensure_exercises_exist({data.exercise_id})

        last_index = await self.db.scalar(
            select(func.max(WorkoutExercise.order_index)).where(WorkoutExercise.workout_id == workout.id)
        )
        assignment = _new_assignment(workout.id, data, 0 if last_index is None else last_index + 1)
        self.db.add(assignment)
        await self.db.flush()
        await AuditService.log_action(
            self.db,
            profile_id=actor.id,
            action="ADD_WORKOUT_EXERCISE",
            target_id=str(workout.id),
            details=f"Assignment {assignment.id} at position {assignment.order_index}",
        )
        await self.db.commit()

        stmt = (
            select(WorkoutExercise)
            .where(WorkoutExercise.id == assignment.id)
            .options(selectinload(WorkoutExercise.exercise))
            .execution_options(populate_existing=True)
        )
        return (await self.db.execute(stmt)).scalar_one()

    async def remove_exercise(self, workout_id: uuid.UUID, assignment_id: uuid.UUID, actor: Profile) -> None:
        stmt = select(WorkoutExercise).where(
            WorkoutExercise.id == assignment_id,
            WorkoutExercise.workout_id == workout_id,
        )
        assignment = (await self.db.execute(stmt)).scalar_one_or_none()
        if not assignment:
            raise HTTPException(status_code=404, detail="Workout exercise not found")

        await self.db.delete(assignment)
        await self.db.flush()

        # Renumber 0..N-1, one row per flush to respect uq_workout_exercises_workout_order.
        remaining = await self.db.execute(
            select(WorkoutExercise)
            .where(WorkoutExercise.workout_id == workout_id)
            .order_by(WorkoutExercise.order_index.asc())
            .execution_options(populate_existing=True)
        )
        for index, item in enumerate(remaining.scalars().all()):
            if item.order_index != index:
                item.order_index = index
                await self.db.flush()

        await AuditService.log_action(
            self.db,
            profile_id=actor.id,
            action="REMOVE_WORKOUT_EXERCISE",
            target_id=str(workout_id),
            details=f"Assignment {assignment_id}",
        )
        await self.db.commit()
