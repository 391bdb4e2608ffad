"""Exercise catalog shared by every workout."""
from __future__ import annotations

import logging
import uuid

from fastapi import HTTPException, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from gym_coach.models.fitness import Exercise, WorkoutExercise
from gym_coach.models.user import Profile
from gym_coach.schemas.fitness import ExerciseCreate, ExerciseUpdate
from gym_coach.services.audit_service import AuditService

logger = logging.getLogger(__name__)

_NON_NULLABLE_FIELDS = {"name", "muscle_group"}


class ExerciseService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(
        self,
        *,
        search: str | None = None,
        muscle_group: str | None = None,
    ) -> list[Exercise]:
        """Catalog in alphabetical order, optionally narrowed like the exercise picker."""
        stmt = select(Exercise)
        if search:
            pattern = f"%{search.strip().lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(Exercise.name).like(pattern),
                    func.lower(Exercise.muscle_group).like(pattern),
                )
            )
        if muscle_group:
            stmt = stmt.where(Exercise.muscle_group == muscle_group)
        stmt = stmt.order_by(Exercise.name.asc())
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def muscle_groups(self) -> list[str]:
        stmt = select(Exercise.muscle_group).distinct().order_by(Exercise.muscle_group.asc())
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get(self, exercise_id: uuid.UUID) -> Exercise:
        exercise = await self.db.get(Exercise, exercise_id)
        if not exercise:
            raise HTTPException(status_code=404, detail="Exercise not found")
        return exercise

    async def create(self, data: ExerciseCreate, actor: Profile) -> Exercise:
        exercise = Exercise(**data.model_dump())
        self.db.add(exercise)
        await self.db.flush()
        await AuditService.log_action(
            self.db,
            profile_id=actor.id,
            action="CREATE_EXERCISE",
            target_id=str(exercise.id),
            details=f"Added exercise {exercise.name}",
        )
        await self.db.commit()
        await self.db.refresh(exercise)
        logger.info("Exercise %s (%s) added to catalog", exercise.id, exercise.name)
        return exercise

    async def update(self, exercise_id: uuid.UUID, data: ExerciseUpdate, actor: Profile) -> Exercise:
        exercise = await self.get(exercise_id)
        update_data = data.model_dump(exclude_unset=True)
        for field in _NON_NULLABLE_FIELDS:
            if field in update_data and update_data[field] is None:
                update_data.pop(field)
        for field, value in update_data.items():
            setattr(exercise, field, value)

        await AuditService.log_action(
            self.db,
            profile_id=actor.id,
            action="UPDATE_EXERCISE",
            target_id=str(exercise.id),
            details=f"Updated fields: {', '.join(sorted(update_data))}",
        )
        await self.db.commit()
        await self.db.refresh(exercise)
        return exercise

    async def delete(self, exercise_id: uuid.UUID, actor: Profile) -> None:
        exercise = await self.get(exercise_id)
        in_use = await self.db.scalar(
            select(func.count(WorkoutExercise.id)).where(WorkoutExercise.exercise_id == exercise.id)
        )
        if in_use:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Exercise is used by {in_use} workout assignment(s)",
            )

        await self.db.delete(exercise)
        await AuditService.log_action(
            self.db,
            profile_id=actor.id,
            action="DELETE_EXERCISE",
            target_id=str(exercise_id),
            details=f"Removed exercise {exercise.name}",
        )
        await self.db.commit()
