"""Student registry: roster CRUD, activation and credentials."""
from __future__ import annotations

import logging
import uuid

from fastapi import HTTPException, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from gym_coach.auth import security
from gym_coach.models.fitness import Workout
from gym_coach.models.student import Student
from gym_coach.models.user import Profile
from gym_coach.schemas.students import StudentCreate, StudentStats, StudentUpdate
from gym_coach.services.audit_service import AuditService

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10

# Columns that may never be cleared by a partial update.
_NON_NULLABLE_FIELDS = {"name", "age", "goal", "username", "active"}


class StudentService:
    """Every mutation commits before returning the persisted row.

    Failures raise ``HTTPException`` after rolling back, so a caller holding a
    list of students only patches it with the returned row on success.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(
        self,
        *,
        search: str | None = None,
        active: bool | None = None,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> list[Student]:
        stmt = select(Student)
        if search:
            pattern = f"%{search.strip().lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(Student.name).like(pattern),
                    func.lower(Student.goal).like(pattern),
                )
            )
        if active is not None:
            stmt = stmt.where(Student.active.is_(active))
        stmt = stmt.order_by(Student.created_at.desc()).offset(offset).limit(limit)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get(self, student_id: uuid.UUID) -> Student:
        student = await self.db.get(Student, student_id)
        if not student:
            raise HTTPException(status_code=404, detail="Student not found")
        return student

    async def _ensure_username_available(self, username: str, *, exclude_id: uuid.UUID | None = None) -> None:
        stmt = select(Student.id).where(Student.username == username)
        if exclude_id is not None:
            stmt = stmt.where(Student.id != exclude_id)
        if (await self.db.execute(stmt)).first() is not None:
            raise HTTPException(status_code=400, detail="Username is already taken")

    async def create(self, data: StudentCreate, owner: Profile) -> tuple[Student, str]:
        """Create a student; returns the row and the plaintext password issued."""
        await self._ensure_username_available(data.username)
        password = data.password or security.generate_student_password()

        student = Student(
            owner_id=owner.id,
            name=data.name,
            age=data.age,
            goal=data.goal,
            medical_notes=data.medical_notes,
            active=data.active,
            photo=data.photo,
            username=data.username,
            hashed_password=security.get_password_hash(password),
        )
        self.db.add(student)
        await self.db.flush()
        await AuditService.log_action(
            self.db,
            profile_id=owner.id,
            action="CREATE_STUDENT",
            target_id=str(student.id),
            details=f"Registered student {student.username}",
        )
        await self.db.commit()
        await self.db.refresh(student)
        logger.info("Student %s created by %s", student.id, owner.email)
        return student, password

    async def update(self, student_id: uuid.UUID, data: StudentUpdate, actor: Profile) -> Student:
        student = await self.get(student_id)
        update_data = data.model_dump(exclude_unset=True)
        for field in _NON_NULLABLE_FIELDS:
            if field in update_data and update_data[field] is None:
                update_data.pop(field)

        if "username" in update_data and update_data["username"] != student.username:
            await self._ensure_username_available(update_data["username"], exclude_id=student.id)

        password = update_data.pop("password", None)
        if password:
            student.hashed_password = security.get_password_hash(password)

        for field, value in update_data.items():
            setattr(student, field, value)

        await AuditService.log_action(
            self.db,
            profile_id=actor.id,
            action="UPDATE_STUDENT",
            target_id=str(student.id),
            details=f"Updated fields: {', '.join(sorted(update_data)) or 'password'}",
        )
        await self.db.commit()
        await self.db.refresh(student)
        return student

    async def delete(self, student_id: uuid.UUID, actor: Profile) -> None:
        """Hard delete. Refused while workouts still reference the student;
        history entries are plain references and stay behind."""
        student = await self.get(student_id)
        workout_count = await self.db.scalar(
            select(func.count(Workout.id)).where(Workout.student_id == student.id)
        )
        if workout_count:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Student still has {workout_count} workout(s); delete them first",
            )

        await self.db.delete(student)
        await AuditService.log_action(
            self.db,
            profile_id=actor.id,
            action="DELETE_STUDENT",
            target_id=str(student_id),
            details=f"Deleted student {student.username}",
        )
        await self.db.commit()
        logger.info("Student %s deleted by %s", student_id, actor.email)

    async def toggle_active(self, student_id: uuid.UUID, actor: Profile) -> Student:
        student = await self.get(student_id)
        student.active = not student.active
        await AuditService.log_action(
            self.db,
            profile_id=actor.id,
            action="ACTIVATE_STUDENT" if student.active else "DEACTIVATE_STUDENT",
            target_id=str(student.id),
        )
        await self.db.commit()
        await self.db.refresh(student)
        return student

    async def reset_password(self, student_id: uuid.UUID, actor: Profile) -> tuple[Student, str]:
        student = await self.get(student_id)
        password = security.generate_student_password()
        student.hashed_password = security.get_password_hash(password)
        await AuditService.log_action(
            self.db,
            profile_id=actor.id,
            action="RESET_STUDENT_PASSWORD",
            target_id=str(student.id),
        )
        await self.db.commit()
        await self.db.refresh(student)
        return student, password

    async def stats(self) -> StudentStats:
        total = await self.db.scalar(select(func.count(Student.id)))
        active = await self.db.scalar(select(func.count(Student.id)).where(Student.active.is_(True)))
        workouts = await self.db.scalar(select(func.count(Workout.id)))
        return StudentStats(
            total_students=total or 0,
            active_students=active or 0,
            total_workouts=workouts or 0,
        )
