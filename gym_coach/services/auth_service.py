import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gym_coach.auth import security
from gym_coach.auth.schemas import StudentProfile
from gym_coach.models.student import Student
from gym_coach.models.user import Profile

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def authenticate_student(self, username: str, password: str) -> list[StudentProfile]:
        """Zero or one profile for an exact username/password match.

        An unknown username and a wrong password both give an empty list.
        Database errors propagate to the caller untouched.
        """
        result = await self.db.execute(select(Student).where(Student.username == username.strip()))
        student = result.scalar_one_or_none()
        if student is None or not security.verify_password(password, student.hashed_password):
            logger.warning("Rejected student login for username=%r", username)
            return []
        return [StudentProfile.model_validate(student)]

    async def is_active_student(self, student_id: uuid.UUID) -> bool:
        active = await self.db.scalar(select(Student.active).where(Student.id == student_id))
        return bool(active)

    async def authenticate_profile(self, email: str, password: str) -> Profile | None:
        result = await self.db.execute(select(Profile).where(Profile.email == email))
        profile = result.scalar_one_or_none()
        if profile is None or not security.verify_password(password, profile.hashed_password):
            return None
        return profile
