from datetime import datetime
from typing import Optional
import uuid

from pydantic import BaseModel, field_validator

from gym_coach.models.student import STUDENT_MAX_AGE, STUDENT_MIN_AGE
from gym_coach.schemas.common import optional_text, password_text, required_text

AGE_RANGE_MESSAGE = f"age must be between {STUDENT_MIN_AGE} and {STUDENT_MAX_AGE}"


def _check_age(value: int) -> int:
    if value < STUDENT_MIN_AGE or value > STUDENT_MAX_AGE:
        raise ValueError(AGE_RANGE_MESSAGE)
    return value


class StudentCreate(BaseModel):
    name: str
    age: int
    goal: str
    username: str
    password: Optional[str] = None
    medical_notes: Optional[str] = None
    active: bool = True
    photo: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return required_text(value, "name")

    @field_validator("goal")
    @classmethod
    def validate_goal(cls, value: str) -> str:
        return required_text(value, "goal")

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        return required_text(value, "username")

    @field_validator("age")
    @classmethod
    def validate_age(cls, value: int) -> int:
        return _check_age(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: Optional[str]) -> Optional[str]:
        # A blank password means "generate one".
        if value is None or not value.strip():
            return None
        return value

    @field_validator("medical_notes", "photo")
    @classmethod
    def normalize_optional(cls, value: Optional[str]) -> Optional[str]:
        return optional_text(value)


class StudentUpdate(BaseModel):
    name: Optional[str] = None
    age: Optional[int] = None
    goal: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    medical_notes: Optional[str] = None
    active: Optional[bool] = None
    photo: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else required_text(value, "name")

    @field_validator("goal")
    @classmethod
    def validate_goal(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else required_text(value, "goal")

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else required_text(value, "username")

    @field_validator("age")
    @classmethod
    def validate_age(cls, value: Optional[int]) -> Optional[int]:
        return None if value is None else _check_age(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else password_text(value)

    @field_validator("medical_notes", "photo")
    @classmethod
    def normalize_optional(cls, value: Optional[str]) -> Optional[str]:
        return optional_text(value)


class StudentResponse(BaseModel):
    id: uuid.UUID
    owner_id: uuid.UUID | None = None
    name: str
    age: int
    goal: str
    medical_notes: str | None = None
    active: bool
    photo: str | None = None
    username: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class StudentCredentialsResponse(StudentResponse):
    """Returned only when a password was just set; carries it in clear once."""
    password: str


class StudentStats(BaseModel):
    total_students: int
    active_students: int
    total_workouts: int
