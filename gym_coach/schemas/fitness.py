from datetime import datetime
from typing import List
import uuid

from pydantic import BaseModel, Field, field_validator

from gym_coach.models.fitness import DEFAULT_REPS, DEFAULT_REST_SECONDS, DEFAULT_SETS
from gym_coach.schemas.common import optional_text, required_text


# --- Exercise catalog ---

class ExerciseCreate(BaseModel):
    name: str
    muscle_group: str
    equipment: str | None = None
    instructions: str | None = None
    description: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return required_text(value, "name")

    @field_validator("muscle_group")
    @classmethod
    def validate_muscle_group(cls, value: str) -> str:
        return required_text(value, "muscle_group")

    @field_validator("equipment", "instructions", "description")
    @classmethod
    def normalize_optional(cls, value: str | None) -> str | None:
        return optional_text(value)


class ExerciseUpdate(BaseModel):
    name: str | None = None
    muscle_group: str | None = None
    equipment: str | None = None
    instructions: str | None = None
    description: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str | None) -> str | None:
        return None if value is None else required_text(value, "name")

    @field_validator("muscle_group")
    @classmethod
    def validate_muscle_group(cls, value: str | None) -> str | None:
        return None if value is None else required_text(value, "muscle_group")

    @field_validator("equipment", "instructions", "description")
    @classmethod
    def normalize_optional(cls, value: str | None) -> str | None:
        return optional_text(value)


class ExerciseResponse(BaseModel):
    id: uuid.UUID
    name: str
    muscle_group: str
    equipment: str | None = None
    instructions: str | None = None
    description: str | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# --- Workouts ---

class WorkoutExerciseData(BaseModel):
    exercise_id: uuid.UUID
    sets: int = Field(default=DEFAULT_SETS, ge=1)
    reps: str = DEFAULT_REPS
    weight: float | None = Field(default=None, ge=0)
    rest_time: int | None = Field(default=DEFAULT_REST_SECONDS, ge=0)
    notes: str | None = None

    @field_validator("reps")
    @classmethod
    def validate_reps(cls, value: str) -> str:
        return required_text(value, "reps")

    @field_validator("notes")
    @classmethod
    def normalize_notes(cls, value: str | None) -> str | None:
        return optional_text(value)

    @field_validator("rest_time")
    @classmethod
    def default_rest_time(cls, value: int | None) -> int:
        # An empty or zero rest time falls back to the default, as the admin form does.
        return value or DEFAULT_REST_SECONDS


class WorkoutExerciseResponse(BaseModel):
    id: uuid.UUID
    workout_id: uuid.UUID
    exercise_id: uuid.UUID
    sets: int
    reps: str
    weight: float | None = None
    rest_time: int | None = None
    notes: str | None = None
    order_index: int
    exercise: ExerciseResponse | None = None

    class Config:
        from_attributes = True


class WorkoutCreate(BaseModel):
    student_id: uuid.UUID
    name: str
    workout_type: str
    description: str | None = None
    active: bool = True
    exercises: List[WorkoutExerciseData] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return required_text(value, "name")

    @field_validator("workout_type")
    @classmethod
    def validate_workout_type(cls, value: str) -> str:
        return required_text(value, "workout_type")

    @field_validator("description")
    @classmethod
    def normalize_description(cls, value: str | None) -> str | None:
        return optional_text(value)


class WorkoutUpdate(BaseModel):
    student_id: uuid.UUID | None = None
    name: str | None = None
    workout_type: str | None = None
    description: str | None = None
    active: bool | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str | None) -> str | None:
        return None if value is None else required_text(value, "name")

    @field_validator("workout_type")
    @classmethod
    def validate_workout_type(cls, value: str | None) -> str | None:
        return None if value is None else required_text(value, "workout_type")

    @field_validator("description")
    @classmethod
    def normalize_description(cls, value: str | None) -> str | None:
        return optional_text(value)


class WorkoutResponse(BaseModel):
    id: uuid.UUID
    student_id: uuid.UUID
    name: str
    description: str | None = None
    workout_type: str
    active: bool
    created_at: datetime
    updated_at: datetime
    exercises: List[WorkoutExerciseResponse] = Field(default_factory=list)

    class Config:
        from_attributes = True
