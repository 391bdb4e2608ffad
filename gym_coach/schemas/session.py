from datetime import date
from typing import List
import uuid

from pydantic import BaseModel, Field

from gym_coach.models.enums import ExerciseState
from gym_coach.schemas.history import WorkoutHistoryResponse


class SessionExerciseResponse(BaseModel):
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
    state: ExerciseState
    completed: bool

    class Config:
        from_attributes = True


class SessionWorkoutResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: str | None = None
    workout_type: str
    completed: bool
    completed_exercises: int
    exercises: List[SessionExerciseResponse] = Field(default_factory=list)

    class Config:
        from_attributes = True


class SessionViewResponse(BaseModel):
    student_id: uuid.UUID
    day: date
    total_workouts: int
    completed_workouts: int
    workouts: List[SessionWorkoutResponse] = Field(default_factory=list)


class CompleteWorkoutRequest(BaseModel):
    completed_exercise_ids: List[uuid.UUID] = Field(default_factory=list)
    notes: str | None = None


class CompleteWorkoutResponse(BaseModel):
    entry: WorkoutHistoryResponse
    evict_after_seconds: float
