from datetime import date, datetime
from typing import List
import uuid

from pydantic import BaseModel, Field


class CompletedExerciseSnapshot(BaseModel):
    """Frozen copy of one assignment as it was when the workout was completed."""
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
    completed: bool = True
    completion_time: datetime


class WorkoutHistoryResponse(BaseModel):
    id: uuid.UUID
    student_id: uuid.UUID
    workout_id: uuid.UUID
    completed_at: datetime
    completion_date: date
    exercises_completed: List[CompletedExerciseSnapshot] = Field(default_factory=list)
    notes: str | None = None
    workout_name: str
    workout_type: str
    student_name: str


class HistorySummary(BaseModel):
    total_workouts: int
    total_exercises: int
    workouts_last_7_days: int


class StudentHistoryResponse(BaseModel):
    summary: HistorySummary
    entries: List[WorkoutHistoryResponse] = Field(default_factory=list)
