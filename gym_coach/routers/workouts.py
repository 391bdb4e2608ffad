from typing import Annotated, List
import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from gym_coach.auth import dependencies
from gym_coach.core.responses import StandardResponse
from gym_coach.database import get_db
from gym_coach.models.enums import WORKOUT_TYPE_OPTIONS
from gym_coach.models.user import Profile
from gym_coach.schemas.fitness import (
    WorkoutCreate,
    WorkoutExerciseData,
    WorkoutExerciseResponse,
    WorkoutResponse,
    WorkoutUpdate,
)
from gym_coach.services.workout_service import WorkoutService

router = APIRouter()


@router.get("/types", response_model=StandardResponse[List[str]])
async def list_workout_types(
    current_profile: Annotated[Profile, Depends(dependencies.get_current_admin)],
):
    return StandardResponse(data=list(WORKOUT_TYPE_OPTIONS))


@router.get("", response_model=StandardResponse[List[WorkoutResponse]])
async def list_workouts(
    current_profile: Annotated[Profile, Depends(dependencies.get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
    student_id: uuid.UUID | None = Query(None),
    active: bool | None = Query(None),
):
    workouts = await WorkoutService(db).list(student_id=student_id, active=active)
    return StandardResponse(data=[WorkoutResponse.model_validate(w) for w in workouts])


@router.post("", response_model=StandardResponse[WorkoutResponse])
async def create_workout(
    data: WorkoutCreate,
    current_profile: Annotated[Profile, Depends(dependencies.get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Create a workout with its exercises in the order given."""
    workout = await WorkoutService(db).create(data, current_profile)
    return StandardResponse(data=WorkoutResponse.model_validate(workout), message="Workout created successfully")


@router.get("/{workout_id}", response_model=StandardResponse[WorkoutResponse])
async def get_workout(
    workout_id: uuid.UUID,
    current_profile: Annotated[Profile, Depends(dependencies.get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    workout = await WorkoutService(db).get(workout_id)
    return StandardResponse(data=WorkoutResponse.model_validate(workout))


@router.put("/{workout_id}", response_model=StandardResponse[WorkoutResponse])
async def update_workout(
    workout_id: uuid.UUID,
    data: WorkoutUpdate,
    current_profile: Annotated[Profile, Depends(dependencies.get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    workout = await WorkoutService(db).update(workout_id, data, current_profile)
    return StandardResponse(data=WorkoutResponse.model_validate(workout), message="Workout updated successfully")


@router.delete("/{workout_id}", response_model=StandardResponse)
async def delete_workout(
    workout_id: uuid.UUID,
    current_profile: Annotated[Profile, Depends(dependencies.get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    await WorkoutService(db).delete(workout_id, current_profile)
    return StandardResponse(message="Workout deleted successfully")


@router.post("/{workout_id}/exercises", response_model=StandardResponse[WorkoutExerciseResponse])
async def add_workout_exercise(
    workout_id: uuid.UUID,
    data: WorkoutExerciseData,
    current_profile: Annotated[Profile, Depends(dependencies.get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    assignment = await WorkoutService(db).add_exercise(workout_id, data, current_profile)
    return StandardResponse(data=WorkoutExerciseResponse.model_validate(assignment), message="Exercise added to workout")


@router.delete("/{workout_id}/exercises/{assignment_id}", response_model=StandardResponse)
async def remove_workout_exercise(
    workout_id: uuid.UUID,
    assignment_id: uuid.UUID,
    current_profile: Annotated[Profile, Depends(dependencies.get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    await WorkoutService(db).remove_exercise(workout_id, assignment_id, current_profile)
    return StandardResponse(message="Exercise removed from workout")
