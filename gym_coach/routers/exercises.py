from typing import Annotated, List
import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from gym_coach.auth import dependencies
from gym_coach.core.responses import StandardResponse
from gym_coach.database import get_db
from gym_coach.models.user import Profile
from gym_coach.schemas.fitness import ExerciseCreate, ExerciseResponse, ExerciseUpdate
from gym_coach.services.exercise_service import ExerciseService

router = APIRouter()


@router.get("/muscle-groups", response_model=StandardResponse[List[str]])
async def list_muscle_groups(
    current_profile: Annotated[Profile, Depends(dependencies.get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return StandardResponse(data=await ExerciseService(db).muscle_groups())


@router.get("", response_model=StandardResponse[List[ExerciseResponse]])
async def list_exercises(
    current_profile: Annotated[Profile, Depends(dependencies.get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
    search: str | None = Query(None),
    muscle_group: str | None = Query(None),
):
    exercises = await ExerciseService(db).list(search=search, muscle_group=muscle_group)
    return StandardResponse(data=[ExerciseResponse.model_validate(e) for e in exercises])


@router.post("", response_model=StandardResponse[ExerciseResponse])
async def create_exercise(
    data: ExerciseCreate,
    current_profile: Annotated[Profile, Depends(dependencies.get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    exercise = await ExerciseService(db).create(data, current_profile)
    return StandardResponse(data=ExerciseResponse.model_validate(exercise), message="Exercise created successfully")


@router.get("/{exercise_id}", response_model=StandardResponse[ExerciseResponse])
async def get_exercise(
    exercise_id: uuid.UUID,
    current_profile: Annotated[Profile, Depends(dependencies.get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    exercise = await ExerciseService(db).get(exercise_id)
    return StandardResponse(data=ExerciseResponse.model_validate(exercise))


@router.put("/{exercise_id}", response_model=StandardResponse[ExerciseResponse])
async def update_exercise(
    exercise_id: uuid.UUID,
    data: ExerciseUpdate,
    current_profile: Annotated[Profile, Depends(dependencies.get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    exercise = await ExerciseService(db).update(exercise_id, data, current_profile)
    return StandardResponse(data=ExerciseResponse.model_validate(exercise), message="Exercise updated successfully")


@router.delete("/{exercise_id}", response_model=StandardResponse)
async def delete_exercise(
    exercise_id: uuid.UUID,
    current_profile: Annotated[Profile, Depends(dependencies.get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    await ExerciseService(db).delete(exercise_id, current_profile)
    return StandardResponse(message="Exercise deleted successfully")
