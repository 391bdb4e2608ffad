from typing import Annotated, List
import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from gym_coach.auth import dependencies
from gym_coach.core.responses import StandardResponse
from gym_coach.database import get_db
from gym_coach.models.enums import GOAL_OPTIONS
from gym_coach.models.user import Profile
from gym_coach.schemas.students import (
    StudentCreate,
    StudentCredentialsResponse,
    StudentResponse,
    StudentStats,
    StudentUpdate,
)
from gym_coach.services.student_service import DEFAULT_PAGE_SIZE, StudentService

router = APIRouter()


def _with_password(student, password: str) -> StudentCredentialsResponse:
    payload = StudentResponse.model_validate(student).model_dump()
    return StudentCredentialsResponse(**payload, password=password)


@router.get("/goals", response_model=StandardResponse[List[str]])
async def list_goal_options(
    current_profile: Annotated[Profile, Depends(dependencies.get_current_admin)],
):
    return StandardResponse(data=list(GOAL_OPTIONS))


@router.get("/stats", response_model=StandardResponse[StudentStats])
async def get_student_stats(
    current_profile: Annotated[Profile, Depends(dependencies.get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return StandardResponse(data=await StudentService(db).stats())


@router.get("", response_model=StandardResponse[List[StudentResponse]])
async def list_students(
    current_profile: Annotated[Profile, Depends(dependencies.get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
    search: str | None = Query(None),
    active: bool | None = Query(None),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100),
    offset: int = Query(0, ge=0),
):
    students = await StudentService(db).list(search=search, active=active, limit=limit, offset=offset)
    return StandardResponse(data=[StudentResponse.model_validate(s) for s in students])


@router.post("", response_model=StandardResponse[StudentCredentialsResponse])
async def create_student(
    data: StudentCreate,
    current_profile: Annotated[Profile, Depends(dependencies.get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Register a student. The password is returned here and never again."""
    student, password = await StudentService(db).create(data, current_profile)
    return StandardResponse(data=_with_password(student, password), message="Student created successfully")


@router.get("/{student_id}", response_model=StandardResponse[StudentResponse])
async def get_student(
    student_id: uuid.UUID,
    current_profile: Annotated[Profile, Depends(dependencies.get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    student = await StudentService(db).get(student_id)
    return StandardResponse(data=StudentResponse.model_validate(student))


@router.patch("/{student_id}", response_model=StandardResponse[StudentResponse])
async def update_student(
    student_id: uuid.UUID,
    data: StudentUpdate,
    current_profile: Annotated[Profile, Depends(dependencies.get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    student = await StudentService(db).update(student_id, data, current_profile)
    return StandardResponse(data=StudentResponse.model_validate(student), message="Student updated successfully")


@router.delete("/{student_id}", response_model=StandardResponse)
async def delete_student(
    student_id: uuid.UUID,
    current_profile: Annotated[Profile, Depends(dependencies.get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    await StudentService(db).delete(student_id, current_profile)
    return StandardResponse(message="Student deleted successfully")


@router.post("/{student_id}/toggle-active", response_model=StandardResponse[StudentResponse])
async def toggle_student_active(
    student_id: uuid.UUID,
    current_profile: Annotated[Profile, Depends(dependencies.get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    student = await StudentService(db).toggle_active(student_id, current_profile)
    state = "activated" if student.active else "deactivated"
    return StandardResponse(data=StudentResponse.model_validate(student), message=f"Student {state}")


@router.post("/{student_id}/reset-password", response_model=StandardResponse[StudentCredentialsResponse])
async def reset_student_password(
    student_id: uuid.UUID,
    current_profile: Annotated[Profile, Depends(dependencies.get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    student, password = await StudentService(db).reset_password(student_id, current_profile)
    return StandardResponse(data=_with_password(student, password), message="Password reset successfully")
