from typing import Annotated, List
import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from gym_coach.auth import dependencies
from gym_coach.core.responses import StandardResponse
from gym_coach.database import get_db
from gym_coach.models.user import Profile
from gym_coach.schemas.history import WorkoutHistoryResponse
from gym_coach.services.history_service import DEFAULT_PAGE_SIZE, HistoryService

router = APIRouter()


@router.get("", response_model=StandardResponse[List[WorkoutHistoryResponse]])
async def list_history(
    current_profile: Annotated[Profile, Depends(dependencies.get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
    student_id: uuid.UUID | None = Query(None),
    search: str | None = Query(None),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100),
    offset: int = Query(0, ge=0),
):
    """Completed workouts, newest first."""
    entries = await HistoryService(db).list(student_id=student_id, search=search, limit=limit, offset=offset)
    return StandardResponse(data=entries)


@router.get("/{entry_id}", response_model=StandardResponse[WorkoutHistoryResponse])
async def get_history_entry(
    entry_id: uuid.UUID,
    current_profile: Annotated[Profile, Depends(dependencies.get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return StandardResponse(data=await HistoryService(db).get(entry_id))
