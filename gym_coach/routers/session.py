from typing import Annotated
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from gym_coach.auth import dependencies
from gym_coach.core.responses import StandardResponse
from gym_coach.database import get_db
from gym_coach.models.student import Student
from gym_coach.schemas.history import StudentHistoryResponse
from gym_coach.schemas.session import (
    CompleteWorkoutRequest,
    CompleteWorkoutResponse,
    SessionViewResponse,
    SessionWorkoutResponse,
)
from gym_coach.services.history_service import DEFAULT_PAGE_SIZE, HistoryService
from gym_coach.services.session_service import StudentSessionService
from gym_coach.services.timezone_service import now_in_gym_tz

router = APIRouter()


@router.get("/workouts", response_model=StandardResponse[SessionViewResponse])
async def get_session_workouts(
    current_student: Annotated[Student, Depends(dependencies.get_current_student)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Workouts still to do today for the logged-in student."""
    service = StudentSessionService(db)
    session = await service.load(current_student.id)
    progress = session.progress()
    return StandardResponse(
        data=SessionViewResponse(
            student_id=session.student_id,
            day=session.day,
            total_workouts=progress.total_workouts,
            completed_workouts=progress.completed_workouts,
            workouts=[
                SessionWorkoutResponse.model_validate(workout)
                for workout in session.visible_workouts(service.clock())
            ],
        )
    )


@router.post("/workouts/{workout_id}/complete", response_model=StandardResponse[CompleteWorkoutResponse])
async def complete_session_workout(
    workout_id: uuid.UUID,
    data: CompleteWorkoutRequest,
    current_student: Annotated[Student, Depends(dependencies.get_current_student)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Finish a workout whose exercises were ticked off on the client.

    ``completed_exercise_ids`` are replayed onto a freshly loaded view, so an
    id that is not part of the workout is rejected.
    """
    service = StudentSessionService(db)
    session = await service.load(current_student.id)
    if session.find_workout(workout_id) is None:
        raise HTTPException(status_code=404, detail="Workout not available in this session")

    for assignment_id in dict.fromkeys(data.completed_exercise_ids):
        try:
            session.toggle_exercise(workout_id, assignment_id)
        except KeyError:
            raise HTTPException(status_code=400, detail=f"Exercise {assignment_id} is not part of this workout")

    entry = await service.complete_workout(session, workout_id, notes=data.notes)
    enriched = (await HistoryService(db).enrich([entry]))[0]
    return StandardResponse(
        data=CompleteWorkoutResponse(
            entry=enriched,
            evict_after_seconds=session.eviction_delay.total_seconds(),
        ),
        message="Workout completed",
    )


@router.get("/history", response_model=StandardResponse[StudentHistoryResponse])
async def get_my_history(
    current_student: Annotated[Student, Depends(dependencies.get_current_student)],
    db: Annotated[AsyncSession, Depends(get_db)],
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100),
    offset: int = Query(0, ge=0),
):
    service = HistoryService(db)
    entries = await service.list(student_id=current_student.id, limit=limit, offset=offset)
    summary = await service.summary(current_student.id, now_in_gym_tz())
    return StandardResponse(data=StudentHistoryResponse(summary=summary, entries=entries))
