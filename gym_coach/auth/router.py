import logging
from typing import Annotated
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from gym_coach.database import get_db
from gym_coach.auth import schemas, security, dependencies
from gym_coach.models.user import Profile
from gym_coach.core.responses import StandardResponse
from gym_coach.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter()

INVALID_STUDENT_CREDENTIALS = "Incorrect username or password"


@router.post("/login", response_model=StandardResponse[schemas.Token])
async def login(
    login_data: schemas.LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)]
):
    profile = await AuthService(db).authenticate_profile(login_data.email, login_data.password)
    if not profile:
        logger.warning("Rejected admin login for email=%r", login_data.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = security.create_access_token(subject=profile.email)
    return StandardResponse(
        data=schemas.Token(access_token=access_token, token_type="bearer"),
        message="Login Successful"
    )


@router.post("/student/login", response_model=StandardResponse[schemas.StudentLoginResponse])
async def student_login(
    credentials: schemas.StudentLoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Authenticate a student by username and password.

    The same message is returned whether the username or the password was
    wrong.
    """
    matches = await AuthService(db).authenticate_student(credentials.username, credentials.password)
    if not matches:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_STUDENT_CREDENTIALS,
            headers={"WWW-Authenticate": "Bearer"},
        )

    student = matches[0]
    return StandardResponse(
        data=schemas.StudentLoginResponse(
            access_token=security.create_student_token(student.id),
            token_type="bearer",
            student=student,
        ),
        message=f"Welcome, {student.name}!"
    )


@router.get("/me", response_model=StandardResponse[schemas.ProfileResponse])
async def read_profile_me(
    current_profile: Annotated[Profile, Depends(dependencies.get_current_active_profile)],
):
    return StandardResponse(data=schemas.ProfileResponse.model_validate(current_profile))
