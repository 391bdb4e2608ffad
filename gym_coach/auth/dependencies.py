from typing import Annotated, List
import uuid
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from gym_coach.config import settings
from gym_coach.database import get_db
from gym_coach.models.student import Student
from gym_coach.models.user import Profile
from gym_coach.auth.schemas import TokenPayload
from gym_coach.auth.security import ACCESS_TOKEN_TYPE, STUDENT_TOKEN_TYPE
from gym_coach.models.enums import Role
from gym_coach.services.auth_service import AuthService

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/login")


def _coerce_role(value: Role | str) -> Role:
    return value if isinstance(value, Role) else Role(value)


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def _decode(token: str, expected_type: str) -> TokenPayload:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise _credentials_exception()
    subject = payload.get("sub")
    token_type = payload.get("type")
    if subject is None or token_type != expected_type:
        raise _credentials_exception()
    return TokenPayload(sub=subject, type=token_type)


async def get_current_profile(
    token: Annotated[str, Depends(oauth2_scheme)],
    db: Annotated[AsyncSession, Depends(get_db)]
) -> Profile:
    token_data = _decode(token, ACCESS_TOKEN_TYPE)

    stmt = select(Profile).where(Profile.email == token_data.sub)
    result = await db.execute(stmt)
    profile = result.scalar_one_or_none()

    if profile is None:
        raise _credentials_exception()
    profile.role = _coerce_role(profile.role)
    return profile

async def get_current_active_profile(
    current_profile: Annotated[Profile, Depends(get_current_profile)]
) -> Profile:
    if not current_profile.is_active:
        raise HTTPException(status_code=400, detail="Inactive account")
    return current_profile

class RoleChecker:
    def __init__(self, allowed_roles: List[Role]):
        self.allowed_roles = allowed_roles

    def __call__(self, profile: Annotated[Profile, Depends(get_current_active_profile)]):
        profile.role = _coerce_role(profile.role)
        if profile.role not in self.allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Operation not permitted"
            )
        return profile

get_current_admin = RoleChecker([Role.ADMIN])


async def get_current_student(
    token: Annotated[str, Depends(oauth2_scheme)],
    db: Annotated[AsyncSession, Depends(get_db)]
) -> Student:
    token_data = _decode(token, STUDENT_TOKEN_TYPE)
    try:
        student_id = uuid.UUID(token_data.sub)
    except ValueError:
        raise _credentials_exception()

    student = await db.get(Student, student_id)
    if student is None:
        raise _credentials_exception()
    if not await AuthService(db).is_active_student(student.id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Inactive student")
    return student
