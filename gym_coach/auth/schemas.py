from typing import Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr
from gym_coach.models.enums import Role
import uuid

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

class TokenPayload(BaseModel):
    sub: Optional[str] = None
    exp: Optional[int] = None
    type: Optional[str] = None

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class ProfileResponse(BaseModel):
    id: uuid.UUID
    email: EmailStr
    name: str
    role: Role
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True

class StudentLoginRequest(BaseModel):
    username: str
    password: str

class StudentProfile(BaseModel):
    """Fields returned by a successful student authentication."""
    id: uuid.UUID
    name: str
    username: str
    age: int
    goal: str
    medical_notes: Optional[str] = None

    class Config:
        from_attributes = True

class StudentLoginResponse(Token):
    student: StudentProfile
