import secrets
import string
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import jwt
from passlib.context import CryptContext

from gym_coach.config import settings

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

PASSWORD_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits

ACCESS_TOKEN_TYPE = "access"
STUDENT_TOKEN_TYPE = "student"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def generate_student_password(length: int | None = None) -> str:
    """Random alphanumeric password handed to a student on registration."""
    size = length or settings.STUDENT_PASSWORD_LENGTH
    return "".join(secrets.choice(PASSWORD_ALPHABET) for _ in range(size))


def _encode(subject: str | Any, token_type: str, expires_delta: timedelta) -> str:
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode = {
        "exp": expire,
        "sub": str(subject),
        "type": token_type,
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_access_token(subject: str | Any, expires_delta: timedelta | None = None) -> str:
    return _encode(
        subject,
        ACCESS_TOKEN_TYPE,
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def create_student_token(student_id: uuid.UUID, expires_delta: timedelta | None = None) -> str:
    return _encode(
        student_id,
        STUDENT_TOKEN_TYPE,
        expires_delta or timedelta(minutes=settings.STUDENT_TOKEN_EXPIRE_MINUTES),
    )
