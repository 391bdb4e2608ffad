import os
import tempfile
from pathlib import Path

TEST_DB_PATH = Path(tempfile.gettempdir()) / "gym_coach_test.db"
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-gym-coach-suite")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["GYM_TIMEZONE"] = "UTC"

import uuid
import pytest
from alembic import command
from alembic.config import Config
from typing import AsyncGenerator
from httpx import ASGITransport, AsyncClient
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
from gym_coach.database import Base, get_db
from gym_coach.config import settings
from gym_coach.main import app
from gym_coach.auth.security import get_password_hash
from gym_coach.models.enums import Role
from gym_coach.models.fitness import Exercise, Workout, WorkoutExercise
from gym_coach.models.student import Student
from gym_coach.models.user import Profile

PROJECT_ROOT = Path(__file__).resolve().parents[1]
ADMIN_EMAIL = "admin@test.com"
ADMIN_PASSWORD = "password123"


@pytest.fixture(scope="session", autouse=True)
def migrated_test_database():
    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()
    alembic_cfg = Config(str(PROJECT_ROOT / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    command.upgrade(alembic_cfg, "head")
    yield
    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()


@pytest.fixture(scope="function")
async def db_engine():
    engine = create_async_engine(
        settings.SQLALCHEMY_DATABASE_URI,
        poolclass=NullPool,
    )
    yield engine
    await engine.dispose()

@pytest.fixture(scope="function")
async def db_session(db_engine, migrated_test_database) -> AsyncGenerator[AsyncSession, None]:
    async def _reset_tables(session: AsyncSession) -> None:
        await session.rollback()
        for table in reversed(Base.metadata.sorted_tables):
            await session.execute(delete(table))
        await session.commit()

    async_session = async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False
    )
    async with async_session() as session:
        await _reset_tables(session)
        yield session
        await _reset_tables(session)

@pytest.fixture(scope="function")
async def client(db_session) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def admin_profile(db_session) -> Profile:
    profile = Profile(
        email=ADMIN_EMAIL,
        hashed_password=get_password_hash(ADMIN_PASSWORD),
        name="Admin User",
        role=Role.ADMIN,
        is_active=True,
    )
    db_session.add(profile)
    await db_session.commit()
    return profile


@pytest.fixture
async def admin_token_headers(client, admin_profile):
    response = await client.post(
        f"{settings.API_V1_STR}/auth/login",
        json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}
    )
    token = response.json()["data"]["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_student(db_session):
    async def _make(*, username="joao", password="senha123", active=True, name="João Silva", age=25, goal="Hipertrofia", **extra) -> Student:
        student = Student(
            name=name,
            age=age,
            goal=goal,
            username=username,
            hashed_password=get_password_hash(password),
            active=active,
            **extra,
        )
        db_session.add(student)
        await db_session.commit()
        return student
    return _make


@pytest.fixture
def make_exercise(db_session):
    async def _make(name="Supino Reto", muscle_group="Peito", **extra) -> Exercise:
        exercise = Exercise(name=name, muscle_group=muscle_group, **extra)
        db_session.add(exercise)
        await db_session.commit()
        return exercise
    return _make


@pytest.fixture
def make_workout(db_session):
    async def _make(student: Student, exercises: list[Exercise], *, name="Treino A", workout_type="Treino A - Superior", active=True, **extra) -> Workout:
        workout = Workout(
            id=uuid.uuid4(),
            student_id=student.id,
            name=name,
            workout_type=workout_type,
            active=active,
            **extra,
        )
        db_session.add(workout)
        await db_session.flush()
        for index, exercise in enumerate(exercises):
            db_session.add(
                WorkoutExercise(
                    workout_id=workout.id,
                    exercise_id=exercise.id,
                    sets=3,
                    reps="8-12",
                    rest_time=60,
                    order_index=index,
                )
            )
        await db_session.commit()
        return workout
    return _make


@pytest.fixture
def student_headers(client):
    async def _login(username: str, password: str) -> dict:
        response = await client.post(
            f"{settings.API_V1_STR}/auth/student/login",
            json={"username": username, "password": password}
        )
        token = response.json()["data"]["access_token"]
        return {"Authorization": f"Bearer {token}"}
    return _login
