import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession
from gym_coach.auth import security
from gym_coach.config import settings


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, admin_profile):
    response = await client.post(
        f"{settings.API_V1_STR}/auth/login",
        json={"email": "admin@test.com", "password": "password123"}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert "access_token" in data["data"]
    assert data["data"]["token_type"] == "bearer"

@pytest.mark.asyncio
async def test_login_invalid_credentials(client: AsyncClient, admin_profile):
    response = await client.post(
        f"{settings.API_V1_STR}/auth/login",
        json={"email": "admin@test.com", "password": "wrongpassword"}
    )
    assert response.status_code == 401

@pytest.mark.asyncio
async def test_read_me(client: AsyncClient, admin_token_headers):
    response = await client.get(f"{settings.API_V1_STR}/auth/me", headers=admin_token_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["email"] == "admin@test.com"
    assert data["role"] == "ADMIN"
    assert "hashed_password" not in data

@pytest.mark.asyncio
async def test_admin_endpoints_require_token(client: AsyncClient, db_session: AsyncSession):
    response = await client.get(f"{settings.API_V1_STR}/students")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_student_login_returns_profile(client: AsyncClient, make_student):
    student = await make_student(username="alice", password="segredo1", medical_notes="Asma leve")

    response = await client.post(
        f"{settings.API_V1_STR}/auth/student/login",
        json={"username": "alice", "password": "segredo1"}
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["token_type"] == "bearer"
    assert data["access_token"]
    assert data["student"] == {
        "id": str(student.id),
        "name": "João Silva",
        "username": "alice",
        "age": 25,
        "goal": "Hipertrofia",
        "medical_notes": "Asma leve",
    }

@pytest.mark.asyncio
async def test_student_login_failures_are_indistinguishable(client: AsyncClient, make_student):
    await make_student(username="alice", password="segredo1")

    wrong_password = await client.post(
        f"{settings.API_V1_STR}/auth/student/login",
        json={"username": "alice", "password": "wrong"}
    )
    unknown_user = await client.post(
        f"{settings.API_V1_STR}/auth/student/login",
        json={"username": "nobody", "password": "segredo1"}
    )
    assert wrong_password.status_code == 401
    assert unknown_user.status_code == 401
    assert wrong_password.json()["detail"] == "Incorrect username or password"
    assert unknown_user.json()["detail"] == wrong_password.json()["detail"]

@pytest.mark.asyncio
async def test_inactive_student_can_login_but_not_open_session(client: AsyncClient, make_student, student_headers):
    await make_student(username="parado", password="segredo1", active=False)
    headers = await student_headers("parado", "segredo1")

    response = await client.get(f"{settings.API_V1_STR}/session/workouts", headers=headers)
    assert response.status_code == 403
    assert response.json()["detail"] == "Inactive student"

@pytest.mark.asyncio
async def test_tokens_are_not_interchangeable(client: AsyncClient, admin_token_headers, make_student, student_headers):
    await make_student(username="alice", password="segredo1")
    headers = await student_headers("alice", "segredo1")

    as_admin = await client.get(f"{settings.API_V1_STR}/students", headers=headers)
    assert as_admin.status_code == 401

    as_student = await client.get(f"{settings.API_V1_STR}/session/workouts", headers=admin_token_headers)
    assert as_student.status_code == 401


def test_generated_student_password_is_alphanumeric():
    password = security.generate_student_password()
    assert len(password) == settings.STUDENT_PASSWORD_LENGTH
    assert all(char in security.PASSWORD_ALPHABET for char in password)
    assert security.generate_student_password(12) != security.generate_student_password(12)


def test_password_hash_roundtrip():
    hashed = security.get_password_hash("segredo1")
    assert hashed != "segredo1"
    assert security.verify_password("segredo1", hashed)
    assert not security.verify_password("segredo2", hashed)
