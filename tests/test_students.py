import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from gym_coach.config import settings
from gym_coach.models.audit import AuditLog
from gym_coach.models.enums import GOAL_OPTIONS
from gym_coach.models.student import Student

STUDENTS_URL = f"{settings.API_V1_STR}/students"


def _student_payload(**overrides):
    payload = {
        "name": "Maria Souza",
        "age": 30,
        "goal": "Emagrecimento",
        "username": "maria",
        "medical_notes": "Joelho direito operado",
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
async def test_create_student_returns_generated_password_once(client: AsyncClient, admin_token_headers):
    response = await client.post(STUDENTS_URL, json=_student_payload(), headers=admin_token_headers)
    assert response.status_code == 200
    created = response.json()["data"]
    password = created["password"]
    assert len(password) == 8
    assert password.isalnum()
    assert created["active"] is True

    fetched = await client.get(f"{STUDENTS_URL}/{created['id']}", headers=admin_token_headers)
    assert fetched.status_code == 200
    assert "password" not in fetched.json()["data"]
    assert "hashed_password" not in fetched.json()["data"]

    login = await client.post(
        f"{settings.API_V1_STR}/auth/student/login",
        json={"username": "maria", "password": password}
    )
    assert login.status_code == 200

@pytest.mark.asyncio
async def test_create_student_keeps_supplied_password(client: AsyncClient, admin_token_headers, db_session: AsyncSession):
    response = await client.post(STUDENTS_URL, json=_student_payload(password="minhasenha"), headers=admin_token_headers)
    assert response.status_code == 200
    assert response.json()["data"]["password"] == "minhasenha"

    stored = (await db_session.execute(select(Student).where(Student.username == "maria"))).scalar_one()
    assert stored.hashed_password != "minhasenha"

@pytest.mark.asyncio
@pytest.mark.parametrize("age,expected", [(11, 422), (12, 200), (120, 200), (121, 422)])
async def test_create_student_age_bounds(client: AsyncClient, admin_token_headers, age, expected):
    response = await client.post(STUDENTS_URL, json=_student_payload(age=age), headers=admin_token_headers)
    assert response.status_code == expected
    if expected == 422:
        assert "age must be between 12 and 120" in response.text

@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["name", "goal", "username"])
async def test_create_student_rejects_blank_fields(client: AsyncClient, admin_token_headers, field):
    response = await client.post(STUDENTS_URL, json=_student_payload(**{field: "   "}), headers=admin_token_headers)
    assert response.status_code == 422

@pytest.mark.asyncio
async def test_create_student_duplicate_username(client: AsyncClient, admin_token_headers, make_student):
    await make_student(username="maria")
    response = await client.post(STUDENTS_URL, json=_student_payload(), headers=admin_token_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Username is already taken"

@pytest.mark.asyncio
async def test_list_students_newest_first_with_filters(client: AsyncClient, admin_token_headers, make_student):
    await make_student(username="ana", name="Ana", goal="Força")
    await make_student(username="bruno", name="Bruno", goal="Hipertrofia", active=False)
    await make_student(username="carla", name="Carla", goal="Hipertrofia")

    response = await client.get(STUDENTS_URL, headers=admin_token_headers)
    assert response.status_code == 200
    assert [s["username"] for s in response.json()["data"]] == ["carla", "bruno", "ana"]

    response = await client.get(STUDENTS_URL, params={"search": "hiper"}, headers=admin_token_headers)
    assert [s["username"] for s in response.json()["data"]] == ["carla", "bruno"]

    response = await client.get(STUDENTS_URL, params={"active": "false"}, headers=admin_token_headers)
    assert [s["username"] for s in response.json()["data"]] == ["bruno"]

@pytest.mark.asyncio
async def test_list_students_is_paginated(client: AsyncClient, admin_token_headers, make_student):
    for index in range(12):
        await make_student(username=f"aluno{index:02d}", name=f"Aluno {index}")

    first_page = await client.get(STUDENTS_URL, headers=admin_token_headers)
    assert len(first_page.json()["data"]) == 10
    assert first_page.json()["data"][0]["username"] == "aluno11"

    second_page = await client.get(STUDENTS_URL, params={"offset": 10}, headers=admin_token_headers)
    assert [s["username"] for s in second_page.json()["data"]] == ["aluno01", "aluno00"]

@pytest.mark.asyncio
async def test_update_student_partial(client: AsyncClient, admin_token_headers, make_student):
    student = await make_student(username="pedro", name="Pedro", age=40)

    response = await client.patch(
        f"{STUDENTS_URL}/{student.id}",
        json={"goal": "Reabilitação", "medical_notes": "Hérnia de disco"},
        headers=admin_token_headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["goal"] == "Reabilitação"
    assert data["medical_notes"] == "Hérnia de disco"
    assert data["name"] == "Pedro"
    assert data["age"] == 40

    invalid = await client.patch(f"{STUDENTS_URL}/{student.id}", json={"age": 5}, headers=admin_token_headers)
    assert invalid.status_code == 422

@pytest.mark.asyncio
async def test_update_student_password_changes_login(client: AsyncClient, admin_token_headers, make_student):
    student = await make_student(username="pedro", password="antiga123")
    response = await client.patch(
        f"{STUDENTS_URL}/{student.id}", json={"password": "nova12345"}, headers=admin_token_headers
    )
    assert response.status_code == 200

    old = await client.post(f"{settings.API_V1_STR}/auth/student/login", json={"username": "pedro", "password": "antiga123"})
    new = await client.post(f"{settings.API_V1_STR}/auth/student/login", json={"username": "pedro", "password": "nova12345"})
    assert old.status_code == 401
    assert new.status_code == 200

@pytest.mark.asyncio
async def test_update_student_username_conflict(client: AsyncClient, admin_token_headers, make_student):
    await make_student(username="taken")
    student = await make_student(username="free")
    response = await client.patch(f"{STUDENTS_URL}/{student.id}", json={"username": "taken"}, headers=admin_token_headers)
    assert response.status_code == 400

@pytest.mark.asyncio
async def test_toggle_active_twice_restores_state(client: AsyncClient, admin_token_headers, make_student):
    student = await make_student(username="lucas")

    first = await client.post(f"{STUDENTS_URL}/{student.id}/toggle-active", headers=admin_token_headers)
    assert first.json()["data"]["active"] is False
    second = await client.post(f"{STUDENTS_URL}/{student.id}/toggle-active", headers=admin_token_headers)
    assert second.json()["data"]["active"] is True

@pytest.mark.asyncio
async def test_reset_password(client: AsyncClient, admin_token_headers, make_student):
    student = await make_student(username="lucas", password="antiga123")

    response = await client.post(f"{STUDENTS_URL}/{student.id}/reset-password", headers=admin_token_headers)
    assert response.status_code == 200
    password = response.json()["data"]["password"]

    old = await client.post(f"{settings.API_V1_STR}/auth/student/login", json={"username": "lucas", "password": "antiga123"})
    new = await client.post(f"{settings.API_V1_STR}/auth/student/login", json={"username": "lucas", "password": password})
    assert old.status_code == 401
    assert new.status_code == 200

@pytest.mark.asyncio
async def test_delete_student(client: AsyncClient, admin_token_headers, make_student):
    student = await make_student(username="sai")

    response = await client.delete(f"{STUDENTS_URL}/{student.id}", headers=admin_token_headers)
    assert response.status_code == 200

    missing = await client.get(f"{STUDENTS_URL}/{student.id}", headers=admin_token_headers)
    assert missing.status_code == 404

@pytest.mark.asyncio
async def test_delete_student_with_workouts_is_refused(
    client: AsyncClient, admin_token_headers, make_student, make_exercise, make_workout
):
    student = await make_student(username="fica")
    await make_workout(student, [await make_exercise()])

    response = await client.delete(f"{STUDENTS_URL}/{student.id}", headers=admin_token_headers)
    assert response.status_code == 409

    still_there = await client.get(f"{STUDENTS_URL}/{student.id}", headers=admin_token_headers)
    assert still_there.status_code == 200

@pytest.mark.asyncio
async def test_student_stats_and_goals(client: AsyncClient, admin_token_headers, make_student, make_exercise, make_workout):
    active = await make_student(username="a1")
    await make_student(username="a2", active=False)
    await make_workout(active, [await make_exercise()])

    stats = await client.get(f"{STUDENTS_URL}/stats", headers=admin_token_headers)
    assert stats.json()["data"] == {"total_students": 2, "active_students": 1, "total_workouts": 1}

    goals = await client.get(f"{STUDENTS_URL}/goals", headers=admin_token_headers)
    assert goals.json()["data"] == GOAL_OPTIONS

@pytest.mark.asyncio
async def test_student_mutations_are_audited(client: AsyncClient, admin_token_headers, db_session: AsyncSession):
    response = await client.post(STUDENTS_URL, json=_student_payload(), headers=admin_token_headers)
    student_id = response.json()["data"]["id"]

    logs = (await db_session.execute(select(AuditLog).where(AuditLog.target_id == student_id))).scalars().all()
    assert [log.action for log in logs] == ["CREATE_STUDENT"]

    audit = await client.get(f"{settings.API_V1_STR}/audit/logs", params={"action": "CREATE_STUDENT"}, headers=admin_token_headers)
    assert audit.status_code == 200
    assert audit.json()["data"][0]["target_id"] == student_id

@pytest.mark.asyncio
async def test_supplied_password_is_stored_exactly(client: AsyncClient, admin_token_headers):
    response = await client.post(STUDENTS_URL, json=_student_payload(password=" senha 1 "), headers=admin_token_headers)
    assert response.status_code == 200
    assert response.json()["data"]["password"] == " senha 1 "

    exact = await client.post(f"{settings.API_V1_STR}/auth/student/login", json={"username": "maria", "password": " senha 1 "})
    trimmed = await client.post(f"{settings.API_V1_STR}/auth/student/login", json={"username": "maria", "password": "senha 1"})
    assert exact.status_code == 200
    assert trimmed.status_code == 401

@pytest.mark.asyncio
async def test_update_password_keeps_whitespace_and_rejects_blank(client: AsyncClient, admin_token_headers, make_student):
    student = await make_student(username="pedro", password="antiga123")

    blank = await client.patch(f"{STUDENTS_URL}/{student.id}", json={"password": "   "}, headers=admin_token_headers)
    assert blank.status_code == 422

    response = await client.patch(f"{STUDENTS_URL}/{student.id}", json={"password": "  nova 12 "}, headers=admin_token_headers)
    assert response.status_code == 200

    login = await client.post(f"{settings.API_V1_STR}/auth/student/login", json={"username": "pedro", "password": "  nova 12 "})
    assert login.status_code == 200

@pytest.mark.asyncio
async def test_blank_password_on_create_generates_one(client: AsyncClient, admin_token_headers):
    response = await client.post(STUDENTS_URL, json=_student_payload(password="  "), headers=admin_token_headers)
    assert response.status_code == 200
    password = response.json()["data"]["password"]
    assert len(password) == 8
    assert password.isalnum()
