import asyncio
import logging
from sqlalchemy import func, select
from gym_coach.config import settings
from gym_coach.database import AsyncSessionLocal
from gym_coach.models.user import Profile
from gym_coach.models.enums import Role
from gym_coach.models.fitness import Exercise
from gym_coach.auth.security import get_password_hash

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

EXERCISES = [
    {"name": "Supino Reto", "muscle_group": "Peito", "equipment": "Barra", "instructions": "Desça a barra até o peito e empurre até estender os braços."},
    {"name": "Crucifixo com Halteres", "muscle_group": "Peito", "equipment": "Halteres"},
    {"name": "Puxada Frontal", "muscle_group": "Costas", "equipment": "Polia", "instructions": "Puxe a barra até a altura do queixo mantendo o tronco firme."},
    {"name": "Remada Curvada", "muscle_group": "Costas", "equipment": "Barra"},
    {"name": "Agachamento Livre", "muscle_group": "Pernas", "equipment": "Barra", "instructions": "Desça até as coxas ficarem paralelas ao chão."},
    {"name": "Leg Press 45", "muscle_group": "Pernas", "equipment": "Máquina"},
    {"name": "Cadeira Extensora", "muscle_group": "Pernas", "equipment": "Máquina"},
    {"name": "Desenvolvimento com Halteres", "muscle_group": "Ombros", "equipment": "Halteres"},
    {"name": "Elevação Lateral", "muscle_group": "Ombros", "equipment": "Halteres"},
    {"name": "Rosca Direta", "muscle_group": "Bíceps", "equipment": "Barra"},
    {"name": "Tríceps Pulley", "muscle_group": "Tríceps", "equipment": "Polia"},
    {"name": "Prancha", "muscle_group": "Abdômen", "equipment": None, "instructions": "Mantenha o corpo alinhado apoiado nos antebraços."},
]


async def seed_admin(session) -> Profile:
    stmt = select(Profile).where(Profile.email == settings.FIRST_ADMIN_EMAIL)
    existing = (await session.execute(stmt)).scalar_one_or_none()
    if existing:
        logger.info("Admin already exists: %s", existing.email)
        return existing

    admin = Profile(
        email=settings.FIRST_ADMIN_EMAIL,
        name=settings.FIRST_ADMIN_NAME,
        hashed_password=get_password_hash(settings.FIRST_ADMIN_PASSWORD),
        role=Role.ADMIN,
        is_active=True,
    )
    session.add(admin)
    await session.flush()
    logger.info("Created admin: %s", admin.email)
    return admin


async def seed_exercises(session) -> int:
    """Insert the starter catalog when it is empty; returns how many were added."""
    count = await session.scalar(select(func.count(Exercise.id)))
    if count:
        logger.info("Exercise catalog already has %d entries; skipping", count)
        return 0
    for item in EXERCISES:
        session.add(Exercise(**item))
    logger.info("Seeded %d exercises", len(EXERCISES))
    return len(EXERCISES)


async def seed_data():
    async with AsyncSessionLocal() as session:
        await seed_admin(session)
        await seed_exercises(session)
        await session.commit()
    logger.info("Seeding complete.")

if __name__ == "__main__":
    asyncio.run(seed_data())
