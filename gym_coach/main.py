import logging
import uuid

from fastapi import FastAPI, HTTPException, status
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import IntegrityError
from sqlalchemy import text

from gym_coach.config import settings
from gym_coach.auth import router as auth_router
from gym_coach.routers.students import router as students_router
from gym_coach.routers.exercises import router as exercises_router
from gym_coach.routers.workouts import router as workouts_router
from gym_coach.routers.history import router as history_router
from gym_coach.routers.session import router as session_router
from gym_coach.routers.audit import router as audit_router
from gym_coach.core import exceptions
from gym_coach.database import AsyncSessionLocal
from gym_coach.models.workout_history import HistoryImmutableError

logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json"
)

# CORS must be added before other middleware
configured_origins = [str(origin).rstrip("/") for origin in settings.BACKEND_CORS_ORIGINS]
default_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
allow_origins = configured_origins if settings.APP_ENV == "production" else list(dict.fromkeys([*default_origins, *configured_origins]))

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def attach_request_id(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response

# Exception Handlers
app.add_exception_handler(RequestValidationError, exceptions.validation_exception_handler)  # type: ignore
app.add_exception_handler(IntegrityError, exceptions.integrity_exception_handler)  # type: ignore
app.add_exception_handler(HistoryImmutableError, exceptions.history_immutable_exception_handler)  # type: ignore

# Routers
app.include_router(auth_router.router, prefix=f"{settings.API_V1_STR}/auth", tags=["Auth"])
app.include_router(students_router, prefix=f"{settings.API_V1_STR}/students", tags=["Students"])
app.include_router(exercises_router, prefix=f"{settings.API_V1_STR}/exercises", tags=["Exercises"])
app.include_router(workouts_router, prefix=f"{settings.API_V1_STR}/workouts", tags=["Workouts"])
app.include_router(history_router, prefix=f"{settings.API_V1_STR}/history", tags=["History"])
app.include_router(session_router, prefix=f"{settings.API_V1_STR}/session", tags=["Session"])
app.include_router(audit_router, prefix=f"{settings.API_V1_STR}/audit", tags=["Audit"])

@app.get("/health")
async def health_check():
    return {"status": "ok"}


@app.get("/healthz")
async def healthz():
    try:
        async with AsyncSessionLocal() as db:
            await db.execute(text("SELECT 1"))
    except Exception as exc:
        logger.exception("Health check failed")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="database unavailable",
        ) from exc
    return {"status": "ok", "database": "ok"}

@app.get("/")
async def root():
    return {"message": "Welcome to the Gym Coach API", "docs": "/docs"}


@app.on_event("startup")
async def startup_checks() -> None:
    _validate_security_settings()
    logger.info("%s %s started (env=%s, tz=%s)", settings.PROJECT_NAME, settings.VERSION, settings.APP_ENV, settings.GYM_TIMEZONE)


def _validate_security_settings() -> None:
    if settings.APP_ENV != "production":
        return

    errors: list[str] = []
    if len(settings.SECRET_KEY.strip()) < 24:
        errors.append("SECRET_KEY must be at least 24 characters in production.")
    if not settings.BACKEND_CORS_ORIGINS:
        errors.append("BACKEND_CORS_ORIGINS must be explicitly configured in production.")
    if settings.SQLALCHEMY_DATABASE_URI.startswith("sqlite"):
        errors.append("SQLite is not supported in production; configure POSTGRES_* or DATABASE_URL.")

    if errors:
        raise RuntimeError("; ".join(errors))
