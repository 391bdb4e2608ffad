import uuid
from datetime import date, datetime, timezone
from sqlalchemy import Date, DateTime, Text, JSON, Uuid, event
from sqlalchemy.orm import Mapped, mapped_column
from gym_coach.database import Base


class WorkoutHistory(Base):
    """Append-only record of a completed workout.

    ``student_id`` and ``workout_id`` are plain references: entries outlive
    the rows they point at, and ``exercises_completed`` keeps the assignment
    parameters as they were at completion time.
    """
    __tablename__ = "workout_history"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    student_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    workout_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    completed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False, index=True)
    completion_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    exercises_completed: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)


class HistoryImmutableError(RuntimeError):
    pass


@event.listens_for(WorkoutHistory, "before_update")
def _reject_history_update(mapper, connection, target) -> None:
    del mapper, connection
    raise HistoryImmutableError(f"Workout history entry {target.id} is append-only")
