from gym_coach.models.audit import AuditLog
from gym_coach.models.fitness import Exercise, Workout, WorkoutExercise
from gym_coach.models.student import Student
from gym_coach.models.user import Profile
from gym_coach.models.workout_history import WorkoutHistory


__all__ = [
    "AuditLog",
    "Exercise",
    "Profile",
    "Student",
    "Workout",
    "WorkoutExercise",
    "WorkoutHistory",
]
