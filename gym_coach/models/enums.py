from enum import Enum

class Role(str, Enum):
    ADMIN = "ADMIN"


class ExerciseState(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"


# Picker options offered by the admin forms. Stored values stay free text.
GOAL_OPTIONS = [
    "Hipertrofia",
    "Emagrecimento",
    "Resistência",
    "Força",
    "Condicionamento",
    "Reabilitação",
    "Bem-estar geral",
]

WORKOUT_TYPE_OPTIONS = [
    "Treino A - Superior",
    "Treino B - Inferior",
    "Treino C - Push",
    "Treino D - Pull",
    "Treino E - Pernas",
    "Cardio",
    "Funcional",
    "Personalizado",
]
