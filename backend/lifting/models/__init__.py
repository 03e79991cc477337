from lifting.models.user import User
from lifting.models.exercise import Exercise
from lifting.models.plan import Plan, PlanDay, PlanDayExercise
from lifting.models.mesocycle import Mesocycle, MesocycleStatus, TERMINAL_MESOCYCLE_STATUSES
from lifting.models.workout import (
    Workout,
    WorkoutSet,
    WorkoutStatus,
    SetStatus,
    TERMINAL_WORKOUT_STATUSES,
)

__all__ = [
    "User",
    "Exercise",
    "Plan",
    "PlanDay",
    "PlanDayExercise",
    "Mesocycle",
    "MesocycleStatus",
    "TERMINAL_MESOCYCLE_STATUSES",
    "Workout",
    "WorkoutSet",
    "WorkoutStatus",
    "SetStatus",
    "TERMINAL_WORKOUT_STATUSES",
]
