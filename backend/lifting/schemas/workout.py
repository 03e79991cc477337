from typing import Annotated
from datetime import date, datetime
from pydantic import BaseModel, Field
from lifting.models import SetStatus, WorkoutStatus

NonNegFloat = Annotated[float, Field(ge=0, le=2000)]
RepCount = Annotated[int, Field(ge=0, le=200)]

class SetLog(BaseModel):
    actual_weight: NonNegFloat
    actual_reps: RepCount

class WorkoutSetRead(BaseModel):
    id: int
    workout_id: int
    exercise_id: int
    set_number: int
    target_reps: int
    target_weight: float
    actual_reps: int | None = None
    actual_weight: float | None = None
    status: SetStatus

    model_config = {"from_attributes": True}

class WorkoutRead(BaseModel):
    id: int
    mesocycle_id: int
    plan_day_id: int
    week_number: int
    scheduled_date: date
    status: WorkoutStatus
    started_at: datetime | None = None
    completed_at: datetime | None = None
    sets: list[WorkoutSetRead] = []

    model_config = {"from_attributes": True}

class SetCountChangeRead(BaseModel):
    workout_set: WorkoutSetRead | None = None
    future_workouts_affected: int
    future_sets_modified: int

    model_config = {"from_attributes": True}
