from typing import Annotated
from datetime import date
from pydantic import BaseModel, Field, model_validator
from lifting.models import MesocycleStatus, WorkoutStatus

WeekNum = Annotated[int, Field(ge=1, le=16)]

class MesocycleStart(BaseModel):
    plan_id: int
    start_date: date
    total_weeks: WeekNum | None = None
    deload_week: WeekNum | None = None
    # false leaves the block pending; start it later with PUT /mesocycles/{id}/start
    activate: bool = True

    @model_validator(mode="after")
    def deload_within_block(self):
        if self.total_weeks is not None and self.deload_week is not None \
                and self.deload_week > self.total_weeks:
            raise ValueError("deload_week must fall within total_weeks")
        return self

class MesocycleRead(BaseModel):
    id: int
    user_id: int
    plan_id: int
    start_date: date
    total_weeks: int
    deload_week: int | None = None
    current_week: int
    status: MesocycleStatus

    model_config = {"from_attributes": True}

class MesocycleStarted(BaseModel):
    mesocycle: MesocycleRead
    workout_count: int

class WorkoutSummary(BaseModel):
    id: int
    plan_day_id: int
    week_number: int
    scheduled_date: date
    status: WorkoutStatus

    model_config = {"from_attributes": True}

class WeekSummaryRead(BaseModel):
    week_number: int
    is_deload: bool
    total_workouts: int
    completed_workouts: int
    skipped_workouts: int
    workouts: list[WorkoutSummary]

    model_config = {"from_attributes": True}

class MesocycleDetailsRead(BaseModel):
    mesocycle: MesocycleRead
    plan_name: str
    total_workouts: int
    completed_workouts: int
    weeks: list[WeekSummaryRead]

    model_config = {"from_attributes": True}
