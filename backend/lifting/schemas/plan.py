from typing import Annotated
from pydantic import BaseModel, Field, StringConstraints, model_validator

NameStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=120)]
RepCount = Annotated[int, Field(ge=0, le=100)]
NonNegFloat = Annotated[float, Field(ge=0, le=2000)]

class PlanDayExerciseIn(BaseModel):
    exercise_id: int
    sets: Annotated[int, Field(ge=1, le=20)] = 3
    reps: RepCount = 8
    weight: NonNegFloat = 0
    min_reps: RepCount = 8
    target_reps: RepCount = 10
    max_reps: RepCount = 12
    rest_seconds: Annotated[int, Field(ge=0, le=900)] = 90

    @model_validator(mode="after")
    def rep_range_ordered(self):
        # rejected at plan-save time; the progression rules re-check
        if self.min_reps > self.max_reps:
            raise ValueError("min_reps cannot exceed max_reps")
        if not self.min_reps <= self.target_reps <= self.max_reps:
            raise ValueError("target_reps must lie between min_reps and max_reps")
        return self

class PlanDayIn(BaseModel):
    name: NameStr
    day_of_week: Annotated[int, Field(ge=0, le=6)]  # 0 = Sunday
    exercises: list[PlanDayExerciseIn] = Field(default_factory=list)

    @model_validator(mode="after")
    def unique_exercises(self):
        ids = [e.exercise_id for e in self.exercises]
        if len(ids) != len(set(ids)):
            raise ValueError("an exercise can appear only once per day")
        return self

class PlanCreate(BaseModel):
    name: NameStr
    duration_weeks: Annotated[int, Field(ge=1, le=16)] = 7
    days: list[PlanDayIn] = Field(min_length=1)

class PlanDayExerciseRead(PlanDayExerciseIn):
    id: int
    sort_order: int

    model_config = {"from_attributes": True}

class PlanDayRead(BaseModel):
    id: int
    name: str
    day_of_week: int
    sort_order: int
    exercises: list[PlanDayExerciseRead]

    model_config = {"from_attributes": True}

class PlanRead(BaseModel):
    id: int
    user_id: int
    name: str
    duration_weeks: int
    days: list[PlanDayRead]

    model_config = {"from_attributes": True}

class PlanUpdate(BaseModel):
    name: NameStr | None = None
    duration_weeks: Annotated[int, Field(ge=1, le=16)] | None = None

class PlanDayUpdate(BaseModel):
    name: NameStr | None = None
    day_of_week: Annotated[int, Field(ge=0, le=6)] | None = None

class PlanDayExerciseUpdate(BaseModel):
    # exercise_id is fixed; delete and re-add to swap exercises
    sets: Annotated[int, Field(ge=1, le=20)] | None = None
    reps: RepCount | None = None
    weight: NonNegFloat | None = None
    min_reps: RepCount | None = None
    target_reps: RepCount | None = None
    max_reps: RepCount | None = None
    rest_seconds: Annotated[int, Field(ge=0, le=900)] | None = None

    @model_validator(mode="after")
    def rep_range_ordered(self):
        # partial ranges are checked against the stored values by the service
        lo, mid, hi = self.min_reps, self.target_reps, self.max_reps
        if lo is not None and hi is not None and lo > hi:
            raise ValueError("min_reps cannot exceed max_reps")
        if None not in (lo, mid, hi) and not lo <= mid <= hi:
            raise ValueError("target_reps must lie between min_reps and max_reps")
        return self

class PlanSyncRead(BaseModel):
    affected_workouts: int
    added_sets: int
    removed_sets: int
    modified_sets: int

    model_config = {"from_attributes": True}

class PlanDaySynced(BaseModel):
    day: PlanDayRead
    sync: PlanSyncRead

class PlanDayExerciseSynced(BaseModel):
    exercise: PlanDayExerciseRead
    sync: PlanSyncRead
