from typing import Annotated
from datetime import date
from pydantic import BaseModel, Field, field_validator

# Keep max length via Field
ExerciseStr = Annotated[str, Field(max_length=120)]
Increment = Annotated[float, Field(gt=0, le=100)]

class ExerciseCreate(BaseModel):
    name: ExerciseStr
    weight_increment: Increment = 5.0

    @field_validator("name")
    @classmethod
    def name_non_blank(cls, v: str) -> str:
        v2 = v.strip()
        if not v2:
            raise ValueError("name cannot be blank")
        return v2

class ExerciseUpdate(BaseModel):
    name: ExerciseStr | None = None
    weight_increment: Increment | None = None

    @field_validator("name")
    @classmethod
    def name_non_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v2 = v.strip()
        if not v2:
            raise ValueError("name cannot be blank")
        return v2

class ExerciseRead(BaseModel):
    id: int
    user_id: int | None = None
    name: str
    weight_increment: float
    is_custom: bool

    model_config = {"from_attributes": True}

class ExerciseHistoryEntry(BaseModel):
    workout_id: int
    mesocycle_id: int
    week_number: int
    scheduled_date: date
    best_weight: float
    best_reps: int
    sets: list[tuple[float, int]]  # (weight, reps) in set order
