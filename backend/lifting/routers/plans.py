from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session
from lifting.db import get_db
from lifting.schemas.plan import (
    PlanCreate,
    PlanRead,
    PlanUpdate,
    PlanDayIn,
    PlanDayRead,
    PlanDayUpdate,
    PlanDaySynced,
    PlanDayExerciseIn,
    PlanDayExerciseRead,
    PlanDayExerciseUpdate,
    PlanDayExerciseSynced,
    PlanSyncRead,
)
from lifting.repositories.plan_repo import PlanRepository
from lifting.repositories.exercise_repo import ExerciseRepository
from lifting.services.plan_service import PlanService
from lifting.deps.user import get_current_user, ensure_owner
from lifting.models import User

router = APIRouter(prefix="/plans", tags=["plans"])

def _check_exercises(db: Session, exercise_ids: list[int], current: User) -> None:
    exercises = ExerciseRepository(db)
    for exercise_id in exercise_ids:
        ex = exercises.get(exercise_id)
        if not ex:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND,
                                detail=f"Exercise {exercise_id} not found")
        ensure_owner(ex.user_id, current, "exercise")

def _owned_plan(db: Session, plan_id: int, current: User) -> PlanService:
    service = PlanService(db)
    plan = service.get(plan_id)
    ensure_owner(plan.user_id, current, "plan")
    return service

@router.post("", response_model=PlanRead, status_code=status.HTTP_201_CREATED)
def create_plan(payload: PlanCreate, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    _check_exercises(db, [pde.exercise_id for day in payload.days for pde in day.exercises], current)
    return PlanRepository(db).create(
        current.id,
        name=payload.name,
        duration_weeks=payload.duration_weeks,
        days=[day.model_dump() for day in payload.days],
    )

@router.get("", response_model=list[PlanRead])
def list_plans(db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return PlanRepository(db).list_by_user(current.id)

@router.get("/{plan_id}", response_model=PlanRead)
def get_plan(plan_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    plan = PlanRepository(db).get(plan_id)
    if not plan:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Plan not found")
    ensure_owner(plan.user_id, current, "plan")
    return plan

@router.put("/{plan_id}", response_model=PlanRead)
def update_plan(plan_id: int, payload: PlanUpdate, db: Session = Depends(get_db),
                current: User = Depends(get_current_user)):
    return _owned_plan(db, plan_id, current).update_plan(
        plan_id, name=payload.name, duration_weeks=payload.duration_weeks,
    )

@router.delete("/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_plan(plan_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    _owned_plan(db, plan_id, current).delete_plan(plan_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# --- days ---
@router.post("/{plan_id}/days", response_model=PlanDayRead, status_code=status.HTTP_201_CREATED)
def add_day(plan_id: int, payload: PlanDayIn, db: Session = Depends(get_db),
            current: User = Depends(get_current_user)):
    service = _owned_plan(db, plan_id, current)
    _check_exercises(db, [pde.exercise_id for pde in payload.exercises], current)
    return service.add_day(
        plan_id,
        name=payload.name,
        day_of_week=payload.day_of_week,
        exercises=[pde.model_dump() for pde in payload.exercises],
    )

@router.put("/{plan_id}/days/{day_id}", response_model=PlanDaySynced)
def update_day(plan_id: int, day_id: int, payload: PlanDayUpdate, db: Session = Depends(get_db),
               current: User = Depends(get_current_user)):
    day, sync = _owned_plan(db, plan_id, current).update_day(
        plan_id, day_id, name=payload.name, day_of_week=payload.day_of_week,
    )
    return PlanDaySynced(day=PlanDayRead.model_validate(day), sync=PlanSyncRead.model_validate(sync))

@router.delete("/{plan_id}/days/{day_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_day(plan_id: int, day_id: int, db: Session = Depends(get_db),
               current: User = Depends(get_current_user)):
    _owned_plan(db, plan_id, current).delete_day(plan_id, day_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# --- exercises within a day ---
@router.post("/{plan_id}/days/{day_id}/exercises", response_model=PlanDayExerciseSynced,
             status_code=status.HTTP_201_CREATED)
def add_day_exercise(plan_id: int, day_id: int, payload: PlanDayExerciseIn, db: Session = Depends(get_db),
                     current: User = Depends(get_current_user)):
    service = _owned_plan(db, plan_id, current)
    _check_exercises(db, [payload.exercise_id], current)
    pde, sync = service.add_exercise(plan_id, day_id, **payload.model_dump())
    return PlanDayExerciseSynced(
        exercise=PlanDayExerciseRead.model_validate(pde), sync=PlanSyncRead.model_validate(sync),
    )

@router.put("/{plan_id}/days/{day_id}/exercises/{pde_id}", response_model=PlanDayExerciseSynced)
def update_day_exercise(plan_id: int, day_id: int, pde_id: int, payload: PlanDayExerciseUpdate,
                        db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    pde, sync = _owned_plan(db, plan_id, current).update_exercise(
        plan_id, day_id, pde_id, **payload.model_dump(exclude_none=True),
    )
    return PlanDayExerciseSynced(
        exercise=PlanDayExerciseRead.model_validate(pde), sync=PlanSyncRead.model_validate(sync),
    )

@router.delete("/{plan_id}/days/{day_id}/exercises/{pde_id}", response_model=PlanSyncRead)
def delete_day_exercise(plan_id: int, day_id: int, pde_id: int, db: Session = Depends(get_db),
                        current: User = Depends(get_current_user)):
    sync = _owned_plan(db, plan_id, current).delete_exercise(plan_id, day_id, pde_id)
    return PlanSyncRead.model_validate(sync)
