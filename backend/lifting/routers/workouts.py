from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from lifting.db import get_db
from lifting.schemas.workout import SetLog, WorkoutRead, WorkoutSetRead, SetCountChangeRead
from lifting.services.workout_service import WorkoutService
from lifting.deps.user import get_current_user, ensure_owner
from lifting.models import User

router = APIRouter(prefix="/workouts", tags=["workouts"])

def _service_for(workout_id: int, db: Session, current: User) -> WorkoutService:
    # Ownership check via workout -> mesocycle -> user
    service = WorkoutService(db)
    workout = service.get(workout_id)
    ensure_owner(workout.mesocycle.user_id, current, "workout")
    return service

@router.get("/next", response_model=WorkoutRead)
def next_workout(db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return WorkoutService(db).get_next_workout(current.id)

@router.get("/{workout_id}", response_model=WorkoutRead)
def get_workout(workout_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return _service_for(workout_id, db, current).get_for_display(workout_id)

@router.put("/{workout_id}/start", response_model=WorkoutRead)
def start_workout(workout_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return _service_for(workout_id, db, current).start(workout_id)

@router.put("/{workout_id}/complete", response_model=WorkoutRead)
def complete_workout(workout_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return _service_for(workout_id, db, current).complete_workout(workout_id)

@router.put("/{workout_id}/skip", response_model=WorkoutRead)
def skip_workout(workout_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return _service_for(workout_id, db, current).skip_workout(workout_id)

@router.put("/{workout_id}/exercises/{exercise_id}/sets/{set_number}/log", response_model=WorkoutSetRead)
def log_set(
    workout_id: int,
    exercise_id: int,
    set_number: int,
    payload: SetLog,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    return _service_for(workout_id, db, current).log_set(
        workout_id, exercise_id, set_number,
        actual_weight=payload.actual_weight, actual_reps=payload.actual_reps,
    )

@router.delete("/{workout_id}/exercises/{exercise_id}/sets/{set_number}/log", response_model=WorkoutSetRead)
def unlog_set(
    workout_id: int,
    exercise_id: int,
    set_number: int,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    return _service_for(workout_id, db, current).unlog_set(workout_id, exercise_id, set_number)

@router.put("/{workout_id}/exercises/{exercise_id}/sets/{set_number}/skip", response_model=WorkoutSetRead)
def skip_set(
    workout_id: int,
    exercise_id: int,
    set_number: int,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    return _service_for(workout_id, db, current).skip_set(workout_id, exercise_id, set_number)

@router.post("/{workout_id}/exercises/{exercise_id}/sets", response_model=SetCountChangeRead,
             status_code=status.HTTP_201_CREATED)
def add_set(workout_id: int, exercise_id: int, db: Session = Depends(get_db),
            current: User = Depends(get_current_user)):
    change = _service_for(workout_id, db, current).add_set(workout_id, exercise_id)
    return SetCountChangeRead.model_validate(change)

@router.delete("/{workout_id}/exercises/{exercise_id}/sets", response_model=SetCountChangeRead)
def remove_set(workout_id: int, exercise_id: int, db: Session = Depends(get_db),
               current: User = Depends(get_current_user)):
    change = _service_for(workout_id, db, current).remove_set(workout_id, exercise_id)
    return SetCountChangeRead.model_validate(change)
