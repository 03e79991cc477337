from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session
from lifting.db import get_db
from lifting.schemas.exercise import ExerciseCreate, ExerciseUpdate, ExerciseRead, ExerciseHistoryEntry
from lifting.repositories.exercise_repo import ExerciseRepository
from lifting.errors import ResourceInUse
from lifting.services.progression import SetPerformance, select_best_set
from lifting.deps.user import get_current_user, ensure_owner
from lifting.models import User

router = APIRouter(prefix="/exercises", tags=["exercises"])

def _get_visible(repo: ExerciseRepository, exercise_id: int, current: User):
    ex = repo.get(exercise_id)
    if not ex:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Exercise not found")
    ensure_owner(ex.user_id, current, "exercise")
    return ex

@router.post("", response_model=ExerciseRead, status_code=status.HTTP_201_CREATED)
def create_exercise(payload: ExerciseCreate, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return ExerciseRepository(db).create(
        user_id=current.id, name=payload.name, weight_increment=payload.weight_increment,
    )

@router.get("", response_model=list[ExerciseRead])
def list_exercises(db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return ExerciseRepository(db).list_for_user(current.id)

@router.get("/{exercise_id}", response_model=ExerciseRead)
def get_exercise(exercise_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    return _get_visible(ExerciseRepository(db), exercise_id, current)

@router.put("/{exercise_id}", response_model=ExerciseRead)
def update_exercise(
    exercise_id: int,
    payload: ExerciseUpdate,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    repo = ExerciseRepository(db)
    ex = _get_visible(repo, exercise_id, current)
    if ex.user_id is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Built-in exercises are read-only")
    return repo.update(exercise_id, name=payload.name, weight_increment=payload.weight_increment)

@router.delete("/{exercise_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_exercise(exercise_id: int, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    repo = ExerciseRepository(db)
    ex = _get_visible(repo, exercise_id, current)
    if ex.user_id is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Built-in exercises are read-only")
    if repo.is_referenced(exercise_id):
        raise ResourceInUse(f"exercise {exercise_id} is used by a plan or logged workouts")
    repo.delete(ex)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.get("/{exercise_id}/history", response_model=list[ExerciseHistoryEntry])
def exercise_history(
    exercise_id: int,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    limit: int = Query(200, ge=1, le=1000),
):
    repo = ExerciseRepository(db)
    _get_visible(repo, exercise_id, current)
    entries: dict[int, ExerciseHistoryEntry] = {}
    for ws, workout in repo.completed_sets(exercise_id, user_id=current.id, limit=limit):
        entry = entries.get(workout.id)
        if entry is None:
            entry = entries[workout.id] = ExerciseHistoryEntry(
                workout_id=workout.id,
                mesocycle_id=workout.mesocycle_id,
                week_number=workout.week_number,
                scheduled_date=workout.scheduled_date,
                best_weight=0,
                best_reps=0,
                sets=[],
            )
        entry.sets.append((float(ws.actual_weight), ws.actual_reps))
    for entry in entries.values():
        best = select_best_set(SetPerformance(weight=w, reps=r) for w, r in entry.sets)
        entry.best_weight, entry.best_reps = best.weight, best.reps
    return list(entries.values())
