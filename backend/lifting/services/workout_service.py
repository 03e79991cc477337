# lifting/services/workout_service.py
"""
Workout lifecycle: pending -> in_progress -> completed | skipped.

Completed and skipped workouts are history and are never touched again.
Finishing a workout does not rewrite later workouts; a pending workout's
targets are recomputed when it is fetched, started or first logged against.
Once the mesocycle is completed or cancelled its workouts are read-only.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from lifting.errors import (
    IncompleteSets,
    InvalidSetValues,
    InvalidTransition,
    NotFound,
    SetNotFound,
)
from lifting.models import (
    TERMINAL_MESOCYCLE_STATUSES,
    Mesocycle,
    MesocycleStatus,
    SetStatus,
    Workout,
    WorkoutSet,
    WorkoutStatus,
)
from lifting.repositories.mesocycle_repo import MesocycleRepository
from lifting.repositories.set_repo import SetRepository
from lifting.repositories.workout_repo import WorkoutRepository
from lifting.services.dynamic_progression import DynamicProgressionService
from lifting.settings import Settings, get_settings

log = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class SetCountChange:
    workout_set: Optional[WorkoutSet]
    future_workouts_affected: int
    future_sets_modified: int


class WorkoutService:
    def __init__(self, db: Session, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or get_settings()
        self.workouts = WorkoutRepository(db)
        self.sets = SetRepository(db)
        self.mesocycles = MesocycleRepository(db)
        self.progression = DynamicProgressionService(db, self.settings)

    # READS
    def get(self, workout_id: int) -> Workout:
        workout = self.workouts.get(workout_id)
        if not workout:
            raise NotFound("Workout", workout_id)
        return workout

    def get_for_display(self, workout_id: int) -> Workout:
        """Like get, but a pending workout of the active block gets fresh targets first."""
        workout = self.get(workout_id)
        if workout.status == WorkoutStatus.pending and workout.mesocycle.status == MesocycleStatus.active:
            self.progression.refresh_workout_targets(workout)
            self.db.commit()
            self.db.refresh(workout)
        return workout

    def get_next_workout(self, user_id: int) -> Workout:
        """
        The workout the lifter should do next in the active block: one already
        in progress, otherwise the earliest pending one with fresh targets.
        """
        meso = self.mesocycles.get_active_for_user(user_id)
        if meso is None:
            raise NotFound("Active mesocycle")
        workout = self.workouts.first_with_status(meso.id, WorkoutStatus.in_progress)
        if workout is not None:
            return workout
        workout = self.workouts.first_with_status(meso.id, WorkoutStatus.pending)
        if workout is None:
            raise NotFound("Pending workout")
        self.progression.refresh_workout_targets(workout)
        self.db.commit()
        self.db.refresh(workout)
        return workout

    # TRANSITIONS
    def start(self, workout_id: int) -> Workout:
        workout = self.get(workout_id)
        if workout.status != WorkoutStatus.pending:
            raise InvalidTransition(f"cannot start a workout that is {workout.status.value}")
        self._ensure_block_open(workout)
        self.progression.refresh_workout_targets(workout)
        self._mark_started(workout)
        self.db.commit()
        self.db.refresh(workout)
        return workout

    def log_set(self, workout_id: int, exercise_id: int, set_number: int, *,
                actual_weight: float, actual_reps: int) -> WorkoutSet:
        if actual_weight < 0 or actual_reps < 0:
            raise InvalidSetValues()
        workout, ws = self._open_set(workout_id, exercise_id, set_number, action="log")
        if workout.status == WorkoutStatus.pending:
            self.progression.refresh_workout_targets(workout)
            self._mark_started(workout)
        ws.actual_weight = actual_weight
        ws.actual_reps = actual_reps
        ws.status = SetStatus.completed
        self.db.commit()
        self.db.refresh(ws)
        log.debug("workout=%s exercise=%s set=%s logged %s x %s",
                  workout_id, exercise_id, set_number, actual_weight, actual_reps)
        return ws

    def skip_set(self, workout_id: int, exercise_id: int, set_number: int) -> WorkoutSet:
        workout, ws = self._open_set(workout_id, exercise_id, set_number, action="skip")
        if ws.status != SetStatus.pending:
            raise InvalidTransition(f"only pending sets can be skipped (set is {ws.status.value})")
        if workout.status == WorkoutStatus.pending:
            self.progression.refresh_workout_targets(workout)
            self._mark_started(workout)
        ws.actual_weight = None
        ws.actual_reps = None
        ws.status = SetStatus.skipped
        self.db.commit()
        self.db.refresh(ws)
        return ws

    def unlog_set(self, workout_id: int, exercise_id: int, set_number: int) -> WorkoutSet:
        workout, ws = self._open_set(workout_id, exercise_id, set_number, action="unlog")
        if workout.status != WorkoutStatus.in_progress:
            raise InvalidTransition("sets can only be unlogged while the workout is in progress")
        ws.actual_weight = None
        ws.actual_reps = None
        ws.status = SetStatus.pending
        self.db.commit()
        self.db.refresh(ws)
        return ws

    def complete_workout(self, workout_id: int) -> Workout:
        workout = self.get(workout_id)
        if workout.status != WorkoutStatus.in_progress:
            raise InvalidTransition(f"cannot complete a workout that is {workout.status.value}")
        self._ensure_block_open(workout)
        pending = [s for s in workout.sets if s.status == SetStatus.pending]
        if pending:
            log.warning("workout=%s completion rejected: %s pending sets", workout_id, len(pending))
            raise IncompleteSets(
                f"Finish or skip all sets before completing this workout ({len(pending)} pending)"
            )
        workout.status = WorkoutStatus.completed
        workout.completed_at = utcnow()
        self._advance_week(workout.mesocycle)
        self.db.commit()
        self.db.refresh(workout)
        log.info("workout %s completed (meso=%s week=%s)", workout.id, workout.mesocycle_id, workout.week_number)
        return workout

    def skip_workout(self, workout_id: int) -> Workout:
        workout = self.get(workout_id)
        if workout.is_terminal:
            raise InvalidTransition(f"cannot skip a workout that is {workout.status.value}")
        self._ensure_block_open(workout)
        for s in workout.sets:
            if s.status == SetStatus.pending:
                s.status = SetStatus.skipped
        workout.status = WorkoutStatus.skipped
        self._advance_week(workout.mesocycle)
        self.db.commit()
        self.db.refresh(workout)
        log.info("workout %s skipped", workout.id)
        return workout

    # SET COUNT
    def add_set(self, workout_id: int, exercise_id: int) -> SetCountChange:
        """Append a set copying the last set's targets; future workouts follow."""
        workout = self._open_workout(workout_id, action="add sets to")
        existing = self.sets.list_by_workout_and_exercise(workout_id, exercise_id)
        if not existing:
            raise SetNotFound(f"exercise {exercise_id} has no sets in workout {workout_id}")
        last = existing[-1]
        new_set = self.sets.create(
            workout_id,
            exercise_id=exercise_id,
            set_number=last.set_number + 1,
            target_reps=last.target_reps,
            target_weight=last.target_weight,
        )
        affected, modified = self._propagate_set_count(workout, exercise_id, len(existing) + 1)
        self.db.commit()
        self.db.refresh(new_set)
        return SetCountChange(new_set, affected, modified)

    def remove_set(self, workout_id: int, exercise_id: int) -> SetCountChange:
        """Drop the highest-numbered pending set; logged sets are never removed."""
        workout = self._open_workout(workout_id, action="remove sets from")
        existing = self.sets.list_by_workout_and_exercise(workout_id, exercise_id)
        if not existing:
            raise SetNotFound(f"exercise {exercise_id} has no sets in workout {workout_id}")
        if len(existing) == 1:
            raise InvalidTransition("cannot remove the last set of an exercise")
        pending = [s for s in existing if s.status == SetStatus.pending]
        if not pending:
            raise InvalidTransition("no pending sets to remove")
        self.sets.delete(pending[-1])
        affected, modified = self._propagate_set_count(workout, exercise_id, len(existing) - 1)
        self.db.commit()
        return SetCountChange(None, affected, modified)

    # HELPERS
    def _mark_started(self, workout: Workout) -> None:
        workout.status = WorkoutStatus.in_progress
        workout.started_at = utcnow()
        log.debug("workout %s started", workout.id)

    def _open_workout(self, workout_id: int, *, action: str) -> Workout:
        workout = self.get(workout_id)
        if workout.is_terminal:
            raise InvalidTransition(f"cannot {action} a workout that is {workout.status.value}")
        self._ensure_block_open(workout)
        return workout

    def _ensure_block_open(self, workout: Workout) -> None:
        meso = workout.mesocycle
        if meso.status in TERMINAL_MESOCYCLE_STATUSES:
            raise InvalidTransition(
                f"mesocycle {meso.id} is {meso.status.value}; its workouts can no longer change"
            )

    def _open_set(self, workout_id: int, exercise_id: int, set_number: int, *,
                  action: str) -> tuple[Workout, WorkoutSet]:
        workout = self._open_workout(workout_id, action=f"{action} sets for")
        ws = self.sets.get_by_key(workout_id, exercise_id, set_number)
        if ws is None:
            raise SetNotFound(
                f"set {set_number} of exercise {exercise_id} was not generated for workout {workout_id}"
            )
        return workout, ws

    def _advance_week(self, meso: Mesocycle) -> None:
        if meso.status != MesocycleStatus.active:
            return
        self.db.flush()
        nxt = self.workouts.first_open(meso.id)
        if nxt is not None and nxt.week_number > meso.current_week:
            meso.current_week = nxt.week_number

    def _propagate_set_count(self, workout: Workout, exercise_id: int, new_count: int) -> tuple[int, int]:
        """
        Bring later pending, non-deload workouts of the same plan day to
        new_count sets for this exercise. Returns (workouts, sets) touched.
        """
        meso = workout.mesocycle
        affected = modified = 0
        for future in self.workouts.future_pending(meso.id, workout.plan_day_id, after_week=workout.week_number):
            if meso.is_deload_week(future.week_number):
                continue
            rows = self.sets.list_by_workout_and_exercise(future.id, exercise_id)
            if not rows:
                continue
            changed = 0
            while len(rows) < new_count:
                last = rows[-1]
                rows.append(self.sets.create(
                    future.id,
                    exercise_id=exercise_id,
                    set_number=last.set_number + 1,
                    target_reps=last.target_reps,
                    target_weight=last.target_weight,
                ))
                changed += 1
            while len(rows) > new_count and len(rows) > 1:
                self.sets.delete(rows.pop())
                changed += 1
            if changed:
                affected += 1
                modified += changed
        return affected, modified
