# lifting/services/plan_service.py
"""
Plan editing after creation.

Plans are templates, but an active mesocycle keeps reading its plan day
exercises for targets. Edits that change what a lifter will do are pushed
into the pending workouts of the plan's active mesocycles; started,
completed and skipped workouts are history and are left alone. New days
and week counts only shape mesocycles generated later.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy.orm import Session

from lifting.errors import InvalidConfiguration, NotFound, ResourceInUse
from lifting.models import MesocycleStatus, Plan, PlanDay, PlanDayExercise, SetStatus, Workout
from lifting.repositories.exercise_repo import ExerciseRepository
from lifting.repositories.mesocycle_repo import MesocycleRepository
from lifting.repositories.plan_repo import PlanRepository
from lifting.repositories.set_repo import SetRepository
from lifting.repositories.workout_repo import WorkoutRepository
from lifting.services.dynamic_progression import DynamicProgressionService, exercise_config
from lifting.services.mesocycle_service import scheduled_date_for
from lifting.settings import Settings, get_settings

log = logging.getLogger(__name__)


@dataclass(slots=True)
class PlanSyncResult:
    affected_workouts: int = 0
    added_sets: int = 0
    removed_sets: int = 0
    modified_sets: int = 0

    def touch(self, *, added: int = 0, removed: int = 0, modified: int = 0) -> None:
        if added or removed or modified:
            self.affected_workouts += 1
        self.added_sets += added
        self.removed_sets += removed
        self.modified_sets += modified


class PlanService:
    def __init__(self, db: Session, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or get_settings()
        self.plans = PlanRepository(db)
        self.exercises = ExerciseRepository(db)
        self.mesocycles = MesocycleRepository(db)
        self.workouts = WorkoutRepository(db)
        self.sets = SetRepository(db)
        self.progression = DynamicProgressionService(db, self.settings)

    # LOOKUPS
    def get(self, plan_id: int) -> Plan:
        plan = self.plans.get(plan_id)
        if not plan:
            raise NotFound("Plan", plan_id)
        return plan

    def get_day(self, plan_id: int, day_id: int) -> PlanDay:
        day = self.plans.get_day(plan_id, day_id)
        if day is None:
            raise NotFound("Plan day", day_id)
        return day

    def get_day_exercise(self, plan_id: int, day_id: int, plan_day_exercise_id: int) -> PlanDayExercise:
        day = self.get_day(plan_id, day_id)
        pde = self.plans.get_day_exercise(day.id, plan_day_exercise_id)
        if pde is None:
            raise NotFound("Plan day exercise", plan_day_exercise_id)
        return pde

    # PLAN
    def update_plan(self, plan_id: int, *, name: Optional[str] = None,
                    duration_weeks: Optional[int] = None) -> Plan:
        plan = self.get(plan_id)
        if name is not None:
            plan.name = name
        if duration_weeks is not None:
            plan.duration_weeks = duration_weeks
        self.db.commit()
        self.db.refresh(plan)
        return plan

    def delete_plan(self, plan_id: int) -> None:
        plan = self.get(plan_id)
        used_by = self.mesocycles.list_for_plan(plan_id)
        if used_by:
            raise ResourceInUse(f"plan {plan_id} is used by {len(used_by)} mesocycle(s)")
        self.db.delete(plan)
        self.db.commit()
        log.info("plan %s deleted", plan_id)

    # DAYS
    def add_day(self, plan_id: int, *, name: str, day_of_week: int,
                exercises: Optional[list[dict[str, Any]]] = None) -> PlanDay:
        plan = self.get(plan_id)
        day = PlanDay(
            name=name,
            day_of_week=day_of_week,
            sort_order=max((d.sort_order for d in plan.days), default=-1) + 1,
        )
        for idx, ex in enumerate(exercises or []):
            self._require_exercise(ex["exercise_id"])
            day.exercises.append(PlanDayExercise(sort_order=idx, **ex))
        plan.days.append(day)
        self.db.commit()
        self.db.refresh(day)
        return day

    def update_day(self, plan_id: int, day_id: int, *, name: Optional[str] = None,
                   day_of_week: Optional[int] = None) -> tuple[PlanDay, PlanSyncResult]:
        """Renames or moves a day; a move reschedules pending workouts of active blocks."""
        day = self.get_day(plan_id, day_id)
        result = PlanSyncResult()
        if name is not None:
            day.name = name
        if day_of_week is not None and day_of_week != day.day_of_week:
            day.day_of_week = day_of_week
            for workout in self._pending_workouts(plan_id, day.id):
                workout.scheduled_date = scheduled_date_for(
                    workout.mesocycle.start_date, workout.week_number, day_of_week,
                )
                result.affected_workouts += 1
        self.db.commit()
        self.db.refresh(day)
        return day, result

    def delete_day(self, plan_id: int, day_id: int) -> None:
        day = self.get_day(plan_id, day_id)
        generated = self.workouts.count_for_plan_day(day.id)
        if generated:
            raise ResourceInUse(f"plan day {day_id} has {generated} generated workout(s)")
        self.db.delete(day)
        self.db.commit()

    # EXERCISES
    def add_exercise(self, plan_id: int, day_id: int, **fields: Any) -> tuple[PlanDayExercise, PlanSyncResult]:
        day = self.get_day(plan_id, day_id)
        exercise_id = fields["exercise_id"]
        self._require_exercise(exercise_id)
        if any(e.exercise_id == exercise_id for e in day.exercises):
            raise InvalidConfiguration(f"exercise {exercise_id} is already on plan day {day_id}")
        pde = PlanDayExercise(
            sort_order=max((e.sort_order for e in day.exercises), default=-1) + 1, **fields,
        )
        day.exercises.append(pde)
        self.db.flush()

        result = PlanSyncResult()
        for workout in self._pending_workouts(plan_id, day.id):
            tc = self.progression.compute_targets(
                exercise_id, workout.mesocycle_id, workout.week_number, plan_day_id=day.id,
            )
            for n in range(1, tc.target_sets + 1):
                self.sets.create(
                    workout.id,
                    exercise_id=exercise_id,
                    set_number=n,
                    target_reps=tc.target_reps,
                    target_weight=tc.target_weight,
                )
            result.touch(added=tc.target_sets)
        self.db.commit()
        self.db.refresh(pde)
        log.info("plan %s day %s: added exercise %s (%s workouts, %s sets)",
                 plan_id, day_id, exercise_id, result.affected_workouts, result.added_sets)
        return pde, result

    def update_exercise(self, plan_id: int, day_id: int, plan_day_exercise_id: int,
                        **fields: Any) -> tuple[PlanDayExercise, PlanSyncResult]:
        pde = self.get_day_exercise(plan_id, day_id, plan_day_exercise_id)
        for key, value in fields.items():
            if value is not None:
                setattr(pde, key, value)
        exercise = self.exercises.get(pde.exercise_id)
        try:
            exercise_config(pde, exercise.weight_increment).validate()
        except InvalidConfiguration:
            self.db.rollback()
            raise
        self.db.flush()

        result = PlanSyncResult()
        for workout in self._pending_workouts(plan_id, day_id):
            result.touch(**self._resync_sets(workout, pde.exercise_id))
        self.db.commit()
        self.db.refresh(pde)
        log.info("plan %s day %s: exercise %s updated (%s workouts resynced)",
                 plan_id, day_id, pde.exercise_id, result.affected_workouts)
        return pde, result

    def delete_exercise(self, plan_id: int, day_id: int, plan_day_exercise_id: int) -> PlanSyncResult:
        """Drops the exercise from the day and from pending workouts; logged sets stay."""
        pde = self.get_day_exercise(plan_id, day_id, plan_day_exercise_id)
        result = PlanSyncResult()
        for workout in self._pending_workouts(plan_id, day_id):
            rows = self.sets.list_by_workout_and_exercise(workout.id, pde.exercise_id)
            for ws in rows:
                self.sets.delete(ws)
            result.touch(removed=len(rows))
        self.db.delete(pde)
        self.db.commit()
        return result

    # HELPERS
    def _require_exercise(self, exercise_id: int) -> None:
        if not self.exercises.get(exercise_id):
            raise NotFound("Exercise", exercise_id)

    def _pending_workouts(self, plan_id: int, plan_day_id: int) -> list[Workout]:
        pending: list[Workout] = []
        for meso in self.mesocycles.list_for_plan(plan_id, status=MesocycleStatus.active):
            pending.extend(self.workouts.pending_for_plan_day(meso.id, plan_day_id))
        return pending

    def _resync_sets(self, workout: Workout, exercise_id: int) -> dict[str, int]:
        """Match one pending workout's sets for an exercise to freshly computed targets."""
        tc = self.progression.compute_targets(
            exercise_id, workout.mesocycle_id, workout.week_number, plan_day_id=workout.plan_day_id,
        )
        rows = [s for s in self.sets.list_by_workout_and_exercise(workout.id, exercise_id)
                if s.status == SetStatus.pending]
        added = removed = modified = 0
        for ws in rows[:tc.target_sets]:
            if (ws.target_weight, ws.target_reps) != (tc.target_weight, tc.target_reps):
                ws.target_weight = tc.target_weight
                ws.target_reps = tc.target_reps
                modified += 1
        for ws in rows[tc.target_sets:]:
            self.sets.delete(ws)
            removed += 1
        next_number = rows[-1].set_number + 1 if rows else 1
        for offset in range(tc.target_sets - len(rows)):
            self.sets.create(
                workout.id,
                exercise_id=exercise_id,
                set_number=next_number + offset,
                target_reps=tc.target_reps,
                target_weight=tc.target_weight,
            )
            added += 1
        return {"added": added, "removed": removed, "modified": modified}
