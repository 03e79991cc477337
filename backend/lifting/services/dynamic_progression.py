# lifting/services/dynamic_progression.py
"""
Bridges logged workout history to the pure progression rules.

Targets for a week are derived from the best set of each of the previous
weeks (bounded lookback, deload weeks ignored). The miss streak is rebuilt
from those rows on every call instead of being stored.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from lifting.errors import NoPlanConfiguration, NotFound
from lifting.models import Mesocycle, PlanDayExercise, SetStatus, Workout, WorkoutSet, WorkoutStatus
from lifting.repositories.exercise_repo import ExerciseRepository
from lifting.repositories.mesocycle_repo import MesocycleRepository
from lifting.repositories.plan_repo import PlanRepository
from lifting.repositories.set_repo import SetRepository
from lifting.services.progression import (
    ExerciseConfig,
    Prescription,
    RepRange,
    SetPerformance,
    compute_next_targets,
    select_best_set,
)
from lifting.settings import Settings, get_settings

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class WeekBest:
    week_number: int
    best: SetPerformance


@dataclass(frozen=True, slots=True)
class TargetComputation:
    exercise_id: int
    week_number: int
    target_weight: float
    target_reps: int
    target_sets: int
    reason: str
    rationale: str
    is_deload: bool

    @classmethod
    def from_prescription(cls, exercise_id: int, week_number: int, p: Prescription) -> "TargetComputation":
        return cls(
            exercise_id=exercise_id,
            week_number=week_number,
            target_weight=p.weight,
            target_reps=p.reps,
            target_sets=p.sets,
            reason=p.reason.value,
            rationale=p.rationale,
            is_deload=p.is_deload,
        )


def exercise_config(pde: PlanDayExercise, weight_increment: float) -> ExerciseConfig:
    return ExerciseConfig(
        rep_range=RepRange(min=pde.min_reps, target=pde.target_reps, max=pde.max_reps),
        weight_increment=float(weight_increment),
        base_weight=float(pde.weight),
        base_reps=pde.reps,
        base_sets=pde.sets,
    )


def count_consecutive_misses(history: list[WeekBest], min_reps: int) -> int:
    """
    history is newest first. Counts weeks below min_reps at the newest week's
    weight; any week at or above min_reps, or at another weight, ends the run.
    """
    if not history:
        return 0
    weight = history[0].best.weight
    misses = 0
    for wb in history:
        if wb.best.weight != weight or wb.best.reps >= min_reps:
            break
        misses += 1
    return misses


class DynamicProgressionService:
    def __init__(self, db: Session, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or get_settings()
        self.mesocycles = MesocycleRepository(db)
        self.plans = PlanRepository(db)
        self.exercises = ExerciseRepository(db)
        self.sets = SetRepository(db)

    def lookback_history(self, mesocycle: Mesocycle, exercise_id: int, current_week: int) -> list[WeekBest]:
        """Best completed set per prior week, newest first; deload weeks excluded."""
        lookback = self.settings.PROGRESSION_LOOKBACK_WEEKS
        from_week = max(1, current_week - lookback)
        to_week = current_week - 1
        if to_week < from_week:
            return []
        by_week = self.sets.completed_by_week(mesocycle.id, exercise_id, from_week=from_week, to_week=to_week)
        history: list[WeekBest] = []
        for week in sorted(by_week, reverse=True):
            if mesocycle.is_deload_week(week):
                continue
            best = select_best_set(
                SetPerformance(weight=float(s.actual_weight), reps=s.actual_reps)
                for s in by_week[week]
                if s.actual_weight is not None and s.actual_reps is not None
            )
            if best is not None:
                history.append(WeekBest(week_number=week, best=best))
        return history

    def compute_targets(
        self,
        exercise_id: int,
        mesocycle_id: int,
        current_week: int,
        *,
        plan_day_id: Optional[int] = None,
    ) -> TargetComputation:
        meso = self.mesocycles.get(mesocycle_id)
        if not meso:
            raise NotFound("Mesocycle", mesocycle_id)
        pde = self.plans.find_plan_day_exercise(meso.plan_id, exercise_id, plan_day_id=plan_day_id)
        if pde is None:
            raise NoPlanConfiguration(
                f"exercise {exercise_id} has no configuration in plan {meso.plan_id}"
            )
        exercise = self.exercises.get(exercise_id)
        if not exercise:
            raise NotFound("Exercise", exercise_id)

        config = exercise_config(pde, exercise.weight_increment)
        is_deload = meso.is_deload_week(current_week)
        history = self.lookback_history(meso, exercise_id, current_week) if current_week > 1 else []

        prior_best = history[0].best if history else None
        misses = count_consecutive_misses(history, config.rep_range.min)
        prescription = compute_next_targets(
            config,
            prior_best,
            week_index=current_week - 1,
            is_deload=is_deload,
            consecutive_misses=misses,
            last_working_weight=prior_best.weight if prior_best else None,
            deload_weight_factor=self.settings.DELOAD_WEIGHT_FACTOR,
            deload_volume_factor=self.settings.DELOAD_VOLUME_FACTOR,
            regress_after_misses=self.settings.REGRESS_AFTER_MISSES,
        )
        log.debug(
            "targets exercise=%s meso=%s week=%s -> %s x %s (%s, misses=%s)",
            exercise_id, mesocycle_id, current_week,
            prescription.weight, prescription.reps, prescription.reason.value, misses,
        )
        return TargetComputation.from_prescription(exercise_id, current_week, prescription)

    def refresh_workout_targets(self, workout: Workout) -> list[WorkoutSet]:
        """
        Lazy recompute for a workout that has not been started: rewrite the
        targets of its pending sets from current history. Set counts are
        left alone. Flushes but does not commit.
        """
        if workout.status != WorkoutStatus.pending:
            return list(workout.sets)
        by_exercise: dict[int, TargetComputation] = {}
        for ws in workout.sets:
            if ws.status != SetStatus.pending:
                continue
            if ws.exercise_id not in by_exercise:
                by_exercise[ws.exercise_id] = self.compute_targets(
                    ws.exercise_id, workout.mesocycle_id, workout.week_number,
                    plan_day_id=workout.plan_day_id,
                )
            tc = by_exercise[ws.exercise_id]
            ws.target_weight = tc.target_weight
            ws.target_reps = tc.target_reps
        self.db.flush()
        return list(workout.sets)
