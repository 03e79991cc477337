# lifting/services/mesocycle_service.py
"""
Mesocycle lifecycle and bulk generation of a block's workouts and sets.

Generation builds every row in memory, flushes them in batches inside one
transaction and flips the mesocycle to active last, so a failure leaves the
block pending with nothing written.

The single-active-mesocycle rule is a check-then-act on the user's rows.
Two concurrent start requests for the same user can both pass the check;
that race is accepted for a personal, single-writer deployment.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from lifting.errors import (
    ActiveMesocycleExists,
    InvalidConfiguration,
    InvalidTransition,
    NotFound,
)
from lifting.models import (
    Mesocycle,
    MesocycleStatus,
    Plan,
    PlanDay,
    PlanDayExercise,
    Workout,
    WorkoutSet,
    WorkoutStatus,
    SetStatus,
)
from lifting.repositories.exercise_repo import ExerciseRepository
from lifting.repositories.mesocycle_repo import MesocycleRepository
from lifting.repositories.plan_repo import PlanRepository
from lifting.repositories.workout_repo import WorkoutRepository
from lifting.services.dynamic_progression import exercise_config
from lifting.services.progression import Prescription, SetPerformance, compute_next_targets
from lifting.settings import Settings, get_settings

log = logging.getLogger(__name__)


@dataclass(slots=True)
class WeekSummary:
    week_number: int
    is_deload: bool
    total_workouts: int = 0
    completed_workouts: int = 0
    skipped_workouts: int = 0
    workouts: list[Workout] = field(default_factory=list)


@dataclass(slots=True)
class MesocycleDetails:
    mesocycle: Mesocycle
    plan_name: str
    weeks: list[WeekSummary]

    @property
    def total_workouts(self) -> int:
        return sum(w.total_workouts for w in self.weeks)

    @property
    def completed_workouts(self) -> int:
        return sum(w.completed_workouts for w in self.weeks)


def scheduled_date_for(start: date, week_number: int, day_of_week: int) -> date:
    """
    Date of a plan day (0 = Sunday) in a given week. Week 1 starts on the
    mesocycle start date and runs for seven days.
    """
    week_start = start + timedelta(weeks=week_number - 1)
    start_dow = (week_start.weekday() + 1) % 7  # python Monday=0 -> Sunday=0
    return week_start + timedelta(days=(day_of_week - start_dow) % 7)


def project_prescriptions(
    pde: PlanDayExercise,
    weight_increment: float,
    total_weeks: int,
    deload_week: Optional[int],
    settings: Settings,
) -> list[Prescription]:
    """
    Planned baseline projection for every week of the block, assuming each
    non-deload week's targets are met exactly. Index 0 is week 1.
    """
    config = exercise_config(pde, weight_increment)
    out: list[Prescription] = []
    last_working: Optional[Prescription] = None
    for week in range(1, total_weeks + 1):
        prior = SetPerformance(weight=last_working.weight, reps=last_working.reps) if last_working else None
        p = compute_next_targets(
            config,
            prior,
            week_index=week - 1,
            is_deload=deload_week is not None and week == deload_week,
            last_working_weight=last_working.weight if last_working else None,
            deload_weight_factor=settings.DELOAD_WEIGHT_FACTOR,
            deload_volume_factor=settings.DELOAD_VOLUME_FACTOR,
            regress_after_misses=settings.REGRESS_AFTER_MISSES,
        )
        out.append(p)
        if not p.is_deload:
            last_working = p
    return out


class MesocycleService:
    def __init__(self, db: Session, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or get_settings()
        self.mesocycles = MesocycleRepository(db)
        self.plans = PlanRepository(db)
        self.exercises = ExerciseRepository(db)
        self.workouts = WorkoutRepository(db)

    # READS
    def get(self, mesocycle_id: int) -> Mesocycle:
        meso = self.mesocycles.get(mesocycle_id)
        if not meso:
            raise NotFound("Mesocycle", mesocycle_id)
        return meso

    def get_active(self, user_id: int) -> Optional[Mesocycle]:
        return self.mesocycles.get_active_for_user(user_id)

    def get_details(self, mesocycle_id: int) -> MesocycleDetails:
        meso = self.get(mesocycle_id)
        weeks = {
            n: WeekSummary(week_number=n, is_deload=meso.is_deload_week(n))
            for n in range(1, meso.total_weeks + 1)
        }
        for w in self.workouts.list_by_mesocycle(meso.id):
            summary = weeks.setdefault(
                w.week_number, WeekSummary(week_number=w.week_number, is_deload=meso.is_deload_week(w.week_number))
            )
            summary.workouts.append(w)
            summary.total_workouts += 1
            if w.status == WorkoutStatus.completed:
                summary.completed_workouts += 1
            elif w.status == WorkoutStatus.skipped:
                summary.skipped_workouts += 1
        return MesocycleDetails(
            mesocycle=meso,
            plan_name=meso.plan.name,
            weeks=[weeks[n] for n in sorted(weeks)],
        )

    # WRITES
    def create(
        self,
        user_id: int,
        *,
        plan_id: int,
        start_date: date,
        total_weeks: Optional[int] = None,
        deload_week: Optional[int] = None,
    ) -> Mesocycle:
        plan = self.plans.get(plan_id)
        if not plan or plan.user_id != user_id:
            raise NotFound("Plan", plan_id)
        if not any(day.exercises for day in plan.days):
            raise InvalidConfiguration(f"plan {plan_id} has no workout days with exercises")

        weeks = total_weeks or plan.duration_weeks or self.settings.DEFAULT_TOTAL_WEEKS
        if weeks < 1:
            raise InvalidConfiguration(f"total weeks must be at least 1, got {weeks}")
        deload = deload_week if deload_week is not None else weeks
        if not 1 <= deload <= weeks:
            raise InvalidConfiguration(f"deload week {deload} outside 1..{weeks}")

        meso = self.mesocycles.create(
            user_id, plan_id=plan_id, start_date=start_date, total_weeks=weeks, deload_week=deload,
        )
        self.db.commit()
        self.db.refresh(meso)
        log.info("mesocycle %s created for user=%s plan=%s weeks=%s deload=%s",
                 meso.id, user_id, plan_id, weeks, deload)
        return meso

    def start(self, mesocycle_id: int) -> tuple[Mesocycle, int]:
        """Generate the whole block and activate it. Returns (mesocycle, workout count)."""
        meso = self.get(mesocycle_id)
        if meso.status != MesocycleStatus.pending:
            raise InvalidTransition(f"only pending mesocycles can be started (status={meso.status.value})")
        active = self.mesocycles.get_active_for_user(meso.user_id)
        if active is not None and active.id != meso.id:
            log.warning("user=%s already has active mesocycle %s", meso.user_id, active.id)
            raise ActiveMesocycleExists(
                f"mesocycle {active.id} is already active; complete or cancel it first"
            )

        try:
            workouts, sets = self.build_rows(meso, meso.plan)
            batch = self.settings.WRITE_BATCH_SIZE
            self.workouts.add_all_batched(workouts, batch_size=batch)
            for w, rows in zip(workouts, sets):
                for s in rows:
                    s.workout_id = w.id
            flat_sets = [s for rows in sets for s in rows]
            self.workouts.add_all_batched(flat_sets, batch_size=batch)
            meso.status = MesocycleStatus.active
            meso.current_week = 1
            self.db.commit()
        except Exception:
            self.db.rollback()
            log.exception("generation failed for mesocycle %s; left pending", mesocycle_id)
            raise
        self.db.refresh(meso)
        log.info("mesocycle %s active: %s workouts, %s sets", meso.id, len(workouts), len(flat_sets))
        return meso, len(workouts)

    def start_new(
        self,
        user_id: int,
        *,
        plan_id: int,
        start_date: date,
        total_weeks: Optional[int] = None,
        deload_week: Optional[int] = None,
    ) -> tuple[Mesocycle, int]:
        # fail fast before leaving a pending row behind
        active = self.mesocycles.get_active_for_user(user_id)
        if active is not None:
            raise ActiveMesocycleExists(
                f"mesocycle {active.id} is already active; complete or cancel it first"
            )
        meso = self.create(
            user_id, plan_id=plan_id, start_date=start_date,
            total_weeks=total_weeks, deload_week=deload_week,
        )
        return self.start(meso.id)

    def complete(self, mesocycle_id: int) -> Mesocycle:
        meso = self.get(mesocycle_id)
        if meso.status != MesocycleStatus.active:
            raise InvalidTransition(f"only active mesocycles can be completed (status={meso.status.value})")
        meso.status = MesocycleStatus.completed
        self.db.commit()
        self.db.refresh(meso)
        log.info("mesocycle %s completed at week %s", meso.id, meso.current_week)
        return meso

    def cancel(self, mesocycle_id: int) -> Mesocycle:
        meso = self.get(mesocycle_id)
        if meso.status not in (MesocycleStatus.pending, MesocycleStatus.active):
            raise InvalidTransition(f"mesocycle is already {meso.status.value}")
        meso.status = MesocycleStatus.cancelled
        self.db.commit()
        self.db.refresh(meso)
        log.info("mesocycle %s cancelled", meso.id)
        return meso

    # GENERATION
    def build_rows(self, meso: Mesocycle, plan: Plan) -> tuple[list[Workout], list[list[WorkoutSet]]]:
        """
        In-memory rows in week, plan day, exercise, set order. The second list
        holds each workout's sets at the same index; workout_id is filled in
        once the workouts have ids.
        """
        days: list[PlanDay] = [d for d in plan.days if d.exercises]
        projections: dict[int, list[Prescription]] = {}
        for day in days:
            for pde in day.exercises:
                exercise = self.exercises.get(pde.exercise_id)
                if not exercise:
                    raise NotFound("Exercise", pde.exercise_id)
                projections[pde.id] = project_prescriptions(
                    pde, exercise.weight_increment, meso.total_weeks, meso.deload_week, self.settings,
                )

        workouts: list[Workout] = []
        sets: list[list[WorkoutSet]] = []
        for week in range(1, meso.total_weeks + 1):
            for day in days:
                workouts.append(Workout(
                    mesocycle_id=meso.id,
                    plan_day_id=day.id,
                    week_number=week,
                    scheduled_date=scheduled_date_for(meso.start_date, week, day.day_of_week),
                    status=WorkoutStatus.pending,
                ))
                rows: list[WorkoutSet] = []
                for pde in day.exercises:
                    p = projections[pde.id][week - 1]
                    for set_number in range(1, p.sets + 1):
                        rows.append(WorkoutSet(
                            exercise_id=pde.exercise_id,
                            set_number=set_number,
                            target_reps=p.reps,
                            target_weight=p.weight,
                            status=SetStatus.pending,
                        ))
                sets.append(rows)
        return workouts, sets
