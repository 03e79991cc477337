from __future__ import annotations
from typing import Optional
from sqlalchemy import func, select
from lifting.models import Workout, WorkoutStatus
from lifting.repositories.base import BaseRepository

_ORDER = (Workout.week_number.asc(), Workout.scheduled_date.asc(), Workout.id.asc())

class WorkoutRepository(BaseRepository[Workout]):
    model = Workout

    def list_by_mesocycle(self, mesocycle_id: int) -> list[Workout]:
        stmt = select(Workout).where(Workout.mesocycle_id == mesocycle_id).order_by(*_ORDER)
        return list(self.db.execute(stmt).scalars().all())

    def first_with_status(self, mesocycle_id: int, status: WorkoutStatus) -> Optional[Workout]:
        stmt = select(Workout).where(
            Workout.mesocycle_id == mesocycle_id,
            Workout.status == status,
        ).order_by(*_ORDER)
        return self.db.execute(stmt.limit(1)).scalars().first()

    def first_open(self, mesocycle_id: int) -> Optional[Workout]:
        """Earliest workout that is neither completed nor skipped."""
        stmt = select(Workout).where(
            Workout.mesocycle_id == mesocycle_id,
            Workout.status.in_((WorkoutStatus.pending, WorkoutStatus.in_progress)),
        ).order_by(*_ORDER)
        return self.db.execute(stmt.limit(1)).scalars().first()

    def future_pending(self, mesocycle_id: int, plan_day_id: int, *, after_week: int) -> list[Workout]:
        stmt = select(Workout).where(
            Workout.mesocycle_id == mesocycle_id,
            Workout.plan_day_id == plan_day_id,
            Workout.week_number > after_week,
            Workout.status == WorkoutStatus.pending,
        ).order_by(*_ORDER)
        return list(self.db.execute(stmt).scalars().all())

    def pending_for_plan_day(self, mesocycle_id: int, plan_day_id: int) -> list[Workout]:
        return self.future_pending(mesocycle_id, plan_day_id, after_week=0)

    def count_for_plan_day(self, plan_day_id: int) -> int:
        stmt = select(func.count(Workout.id)).where(Workout.plan_day_id == plan_day_id)
        return self.db.execute(stmt).scalar_one()
