from __future__ import annotations
from datetime import date
from typing import Optional
from sqlalchemy import select
from lifting.models import Mesocycle, MesocycleStatus
from lifting.repositories.base import BaseRepository

class MesocycleRepository(BaseRepository[Mesocycle]):
    model = Mesocycle

    def get_active_for_user(self, user_id: int) -> Optional[Mesocycle]:
        stmt = select(Mesocycle).where(
            Mesocycle.user_id == user_id,
            Mesocycle.status == MesocycleStatus.active,
        ).order_by(Mesocycle.id.desc())
        return self.db.execute(stmt).scalars().first()

    def list_by_user(self, user_id: int) -> list[Mesocycle]:
        stmt = select(Mesocycle).where(Mesocycle.user_id == user_id).order_by(Mesocycle.id.desc())
        return list(self.db.execute(stmt).scalars().all())

    def list_for_plan(self, plan_id: int, *, status: MesocycleStatus | None = None) -> list[Mesocycle]:
        stmt = select(Mesocycle).where(Mesocycle.plan_id == plan_id)
        if status is not None:
            stmt = stmt.where(Mesocycle.status == status)
        return list(self.db.execute(stmt.order_by(Mesocycle.id.asc())).scalars().all())

    def create(self, user_id: int, *, plan_id: int, start_date: date,
               total_weeks: int, deload_week: int | None) -> Mesocycle:
        meso = Mesocycle(
            user_id=user_id,
            plan_id=plan_id,
            start_date=start_date,
            total_weeks=total_weeks,
            deload_week=deload_week,
            current_week=1,
            status=MesocycleStatus.pending,
        )
        return self.add_and_refresh(meso)
