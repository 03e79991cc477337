from __future__ import annotations
from typing import Any, Optional
from sqlalchemy import select
from lifting.models import Plan, PlanDay, PlanDayExercise
from lifting.repositories.base import BaseRepository

class PlanRepository(BaseRepository[Plan]):
    model = Plan

    def list_by_user(self, user_id: int) -> list[Plan]:
        stmt = select(Plan).where(Plan.user_id == user_id).order_by(Plan.id.desc())
        return list(self.db.execute(stmt).scalars().all())

    def create(self, user_id: int, *, name: str, duration_weeks: int, days: list[dict[str, Any]]) -> Plan:
        """days: [{name, day_of_week, exercises: [{exercise_id, sets, reps, ...}]}] in display order."""
        plan = Plan(user_id=user_id, name=name, duration_weeks=duration_weeks)
        for day_idx, day in enumerate(days):
            exercises = day.get("exercises", [])
            plan_day = PlanDay(name=day["name"], day_of_week=day["day_of_week"], sort_order=day_idx)
            for ex_idx, ex in enumerate(exercises):
                plan_day.exercises.append(PlanDayExercise(sort_order=ex_idx, **ex))
            plan.days.append(plan_day)
        self.db.add(plan)
        self.db.commit()
        self.db.refresh(plan)
        return plan

    def find_plan_day_exercise(
        self, plan_id: int, exercise_id: int, *, plan_day_id: Optional[int] = None
    ) -> Optional[PlanDayExercise]:
        stmt = (
            select(PlanDayExercise)
            .join(PlanDay, PlanDayExercise.plan_day_id == PlanDay.id)
            .where(PlanDay.plan_id == plan_id, PlanDayExercise.exercise_id == exercise_id)
            .order_by(PlanDay.sort_order.asc(), PlanDayExercise.sort_order.asc(), PlanDayExercise.id.asc())
        )
        if plan_day_id is not None:
            stmt = stmt.where(PlanDayExercise.plan_day_id == plan_day_id)
        return self.db.execute(stmt.limit(1)).scalars().first()

    def get_day(self, plan_id: int, day_id: int) -> Optional[PlanDay]:
        day = self.db.get(PlanDay, day_id)
        if day is None or day.plan_id != plan_id:
            return None
        return day

    def get_day_exercise(self, day_id: int, plan_day_exercise_id: int) -> Optional[PlanDayExercise]:
        pde = self.db.get(PlanDayExercise, plan_day_exercise_id)
        if pde is None or pde.plan_day_id != day_id:
            return None
        return pde
