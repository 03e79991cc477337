from __future__ import annotations
from typing import Optional
from sqlalchemy import exists, select, or_
from lifting.models import Exercise, Workout, WorkoutSet, Mesocycle, PlanDayExercise, SetStatus
from lifting.repositories.base import BaseRepository

class ExerciseRepository(BaseRepository[Exercise]):
    model = Exercise

    def list_for_user(self, user_id: int) -> list[Exercise]:
        stmt = select(Exercise).where(or_(Exercise.user_id == user_id, Exercise.user_id.is_(None)))\
                               .order_by(Exercise.name.asc(), Exercise.id.asc())
        return list(self.db.execute(stmt).scalars().all())

    def create(self, *, user_id: int | None, name: str, weight_increment: float, is_custom: bool = True) -> Exercise:
        ex = Exercise(user_id=user_id, name=name, weight_increment=weight_increment, is_custom=is_custom)
        self.db.add(ex)
        self.db.commit()
        self.db.refresh(ex)
        return ex

    def update(self, exercise_id: int, *, name: str | None = None,
               weight_increment: float | None = None) -> Optional[Exercise]:
        ex = self.get(exercise_id)
        if not ex:
            return None
        if name is not None:
            ex.name = name
        if weight_increment is not None:
            ex.weight_increment = weight_increment
        self.db.commit()
        self.db.refresh(ex)
        return ex

    def is_referenced(self, exercise_id: int) -> bool:
        """True while any plan day or generated set still points at the exercise."""
        in_plans = exists().where(PlanDayExercise.exercise_id == exercise_id)
        in_sets = exists().where(WorkoutSet.exercise_id == exercise_id)
        return bool(self.db.execute(select(or_(in_plans, in_sets))).scalar())

    def delete(self, ex: Exercise) -> None:
        self.db.delete(ex)
        self.db.commit()

    def completed_sets(self, exercise_id: int, *, user_id: int, limit: int = 200) -> list[tuple[WorkoutSet, Workout]]:
        """Completed sets of this exercise across the user's mesocycles, newest first."""
        stmt = (
            select(WorkoutSet, Workout)
            .join(Workout, WorkoutSet.workout_id == Workout.id)
            .join(Mesocycle, Workout.mesocycle_id == Mesocycle.id)
            .where(
                WorkoutSet.exercise_id == exercise_id,
                WorkoutSet.status == SetStatus.completed,
                Mesocycle.user_id == user_id,
            )
            .order_by(Workout.scheduled_date.desc(), Workout.id.desc(), WorkoutSet.set_number.asc())
            .limit(limit)
        )
        return [(row[0], row[1]) for row in self.db.execute(stmt).all()]
