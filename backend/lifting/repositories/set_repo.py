from __future__ import annotations
from typing import Optional
from sqlalchemy import select
from lifting.models import WorkoutSet, Workout, SetStatus
from lifting.repositories.base import BaseRepository

class SetRepository(BaseRepository[WorkoutSet]):
    model = WorkoutSet

    def get_by_key(self, workout_id: int, exercise_id: int, set_number: int) -> Optional[WorkoutSet]:
        stmt = select(WorkoutSet).where(
            WorkoutSet.workout_id == workout_id,
            WorkoutSet.exercise_id == exercise_id,
            WorkoutSet.set_number == set_number,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def list_by_workout_and_exercise(self, workout_id: int, exercise_id: int) -> list[WorkoutSet]:
        stmt = select(WorkoutSet).where(
            WorkoutSet.workout_id == workout_id,
            WorkoutSet.exercise_id == exercise_id,
        ).order_by(WorkoutSet.set_number.asc())
        return list(self.db.execute(stmt).scalars().all())

    def completed_by_week(
        self, mesocycle_id: int, exercise_id: int, *, from_week: int, to_week: int
    ) -> dict[int, list[WorkoutSet]]:
        """Completed sets of one exercise grouped by week_number, weeks inclusive."""
        stmt = (
            select(WorkoutSet, Workout.week_number)
            .join(Workout, WorkoutSet.workout_id == Workout.id)
            .where(
                Workout.mesocycle_id == mesocycle_id,
                Workout.week_number >= from_week,
                Workout.week_number <= to_week,
                WorkoutSet.exercise_id == exercise_id,
                WorkoutSet.status == SetStatus.completed,
            )
            .order_by(Workout.week_number.desc(), WorkoutSet.set_number.asc())
        )
        by_week: dict[int, list[WorkoutSet]] = {}
        for ws, week in self.db.execute(stmt).all():
            by_week.setdefault(week, []).append(ws)
        return by_week

    def create(self, workout_id: int, *, exercise_id: int, set_number: int,
               target_reps: int, target_weight: float) -> WorkoutSet:
        s = WorkoutSet(
            workout_id=workout_id,
            exercise_id=exercise_id,
            set_number=set_number,
            target_reps=target_reps,
            target_weight=target_weight,
            status=SetStatus.pending,
        )
        return self.add_and_refresh(s)

    def delete(self, workout_set: WorkoutSet) -> None:
        self.db.delete(workout_set)
        self.db.flush()
