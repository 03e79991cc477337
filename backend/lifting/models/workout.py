from enum import Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Integer, ForeignKey, Date, DateTime, Numeric, UniqueConstraint, Enum as SAEnum
from lifting.db import Base

class WorkoutStatus(str, Enum):
    pending = "pending"
    in_progress = "in_progress"
    completed = "completed"
    skipped = "skipped"

TERMINAL_WORKOUT_STATUSES = (WorkoutStatus.completed, WorkoutStatus.skipped)

class SetStatus(str, Enum):
    pending = "pending"
    completed = "completed"
    skipped = "skipped"

class Workout(Base):
    __tablename__ = "workouts"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    mesocycle_id: Mapped[int] = mapped_column(ForeignKey("mesocycles.id", ondelete="CASCADE"), index=True)
    plan_day_id: Mapped[int] = mapped_column(ForeignKey("plan_days.id", ondelete="RESTRICT"), index=True)
    week_number: Mapped[int] = mapped_column(Integer, nullable=False)
    scheduled_date: Mapped[Date] = mapped_column(Date, nullable=False)
    status: Mapped[WorkoutStatus] = mapped_column(
        SAEnum(WorkoutStatus, name="workout_status"),
        nullable=False,
        default=WorkoutStatus.pending,
        server_default=WorkoutStatus.pending.value,
    )
    started_at: Mapped[DateTime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[DateTime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    mesocycle = relationship("Mesocycle", back_populates="workouts")
    plan_day = relationship("PlanDay")
    sets = relationship(
        "WorkoutSet", back_populates="workout", cascade="all, delete-orphan",
        order_by="WorkoutSet.id",
    )

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_WORKOUT_STATUSES

class WorkoutSet(Base):
    __tablename__ = "workout_sets"
    __table_args__ = (
        UniqueConstraint("workout_id", "exercise_id", "set_number", name="uq_workout_exercise_set"),
    )
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    workout_id: Mapped[int] = mapped_column(ForeignKey("workouts.id", ondelete="CASCADE"), index=True)
    exercise_id: Mapped[int] = mapped_column(ForeignKey("exercises.id", ondelete="RESTRICT"), index=True)
    set_number: Mapped[int] = mapped_column(Integer, nullable=False)
    target_reps: Mapped[int] = mapped_column(Integer, nullable=False)
    target_weight: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)
    actual_reps: Mapped[int | None] = mapped_column(Integer, nullable=True)
    actual_weight: Mapped[float | None] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=True)
    status: Mapped[SetStatus] = mapped_column(
        SAEnum(SetStatus, name="set_status"),
        nullable=False,
        default=SetStatus.pending,
        server_default=SetStatus.pending.value,
    )

    workout = relationship("Workout", back_populates="sets")
    exercise = relationship("Exercise")
