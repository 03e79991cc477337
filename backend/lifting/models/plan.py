from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Integer, ForeignKey, String, Numeric, DateTime, func
from lifting.db import Base

class Plan(Base):
    __tablename__ = "plans"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    duration_weeks: Mapped[int] = mapped_column(Integer, nullable=False, default=7)
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="plans")
    days = relationship(
        "PlanDay", back_populates="plan", cascade="all, delete-orphan",
        order_by="[PlanDay.sort_order, PlanDay.id]",
    )

class PlanDay(Base):
    __tablename__ = "plan_days"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    plan_id: Mapped[int] = mapped_column(ForeignKey("plans.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)  # 0 = Sunday
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    plan = relationship("Plan", back_populates="days")
    exercises = relationship(
        "PlanDayExercise", back_populates="plan_day", cascade="all, delete-orphan",
        order_by="[PlanDayExercise.sort_order, PlanDayExercise.id]",
    )

class PlanDayExercise(Base):
    __tablename__ = "plan_day_exercises"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    plan_day_id: Mapped[int] = mapped_column(ForeignKey("plan_days.id", ondelete="CASCADE"), index=True)
    exercise_id: Mapped[int] = mapped_column(ForeignKey("exercises.id", ondelete="RESTRICT"), index=True)
    # starting prescription
    sets: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    reps: Mapped[int] = mapped_column(Integer, nullable=False, default=8)
    weight: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False, default=0)
    # target rep range
    min_reps: Mapped[int] = mapped_column(Integer, nullable=False, default=8)
    target_reps: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    max_reps: Mapped[int] = mapped_column(Integer, nullable=False, default=12)
    rest_seconds: Mapped[int] = mapped_column(Integer, nullable=False, default=90)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    plan_day = relationship("PlanDay", back_populates="exercises")
    exercise = relationship("Exercise")
