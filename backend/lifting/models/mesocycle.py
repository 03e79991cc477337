from enum import Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Integer, ForeignKey, Date, DateTime, func, Enum as SAEnum
from lifting.db import Base

class MesocycleStatus(str, Enum):
    pending = "pending"
    active = "active"
    completed = "completed"
    cancelled = "cancelled"

TERMINAL_MESOCYCLE_STATUSES = (MesocycleStatus.completed, MesocycleStatus.cancelled)

class Mesocycle(Base):
    __tablename__ = "mesocycles"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    plan_id: Mapped[int] = mapped_column(ForeignKey("plans.id", ondelete="RESTRICT"), index=True)
    start_date: Mapped[Date] = mapped_column(Date, nullable=False)
    total_weeks: Mapped[int] = mapped_column(Integer, nullable=False, default=7)
    deload_week: Mapped[int | None] = mapped_column(Integer, nullable=True)
    current_week: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    status: Mapped[MesocycleStatus] = mapped_column(
        SAEnum(MesocycleStatus, name="mesocycle_status"),
        nullable=False,
        default=MesocycleStatus.pending,
        server_default=MesocycleStatus.pending.value,
    )
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="mesocycles")
    plan = relationship("Plan")
    workouts = relationship(
        "Workout", back_populates="mesocycle", cascade="all, delete-orphan",
        order_by="[Workout.week_number, Workout.scheduled_date, Workout.id]",
    )

    def is_deload_week(self, week_number: int) -> bool:
        return self.deload_week is not None and week_number == self.deload_week
