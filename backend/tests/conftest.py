"""
Point the app at a throwaway SQLite file before anything imports
lifting.db, and give every test a fresh schema.
"""
import os
import tempfile
from datetime import date

_DB_DIR = tempfile.mkdtemp(prefix="lifting-tests-")
os.environ.setdefault("DB_URL", f"sqlite:///{_DB_DIR}/test.db")

import pytest

from lifting.db import Base, SessionLocal, engine
from lifting import models  # noqa: F401  # registers tables
from lifting.models import Exercise, Plan, PlanDay, PlanDayExercise, User
from lifting.repositories.set_repo import SetRepository
from lifting.repositories.workout_repo import WorkoutRepository
from lifting.services.mesocycle_service import MesocycleService

START = date(2024, 1, 15)  # a Monday


@pytest.fixture(autouse=True)
def fresh_schema():
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


def make_user(db, email="lifter@ex.com", name="Lifter"):
    user = User(email=email, name=name)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_exercise(db, name, increment=5.0, user_id=None):
    ex = Exercise(name=name, weight_increment=increment, user_id=user_id, is_custom=user_id is not None)
    db.add(ex)
    db.commit()
    db.refresh(ex)
    return ex


@pytest.fixture
def user(db):
    return make_user(db)


@pytest.fixture
def bench(db):
    return make_exercise(db, "Bench Press")


@pytest.fixture
def squat(db):
    return make_exercise(db, "Back Squat")


@pytest.fixture
def plan(db, user, bench, squat):
    """
    Upper A (Monday): bench 3 x 8 @ 135, range 8/10/12.
    Lower A (Thursday): squat 2 x 5 @ 225, range 5/6/8.
    """
    p = Plan(user_id=user.id, name="Upper/Lower", duration_weeks=7)
    upper = PlanDay(name="Upper A", day_of_week=1, sort_order=0)
    upper.exercises.append(PlanDayExercise(
        exercise_id=bench.id, sets=3, reps=8, weight=135,
        min_reps=8, target_reps=10, max_reps=12, sort_order=0,
    ))
    lower = PlanDay(name="Lower A", day_of_week=4, sort_order=1)
    lower.exercises.append(PlanDayExercise(
        exercise_id=squat.id, sets=2, reps=5, weight=225,
        min_reps=5, target_reps=6, max_reps=8, sort_order=0,
    ))
    p.days.extend([upper, lower])
    db.add(p)
    db.commit()
    db.refresh(p)
    return p


@pytest.fixture
def block(db, user, plan):
    """An active seven-week mesocycle generated from the plan fixture."""
    meso, _ = MesocycleService(db).start_new(user.id, plan_id=plan.id, start_date=START)
    return meso


def week_workout(db, meso_id, week, plan_day_id):
    for w in WorkoutRepository(db).list_by_mesocycle(meso_id):
        if w.week_number == week and w.plan_day_id == plan_day_id:
            return w
    raise AssertionError(f"no workout for week {week} day {plan_day_id}")


def week_sets(db, meso_id, week, plan_day_id, exercise_id):
    w = week_workout(db, meso_id, week, plan_day_id)
    return SetRepository(db).list_by_workout_and_exercise(w.id, exercise_id)
