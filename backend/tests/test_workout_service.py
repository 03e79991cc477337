import pytest

from conftest import week_sets, week_workout
from lifting.errors import (
    IncompleteSets,
    InvalidSetValues,
    InvalidTransition,
    NotFound,
    SetNotFound,
)
from lifting.models import SetStatus, WorkoutStatus
from lifting.repositories.workout_repo import WorkoutRepository
from lifting.services.mesocycle_service import MesocycleService
from lifting.services.workout_service import WorkoutService


@pytest.fixture
def svc(db):
    return WorkoutService(db)


@pytest.fixture
def upper1(db, block, plan):
    return week_workout(db, block.id, 1, plan.days[0].id)


def test_start_once(svc, upper1):
    w = svc.start(upper1.id)
    assert w.status == WorkoutStatus.in_progress
    assert w.started_at is not None
    with pytest.raises(InvalidTransition):
        svc.start(upper1.id)


def test_logging_a_set_starts_the_workout(svc, upper1, bench):
    ws = svc.log_set(upper1.id, bench.id, 1, actual_weight=135, actual_reps=9)
    assert ws.status == SetStatus.completed
    assert (ws.actual_weight, ws.actual_reps) == (135, 9)
    assert svc.get(upper1.id).status == WorkoutStatus.in_progress


def test_relogging_overwrites(svc, upper1, bench):
    svc.log_set(upper1.id, bench.id, 1, actual_weight=135, actual_reps=9)
    ws = svc.log_set(upper1.id, bench.id, 1, actual_weight=135, actual_reps=10)
    assert ws.actual_reps == 10


def test_log_rejects_negative_values(svc, upper1, bench):
    with pytest.raises(InvalidSetValues):
        svc.log_set(upper1.id, bench.id, 1, actual_weight=-1, actual_reps=8)
    with pytest.raises(InvalidSetValues):
        svc.log_set(upper1.id, bench.id, 1, actual_weight=135, actual_reps=-2)
    assert svc.get(upper1.id).status == WorkoutStatus.pending


def test_log_unknown_set(svc, upper1, bench, squat):
    with pytest.raises(SetNotFound):
        svc.log_set(upper1.id, bench.id, 9, actual_weight=135, actual_reps=8)
    with pytest.raises(SetNotFound):
        svc.log_set(upper1.id, squat.id, 1, actual_weight=225, actual_reps=5)


def test_unknown_workout(svc):
    with pytest.raises(NotFound):
        svc.get(12345)


def test_skip_set_only_when_pending(svc, upper1, bench):
    ws = svc.skip_set(upper1.id, bench.id, 2)
    assert ws.status == SetStatus.skipped
    assert ws.actual_weight is None and ws.actual_reps is None
    svc.log_set(upper1.id, bench.id, 1, actual_weight=135, actual_reps=8)
    with pytest.raises(InvalidTransition):
        svc.skip_set(upper1.id, bench.id, 1)


def test_unlog_requires_in_progress(svc, upper1, bench):
    with pytest.raises(InvalidTransition):
        svc.unlog_set(upper1.id, bench.id, 1)
    svc.log_set(upper1.id, bench.id, 1, actual_weight=135, actual_reps=8)
    ws = svc.unlog_set(upper1.id, bench.id, 1)
    assert ws.status == SetStatus.pending
    assert ws.actual_weight is None and ws.actual_reps is None


def test_completion_gate(svc, upper1, bench):
    with pytest.raises(InvalidTransition):
        svc.complete_workout(upper1.id)
    svc.log_set(upper1.id, bench.id, 1, actual_weight=135, actual_reps=10)
    svc.log_set(upper1.id, bench.id, 2, actual_weight=135, actual_reps=9)
    with pytest.raises(IncompleteSets):
        svc.complete_workout(upper1.id)
    svc.skip_set(upper1.id, bench.id, 3)
    w = svc.complete_workout(upper1.id)
    assert w.status == WorkoutStatus.completed
    assert w.completed_at is not None


def test_completed_workout_is_frozen(svc, upper1, bench):
    for n in (1, 2, 3):
        svc.log_set(upper1.id, bench.id, n, actual_weight=135, actual_reps=10)
    svc.complete_workout(upper1.id)
    with pytest.raises(InvalidTransition):
        svc.log_set(upper1.id, bench.id, 1, actual_weight=140, actual_reps=10)
    with pytest.raises(InvalidTransition):
        svc.unlog_set(upper1.id, bench.id, 1)
    with pytest.raises(InvalidTransition):
        svc.skip_workout(upper1.id)


def test_skip_workout_cascades_to_pending_sets(svc, upper1, bench):
    svc.log_set(upper1.id, bench.id, 1, actual_weight=135, actual_reps=10)
    w = svc.skip_workout(upper1.id)
    assert w.status == WorkoutStatus.skipped
    assert [s.status for s in w.sets] == [SetStatus.completed, SetStatus.skipped, SetStatus.skipped]


def test_finishing_a_week_advances_current_week(db, svc, block, plan, upper1):
    lower1 = week_workout(db, block.id, 1, plan.days[1].id)
    svc.skip_workout(upper1.id)
    db.refresh(block)
    assert block.current_week == 1
    svc.skip_workout(lower1.id)
    db.refresh(block)
    assert block.current_week == 2


def test_next_workout_prefers_in_progress(db, svc, user, block, plan, squat):
    assert svc.get_next_workout(user.id).week_number == 1
    lower2 = week_workout(db, block.id, 2, plan.days[1].id)
    svc.log_set(lower2.id, squat.id, 1, actual_weight=225, actual_reps=6)
    assert svc.get_next_workout(user.id).id == lower2.id


def test_next_workout_recomputes_generated_targets(db, svc, user, block, plan, bench, upper1):
    """Generated weeks hold projections; the live targets follow what was lifted."""
    placeholder = week_sets(db, block.id, 2, plan.days[0].id, bench.id)
    assert [(s.target_weight, s.target_reps) for s in placeholder] == [(135, 9)] * 3

    for n in (1, 2, 3):
        svc.log_set(upper1.id, bench.id, n, actual_weight=135, actual_reps=12)
    svc.complete_workout(upper1.id)
    svc.skip_workout(week_workout(db, block.id, 1, plan.days[1].id).id)

    nxt = svc.get_next_workout(user.id)
    assert (nxt.week_number, nxt.plan_day_id) == (2, plan.days[0].id)
    assert [(s.target_weight, s.target_reps) for s in nxt.sets] == [(140, 8)] * 3


def test_next_workout_without_active_block(db, svc, user):
    with pytest.raises(NotFound):
        svc.get_next_workout(user.id)


def test_next_workout_when_block_is_done(db, svc, user, block):
    for w in WorkoutRepository(db).list_by_mesocycle(block.id):
        svc.skip_workout(w.id)
    with pytest.raises(NotFound):
        svc.get_next_workout(user.id)


def test_add_set_propagates_to_future_weeks(db, svc, block, plan, bench, upper1):
    change = svc.add_set(upper1.id, bench.id)
    assert change.workout_set.set_number == 4
    assert (change.workout_set.target_weight, change.workout_set.target_reps) == (135, 8)
    assert (change.future_workouts_affected, change.future_sets_modified) == (5, 5)

    week3 = week_sets(db, block.id, 3, plan.days[0].id, bench.id)
    assert len(week3) == 4
    assert (week3[-1].target_weight, week3[-1].target_reps) == (135, 10)
    # deload week keeps its reduced volume
    assert len(week_sets(db, block.id, 7, plan.days[0].id, bench.id)) == 2


def test_add_set_skips_started_future_workouts(db, svc, block, plan, bench, upper1):
    svc.start(week_workout(db, block.id, 2, plan.days[0].id).id)
    change = svc.add_set(upper1.id, bench.id)
    assert change.future_workouts_affected == 4
    assert len(week_sets(db, block.id, 2, plan.days[0].id, bench.id)) == 3


def test_remove_set_down_to_one(db, svc, block, plan, bench, upper1):
    change = svc.remove_set(upper1.id, bench.id)
    assert change.workout_set is None
    assert (change.future_workouts_affected, change.future_sets_modified) == (5, 5)
    assert len(week_sets(db, block.id, 1, plan.days[0].id, bench.id)) == 2
    assert len(week_sets(db, block.id, 4, plan.days[0].id, bench.id)) == 2

    svc.remove_set(upper1.id, bench.id)
    with pytest.raises(InvalidTransition):
        svc.remove_set(upper1.id, bench.id)
    assert len(week_sets(db, block.id, 6, plan.days[0].id, bench.id)) == 1


def test_remove_set_never_drops_logged_sets(svc, upper1, bench):
    for n in (1, 2, 3):
        svc.log_set(upper1.id, bench.id, n, actual_weight=135, actual_reps=10)
    with pytest.raises(InvalidTransition):
        svc.remove_set(upper1.id, bench.id)


def test_cancelled_block_freezes_its_workouts(db, svc, block, plan, squat, upper1):
    lower1 = week_workout(db, block.id, 1, plan.days[1].id)
    svc.skip_workout(upper1.id)
    MesocycleService(db).cancel(block.id)

    with pytest.raises(InvalidTransition):
        svc.skip_workout(lower1.id)
    with pytest.raises(InvalidTransition):
        svc.start(lower1.id)
    with pytest.raises(InvalidTransition):
        svc.log_set(lower1.id, squat.id, 1, actual_weight=225, actual_reps=5)
    with pytest.raises(InvalidTransition):
        svc.add_set(lower1.id, squat.id)

    db.refresh(block)
    assert block.current_week == 1
    assert svc.get(lower1.id).status == WorkoutStatus.pending


def test_completed_block_rejects_in_progress_workout(db, svc, block, bench, upper1):
    svc.log_set(upper1.id, bench.id, 1, actual_weight=135, actual_reps=8)
    MesocycleService(db).complete(block.id)
    with pytest.raises(InvalidTransition):
        svc.skip_set(upper1.id, bench.id, 2)
    with pytest.raises(InvalidTransition):
        svc.complete_workout(upper1.id)


def test_starting_a_workout_uses_live_targets(db, svc, block, plan, bench, upper1):
    """Six reps at 135 is below the 8-rep floor, so week 2 holds at 135 x 8."""
    for n in (1, 2, 3):
        svc.log_set(upper1.id, bench.id, n, actual_weight=135, actual_reps=6)
    svc.complete_workout(upper1.id)

    upper2 = week_workout(db, block.id, 2, plan.days[0].id)
    started = svc.start(upper2.id)
    assert started.status == WorkoutStatus.in_progress
    assert [(s.target_weight, s.target_reps) for s in started.sets] == [(135, 8)] * 3


def test_first_logged_set_refreshes_targets(db, svc, block, plan, bench, upper1):
    for n in (1, 2, 3):
        svc.log_set(upper1.id, bench.id, n, actual_weight=135, actual_reps=12)
    svc.complete_workout(upper1.id)

    upper2 = week_workout(db, block.id, 2, plan.days[0].id)
    svc.log_set(upper2.id, bench.id, 1, actual_weight=140, actual_reps=8)
    rows = week_sets(db, block.id, 2, plan.days[0].id, bench.id)
    assert [(s.target_weight, s.target_reps) for s in rows] == [(140, 8)] * 3


def test_get_for_display_leaves_started_workouts_alone(db, svc, block, plan, bench, upper1):
    upper2 = week_workout(db, block.id, 2, plan.days[0].id)
    svc.start(upper2.id)
    for n in (1, 2, 3):
        svc.log_set(upper1.id, bench.id, n, actual_weight=135, actual_reps=12)
    svc.complete_workout(upper1.id)
    shown = svc.get_for_display(upper2.id)
    assert [(s.target_weight, s.target_reps) for s in shown.sets] == [(135, 8)] * 3
