"""
Unit tests for the pure progression rules in lifting.services.progression.
Run: cd backend && python -m pytest tests/test_progression.py -v
"""
import unittest

from lifting.errors import InvalidConfiguration
from lifting.services.progression import (
    ExerciseConfig,
    ProgressionReason,
    RepRange,
    SetPerformance,
    compute_next_targets,
    deload_set_count,
    floor_to_increment,
    select_best_set,
)


def bench_config(**overrides):
    values = dict(
        rep_range=RepRange(min=8, target=10, max=12),
        weight_increment=5.0,
        base_weight=135.0,
        base_reps=8,
        base_sets=3,
    )
    values.update(overrides)
    return ExerciseConfig(**values)


# --- worked scenarios ---
class TestScenarios(unittest.TestCase):
    def test_first_week_returns_baseline(self):
        p = compute_next_targets(bench_config(), None, week_index=0)
        self.assertEqual((p.weight, p.reps, p.sets), (135.0, 8, 3))
        self.assertEqual(p.reason, ProgressionReason.first_week)

    def test_first_week_ignores_prior_best(self):
        """Week index 0 always uses the plan, whatever history says."""
        p = compute_next_targets(bench_config(), SetPerformance(200, 12), week_index=0)
        self.assertEqual((p.weight, p.reps), (135.0, 8))

    def test_hit_max_reps_adds_weight(self):
        p = compute_next_targets(bench_config(), SetPerformance(135, 12), week_index=1)
        self.assertEqual((p.weight, p.reps), (140, 8))
        self.assertEqual(p.reason, ProgressionReason.hit_max_reps)

    def test_hit_target_adds_rep(self):
        p = compute_next_targets(bench_config(), SetPerformance(135, 10), week_index=1)
        self.assertEqual((p.weight, p.reps), (135, 11))
        self.assertEqual(p.reason, ProgressionReason.hit_target)

    def test_first_miss_holds(self):
        p = compute_next_targets(bench_config(), SetPerformance(135, 6), week_index=2, consecutive_misses=1)
        self.assertEqual((p.weight, p.reps), (135, 8))
        self.assertEqual(p.reason, ProgressionReason.hold)

    def test_second_miss_regresses(self):
        p = compute_next_targets(bench_config(), SetPerformance(135, 6), week_index=3, consecutive_misses=2)
        self.assertEqual((p.weight, p.reps), (130, 8))
        self.assertEqual(p.reason, ProgressionReason.regress)

    def test_deload_from_last_working_weight(self):
        p = compute_next_targets(
            bench_config(), SetPerformance(150, 10), week_index=6,
            is_deload=True, last_working_weight=150,
        )
        self.assertEqual(p.weight, 125)
        self.assertTrue(p.is_deload)


# --- properties ---
class TestRules(unittest.TestCase):
    def test_deterministic(self):
        args = (bench_config(), SetPerformance(135, 9))
        first = compute_next_targets(*args, week_index=2)
        second = compute_next_targets(*args, week_index=2)
        self.assertEqual(first, second)

    def test_overshoot_adds_a_single_increment(self):
        p = compute_next_targets(bench_config(), SetPerformance(135, 20), week_index=1)
        self.assertEqual((p.weight, p.reps), (140, 8))

    def test_min_reps_counts_as_hit(self):
        p = compute_next_targets(bench_config(), SetPerformance(135, 8), week_index=1)
        self.assertEqual((p.weight, p.reps), (135, 9))

    def test_hold_then_regress(self):
        cfg = bench_config()
        hold = compute_next_targets(cfg, SetPerformance(135, 7), week_index=1, consecutive_misses=1)
        regress = compute_next_targets(cfg, SetPerformance(135, 7), week_index=2, consecutive_misses=2)
        self.assertEqual(hold.weight, 135)
        self.assertEqual(regress.weight, 130)

    def test_regress_never_goes_negative(self):
        cfg = bench_config(base_weight=0.0)
        p = compute_next_targets(cfg, SetPerformance(2.5, 3), week_index=3, consecutive_misses=2)
        self.assertEqual(p.weight, 0.0)

    def test_deload_overrides_rep_outcome(self):
        """A max-rep week still deloads when the week is flagged."""
        p = compute_next_targets(
            bench_config(), SetPerformance(140, 12), week_index=6,
            is_deload=True, last_working_weight=140,
        )
        self.assertEqual(p.reason, ProgressionReason.deload)
        self.assertEqual((p.weight, p.reps, p.sets), (115, 8, 2))

    def test_no_history_beats_deload(self):
        """A deload week with nothing logged still gets the plan's starting prescription."""
        p = compute_next_targets(bench_config(), None, week_index=6, is_deload=True)
        self.assertEqual(p.reason, ProgressionReason.first_week)
        self.assertEqual((p.weight, p.reps, p.sets), (135.0, 8, 3))

    def test_off_grid_weight_snaps_before_progressing(self):
        p = compute_next_targets(bench_config(), SetPerformance(137, 12), week_index=1)
        self.assertEqual((p.weight, p.reps), (140, 8))
        hold = compute_next_targets(bench_config(), SetPerformance(139, 9), week_index=1)
        self.assertEqual((hold.weight, hold.reps), (135, 10))

    def test_targets_stay_on_the_increment_grid(self):
        cfg = bench_config()
        for logged in (135, 136, 137.5, 139.9, 142.5, 151):
            for reps in (4, 8, 10, 12, 15):
                for misses in (0, 1, 2):
                    p = compute_next_targets(
                        cfg, SetPerformance(logged, reps), week_index=2, consecutive_misses=misses,
                    )
                    steps = (p.weight - cfg.base_weight) / cfg.weight_increment
                    self.assertAlmostEqual(steps, round(steps), places=6, msg=(logged, reps, misses))
                    self.assertLessEqual(p.weight, logged + cfg.weight_increment)

    def test_deload_weight_is_never_above_working(self):
        for working in (95, 100, 137.5, 142.5, 225):
            p = compute_next_targets(
                bench_config(), SetPerformance(working, 10), week_index=5,
                is_deload=True, last_working_weight=working,
            )
            self.assertLessEqual(p.weight, working * 0.85)

    def test_invalid_rep_range_rejected(self):
        with self.assertRaises(InvalidConfiguration):
            compute_next_targets(bench_config(rep_range=RepRange(min=12, target=10, max=8)), None, 0)

    def test_non_positive_increment_rejected(self):
        with self.assertRaises(InvalidConfiguration):
            compute_next_targets(bench_config(weight_increment=0), SetPerformance(135, 10), 1)

    def test_negative_prior_best_rejected(self):
        with self.assertRaises(InvalidConfiguration):
            compute_next_targets(bench_config(), SetPerformance(-5, 10), 1)


# --- helpers ---
class TestFloorToIncrement(unittest.TestCase):
    def test_rounds_down(self):
        self.assertEqual(floor_to_increment(116.875, 5), 115)

    def test_exact_multiple_kept(self):
        self.assertEqual(floor_to_increment(127.5, 2.5), 127.5)

    def test_anchor_offsets_the_grid(self):
        self.assertEqual(floor_to_increment(119, 5, anchor=132.5), 117.5)

    def test_float_noise_does_not_drop_a_step(self):
        self.assertEqual(floor_to_increment(0.3, 0.1), 0.3)


class TestSelectBestSet(unittest.TestCase):
    def test_heaviest_wins(self):
        best = select_best_set([SetPerformance(135, 12), SetPerformance(140, 6)])
        self.assertEqual(best, SetPerformance(140, 6))

    def test_reps_break_ties(self):
        best = select_best_set([SetPerformance(135, 8), SetPerformance(135, 10), SetPerformance(135, 9)])
        self.assertEqual(best.reps, 10)

    def test_empty(self):
        self.assertIsNone(select_best_set([]))


class TestDeloadSetCount(unittest.TestCase):
    def test_halves_rounding_up(self):
        self.assertEqual(deload_set_count(3), 2)
        self.assertEqual(deload_set_count(4), 2)

    def test_at_least_one(self):
        self.assertEqual(deload_set_count(1), 1)


if __name__ == "__main__":
    unittest.main()
