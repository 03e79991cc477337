# lifting/services/progression.py
"""
Pure progressive-overload rules for one exercise.

Given the rep range configured on a plan day exercise and the best set the
lifter performed last time, decide next week's weight, reps and set count.
No I/O happens here; callers look up history and pass it in.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from lifting.errors import InvalidConfiguration

DELOAD_WEIGHT_FACTOR = 0.85
DELOAD_VOLUME_FACTOR = 0.5
REGRESS_AFTER_MISSES = 2

# float noise guard for floor division (e.g. 127.49999999 / 2.5)
_EPS = 1e-9


class ProgressionReason(str, Enum):
    first_week = "first_week"
    deload = "deload"
    hit_max_reps = "hit_max_reps"
    hit_target = "hit_target"
    hold = "hold"
    regress = "regress"


@dataclass(frozen=True, slots=True)
class RepRange:
    min: int
    target: int
    max: int

    def validate(self) -> None:
        if self.min < 0:
            raise InvalidConfiguration(f"min reps must be non-negative, got {self.min}")
        if self.min > self.max:
            raise InvalidConfiguration(f"min reps {self.min} exceeds max reps {self.max}")
        if not self.min <= self.target <= self.max:
            raise InvalidConfiguration(
                f"target reps {self.target} outside range {self.min}-{self.max}"
            )


@dataclass(frozen=True, slots=True)
class SetPerformance:
    weight: float
    reps: int


@dataclass(frozen=True, slots=True)
class Prescription:
    weight: float
    reps: int
    sets: int
    reason: ProgressionReason
    rationale: str

    @property
    def is_deload(self) -> bool:
        return self.reason is ProgressionReason.deload


@dataclass(frozen=True, slots=True)
class ExerciseConfig:
    """Everything the rules need to know about one plan day exercise."""
    rep_range: RepRange
    weight_increment: float
    base_weight: float
    base_reps: int
    base_sets: int

    def validate(self) -> None:
        self.rep_range.validate()
        if self.weight_increment <= 0:
            raise InvalidConfiguration(
                f"weight increment must be positive, got {self.weight_increment}"
            )
        if self.base_weight < 0:
            raise InvalidConfiguration(f"starting weight must be non-negative, got {self.base_weight}")
        if self.base_reps < 0:
            raise InvalidConfiguration(f"starting reps must be non-negative, got {self.base_reps}")
        if self.base_sets < 1:
            raise InvalidConfiguration(f"starting set count must be at least 1, got {self.base_sets}")


def floor_to_increment(value: float, increment: float, anchor: float = 0.0) -> float:
    """
    Largest weight <= value reachable from anchor in whole increments.
    Never rounds up.
    """
    steps = math.floor((value - anchor) / increment + _EPS)
    return round(anchor + steps * increment, 4)


def select_best_set(sets: Iterable[SetPerformance]) -> Optional[SetPerformance]:
    """Heaviest set wins; ties go to the set with more reps."""
    best: Optional[SetPerformance] = None
    for s in sets:
        if best is None or (s.weight, s.reps) > (best.weight, best.reps):
            best = s
    return best


def deload_set_count(base_sets: int, volume_factor: float = DELOAD_VOLUME_FACTOR) -> int:
    return max(1, math.ceil(base_sets * volume_factor))


def compute_next_targets(
    config: ExerciseConfig,
    prior_best: Optional[SetPerformance],
    week_index: int,
    *,
    is_deload: bool = False,
    consecutive_misses: int = 0,
    last_working_weight: Optional[float] = None,
    deload_weight_factor: float = DELOAD_WEIGHT_FACTOR,
    deload_volume_factor: float = DELOAD_VOLUME_FACTOR,
    regress_after_misses: int = REGRESS_AFTER_MISSES,
) -> Prescription:
    """
    Next prescription for one exercise.

    week_index is zero-based within the mesocycle. consecutive_misses counts
    the weeks in a row (ending with prior_best) that fell short of the rep
    range minimum at prior_best's weight.
    """
    config.validate()
    if prior_best is not None and (prior_best.weight < 0 or prior_best.reps < 0):
        raise InvalidConfiguration("logged weight and reps must be non-negative")

    rng = config.rep_range
    inc = config.weight_increment

    if week_index == 0 or prior_best is None:
        return Prescription(
            weight=config.base_weight,
            reps=config.base_reps,
            sets=config.base_sets,
            reason=ProgressionReason.first_week,
            rationale="No prior performance; using the plan's starting prescription.",
        )

    if is_deload:
        working = last_working_weight if last_working_weight is not None else prior_best.weight
        weight = max(0.0, floor_to_increment(working * deload_weight_factor, inc, config.base_weight))
        return Prescription(
            weight=weight,
            reps=rng.min,
            sets=deload_set_count(config.base_sets, deload_volume_factor),
            reason=ProgressionReason.deload,
            rationale=(
                f"Deload week: {deload_weight_factor:.0%} of working weight {working:g} "
                f"floored to {weight:g}, reduced volume."
            ),
        )

    # logged loads may be off the plan's grid; targets never are
    weight = floor_to_increment(prior_best.weight, inc, config.base_weight)
    reps = prior_best.reps

    if reps >= rng.max:
        return Prescription(
            weight=round(weight + inc, 4),
            reps=rng.min,
            sets=config.base_sets,
            reason=ProgressionReason.hit_max_reps,
            rationale=f"Hit {reps} reps (max {rng.max}) at {weight:g}; adding {inc:g} and resetting to {rng.min} reps.",
        )

    if rng.min <= reps < rng.max:
        return Prescription(
            weight=weight,
            reps=reps + 1,
            sets=config.base_sets,
            reason=ProgressionReason.hit_target,
            rationale=f"Hit {reps} reps at {weight:g}; adding a rep.",
        )

    # below the range minimum: a miss
    if consecutive_misses >= regress_after_misses:
        regressed = max(0.0, floor_to_increment(weight - inc, inc, config.base_weight))
        return Prescription(
            weight=regressed,
            reps=rng.min,
            sets=config.base_sets,
            reason=ProgressionReason.regress,
            rationale=(
                f"Missed {rng.min} reps at {weight:g} for {consecutive_misses} weeks running; "
                f"dropping to {regressed:g}."
            ),
        )
    return Prescription(
        weight=weight,
        reps=rng.min,
        sets=config.base_sets,
        reason=ProgressionReason.hold,
        rationale=f"Missed {rng.min} reps at {weight:g} ({reps} reps); holding for another attempt.",
    )
