"""
Memory Updates

Implements the stability, difficulty and interval recalculation applied on
every graded review.

Key principles:
- Failure resets progress and shrinks stability, more so when recall was expected
- Success grows stability, scaled down for difficult cards
- Reviewing early dampens the gain; reviewing late inflates it, sub-linearly
- Difficulty moves most when the outcome was surprising given R
"""

from __future__ import annotations
from dataclasses import dataclass
import math

from phrase_trainer.fsrs.constants import (
    Grade,
    S_MIN,
    INITIAL_STABILITY_GOOD,
    K,
    K_FAIL,
    ALPHA,
    ETA,
    EARLY_FLOOR,
    LATE_WEIGHT,
    LATE_CAP,
    U_RATING,
)
from phrase_trainer.fsrs.memory_state import calculate_retrievability


@dataclass(frozen=True)
class MemoryUpdate:
    """Candidate memory state produced by one recalculation (unclamped)."""
    difficulty: float
    stability: float
    reps: int
    lapses: int
    interval: float
    retrievability: float


def timing_factor(elapsed_days: float, last_interval: float) -> float:
    """
    Multiplier on the stability gain for how early or late the review was.

    - ratio < 1 (early): linear damping, floored at EARLY_FLOOR
    - ratio = 1 (on time): 1.0
    - ratio > 1 (late): 1 + LATE_WEIGHT * ln(ratio), capped at LATE_CAP

    Cards without a previous interval (first success after a lapse) count
    as reviewed on time.
    """
    if last_interval <= 0:
        return 1.0

    ratio = max(0.0, elapsed_days) / last_interval
    if ratio < 1.0:
        return max(EARLY_FLOOR, ratio)
    return min(LATE_CAP, 1.0 + LATE_WEIGHT * math.log(ratio))


def update_stability_on_success(
    stability: float,
    difficulty: float,
    elapsed_days: float,
    last_interval: float
) -> float:
    """
    Update stability after a GOOD review.

    Formula:
        S_new = S * (1 + k * f(D) * timing)
        f(D) = 1 / (1 + alpha * (D - 1))

    Special case for unseen cards (S = 0):
        S_new = INITIAL_STABILITY_GOOD

    Args:
        stability: Current stability (S)
        difficulty: Current difficulty (D)
        elapsed_days: Days since the previous review
        last_interval: Interval chosen at the previous review (days)

    Returns:
        New stability value (strictly greater than S when S > 0)
    """
    if stability <= 0:
        return max(S_MIN, INITIAL_STABILITY_GOOD)

    # Difficulty penalty: higher difficulty -> smaller f(D) -> slower learning
    f_d = 1.0 / (1.0 + ALPHA * (difficulty - 1.0))

    gain = K * f_d * timing_factor(elapsed_days, last_interval)
    return max(S_MIN, stability * (1.0 + gain))


def update_stability_on_failure(
    stability: float,
    retrievability: float
) -> float:
    """
    Update stability after an AGAIN review.

    Formula:
        S_new = max(S_min, S * (1 - k_fail * R))

    Failures are penalized more strongly when recall was expected (high R).
    """
    return max(S_MIN, stability * (1.0 - K_FAIL * retrievability))


def update_difficulty(
    difficulty: float,
    retrievability: float,
    grade: Grade
) -> float:
    """
    Update difficulty based on retrieval outcome (unclamped).

    Formula:
        D_new = D + eta * surprise * u(grade)

    Where surprise = R on failure, (1 - R) on success.
    """
    if grade == Grade.AGAIN:
        surprise = retrievability
    else:
        surprise = 1.0 - retrievability

    return difficulty + ETA * surprise * U_RATING[grade]


def recalculate(
    difficulty: float,
    stability: float,
    reps: int,
    lapses: int,
    last_interval: float,
    elapsed_days: float,
    grade: Grade
) -> MemoryUpdate:
    """
    Apply the memory recalculation for one graded review.

    This is the main entry point for memory updates. Callers clamp the result.

    Args:
        difficulty: Current difficulty
        stability: Current stability (days)
        reps: Successful reviews so far
        lapses: Failed reviews so far
        last_interval: Interval chosen at the previous review (days)
        elapsed_days: Days since the previous review (>= 0)
        grade: AGAIN or GOOD

    Returns:
        MemoryUpdate with the candidate state
    """
    retrievability = calculate_retrievability(stability, elapsed_days)

    if grade == Grade.AGAIN:
        return MemoryUpdate(
            difficulty=update_difficulty(difficulty, retrievability, grade),
            stability=update_stability_on_failure(stability, retrievability),
            reps=0,
            lapses=lapses + 1,
            interval=0.0,
            retrievability=retrievability,
        )

    new_stability = update_stability_on_success(
        stability, difficulty, elapsed_days, last_interval
    )
    return MemoryUpdate(
        difficulty=update_difficulty(difficulty, retrievability, grade),
        stability=new_stability,
        reps=reps + 1,
        lapses=lapses,
        # S is the number of days until R decays to R_TARGET
        interval=new_stability,
        retrievability=retrievability,
    )
