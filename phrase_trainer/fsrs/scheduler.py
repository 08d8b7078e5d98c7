"""
Scheduler - Card Update Rule

Pure scheduling and state updates (no database calls).

Main workflow:
1. Load the record (caller's responsibility; synthesize a default if absent)
2. Validate grade and review time
3. Recalculate memory state and clamp it
4. Choose the next review time
5. Return the updated record + event data dict

This module handles ONLY the algorithm logic.
Database I/O is handled by the database module.
"""

from __future__ import annotations
from datetime import datetime, timedelta
from typing import Optional, Tuple

from phrase_trainer.config import DEFAULT_POLICY, SchedulerPolicy
from phrase_trainer.errors import CardRemoved, ClockSkew, InvalidGrade, NotStudiedToday
from phrase_trainer.fsrs import memory_updates
from phrase_trainer.fsrs.constants import Grade, Lifecycle
from phrase_trainer.fsrs.memory_state import (
    LearningRecord,
    day_key,
    days_between,
    ensure_aware,
)


def coerce_grade(grade) -> Grade:
    """
    Normalize a grade given as Grade, int (1/3) or name ("again"/"good").

    Raises:
        InvalidGrade: for anything outside {AGAIN, GOOD}
    """
    if isinstance(grade, Grade):
        return grade
    if isinstance(grade, bool):
        raise InvalidGrade(grade)
    if isinstance(grade, int):
        try:
            return Grade(grade)
        except ValueError:
            raise InvalidGrade(grade) from None
    if isinstance(grade, str):
        try:
            return Grade[grade.strip().upper()]
        except KeyError:
            raise InvalidGrade(grade) from None
    raise InvalidGrade(grade)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _check_review_time(record: LearningRecord, now: datetime) -> datetime:
    now = ensure_aware(now)
    if now < ensure_aware(record.last_review):
        raise ClockSkew(record.card_id, now, record.last_review)
    return now


def next_review_time(
    grade: Grade,
    interval_days: float,
    now: datetime,
    policy: SchedulerPolicy = DEFAULT_POLICY
) -> datetime:
    """
    Choose the next review time.

    - AGAIN: short relearning requeue (now + relearning_delay)
    - GOOD with interval below the minimum: now + minimum_interval
    - GOOD otherwise: now + interval
    """
    if grade == Grade.AGAIN:
        return now + policy.relearning_delay
    if interval_days < policy.minimum_interval_days:
        return now + policy.minimum_interval
    return now + timedelta(days=interval_days)


def process_review(
    record: LearningRecord,
    grade,
    now: datetime,
    policy: SchedulerPolicy = DEFAULT_POLICY
) -> Tuple[LearningRecord, dict]:
    """
    Process a graded review and return the updated record + event data.

    This is the core update rule. No database calls.
    Caller is responsible for:
    1. Loading (or synthesizing) the record
    2. Saving the record after review
    3. Persisting the event

    Args:
        record: Prior state (new or existing)
        grade: AGAIN or GOOD (Grade, 1/3, or name)
        now: Review timestamp
        policy: Scheduler policy

    Returns:
        Tuple of (updated_record, event_data_dict)

    Raises:
        InvalidGrade: grade outside {AGAIN, GOOD}
        ClockSkew: now precedes record.last_review
        CardRemoved: record is retired
    """
    grade = coerce_grade(grade)
    if record.is_removed:
        raise CardRemoved(record.card_id)
    now = _check_review_time(record, now)

    elapsed_days = days_between(record.last_review, now)

    update = memory_updates.recalculate(
        difficulty=record.difficulty,
        stability=record.stability,
        reps=record.reps,
        lapses=record.lapses,
        last_interval=record.last_interval,
        elapsed_days=elapsed_days,
        grade=grade,
    )

    # Clamp outputs
    d_min, d_max = policy.difficulty_bounds
    difficulty = _clamp(update.difficulty, d_min, d_max)
    retrievability = _clamp(update.retrievability, 0.0, 1.0)
    stability = max(0.0, update.stability)
    interval = max(0.0, update.interval)
    reps = max(0, update.reps)
    lapses = max(0, update.lapses)

    today = day_key(now, policy.tzinfo)

    updated = record.evolve(
        difficulty=difficulty,
        stability=stability,
        retrievability=retrievability,
        reps=reps,
        lapses=lapses,
        last_interval=interval,
        last_review=now,
        next_review=next_review_time(grade, interval, now, policy),
        # Never DUE straight after a review; the classifier promotes it later
        lifecycle=Lifecycle.LEARNING,
        studied_today=True,
        same_day_reviews=0,
        study_day=today,
        introduced_day=record.introduced_day or today,
    )

    event_data = _build_event(record, updated, grade, now, study_again=False)
    event_data["graduated"] = reps > policy.graduation_reps
    return updated, event_data


def apply_study_again(
    record: LearningRecord,
    now: datetime,
    policy: SchedulerPolicy = DEFAULT_POLICY,
    grade: Optional[Grade] = None
) -> Tuple[LearningRecord, dict]:
    """
    Record a bonus exposure without touching the memory model.

    Only last_review, studied_today, study_day and same_day_reviews change.
    difficulty, stability, reps, lapses, last_interval and next_review are
    left exactly as they were.

    Args:
        record: Prior state
        now: Exposure timestamp
        policy: Scheduler policy (for the day boundary)
        grade: Optional grade, validated and logged but not applied

    Returns:
        Tuple of (updated_record, event_data_dict)

    Raises:
        NotStudiedToday: the card has no graded review on the current local day
    """
    if grade is not None:
        grade = coerce_grade(grade)
    if record.is_removed:
        raise CardRemoved(record.card_id)
    now = _check_review_time(record, now)

    today = day_key(now, policy.tzinfo)
    if not record.studied_today or record.study_day != today:
        raise NotStudiedToday(record.card_id)

    updated = record.evolve(
        last_review=now,
        studied_today=True,
        study_day=today,
        same_day_reviews=record.same_day_reviews + 1,
    )
    event_data = _build_event(record, updated, grade, now, study_again=True)
    event_data["graduated"] = False
    return updated, event_data


def _build_event(
    before: LearningRecord,
    after: LearningRecord,
    grade: Optional[Grade],
    now: datetime,
    study_again: bool
) -> dict:
    """Event data dict, ready to pass to database.log_review_event()."""
    return {
        'card_id': after.card_id,
        'timestamp': now,
        'grade': int(grade) if grade is not None else None,
        'study_again': study_again,
        'stability_before': before.stability,
        'difficulty_before': before.difficulty,
        'retrievability_before': after.retrievability if not study_again else before.retrievability,
        'stability_after': after.stability,
        'difficulty_after': after.difficulty,
        'reps_after': after.reps,
        'lapses_after': after.lapses,
        'next_review': after.next_review,
    }
