"""
Session status aggregation.

Pure tallies over classified records, used for display and for deciding how
a study session is framed.
"""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from typing import Iterable, Optional

from phrase_trainer.analytics.types import SessionFraming, SessionStatus
from phrase_trainer.card_ids import CardId
from phrase_trainer.config import DEFAULT_POLICY, SchedulerPolicy
from phrase_trainer.fsrs.memory_state import LearningRecord, day_key
from phrase_trainer.session_builders.pool_types import PoolState, SessionBudget
from phrase_trainer.session_builders.queue_builder import build_pool_state


def status_from_pool(pool_state: PoolState, today: str) -> SessionStatus:
    """
    Count a pool state's buckets.

    Args:
        pool_state: Refreshed pools
        today: Learner's current day key
    """
    active = [
        record for card_id, record in pool_state.records.items()
        if card_id not in pool_state.removed
    ]
    return SessionStatus(
        new_count=pool_state.new_count,
        learning_count=len(pool_state.learning),
        due_count=len(pool_state.due),
        studied_today_count=sum(1 for r in active if r.studied_today),
        # Removing a card does not refund today's new-card budget
        introduced_today_count=sum(
            1 for r in pool_state.records.values() if r.introduced_day == today
        ),
        removed_count=len(pool_state.removed),
    )


def aggregate(
    records: Iterable[LearningRecord],
    now: datetime,
    catalog_card_ids: Optional[Iterable[CardId]] = None,
    tz: tzinfo = timezone.utc
) -> SessionStatus:
    """
    Compute new / learning / due / studied-today counts.

    Args:
        records: All of the learner's records for one content unit
        now: Current time
        catalog_card_ids: Optional catalog listing; unrecorded cards count as new
        tz: Learner timezone for the day boundary

    Returns:
        SessionStatus
    """
    pool_state = build_pool_state(records, now, catalog_card_ids, tz)
    return status_from_pool(pool_state, day_key(now, tz))


def budget_from_status(
    status: SessionStatus,
    policy: SchedulerPolicy = DEFAULT_POLICY,
    study_again: bool = False
) -> SessionBudget:
    """Derive the day's admission budget from a status tally."""
    return SessionBudget(
        max_new_per_day=policy.max_new_per_day,
        new_introduced_today=status.introduced_today_count,
        study_again=study_again,
    )


def session_framing(
    status: SessionStatus,
    policy: SchedulerPolicy = DEFAULT_POLICY
) -> SessionFraming:
    """
    Decide whether the entry point reads "start", "continue" or "study again".

    - STUDY_AGAIN: the daily cap was reached, or nothing is left to study
      after studying today
    - CONTINUE: something was studied today
    - START: nothing studied today yet
    """
    studied = status.studied_today_count
    if studied >= policy.max_new_per_day and studied > 0:
        return SessionFraming.STUDY_AGAIN

    remaining_new = min(
        status.new_count,
        max(0, policy.max_new_per_day - status.introduced_today_count),
    )
    nothing_left = status.due_count + status.learning_count + remaining_new == 0
    if studied > 0 and nothing_left:
        return SessionFraming.STUDY_AGAIN
    if studied > 0:
        return SessionFraming.CONTINUE
    return SessionFraming.START
