"""
Lifecycle classification.

classify() is the single source of truth for a record's bucket. The
lifecycle stored on a record is a cached projection; refresh_record()
recomputes it (and the daily counters) for a given moment.
"""

from __future__ import annotations
from datetime import datetime, tzinfo

from phrase_trainer.fsrs.constants import Lifecycle
from phrase_trainer.fsrs.memory_state import LearningRecord, day_key, ensure_aware


def classify(record: LearningRecord, now: datetime) -> Lifecycle:
    """
    Derive the lifecycle bucket of a record at time `now`.

    Rules, in order:
    1. REMOVED if the learner retired the card (sticky until reinstated)
    2. NEW if never reviewed (reps = 0 and lapses = 0)
    3. DUE if now >= next_review
    4. LEARNING otherwise
    """
    if record.lifecycle is Lifecycle.REMOVED:
        return Lifecycle.REMOVED
    if record.reps == 0 and record.lapses == 0:
        return Lifecycle.NEW
    if ensure_aware(now) >= ensure_aware(record.next_review):
        return Lifecycle.DUE
    return Lifecycle.LEARNING


def refresh_record(record: LearningRecord, now: datetime, tz: tzinfo) -> LearningRecord:
    """
    Re-project lifecycle and daily counters onto a record for time `now`.

    When the record was last studied on an earlier local day,
    studied_today and same_day_reviews are reset.

    Args:
        record: Record as loaded from the store
        now: Current time
        tz: Learner timezone for the day boundary

    Returns:
        The same record if nothing changed, otherwise an updated copy
    """
    changes = {}

    lifecycle = classify(record, now)
    if lifecycle is not record.lifecycle:
        changes["lifecycle"] = lifecycle

    if record.study_day != day_key(now, tz):
        if record.studied_today:
            changes["studied_today"] = False
        if record.same_day_reviews:
            changes["same_day_reviews"] = 0

    if not changes:
        return record
    return record.evolve(**changes)
