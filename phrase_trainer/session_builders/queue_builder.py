"""
Study Queue Builder

Creates the ordered card list for one study session from three pools:
1. Due pool: reviewed cards whose next_review has passed
2. Learning pool: reviewed cards not yet due
3. New pool: cards never reviewed (recorded or only in the catalog)

Session Logic:
- Due and learning cards are merged ahead of new cards
- Within each pool: earliest next_review first, card id breaks ties
- New cards are capped by the daily allowance
- Study-again sessions replay today's studied cards and ignore the budget
"""

from __future__ import annotations
from datetime import datetime, timezone, tzinfo
from typing import Iterable, Optional

from phrase_trainer.card_ids import CardId
from phrase_trainer.fsrs.lifecycle import refresh_record
from phrase_trainer.fsrs.memory_state import LearningRecord
from phrase_trainer.session_builders.pool_types import PoolState, SessionBudget
from phrase_trainer.session_builders.pool_utils import (
    fill_in_order,
    latest_records,
    sorted_card_ids,
)


def build_pool_state(
    records: Iterable[LearningRecord],
    now: datetime,
    catalog_card_ids: Optional[Iterable[CardId]] = None,
    tz: tzinfo = timezone.utc
) -> PoolState:
    """
    Classify every record at `now` and partition the unit's cards.

    Args:
        records: All of the learner's records for one content unit
        now: Current time
        catalog_card_ids: Cards the catalog lists for the unit, in catalog
            order. When given, unrecorded cards become new candidates and
            records outside the catalog are set aside as unknown.
        tz: Learner timezone for the day boundary

    Returns:
        PoolState with refreshed records
    """
    by_id = latest_records(records)
    catalog = list(dict.fromkeys(catalog_card_ids)) if catalog_card_ids is not None else None

    pool_state = PoolState(records={})

    if catalog is not None:
        catalog_set = set(catalog)
        pool_state.unknown = sorted(c for c in by_id if c not in catalog_set)
        pool_state.unseen = [c for c in catalog if c not in by_id]

    unknown = set(pool_state.unknown)
    for card_id, record in by_id.items():
        if card_id in unknown:
            continue
        refreshed = refresh_record(record, now, tz)
        pool_state.records[card_id] = refreshed
        pool_state.move_to(card_id, refreshed.lifecycle)

    return pool_state


def create_queue(pool_state: PoolState, budget: SessionBudget) -> list[CardId]:
    """
    Create the ordered, deduplicated queue for a pool state.

    Args:
        pool_state: Session-scoped pools
        budget: Daily admission budget

    Returns:
        List of card ids; empty means nothing to study now
    """
    records = pool_state.records

    if budget.study_again:
        return sorted_card_ids(pool_state.studied_today, records)

    review_ids = sorted_card_ids(pool_state.due | pool_state.learning, records)
    new_ids = sorted_card_ids(pool_state.new, records) + list(pool_state.unseen)

    return fill_in_order(
        {"review": review_ids, "new": new_ids},
        order=["review", "new"],
        limits={"new": min(budget.new_allowance, len(new_ids))},
    )


def build_queue(
    records: Iterable[LearningRecord],
    budget: SessionBudget,
    now: datetime,
    catalog_card_ids: Optional[Iterable[CardId]] = None,
    tz: tzinfo = timezone.utc
) -> list[CardId]:
    """
    Build the study queue for one session.

    Args:
        records: All of the learner's records for one content unit
        budget: Daily admission budget (and study-again flag)
        now: Current time
        catalog_card_ids: Optional catalog listing for the unit
        tz: Learner timezone for the day boundary

    Returns:
        Ordered list of card ids
    """
    pool_state = build_pool_state(records, now, catalog_card_ids, tz)
    return create_queue(pool_state, budget)
