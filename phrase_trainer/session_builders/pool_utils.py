"""
Pool utilities for session builders.

These helpers provide shared, minimal primitives for building and reasoning
about session pools.
"""

from __future__ import annotations
from typing import Iterable, TypeVar

from phrase_trainer.card_ids import CardId
from phrase_trainer.fsrs.memory_state import LearningRecord, ensure_aware


T = TypeVar("T")


def fill_in_order(
    pools: dict[str, list[T]],
    order: list[str],
    limits: dict[str, int]
) -> list[T]:
    """
    Build a session by walking pools in order, taking at most limits[name]
    items from each pool (no limit when a pool has no entry in limits).
    Items already taken are skipped.
    """
    session: list[T] = []
    seen: set = set()
    for name in order:
        taken = 0
        limit = limits.get(name)
        for item in pools.get(name, []):
            if limit is not None and taken >= limit:
                break
            if item in seen:
                continue
            seen.add(item)
            session.append(item)
            taken += 1
    return session


def queue_order_key(record: LearningRecord) -> tuple:
    """Earliest next_review first; card id breaks ties."""
    return (ensure_aware(record.next_review), record.card_id)


def sorted_card_ids(
    card_ids: Iterable[CardId],
    records: dict[CardId, LearningRecord]
) -> list[CardId]:
    """
    Sort card ids by their record's queue order key.
    """
    return [
        record.card_id
        for record in sorted((records[c] for c in card_ids), key=queue_order_key)
    ]


def latest_records(records: Iterable[LearningRecord]) -> dict[CardId, LearningRecord]:
    """
    Index records by card id, keeping the highest version of duplicates.
    """
    by_id: dict[CardId, LearningRecord] = {}
    for record in records:
        current = by_id.get(record.card_id)
        if current is None or record.version > current.version:
            by_id[record.card_id] = record
    return by_id
