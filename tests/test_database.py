from datetime import timedelta

import pytest
from sqlalchemy import inspect

from phrase_trainer.errors import RecordConflict
from phrase_trainer.fsrs.constants import Grade
from phrase_trainer.fsrs.database import init_db, reset_db
from phrase_trainer.fsrs.memory_state import initialize_new_record
from phrase_trainer.fsrs.scheduler import process_review
from tests.factories import UNIT, card, make_record


def test_init_db_creates_tables(engine):
    tables = set(inspect(engine).get_table_names())

    assert {"learning_records", "review_events"} <= tables
    init_db(engine)  # second call is a no-op


def test_put_inserts_then_round_trips(store, t0):
    record = make_record(1, t0, next_review=t0 + timedelta(days=2), study_day="2024-03-10")

    saved = store.put("alice", record)
    loaded = store.get_record("alice", card(1))

    assert saved.version == 1
    assert loaded == saved
    assert loaded.last_review.utcoffset() == timedelta(0)
    assert store.get_record("bob", card(1)) is None


def test_put_updates_with_matching_version(store, t0):
    saved = store.put("alice", initialize_new_record(card(1), t0))

    reviewed, _ = process_review(saved, Grade.GOOD, t0 + timedelta(minutes=1))
    updated = store.put("alice", reviewed)

    assert updated.version == 2
    assert store.get_record("alice", card(1)).reps == 1


def test_stale_version_raises_conflict(store, t0):
    saved = store.put("alice", initialize_new_record(card(1), t0))
    store.put("alice", saved.evolve(reps=1))

    with pytest.raises(RecordConflict) as exc_info:
        store.put("alice", saved.evolve(lapses=1))

    assert exc_info.value.expected_version == 1
    assert store.get_record("alice", card(1)).reps == 1


def test_duplicate_insert_raises_conflict(store, t0):
    store.put("alice", initialize_new_record(card(1), t0))

    with pytest.raises(RecordConflict):
        store.put("alice", initialize_new_record(card(1), t0))


def test_get_returns_unit_records_in_next_review_order(store, t0):
    store.put("alice", make_record(2, t0, next_review=t0 + timedelta(days=3)))
    store.put("alice", make_record(1, t0, next_review=t0 + timedelta(days=1)))
    store.put("alice", make_record(7, t0).evolve(card_id=card(7, unit_id="other")))
    store.put("bob", make_record(3, t0))

    records = store.get("alice", UNIT)

    assert [r.card_id for r in records] == [card(1), card(2)]


def test_review_events_newest_first(store, t0):
    record = initialize_new_record(card(1), t0)
    first, event_1 = process_review(record, Grade.AGAIN, t0)
    _, event_2 = process_review(first, Grade.GOOD, t0 + timedelta(minutes=6))

    store.log_review_event("alice", event_1, session_id="s1")
    store.log_review_event("alice", event_2, session_id="s1")

    events = store.get_recent_events("alice", limit=10)

    assert [e["grade"] for e in events] == [3, 1]
    assert events[0]["card_id"] == card(1)
    assert events[0]["timestamp"] == t0 + timedelta(minutes=6)
    assert events[1]["session_id"] == "s1"
    assert store.get_recent_events("bob") == []


def test_reset_db_clears_records(engine, store, t0):
    store.put("alice", make_record(1, t0))

    reset_db(engine)

    assert store.get("alice", UNIT) == []
