from datetime import timedelta, timezone

from phrase_trainer.fsrs.constants import Lifecycle
from phrase_trainer.fsrs.memory_state import day_key, initialize_new_record
from phrase_trainer.session_builders import SessionBudget, build_pool_state, build_queue
from phrase_trainer.session_builders.pool_utils import fill_in_order, latest_records
from tests.factories import card, make_record


def _studied(phrase_id, t0, **overrides):
    today = day_key(t0, timezone.utc)
    return make_record(
        phrase_id, t0,
        studied_today=True, study_day=today, introduced_day=today,
        **overrides,
    )


def test_exhausted_budget_admits_no_new_cards(t0):
    due = [make_record(i, t0 - timedelta(days=2), next_review=t0 - timedelta(hours=i)) for i in (1, 2)]
    learning = [make_record(3, t0, next_review=t0 + timedelta(days=1))]
    new = [initialize_new_record(card(i), t0) for i in (4, 5, 6, 7, 8)]
    budget = SessionBudget(max_new_per_day=20, new_introduced_today=20)

    queue = build_queue(due + learning + new, budget, t0)

    assert set(queue) == {card(1), card(2), card(3)}


def test_study_again_returns_todays_cards_in_next_review_order(t0):
    records = [
        _studied(1, t0, next_review=t0 + timedelta(days=3)),
        _studied(2, t0, next_review=t0 + timedelta(days=1)),
        _studied(3, t0, next_review=t0 + timedelta(minutes=5)),
        make_record(4, t0 - timedelta(days=1), next_review=t0 - timedelta(hours=1)),
        initialize_new_record(card(5), t0),
    ]
    budget = SessionBudget(max_new_per_day=20, new_introduced_today=20, study_again=True)

    queue = build_queue(records, budget, t0 + timedelta(minutes=1))

    assert queue == [card(3), card(2), card(1)]


def test_review_cards_precede_new_cards(t0):
    records = [
        initialize_new_record(card(1), t0 - timedelta(days=1)),
        make_record(2, t0 - timedelta(days=3), next_review=t0 - timedelta(days=1)),
        make_record(3, t0 - timedelta(days=3), next_review=t0 + timedelta(hours=2)),
        make_record(4, t0 - timedelta(days=3), next_review=t0 - timedelta(days=2)),
    ]

    queue = build_queue(records, SessionBudget(), t0)

    assert queue == [card(4), card(2), card(3), card(1)]


def test_ties_are_broken_by_card_id(t0):
    when = t0 - timedelta(hours=1)
    records = [make_record(i, t0 - timedelta(days=1), next_review=when) for i in (3, 1, 2)]

    assert build_queue(records, SessionBudget(), t0) == [card(1), card(2), card(3)]


def test_new_cards_limited_by_remaining_allowance(t0):
    catalog = [card(i) for i in range(10, 40)]

    queue = build_queue([], SessionBudget(max_new_per_day=20, new_introduced_today=5), t0, catalog)

    assert queue == catalog[:15]


def test_overspent_budget_is_not_negative(t0):
    budget = SessionBudget(max_new_per_day=20, new_introduced_today=25)

    assert budget.new_allowance == 0
    assert build_queue([], budget, t0, [card(1), card(2)]) == []


def test_removed_cards_never_queued(t0):
    records = [
        make_record(1, t0 - timedelta(days=1), lifecycle=Lifecycle.REMOVED, next_review=t0 - timedelta(days=1)),
        _studied(2, t0, lifecycle=Lifecycle.REMOVED),
    ]

    assert build_queue(records, SessionBudget(), t0) == []
    assert build_queue(records, SessionBudget(study_again=True), t0) == []


def test_catalog_partitions_unseen_and_unknown(t0):
    stray = card(99, unit_id="other-unit")
    records = [make_record(1, t0 - timedelta(days=1), next_review=t0), make_record(99, t0).evolve(card_id=stray)]
    catalog = [card(1), card(2), card(3)]

    pool_state = build_pool_state(records, t0, catalog)

    assert pool_state.unseen == [card(2), card(3)]
    assert pool_state.unknown == [stray]
    assert pool_state.due == {card(1)}
    assert stray not in pool_state.records
    assert build_queue(records, SessionBudget(), t0, catalog) == [card(1), card(2), card(3)]


def test_recorded_new_cards_come_before_unseen_ones(t0):
    records = [initialize_new_record(card(5), t0)]
    catalog = [card(i) for i in range(1, 6)]

    queue = build_queue(records, SessionBudget(max_new_per_day=3), t0, catalog)

    assert queue == [card(5), card(1), card(2)]


def test_queue_has_no_duplicates(t0):
    older = make_record(1, t0 - timedelta(days=1), next_review=t0 - timedelta(hours=1), version=1)
    newer = older.evolve(version=2, next_review=t0 + timedelta(days=2))

    assert latest_records([older, newer])[card(1)] is newer
    assert build_queue([older, newer], SessionBudget(), t0, [card(1)]) == [card(1)]


def test_fill_in_order_respects_limits_and_dedup():
    pools = {"review": ["a", "b"], "new": ["b", "c", "d", "e"]}

    assert fill_in_order(pools, ["review", "new"], {"new": 2}) == ["a", "b", "c", "d"]
