from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pandas as pd

from phrase_trainer.analytics.history import build_study_history, compute_streaks
from tests.factories import card


def _event(ts, phrase_id=1):
    return {"timestamp": ts, "card_id": card(phrase_id)}


def test_empty_history():
    history = build_study_history([], datetime(2024, 3, 10, tzinfo=timezone.utc))

    assert history.current_streak == 0
    assert history.longest_streak == 0
    assert history.reviews_daily.empty


def test_daily_counts_and_gaps(t0):
    events = [
        _event(t0 - timedelta(days=2), 1),
        _event(t0 - timedelta(days=2, minutes=-5), 1),
        _event(t0 - timedelta(days=2, minutes=-9), 2),
        _event(t0, 3),
    ]

    history = build_study_history(events, t0)

    assert list(history.reviews_daily) == [3, 0, 1]
    assert list(history.cards_daily) == [2, 0, 1]
    assert history.current_streak == 1
    assert history.longest_streak == 1


def test_streak_survives_until_today_ends(t0):
    events = [_event(t0 - timedelta(days=d)) for d in (1, 2, 3)]

    history = build_study_history(events, t0)

    assert history.current_streak == 3
    assert history.longest_streak == 3


def test_days_follow_learner_timezone():
    # 23:30 UTC is already the next day in Amsterdam
    late = datetime(2024, 1, 1, 23, 30, tzinfo=timezone.utc)
    events = [_event(late - timedelta(hours=2)), _event(late)]

    history = build_study_history(events, late, ZoneInfo("Europe/Amsterdam"))

    assert list(history.reviews_daily) == [1, 1]
    assert history.reviews_daily.index[-1] == pd.Timestamp("2024-01-02")


def test_compute_streaks_picks_longest_run():
    active = pd.Series([1, 1, 1, 0, 1, 1])

    assert compute_streaks(active) == (2, 3)
