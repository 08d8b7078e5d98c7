"""
Study history metrics computed from the review event log.
"""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo

import pandas as pd

from phrase_trainer.analytics.types import StudyHistory
from phrase_trainer.fsrs.memory_state import ensure_aware


def events_to_frame(events: list[dict], tz: tzinfo = timezone.utc) -> pd.DataFrame:
    """
    Build a DataFrame with one row per event and a learner-local `day` column.
    """
    if not events:
        return pd.DataFrame(columns=["timestamp", "card_id", "day"])

    df = pd.DataFrame({
        "timestamp": [ensure_aware(e["timestamp"]).astimezone(tz) for e in events],
        "card_id": [str(e["card_id"]) for e in events],
    })
    df["day"] = [ts.date() for ts in df["timestamp"]]
    return df


def build_day_index(events_df: pd.DataFrame, today) -> pd.DatetimeIndex:
    """
    Dense day index from the first event day through today.
    """
    if events_df.empty:
        return pd.DatetimeIndex([])
    start = min(events_df["day"])
    return pd.date_range(start=start, end=max(today, start), freq="D")


def compute_streaks(active_days: pd.Series) -> tuple[int, int]:
    """
    Current and longest runs of consecutive active days.

    The current streak may end yesterday: a learner who has not studied yet
    today keeps the streak until the day is over.

    Args:
        active_days: 0/1 series indexed by day, ending today

    Returns:
        (current_streak, longest_streak)
    """
    if active_days.empty:
        return 0, 0

    runs = (active_days != active_days.shift()).cumsum()
    run_lengths = active_days.groupby(runs).cumsum()
    longest = int(run_lengths.max())

    current = int(run_lengths.iloc[-1])
    if current == 0 and len(run_lengths) > 1:
        current = int(run_lengths.iloc[-2])
    return current, longest


def build_study_history(
    events: list[dict],
    now: datetime,
    tz: tzinfo = timezone.utc
) -> StudyHistory:
    """
    Daily review counts, unique cards per day and study streaks.

    Args:
        events: Review events (dicts with `timestamp` and `card_id`)
        now: Current time
        tz: Learner timezone for day boundaries

    Returns:
        StudyHistory
    """
    today = ensure_aware(now).astimezone(tz).date()
    events_df = events_to_frame(events, tz)
    day_index = build_day_index(events_df, today)

    if len(day_index) == 0:
        empty = pd.Series(dtype="int64")
        return StudyHistory(
            reviews_daily=empty,
            cards_daily=empty,
            current_streak=0,
            longest_streak=0,
        )

    by_day = events_df.groupby(pd.to_datetime(events_df["day"]))
    reviews_daily = by_day.size().reindex(day_index, fill_value=0).astype("int64")
    cards_daily = by_day["card_id"].nunique().reindex(day_index, fill_value=0).astype("int64")

    current, longest = compute_streaks((reviews_daily > 0).astype("int64"))

    return StudyHistory(
        reviews_daily=reviews_daily,
        cards_daily=cards_daily,
        current_streak=current,
        longest_streak=longest,
    )
