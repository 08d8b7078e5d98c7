"""
Types for session status and study history.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import pandas as pd


class SessionFraming(str, Enum):
    """How the study entry point should be framed to the learner."""
    START = "start"
    CONTINUE = "continue"
    STUDY_AGAIN = "study_again"


@dataclass(frozen=True)
class SessionStatus:
    """
    Tally of a content unit's cards for one learner at one moment.
    """
    new_count: int
    learning_count: int
    due_count: int
    studied_today_count: int
    introduced_today_count: int = 0
    removed_count: int = 0

    @property
    def to_study_count(self) -> int:
        return self.new_count + self.learning_count + self.due_count


@dataclass(frozen=True)
class StudyHistory:
    """
    Daily activity derived from the review event log.
    """
    reviews_daily: pd.Series       # reviews per local day
    cards_daily: pd.Series         # unique cards per local day
    current_streak: int            # consecutive days ending today (or yesterday)
    longest_streak: int
