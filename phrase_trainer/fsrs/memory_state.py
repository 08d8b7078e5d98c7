"""
Memory State - Learning Record and Retrievability

Defines the per-(learner, card) memory state and derived quantities.

Key concepts:
- Stability (S): Days until recall probability decays to R_TARGET
- Difficulty (D): How hard the card is to learn (1-10 scale)
- Retrievability (R): Probability of successful recall at time t
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from datetime import date, datetime, timezone, tzinfo
from typing import Optional
import math

from phrase_trainer.card_ids import CardId
from phrase_trainer.fsrs.constants import INITIAL_DIFFICULTY, Lifecycle, R_TARGET


@dataclass(frozen=True)
class LearningRecord:
    """
    Memory state for one learner/card pair.

    Lifecycle is a single tagged value; the is_* properties are projections
    kept for callers that think in flags.
    """
    card_id: CardId

    # Memory model
    difficulty: float
    stability: float
    retrievability: float
    reps: int
    lapses: int
    last_interval: float  # days

    # Timing
    last_review: datetime
    next_review: datetime

    lifecycle: Lifecycle = Lifecycle.NEW

    # Daily bookkeeping (day keys are YYYY-MM-DD in the learner's timezone)
    studied_today: bool = False
    same_day_reviews: int = 0
    study_day: Optional[str] = None
    introduced_day: Optional[str] = None

    # Optimistic concurrency token, owned by the record store
    version: int = 0

    @property
    def is_new(self) -> bool:
        return self.lifecycle is Lifecycle.NEW

    @property
    def is_learning(self) -> bool:
        return self.lifecycle is Lifecycle.LEARNING

    @property
    def is_due(self) -> bool:
        return self.lifecycle is Lifecycle.DUE

    @property
    def is_removed(self) -> bool:
        return self.lifecycle is Lifecycle.REMOVED

    @property
    def unit_id(self) -> str:
        return self.card_id.unit_id

    def evolve(self, **changes) -> "LearningRecord":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)


# ---- Time helpers ----

def ensure_aware(ts: datetime) -> datetime:
    """Treat naive timestamps as UTC."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def days_between(start: datetime, end: datetime) -> float:
    """Signed number of days from start to end."""
    delta = ensure_aware(end) - ensure_aware(start)
    return delta.total_seconds() / 86400.0


def day_key(ts: datetime, tz: tzinfo) -> str:
    """
    Local day key (YYYY-MM-DD) of a timestamp in the learner's timezone.

    Daily counters compare day keys rather than "today" so the core never
    reads the wall clock.
    """
    local: date = ensure_aware(ts).astimezone(tz).date()
    return local.isoformat()


# ---- Derived quantities ----

def calculate_retrievability(
    stability: float,
    days_since_review: float
) -> float:
    """
    Calculate retrievability on the forgetting curve.

    Formula: R = R_TARGET ^ (Δt / S)

    Where:
    - Δt = time since last review (in days)
    - S = stability (in days)

    Interpretation:
    - Immediately after review: R = 1.0
    - After exactly S days: R = R_TARGET
    - Unseen cards (S = 0) are treated as fully retrievable

    Args:
        stability: Current stability in days
        days_since_review: Time since last review in days

    Returns:
        Retrievability between 0 and 1
    """
    if days_since_review <= 0 or stability <= 0:
        return 1.0

    return math.exp(math.log(R_TARGET) * days_since_review / stability)


def initialize_new_record(
    card_id: CardId,
    now: datetime,
    initial_difficulty: float = INITIAL_DIFFICULTY
) -> LearningRecord:
    """
    Synthesize the default record for a card the learner has never seen.

    Args:
        card_id: Card identifier
        now: Time of first exposure
        initial_difficulty: Starting difficulty (middle of the 1-10 scale)

    Returns:
        New LearningRecord in the NEW lifecycle
    """
    now = ensure_aware(now)
    return LearningRecord(
        card_id=card_id,
        difficulty=initial_difficulty,
        stability=0.0,
        retrievability=1.0,
        reps=0,
        lapses=0,
        last_interval=0.0,
        last_review=now,
        next_review=now,
        lifecycle=Lifecycle.NEW,
    )
