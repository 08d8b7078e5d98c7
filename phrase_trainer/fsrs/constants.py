"""
FSRS Constants and Parameters

All tunable parameters for the memory model in one place.
Session-level policy (daily budget, delays, timezone) lives in
phrase_trainer.config instead.
"""

from enum import Enum, IntEnum


# ---- Grades ----

class Grade(IntEnum):
    """Learner's self-assessed recall outcome (two-button scale)."""
    AGAIN = 1   # Retrieval failed
    GOOD = 3    # Retrieved


# ---- Lifecycle ----

class Lifecycle(str, Enum):
    """Lifecycle bucket of a learning record. Exactly one applies."""
    NEW = "new"
    LEARNING = "learning"
    DUE = "due"
    REMOVED = "removed"


# ---- Global Constants ----

R_TARGET = 0.90   # Retrievability reached after `stability` days
S_MIN = 0.5       # Minimum stability after any review (days)
INITIAL_DIFFICULTY = 5.0        # Baseline difficulty for unseen cards
INITIAL_STABILITY_GOOD = 1.0    # Stability after the first successful review


# ---- Learning Parameters ----

K = 1.2          # Stability learning rate
K_FAIL = 0.6     # Stability penalty rate on failure
ALPHA = 0.15     # Difficulty penalty factor (higher = slower learning for hard cards)
ETA = 0.8        # Difficulty adaptation rate


# ---- Review Timing ----
# Gain multiplier as a function of elapsed / previous interval.

EARLY_FLOOR = 0.05   # Smallest multiplier for a very early review
LATE_WEIGHT = 0.5    # Log growth of the multiplier past the due date
LATE_CAP = 2.0       # Upper bound on the late multiplier


# ---- Difficulty Update Direction by Grade ----

U_RATING = {
    Grade.AGAIN: +1.0,   # Failure increases difficulty
    Grade.GOOD: -0.20,   # Success slightly decreases difficulty
}
