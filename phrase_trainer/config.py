"""
Scheduler policy configuration.

Policy constants live here as module defaults. Each one can be overridden
through the environment (a local .env file is loaded on import).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

# Load environment
load_dotenv()


# ---- Policy Defaults ----

MAX_NEW_PER_DAY = 20             # New cards a learner may start per local day
RELEARNING_DELAY_MINUTES = 5     # Requeue delay after an AGAIN grade
MINIMUM_INTERVAL_DAYS = 1.0      # Floor for the next review after a GOOD grade
DIFFICULTY_BOUNDS = (1.0, 10.0)  # Clamp range for difficulty
GRADUATION_REPS = 2              # Reviews after which a card counts as graduated
CONFLICT_RETRIES = 1             # Re-fetch/retry attempts for a conflicting write
DEFAULT_TIMEZONE = "UTC"         # Timezone used to derive the learner's day key


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return int(value)


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return float(value)


@dataclass(frozen=True)
class SchedulerPolicy:
    """
    Tunable policy for one scheduler instance.

    Attributes:
        max_new_per_day: Daily admission budget for new cards
        relearning_delay: Delay before a failed card is shown again
        minimum_interval: Shortest gap after a successful review
        difficulty_bounds: (min, max) clamp for difficulty
        graduation_reps: Successful reviews before a card is "graduated"
        conflict_retries: How often a conflicting write is retried
        timezone: IANA timezone name for the learner's local day
    """
    max_new_per_day: int = MAX_NEW_PER_DAY
    relearning_delay: timedelta = timedelta(minutes=RELEARNING_DELAY_MINUTES)
    minimum_interval: timedelta = timedelta(days=MINIMUM_INTERVAL_DAYS)
    difficulty_bounds: tuple[float, float] = DIFFICULTY_BOUNDS
    graduation_reps: int = GRADUATION_REPS
    conflict_retries: int = CONFLICT_RETRIES
    timezone: str = DEFAULT_TIMEZONE

    def __post_init__(self):
        if self.max_new_per_day < 0:
            raise ValueError("max_new_per_day must be >= 0")
        if self.relearning_delay < timedelta(0):
            raise ValueError("relearning_delay must not be negative")
        if self.minimum_interval < timedelta(0):
            raise ValueError("minimum_interval must not be negative")
        low, high = self.difficulty_bounds
        if low > high:
            raise ValueError(f"Invalid difficulty bounds: {self.difficulty_bounds}")
        if self.conflict_retries < 0:
            raise ValueError("conflict_retries must be >= 0")
        # Fail early on unknown timezone names
        ZoneInfo(self.timezone)

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @property
    def minimum_interval_days(self) -> float:
        return self.minimum_interval.total_seconds() / 86400.0

    @classmethod
    def from_env(cls, timezone: Optional[str] = None) -> "SchedulerPolicy":
        """
        Build a policy from environment variables, falling back to defaults.

        Args:
            timezone: Explicit learner timezone (overrides LEARNER_TIMEZONE)

        Returns:
            SchedulerPolicy instance
        """
        return cls(
            max_new_per_day=_env_int("MAX_NEW_PER_DAY", MAX_NEW_PER_DAY),
            relearning_delay=timedelta(
                minutes=_env_float("RELEARNING_DELAY_MINUTES", RELEARNING_DELAY_MINUTES)
            ),
            minimum_interval=timedelta(
                days=_env_float("MINIMUM_INTERVAL_DAYS", MINIMUM_INTERVAL_DAYS)
            ),
            graduation_reps=_env_int("GRADUATION_REPS", GRADUATION_REPS),
            conflict_retries=_env_int("CONFLICT_RETRIES", CONFLICT_RETRIES),
            timezone=timezone or os.getenv("LEARNER_TIMEZONE", DEFAULT_TIMEZONE),
        )


DEFAULT_POLICY = SchedulerPolicy()


def is_test_mode() -> bool:
    """Check if running in test mode."""
    return os.getenv("TEST_MODE", "false").lower() == "true"
