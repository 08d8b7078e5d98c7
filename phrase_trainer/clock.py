"""
Clocks injected into the session service.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from phrase_trainer.fsrs.memory_state import ensure_aware


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """
    Manually advanced clock for tests and simulations.
    """

    def __init__(self, start: datetime):
        self._now = ensure_aware(start)

    def now(self) -> datetime:
        return self._now

    def set(self, value: datetime) -> None:
        self._now = ensure_aware(value)

    def advance(self, **kwargs) -> datetime:
        """Move forward by timedelta(**kwargs) and return the new time."""
        self._now = self._now + timedelta(**kwargs)
        return self._now
