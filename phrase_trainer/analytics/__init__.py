"""
Analytics package exports.
"""

from phrase_trainer.analytics.history import build_study_history
from phrase_trainer.analytics.status import (
    aggregate,
    budget_from_status,
    session_framing,
    status_from_pool,
)
from phrase_trainer.analytics.types import SessionFraming, SessionStatus, StudyHistory

__all__ = [
    "aggregate",
    "budget_from_status",
    "build_study_history",
    "session_framing",
    "status_from_pool",
    "SessionFraming",
    "SessionStatus",
    "StudyHistory",
]
