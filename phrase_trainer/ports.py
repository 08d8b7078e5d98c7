"""
Collaborator interfaces consumed by the study session service.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from phrase_trainer.card_ids import CardId
from phrase_trainer.fsrs.memory_state import LearningRecord
from phrase_trainer.schemas import PhraseEntry


class RecordStore(Protocol):
    """Durable per-learner, per-card state."""

    def get(self, learner_id: str, unit_id: str) -> list[LearningRecord]:
        ...

    def get_record(self, learner_id: str, card_id: CardId) -> Optional[LearningRecord]:
        ...

    def put(self, learner_id: str, record: LearningRecord) -> LearningRecord:
        """Atomic upsert keyed by (learner_id, card_id); raises RecordConflict."""
        ...

    def log_review_event(self, learner_id: str, event: dict, session_id: Optional[str] = None) -> None:
        ...

    def get_recent_events(self, learner_id: str, limit: int = 10) -> list[dict]:
        ...


class ContentCatalog(Protocol):
    """Read-only view of a unit's cards."""

    def list_cards(self, unit_id: str) -> list[CardId]:
        ...

    def get_card(self, card_id: CardId) -> PhraseEntry:
        """Raises UnknownCard when the id does not resolve."""
        ...


class Clock(Protocol):
    """Source of the current time (timezone-aware)."""

    def now(self) -> datetime:
        ...
