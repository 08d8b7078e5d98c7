"""
Typed pool models shared across session builders.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from phrase_trainer.card_ids import CardId
from phrase_trainer.config import MAX_NEW_PER_DAY
from phrase_trainer.fsrs.constants import Lifecycle
from phrase_trainer.fsrs.memory_state import LearningRecord


@dataclass(frozen=True)
class SessionBudget:
    """
    Daily admission budget for one session (derived, never persisted).
    """
    max_new_per_day: int = MAX_NEW_PER_DAY
    new_introduced_today: int = 0
    study_again: bool = False

    @property
    def new_allowance(self) -> int:
        """Remaining new cards for today, never negative."""
        return max(0, self.max_new_per_day - self.new_introduced_today)


@dataclass
class PoolState:
    """
    Session-scoped partition of a content unit's cards.

    records holds the refreshed records keyed by card id. unseen lists
    catalog cards the learner has no record for yet (in catalog order);
    unknown lists records whose card is missing from the catalog.
    """
    records: dict[CardId, LearningRecord]
    due: set[CardId] = field(default_factory=set)
    learning: set[CardId] = field(default_factory=set)
    new: set[CardId] = field(default_factory=set)
    removed: set[CardId] = field(default_factory=set)
    unseen: list[CardId] = field(default_factory=list)
    unknown: list[CardId] = field(default_factory=list)

    def move_to(self, card_id: CardId, target: Lifecycle) -> None:
        """
        Move a card to the target pool, removing it from others.
        """
        self.due.discard(card_id)
        self.learning.discard(card_id)
        self.new.discard(card_id)
        self.removed.discard(card_id)

        if target is Lifecycle.DUE:
            self.due.add(card_id)
        elif target is Lifecycle.LEARNING:
            self.learning.add(card_id)
        elif target is Lifecycle.NEW:
            self.new.add(card_id)
        elif target is Lifecycle.REMOVED:
            self.removed.add(card_id)

    @property
    def new_count(self) -> int:
        """Recorded new cards plus catalog cards never shown."""
        return len(self.new) + len(self.unseen)

    @property
    def studied_today(self) -> set[CardId]:
        return {
            card_id for card_id, record in self.records.items()
            if record.studied_today and card_id not in self.removed
        }
