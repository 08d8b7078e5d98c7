"""Builders for records and card ids used across the test suite."""

from phrase_trainer.card_ids import CardId
from phrase_trainer.fsrs.constants import Lifecycle
from phrase_trainer.fsrs.memory_state import LearningRecord

UNIT = "3f2c9a1e-7b44-4d0e-9c1a-55aa01b2c3d4"


def card(phrase_id, unit_id=UNIT):
    return CardId(unit_id=unit_id, phrase_id=str(phrase_id))


def make_record(phrase_id, when, **overrides):
    """Reviewed LearningRecord with sensible defaults; override any field."""
    values = dict(
        card_id=card(phrase_id),
        difficulty=5.0,
        stability=2.0,
        retrievability=1.0,
        reps=1,
        lapses=0,
        last_interval=2.0,
        last_review=when,
        next_review=when,
        lifecycle=Lifecycle.LEARNING,
    )
    values.update(overrides)
    return LearningRecord(**values)
