"""
Scheduler error taxonomy.
"""

from __future__ import annotations


class SchedulerError(Exception):
    """Base class for all scheduling errors."""


class InvalidGrade(SchedulerError):
    """The caller passed a grade outside {AGAIN, GOOD}."""

    def __init__(self, grade):
        self.grade = grade
        super().__init__(f"Unsupported grade: {grade!r} (expected AGAIN or GOOD)")


class ClockSkew(SchedulerError):
    """The review time precedes the record's last review."""

    def __init__(self, card_id, now, last_review):
        self.card_id = card_id
        self.now = now
        self.last_review = last_review
        super().__init__(
            f"Review time {now.isoformat()} precedes last review "
            f"{last_review.isoformat()} for card {card_id}"
        )


class RecordConflict(SchedulerError):
    """The store detected a concurrent write to the same (learner, card)."""

    def __init__(self, learner_id: str, card_id, expected_version: int):
        self.learner_id = learner_id
        self.card_id = card_id
        self.expected_version = expected_version
        super().__init__(
            f"Concurrent write for learner {learner_id}, card {card_id} "
            f"(expected version {expected_version})"
        )


class UnknownCard(SchedulerError):
    """A card id cannot be resolved against the content catalog."""

    def __init__(self, card_id, reason: str = "not found in catalog"):
        self.card_id = card_id
        self.reason = reason
        super().__init__(f"Unknown card {card_id}: {reason}")


class CardRemoved(SchedulerError):
    """The card was retired by the learner and cannot be reviewed."""

    def __init__(self, card_id):
        self.card_id = card_id
        super().__init__(f"Card {card_id} is removed; reinstate it before reviewing")


class NotStudiedToday(SchedulerError):
    """A study-again exposure was requested for a card not studied today."""

    def __init__(self, card_id):
        self.card_id = card_id
        super().__init__(f"Card {card_id} was not studied today; study again only replays today's cards")
