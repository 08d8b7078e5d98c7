"""
SQLAlchemy ORM Models for the Record Store

Defines LearningRecord and ReviewEvent rows. Timestamps are stored as
UTC ISO-8601 strings so ordering by column is chronological.
"""

from sqlalchemy import Boolean, Column, Float, Integer, String, Index
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class LearningRecordRow(Base):
    """
    Persistent memory state for one (learner, card) pair.

    A card is (unit_id, phrase_id); together with learner_id it forms the
    primary key, so the store's upsert is keyed by (learner_id, card_id).
    """
    __tablename__ = 'learning_records'

    # Primary key: composite of learner_id, unit_id, and phrase_id
    learner_id = Column(String(255), primary_key=True, nullable=False)
    unit_id = Column(String(255), primary_key=True, nullable=False)
    phrase_id = Column(String(255), primary_key=True, nullable=False)

    # Memory model
    difficulty = Column(Float, nullable=False)
    stability = Column(Float, nullable=False)
    retrievability = Column(Float, nullable=False)
    reps = Column(Integer, nullable=False, default=0)
    lapses = Column(Integer, nullable=False, default=0)
    last_interval = Column(Float, nullable=False, default=0.0)

    # Timing
    last_review = Column(String(64), nullable=False)
    next_review = Column(String(64), nullable=False)

    lifecycle = Column(String(16), nullable=False)  # new / learning / due / removed

    # Daily bookkeeping
    studied_today = Column(Boolean, nullable=False, default=False)
    same_day_reviews = Column(Integer, nullable=False, default=0)
    study_day = Column(String(10), nullable=True)  # YYYY-MM-DD, learner-local
    introduced_day = Column(String(10), nullable=True)

    # Optimistic concurrency token
    version = Column(Integer, nullable=False, default=1)

    def __repr__(self):
        return f"<LearningRecordRow({self.learner_id}, {self.unit_id}-{self.phrase_id}, v{self.version})>"


class ReviewEvent(Base):
    """
    Log entry for a single committed answer.

    Captures the memory state before/after the review and whether it was a
    study-again exposure.
    """
    __tablename__ = 'review_events'

    id = Column(Integer, primary_key=True, autoincrement=True)

    learner_id = Column(String(255), nullable=False)
    unit_id = Column(String(255), nullable=False)
    phrase_id = Column(String(255), nullable=False)

    timestamp = Column(String(64), nullable=False)
    grade = Column(Integer, nullable=True)  # 1=AGAIN, 3=GOOD, NULL for ungraded study-again
    study_again = Column(Boolean, nullable=False, default=False)

    # State before review
    stability_before = Column(Float, nullable=True)
    difficulty_before = Column(Float, nullable=True)
    retrievability_before = Column(Float, nullable=True)

    # State after review
    stability_after = Column(Float, nullable=False)
    difficulty_after = Column(Float, nullable=False)
    reps_after = Column(Integer, nullable=False)
    lapses_after = Column(Integer, nullable=False)
    next_review = Column(String(64), nullable=False)
    graduated = Column(Boolean, nullable=False, default=False)

    # Session context (optional, for analytics)
    session_id = Column(String(255), nullable=True)

    __table_args__ = (
        Index('idx_review_events_learner_ts', 'learner_id', 'timestamp'),
    )

    def __repr__(self):
        return f"<ReviewEvent(id={self.id}, {self.unit_id}-{self.phrase_id}, grade={self.grade})>"
