"""
FSRS - Free Spaced Repetition Scheduler

Memory model and record store for phrase flashcards.

This package implements:
- A two-grade update rule (AGAIN / GOOD) over stability, difficulty, retrievability
- Forgetting curve: R = R_TARGET ^ (Δt / S)
- A lifecycle classifier (new / learning / due / removed)
- A study-again path that never touches the memory model

Quick start:
    from phrase_trainer import fsrs

    # Process a review (algorithm only, no DB calls)
    record, event_data = fsrs.process_review(record, fsrs.Grade.GOOD, now)

    # Bucket for the current moment
    bucket = fsrs.classify(record, now)
"""

# Core scheduler API (algorithm logic)
from phrase_trainer.fsrs.scheduler import (
    process_review,
    apply_study_again,
    coerce_grade,
    next_review_time,
)
from phrase_trainer.fsrs.lifecycle import classify, refresh_record

# Database API
from phrase_trainer.fsrs.database import (
    SqlRecordStore,
    get_engine,
    init_db,
    reset_db,
)

# Constants and parameters
from phrase_trainer.fsrs.constants import (
    Grade,
    Lifecycle,
    R_TARGET,
    S_MIN,
    INITIAL_DIFFICULTY,
    INITIAL_STABILITY_GOOD,
    K,
    K_FAIL,
    ALPHA,
    ETA,
    U_RATING,
)

# Memory state
from phrase_trainer.fsrs.memory_state import (
    LearningRecord,
    calculate_retrievability,
    day_key,
    initialize_new_record,
)


__all__ = [
    # Core algorithm
    "process_review",
    "apply_study_again",
    "coerce_grade",
    "next_review_time",
    "classify",
    "refresh_record",

    # Database operations
    "SqlRecordStore",
    "get_engine",
    "init_db",
    "reset_db",

    # Enums
    "Grade",
    "Lifecycle",

    # Memory state
    "LearningRecord",
    "calculate_retrievability",
    "day_key",
    "initialize_new_record",

    # Parameters
    "R_TARGET",
    "S_MIN",
    "INITIAL_DIFFICULTY",
    "INITIAL_STABILITY_GOOD",
    "K",
    "K_FAIL",
    "ALPHA",
    "ETA",
    "U_RATING",
]
