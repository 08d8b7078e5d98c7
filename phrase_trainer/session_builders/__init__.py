"""Session builder modules for study sessions."""

from phrase_trainer.session_builders.pool_types import PoolState, SessionBudget
from phrase_trainer.session_builders.queue_builder import (
    build_pool_state,
    build_queue,
    create_queue,
)

__all__ = [
    "PoolState",
    "SessionBudget",
    "build_pool_state",
    "build_queue",
    "create_queue",
]
