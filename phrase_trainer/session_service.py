"""
Study session orchestration.

Thin layer between callers (UI / API) and the pure scheduling core:
fetches snapshots from the record store and catalog, calls the pure
functions with an explicit `now`, and commits one record at a time.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional, Tuple, Union

from phrase_trainer.analytics.history import build_study_history
from phrase_trainer.analytics.status import (
    budget_from_status,
    session_framing,
    status_from_pool,
)
from phrase_trainer.analytics.types import SessionFraming, SessionStatus, StudyHistory
from phrase_trainer.card_ids import CardId
from phrase_trainer.clock import SystemClock
from phrase_trainer.config import DEFAULT_POLICY, SchedulerPolicy
from phrase_trainer.errors import RecordConflict, UnknownCard
from phrase_trainer.fsrs import scheduler
from phrase_trainer.fsrs.constants import Lifecycle
from phrase_trainer.fsrs.lifecycle import classify, refresh_record
from phrase_trainer.fsrs.memory_state import LearningRecord, day_key, initialize_new_record
from phrase_trainer.ports import Clock, ContentCatalog, RecordStore
from phrase_trainer.schemas import PhraseEntry
from phrase_trainer.session_builders.pool_types import PoolState
from phrase_trainer.session_builders.queue_builder import build_pool_state, create_queue

logger = logging.getLogger(__name__)

Mutation = Callable[[LearningRecord, datetime], Tuple[LearningRecord, Optional[dict]]]


@dataclass(frozen=True)
class SessionPlan:
    """
    Everything a caller needs to run one study session.
    """
    session_id: str
    unit_id: str
    queue: list[CardId]
    status: SessionStatus
    framing: SessionFraming
    study_again: bool = False
    unknown: list[CardId] = field(default_factory=list)


class StudySessionService:
    """
    Entry points for starting sessions, recording answers and reading status.

    Args:
        store: Record store collaborator
        catalog: Content catalog collaborator
        clock: Time source (defaults to the UTC wall clock)
        policy: Scheduler policy
    """

    def __init__(
        self,
        store: RecordStore,
        catalog: ContentCatalog,
        clock: Optional[Clock] = None,
        policy: SchedulerPolicy = DEFAULT_POLICY
    ):
        self.store = store
        self.catalog = catalog
        self.clock = clock or SystemClock()
        self.policy = policy

    # ---- Snapshots ----

    def _pool_state(self, learner_id: str, unit_id: str, now: datetime) -> PoolState:
        catalog_ids = self.catalog.list_cards(unit_id)
        records = self.store.get(learner_id, unit_id)
        pool_state = build_pool_state(records, now, catalog_ids, self.policy.tzinfo)
        for card_id in pool_state.unknown:
            logger.warning(
                f"Learner {learner_id} has a record for {card_id}, "
                f"which is not in the catalog for unit {unit_id}; skipping"
            )
        return pool_state

    # ---- Public API ----

    def get_status(self, learner_id: str, unit_id: str) -> SessionStatus:
        """
        Current new / learning / due / studied-today counts for a unit.
        """
        now = self.clock.now()
        pool_state = self._pool_state(learner_id, unit_id, now)
        return status_from_pool(pool_state, day_key(now, self.policy.tzinfo))

    def start_session(
        self,
        learner_id: str,
        unit_id: str,
        study_again: bool = False
    ) -> SessionPlan:
        """
        Plan a study session: status, framing and the ordered queue.

        Args:
            learner_id: Learner identifier
            unit_id: Content unit identifier
            study_again: Replay today's studied cards instead of a normal session

        Returns:
            SessionPlan (an empty queue means nothing to study now)
        """
        now = self.clock.now()
        pool_state = self._pool_state(learner_id, unit_id, now)
        status = status_from_pool(pool_state, day_key(now, self.policy.tzinfo))
        budget = budget_from_status(status, self.policy, study_again)
        queue = create_queue(pool_state, budget)

        plan = SessionPlan(
            session_id=str(uuid.uuid4()),
            unit_id=unit_id,
            queue=queue,
            status=status,
            framing=session_framing(status, self.policy),
            study_again=study_again,
            unknown=list(pool_state.unknown),
        )
        logger.info(
            f"Planned session {plan.session_id} for learner {learner_id}, unit {unit_id}: "
            f"{len(queue)} cards (study_again={study_again}, framing={plan.framing.value})"
        )
        return plan

    def resolve_queue(self, plan: SessionPlan) -> list[PhraseEntry]:
        """
        Resolve a plan's card ids against the catalog.

        Cards that fail to resolve (or belong to another unit) are dropped
        and logged; the rest of the session continues.
        """
        phrases: list[PhraseEntry] = []
        for card_id in plan.queue:
            try:
                if card_id.unit_id != plan.unit_id:
                    raise UnknownCard(card_id, f"belongs to unit {card_id.unit_id}, expected {plan.unit_id}")
                phrases.append(self.catalog.get_card(card_id))
            except UnknownCard as exc:
                logger.warning(f"Dropping card from session {plan.session_id}: {exc}")
        return phrases

    def record_answer(
        self,
        learner_id: str,
        card_id: Union[str, CardId],
        grade,
        study_again: bool = False,
        session_id: Optional[str] = None
    ) -> LearningRecord:
        """
        Apply a learner's answer to one card and persist the result.

        The record is re-fetched right before the update. In study-again
        mode the memory model is left untouched.

        Args:
            learner_id: Learner identifier
            card_id: Card id (CardId or "<unit_id>-<phrase_id>")
            grade: AGAIN or GOOD
            study_again: Bonus pass over already-studied cards
            session_id: Optional session identifier for the event log

        Returns:
            The stored record

        Raises:
            InvalidGrade, ClockSkew, CardRemoved, UnknownCard, RecordConflict,
            NotStudiedToday (study-again answer for a card not studied today)
        """
        card_id = CardId.parse(card_id)
        grade = scheduler.coerce_grade(grade)

        def mutate(prior: LearningRecord, now: datetime):
            if study_again:
                return scheduler.apply_study_again(prior, now, self.policy, grade)
            return scheduler.process_review(prior, grade, now, self.policy)

        return self._commit(learner_id, card_id, mutate, session_id)

    def remove_card(self, learner_id: str, card_id: Union[str, CardId]) -> LearningRecord:
        """
        Retire a card for a learner. History is kept; the card leaves every queue.
        """
        def mutate(prior: LearningRecord, now: datetime):
            return prior.evolve(lifecycle=Lifecycle.REMOVED), None

        return self._commit(learner_id, CardId.parse(card_id), mutate)

    def reinstate_card(self, learner_id: str, card_id: Union[str, CardId]) -> LearningRecord:
        """
        Bring a retired card back; its bucket is re-derived from its memory state.
        """
        def mutate(prior: LearningRecord, now: datetime):
            restored = prior.evolve(lifecycle=Lifecycle.NEW)
            return restored.evolve(lifecycle=classify(restored, now)), None

        return self._commit(learner_id, CardId.parse(card_id), mutate)

    def get_study_history(self, learner_id: str, limit: int = 5000) -> StudyHistory:
        """
        Daily activity and streaks from the learner's most recent events.
        """
        events = self.store.get_recent_events(learner_id, limit=limit)
        return build_study_history(events, self.clock.now(), self.policy.tzinfo)

    # ---- Commit ----

    def _load(self, learner_id: str, card_id: CardId, now: datetime) -> LearningRecord:
        prior = self.store.get_record(learner_id, card_id)
        if prior is None:
            # First exposure: the card must exist before a record is created
            self.catalog.get_card(card_id)
            return initialize_new_record(card_id, now)
        return refresh_record(prior, now, self.policy.tzinfo)

    def _commit(
        self,
        learner_id: str,
        card_id: CardId,
        mutate: Mutation,
        session_id: Optional[str] = None
    ) -> LearningRecord:
        """
        Fetch, mutate and put one record, retrying on write conflicts.
        """
        attempt = 0
        while True:
            attempt += 1
            now = self.clock.now()
            prior = self._load(learner_id, card_id, now)
            updated, event = mutate(prior, now)
            try:
                saved = self.store.put(learner_id, updated)
            except RecordConflict:
                if attempt > self.policy.conflict_retries:
                    logger.error(
                        f"Giving up on card {card_id} for learner {learner_id} "
                        f"after {attempt} conflicting writes"
                    )
                    raise
                logger.info(f"Write conflict on card {card_id}; re-fetching (attempt {attempt})")
                continue

            if event is not None:
                self.store.log_review_event(learner_id, event, session_id)
            return saved
