"""
Print a learner's study status for one content unit.

Shows the new / learning / due counts, how the next session would be
framed, and the first cards of the queue.

Usage:
    python -m scripts.show_status --learner alice --unit <song-uuid>
    python -m scripts.show_status --learner alice --unit <song-uuid> --study-again
"""

from __future__ import annotations

import argparse
import logging

from phrase_trainer import fsrs
from phrase_trainer.catalog_repo import MongoContentCatalog
from phrase_trainer.config import SchedulerPolicy
from phrase_trainer.session_service import StudySessionService


def show_status(learner_id: str, unit_id: str, study_again: bool, limit: int) -> None:
    engine = fsrs.get_engine()
    fsrs.init_db(engine)

    service = StudySessionService(
        store=fsrs.SqlRecordStore(engine),
        catalog=MongoContentCatalog(),
        policy=SchedulerPolicy.from_env(),
    )
    plan = service.start_session(learner_id, unit_id, study_again=study_again)
    status = plan.status

    print("=" * 60)
    print(f"Learner: {learner_id}   Unit: {unit_id}")
    print("=" * 60)
    print(f"New:           {status.new_count}")
    print(f"Learning:      {status.learning_count}")
    print(f"Due:           {status.due_count}")
    print(f"Studied today: {status.studied_today_count}")
    print(f"Removed:       {status.removed_count}")
    print(f"Framing:       {plan.framing.value}")
    print()

    if not plan.queue:
        print("Nothing to study right now.")
        return

    print(f"Queue ({len(plan.queue)} cards, showing {min(limit, len(plan.queue))}):")
    for position, card_id in enumerate(plan.queue[:limit], 1):
        print(f"  {position:3d}. {card_id}")

    history = service.get_study_history(learner_id)
    print()
    print(f"Current streak: {history.current_streak} days (longest {history.longest_streak})")


def main():
    parser = argparse.ArgumentParser(
        description="Show study status and the next session queue for a learner"
    )
    parser.add_argument("--learner", required=True, help="Learner identifier")
    parser.add_argument("--unit", required=True, help="Content unit (song) identifier")
    parser.add_argument(
        "--study-again",
        action="store_true",
        help="Plan a study-again pass over today's cards"
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=20,
        help="Number of queued cards to print (default: 20)"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    show_status(args.learner, args.unit, args.study_again, args.limit)


if __name__ == "__main__":
    main()
