"""
Reset the record store (learning records + review events).

DANGEROUS: This deletes every learner's scheduling state!
Only use when you want to start fresh for testing.

Usage:
    python -m scripts.maintenance.reset_learning_db [--database-url URL] [--yes]
"""

from __future__ import annotations

import argparse

from phrase_trainer import fsrs
from phrase_trainer.fsrs.models import Base


def main():
    parser = argparse.ArgumentParser(description="Drop and recreate the record store tables")
    parser.add_argument(
        "--database-url",
        default=None,
        help="Connection string (default: DATABASE_URL from the environment)"
    )
    parser.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    args = parser.parse_args()

    engine = fsrs.get_engine(args.database_url)

    print("=" * 60)
    print("WARNING: Reset Record Store")
    print("=" * 60)
    print(f"Database: {engine.url.render_as_string(hide_password=True)}")
    print()
    print("This will DROP and recreate:")
    for table in Base.metadata.sorted_tables:
        print(f"  - {table.name}")
    print()

    if not args.yes:
        response = input("Type 'yes' to confirm: ")
        if response.strip().lower() != "yes":
            print("\nCancelled. No changes made.")
            return

    fsrs.reset_db(engine)
    print("✓ Record store reset; tables are empty.")


if __name__ == "__main__":
    main()
