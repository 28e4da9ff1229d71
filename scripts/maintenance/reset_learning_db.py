"""
Reset the flashcard database.

DANGEROUS: This deletes every flashcard and all review history!
Only use when you want to start fresh for testing.

Usage:
    python -m scripts.maintenance.reset_learning_db [--yes]
"""

import argparse

from lingo.fsrs import database
from lingo.logging_config import configure_logging


def main():
    parser = argparse.ArgumentParser(description="Drop and recreate the flashcard tables")
    parser.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    args = parser.parse_args()

    configure_logging()

    print("=" * 60)
    print("WARNING: Reset Flashcard Database")
    print("=" * 60)
    print()
    print(f"Target: {'test_learning_db' if database.is_test_mode() else 'learning_db'}")
    print("This will DELETE:")
    print("  - All flashcards (content and scheduling state)")
    print("  - All review events (logs of past reviews)")
    print()

    if not args.yes:
        response = input("Are you sure you want to reset? (type 'yes' to confirm): ")
        if response.lower() != "yes":
            print("\nCancelled. No changes made.")
            return

    print("\nResetting database...")
    database.reset_db()
    print("✓ Database reset complete!")
    print("\nThe database now has empty tables ready for new cards.")


if __name__ == "__main__":
    main()
