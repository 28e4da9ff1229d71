"""
Persistence Layer - Database I/O for FSRS

Handles all database operations for flashcards and review events.
The repository works inside a session owned by the caller, so one review
(card update + event row) commits or rolls back as a unit.

Schema:
- flashcards: Card content plus FSRS scheduling state
- review_events: Log of all applied reviews
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from lingo.fsrs.memory_state import Card
from lingo.fsrs.models import Flashcard, ReviewEvent
from lingo.fsrs.scheduler import SchedulingResult


# ---- Snapshot conversion ----

def card_from_row(row: Flashcard) -> Card:
    """
    Build the scheduling snapshot of a persisted flashcard.

    Raises:
        InvariantViolation: If the stored scheduling fields are corrupt
    """
    return Card(
        due=row.due_date,
        stability=row.stability,
        difficulty=row.difficulty,
        state=row.state,
        learning_steps=row.learning_steps,
        reps=row.reps,
        lapses=row.lapses,
        last_review=row.last_reviewed_at,
    )


def apply_snapshot(row: Flashcard, card: Card):
    """Copy every scheduling field of `card` onto `row`."""
    row.stability = card.stability
    row.difficulty = card.difficulty
    row.state = card.state
    row.learning_steps = card.learning_steps
    row.reps = card.reps
    row.lapses = card.lapses
    row.due_date = card.due
    row.last_reviewed_at = card.last_review


# ---- Repository ----

class FlashcardRepository:
    """
    Queries and writes for one session.

    Never commits; transaction boundaries belong to the caller.
    """

    def __init__(self, session: Session):
        self.session = session

    # ---- Lookups ----

    def find_card_by_id(self, card_id: str) -> Optional[Flashcard]:
        """Load a card regardless of owner (None if missing)."""
        return self.session.get(Flashcard, card_id)

    def find_owned_card(
        self,
        card_id: str,
        user_id: str,
        for_update: bool = False
    ) -> Optional[Flashcard]:
        """
        Load a card only if `user_id` owns it.

        Args:
            card_id: Flashcard id
            user_id: Expected owner
            for_update: Lock the row (SELECT ... FOR UPDATE) where supported

        Returns:
            The row, or None when it is missing or owned by someone else
        """
        query = self.session.query(Flashcard).filter(
            Flashcard.id == card_id,
            Flashcard.user_id == user_id
        )
        if for_update:
            query = query.with_for_update()
        return query.first()

    # ---- Writes ----

    def add_card(self, row: Flashcard) -> Flashcard:
        self.session.add(row)
        self.session.flush()
        return row

    def save_card(self, row: Flashcard) -> Flashcard:
        """
        Flush pending changes to `row`.

        Raises:
            StaleDataError: If another transaction changed the row first
        """
        self.session.add(row)
        self.session.flush()
        return row

    def apply_review(self, row: Flashcard, result: SchedulingResult) -> ReviewEvent:
        """
        Write one scheduler result onto `row` and log the review.

        All scheduling fields and last_reviewed_at change together in the
        caller's transaction, along with the event row.

        Args:
            row: Flashcard loaded in this session
            result: Scheduler output for this review

        Returns:
            The logged ReviewEvent

        Raises:
            StaleDataError: If another transaction changed the row first
        """
        event = ReviewEvent(
            flashcard_id=row.id,
            user_id=row.user_id,
            reviewed_at=result.reviewed_at,
            rating=result.rating,
            elapsed_days=result.elapsed_days,
            scheduled_days=result.scheduled_days,
            retrievability_before=result.retrievability,
            state_before=row.state,
            stability_before=row.stability,
            difficulty_before=row.difficulty,
            state_after=result.card.state,
            stability_after=result.card.stability,
            difficulty_after=result.card.difficulty,
            due_after=result.card.due,
        )

        apply_snapshot(row, result.card)
        self.save_card(row)
        self.log_review_event(event)
        return event

    def log_review_event(self, event: ReviewEvent) -> ReviewEvent:
        self.session.add(event)
        self.session.flush()
        return event

    def delete_card(self, card_id: str, user_id: str) -> int:
        """
        Delete a card (and its review log) if `user_id` owns it.

        Returns:
            Number of cards deleted (0 or 1)
        """
        self.session.query(ReviewEvent).filter(
            ReviewEvent.flashcard_id == card_id,
            ReviewEvent.user_id == user_id
        ).delete(synchronize_session=False)

        return self.session.query(Flashcard).filter(
            Flashcard.id == card_id,
            Flashcard.user_id == user_id
        ).delete(synchronize_session=False)

    # ---- Queue queries ----

    def list_due_cards(
        self,
        user_id: str,
        now: datetime,
        limit: Optional[int] = None
    ) -> list[Flashcard]:
        """
        Cards owned by `user_id` with due_date <= now, earliest due first.

        Ties are broken by creation time, then id.
        """
        query = self.session.query(Flashcard).filter(
            Flashcard.user_id == user_id,
            Flashcard.due_date <= now
        ).order_by(
            Flashcard.due_date.asc(),
            Flashcard.created_at.asc(),
            Flashcard.id.asc()
        )
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def count_due_cards(self, user_id: str, now: datetime) -> int:
        return self.session.query(Flashcard).filter(
            Flashcard.user_id == user_id,
            Flashcard.due_date <= now
        ).count()

    def list_due_dates(self, user_id: str, until: datetime) -> list[datetime]:
        """Due dates of every card falling due before `until` (overdue included)."""
        rows = self.session.query(Flashcard.due_date).filter(
            Flashcard.user_id == user_id,
            Flashcard.due_date < until
        ).all()
        return [due_date for (due_date,) in rows]

    # ---- Browsing ----

    def list_cards(
        self,
        user_id: str,
        offset: int = 0,
        limit: int = 20,
        q: Optional[str] = None,
        language=None
    ) -> tuple[list[Flashcard], int]:
        """
        One page of a user's cards, newest first.

        Args:
            user_id: Owner
            offset: Rows to skip
            limit: Page size
            q: Case-insensitive substring matched against front and back text
            language: Optional ContentLanguage filter

        Returns:
            (cards on this page, total matching cards)
        """
        query = self.session.query(Flashcard).filter(Flashcard.user_id == user_id)
        if q:
            pattern = f"%{q}%"
            query = query.filter(or_(
                Flashcard.front_text.ilike(pattern),
                Flashcard.back_text.ilike(pattern)
            ))
        if language is not None:
            query = query.filter(Flashcard.language == language)

        total = query.count()
        cards = query.order_by(
            Flashcard.created_at.desc(),
            Flashcard.id.desc()
        ).offset(offset).limit(limit).all()
        return cards, total

    def list_review_events(self, card_id: str, user_id: str) -> list[ReviewEvent]:
        """Review log of one card, oldest first."""
        return self.session.query(ReviewEvent).filter(
            ReviewEvent.flashcard_id == card_id,
            ReviewEvent.user_id == user_id
        ).order_by(ReviewEvent.reviewed_at.asc(), ReviewEvent.id.asc()).all()
