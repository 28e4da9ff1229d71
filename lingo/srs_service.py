"""
SRS Service - flashcard operations and the review transaction.

Main workflow for a review:
1. Validate the rating
2. Load the card owned by the user (row lock where supported)
3. Ask the Scheduler for the next state (pure computation)
4. Write every scheduling field plus last_reviewed_at and a review event
5. Commit, or roll back everything on any error

This is the only code path that writes scheduling fields.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Optional

from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from lingo.exceptions import InvariantViolation, NotFoundError, ReviewConflictError
from lingo.fsrs.config import load_scheduler_config
from lingo.fsrs.constants import Rating, State
from lingo.fsrs.database import session_scope
from lingo.fsrs.models import Flashcard, ReviewEvent, utc_now
from lingo.fsrs.persistence import FlashcardRepository, card_from_row
from lingo.fsrs.scheduler import Scheduler, SchedulingResult
from lingo.review_queue import ReviewQueue
from lingo.schemas import (
    FlashcardCreate,
    FlashcardListQuery,
    FlashcardPage,
    FlashcardUpdate,
    ReviewOutcome,
    ReviewSubmission,
    validate_payload,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class SrsService:
    """
    Flashcard CRUD plus review submission for any number of users.

    Args:
        session_factory: SQLAlchemy sessionmaker (default: process-wide factory)
        scheduler: Shared Scheduler (default: built from environment config)
        clock: Zero-argument callable returning an aware "now"
    """

    def __init__(
        self,
        session_factory: Optional[sessionmaker] = None,
        scheduler: Optional[Scheduler] = None,
        clock: Clock = utc_now
    ):
        self.session_factory = session_factory
        self.scheduler = scheduler or Scheduler(load_scheduler_config())
        self.clock = clock
        self.queue = ReviewQueue(session_factory)

    # ---- Cards ----

    def create_card(self, user_id: str, payload: Any) -> Flashcard:
        """
        Create a New card that is due immediately.

        Args:
            user_id: Owner of the new card
            payload: FlashcardCreate or an equivalent dict

        Raises:
            ValidationError: If the payload is malformed
        """
        data: FlashcardCreate = validate_payload(FlashcardCreate, payload)
        now = self.clock()

        row = Flashcard(
            user_id=user_id,
            content_id=str(data.content_id) if data.content_id else None,
            language=data.language,
            front_text=data.front_text,
            back_text=data.back_text,
            details=_dump_details(data.details),
            stability=0.0,
            difficulty=0.0,
            state=State.NEW,
            learning_steps=0,
            reps=0,
            lapses=0,
            due_date=now,
            last_reviewed_at=None,
            created_at=now,
            updated_at=now,
        )

        with session_scope(self.session_factory) as session:
            FlashcardRepository(session).add_card(row)

        logger.info("Created card %s for user %s (%s)", row.id, user_id, row.language.value)
        return row

    def get_card(self, user_id: str, card_id: str) -> Flashcard:
        """
        Raises:
            NotFoundError: If the card is missing or owned by another user
        """
        with session_scope(self.session_factory) as session:
            row = FlashcardRepository(session).find_owned_card(card_id, user_id)
        if row is None:
            self._not_found(user_id, card_id)
        return row

    def list_cards(self, user_id: str, query: Any = None) -> FlashcardPage:
        """
        Browse a user's cards, newest first.

        Args:
            user_id: Owner
            query: FlashcardListQuery or dict with page, limit, q, language

        Raises:
            ValidationError: If paging or filters are out of range
        """
        params: FlashcardListQuery = validate_payload(FlashcardListQuery, query or {})
        with session_scope(self.session_factory) as session:
            cards, total = FlashcardRepository(session).list_cards(
                user_id,
                offset=(params.page - 1) * params.limit,
                limit=params.limit,
                q=params.q,
                language=params.language,
            )
        return FlashcardPage.build(cards, total, params)

    def list_due_cards(self, user_id: str, limit: Optional[int] = None) -> list[Flashcard]:
        """Cards due now for `user_id`, earliest due first."""
        return self.queue.due_cards(user_id, self.clock(), limit)

    def update_card(self, user_id: str, card_id: str, payload: Any) -> Flashcard:
        """
        Change a card's content fields.

        Scheduling fields are not part of FlashcardUpdate and are rejected.

        Raises:
            ValidationError: If the payload is malformed or names scheduling fields
            NotFoundError: If the card is missing or owned by another user
        """
        data: FlashcardUpdate = validate_payload(FlashcardUpdate, payload)
        changes = data.model_dump(exclude_unset=True)
        if "content_id" in changes and changes["content_id"] is not None:
            changes["content_id"] = str(changes["content_id"])
        if "details" in changes:
            changes["details"] = _dump_details(data.details)

        with session_scope(self.session_factory) as session:
            repo = FlashcardRepository(session)
            row = repo.find_owned_card(card_id, user_id, for_update=True)
            if row is None:
                self._not_found(user_id, card_id)
            for field, value in changes.items():
                setattr(row, field, value)
            row.updated_at = self.clock()
            repo.save_card(row)

        logger.info("Updated card %s (%s)", card_id, ", ".join(sorted(changes)) or "no changes")
        return row

    def delete_card(self, user_id: str, card_id: str):
        """
        Delete a card and its review log.

        Raises:
            NotFoundError: If nothing was deleted
        """
        with session_scope(self.session_factory) as session:
            deleted = FlashcardRepository(session).delete_card(card_id, user_id)
            if deleted == 0:
                self._not_found(user_id, card_id)
        logger.info("Deleted card %s for user %s", card_id, user_id)

    # ---- Reviews ----

    def submit_review(self, user_id: str, card_id: str, rating: Any) -> ReviewOutcome:
        """
        Apply one rating to one card.

        Args:
            user_id: Must own the card
            card_id: Card to review
            rating: Rating, 1-4, or "again"/"hard"/"good"/"easy"

        Returns:
            ReviewOutcome with the next due date

        Raises:
            ValidationError: If the card id is empty or the rating is not one of
                the four values
            NotFoundError: If the card is missing or owned by another user
            ReviewConflictError: If a concurrent review of the card committed first
            InvariantViolation: If stored or computed scheduling state is illegal
        """
        submission: ReviewSubmission = validate_payload(
            ReviewSubmission, {"flashcard_id": card_id, "rating": rating}
        )
        card_id, rating = submission.flashcard_id, submission.rating
        now = self.clock()

        try:
            with session_scope(self.session_factory) as session:
                repo = FlashcardRepository(session)
                row = repo.find_owned_card(card_id, user_id, for_update=True)
                if row is None:
                    self._not_found(user_id, card_id)

                state_before = row.state
                result = self._schedule(row, now, rating)
                repo.apply_review(row, result)
        except StaleDataError as e:
            logger.warning(
                "Review of card %s (%s) lost to a concurrent review; discarded",
                card_id, rating.name
            )
            raise ReviewConflictError(
                f"Flashcard {card_id} was reviewed concurrently; please retry."
            ) from e

        logger.info(
            "Reviewed card %s: %s, %s -> %s, next due %s",
            card_id, rating.name, state_before.name, result.card.state.name,
            result.due.isoformat()
        )
        return ReviewOutcome(
            flashcard_id=card_id,
            next_due_date=result.due,
            state=result.card.state,
        )

    def preview_review(self, user_id: str, card_id: str) -> dict[Rating, SchedulingResult]:
        """Outcome of each rating for a card, without saving anything."""
        row = self.get_card(user_id, card_id)
        now = self.clock()
        try:
            return self.scheduler.preview(card_from_row(row), row.last_reviewed_at or now, now)
        except InvariantViolation:
            logger.exception("Invalid scheduling state on card %s", card_id)
            raise

    def review_history(self, user_id: str, card_id: str) -> list[ReviewEvent]:
        """
        Raises:
            NotFoundError: If the card is missing or owned by another user
        """
        with session_scope(self.session_factory) as session:
            repo = FlashcardRepository(session)
            if repo.find_owned_card(card_id, user_id) is None:
                self._not_found(user_id, card_id)
            return repo.list_review_events(card_id, user_id)

    # ---- Helpers ----

    def _schedule(self, row: Flashcard, now: datetime, rating: Rating) -> SchedulingResult:
        try:
            card = card_from_row(row)
            return self.scheduler.compute_next(
                card,
                row.last_reviewed_at or now,
                now,
                rating,
            )
        except InvariantViolation:
            logger.exception("Invalid scheduling state on card %s", row.id)
            raise

    def _not_found(self, user_id: str, card_id: str):
        logger.warning("Card %s not found for user %s", card_id, user_id)
        raise NotFoundError()


def _dump_details(details) -> Optional[dict]:
    if details is None:
        return None
    return details.model_dump(mode="json", exclude_none=True)
