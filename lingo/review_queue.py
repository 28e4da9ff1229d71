"""
Review Queue - which cards are up for review right now.

Read-only: nothing here touches scheduling state, so calling any of these
twice without a review in between returns the same answer.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import sessionmaker

from lingo.fsrs.database import session_scope
from lingo.fsrs.models import Flashcard
from lingo.fsrs.persistence import FlashcardRepository


class ReviewQueue:
    """Due-card selection for one user at one instant."""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self.session_factory = session_factory

    def due_cards(
        self,
        user_id: str,
        now: datetime,
        limit: Optional[int] = None
    ) -> list[Flashcard]:
        """
        Cards with due_date <= now, earliest due first.

        Args:
            user_id: Owner of the cards
            now: Cut-off instant (timezone-aware)
            limit: Optional cap on the number of cards returned

        Returns:
            Detached Flashcard rows, safe to read after the session closes
        """
        if limit is not None and limit < 1:
            raise ValueError(f"limit must be positive, got {limit}")
        with session_scope(self.session_factory) as session:
            return FlashcardRepository(session).list_due_cards(user_id, now, limit)

    def due_count(self, user_id: str, now: datetime) -> int:
        with session_scope(self.session_factory) as session:
            return FlashcardRepository(session).count_due_cards(user_id, now)

    def forecast(self, user_id: str, now: datetime, days: int = 7) -> list[int]:
        """
        Number of cards coming due on each of the next `days` days.

        Day 0 covers everything due before now + 1 day, overdue cards
        included; day i covers [now + i days, now + (i + 1) days).

        Returns:
            List of `days` counts
        """
        if days < 1:
            raise ValueError(f"days must be positive, got {days}")

        until = now + timedelta(days=days)
        with session_scope(self.session_factory) as session:
            due_dates = FlashcardRepository(session).list_due_dates(user_id, until)

        counts = [0] * days
        for due_date in due_dates:
            offset = (due_date - now).total_seconds() / 86400.0
            counts[max(0, math.floor(offset))] += 1
        return counts
