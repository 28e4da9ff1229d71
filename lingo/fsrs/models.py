"""
SQLAlchemy ORM Models for FSRS Database

Defines the Flashcard and ReviewEvent models for Postgres persistence
(SQLite in tests).
"""

from __future__ import annotations

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.types import TypeDecorator

from lingo.fsrs.constants import Rating, State

Base = declarative_base()


class ContentLanguage(str, enum.Enum):
    """Languages content and flashcards can be written in."""
    ENGLISH = "eng"
    JAPANESE = "jpn"
    CHINESE_SIMPLIFIED = "chi_sim"


# Shared so Postgres creates the enum type once
CardStateType = Enum(State, name="card_state")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware UTC datetimes on every backend.

    SQLite drops tzinfo on write; values are normalized to UTC going in and
    re-tagged as UTC coming out.
    """
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            raise ValueError(f"Naive datetime not allowed: {value!r}")
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class Flashcard(Base):
    """
    One learnable item owned by exactly one user.

    Content fields are editable by the owner; scheduling fields are written
    only from Scheduler output, all together, in the review transaction.
    """
    __tablename__ = 'flashcards'

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(255), nullable=False, index=True)
    content_id = Column(String(36), nullable=True, index=True)

    # Content
    language = Column(Enum(ContentLanguage, name="content_language"), nullable=False)
    front_text = Column(Text, nullable=False)
    back_text = Column(Text, nullable=False)
    details = Column(JSON, nullable=True)  # Phonetics, examples, ...

    # FSRS scheduling state
    stability = Column(Float, nullable=False, default=0.0)
    difficulty = Column(Float, nullable=False, default=0.0)
    state = Column(CardStateType, nullable=False, default=State.NEW)
    learning_steps = Column(Integer, nullable=False, default=0)  # Steps served in (re)learning
    reps = Column(Integer, nullable=False, default=0)
    lapses = Column(Integer, nullable=False, default=0)  # Times forgotten while in Review
    due_date = Column(UTCDateTime, nullable=False, index=True)
    last_reviewed_at = Column(UTCDateTime, nullable=True)

    # Metadata
    created_at = Column(UTCDateTime, nullable=False, default=utc_now)
    updated_at = Column(UTCDateTime, nullable=False, default=utc_now, onupdate=utc_now)
    version_id = Column(Integer, nullable=False)

    __table_args__ = (
        Index("ix_flashcards_user_due", "user_id", "due_date"),
    )

    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self):
        return f"<Flashcard({self.id}, user={self.user_id}, state={self.state})>"


class ReviewEvent(Base):
    """
    Log entry for a single applied review.

    Captures the state before/after, written in the same transaction as the
    card update.
    """
    __tablename__ = 'review_events'

    id = Column(Integer, primary_key=True, autoincrement=True)
    flashcard_id = Column(
        String(36), ForeignKey("flashcards.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(String(255), nullable=False)

    # Timing and feedback
    reviewed_at = Column(UTCDateTime, nullable=False)
    rating = Column(Enum(Rating, name="review_rating"), nullable=False)
    elapsed_days = Column(Float, nullable=False)
    scheduled_days = Column(Float, nullable=False)
    retrievability_before = Column(Float, nullable=False)

    # State before review
    state_before = Column(CardStateType, nullable=False)
    stability_before = Column(Float, nullable=False)
    difficulty_before = Column(Float, nullable=False)

    # State after review
    state_after = Column(CardStateType, nullable=False)
    stability_after = Column(Float, nullable=False)
    difficulty_after = Column(Float, nullable=False)
    due_after = Column(UTCDateTime, nullable=False)

    def __repr__(self):
        return f"<ReviewEvent(id={self.id}, card={self.flashcard_id}, rating={self.rating})>"
