"""
Pydantic models for flashcard payloads.

These models validate what callers send (create/update/list/review) and shape
what the service hands back. Scheduling fields are never accepted as input.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from lingo.exceptions import ValidationError
from lingo.fsrs.constants import Rating, State
from lingo.fsrs.models import ContentLanguage


# Configuration
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


# ---- Card details ----

class ExampleSentence(BaseModel):
    """An example sentence with optional translation."""
    sentence: str = Field(..., min_length=1)
    translation: Optional[str] = None


class CardDetails(BaseModel):
    """
    Language-specific metadata shown on the back of a card.

    Opaque to the scheduler; only stored and displayed.
    """
    model_config = ConfigDict(extra="forbid")

    part_of_speech: Optional[str] = None
    audio_url: Optional[str] = None
    example_sentences: list[ExampleSentence] = Field(default_factory=list)

    # Japanese
    furigana: Optional[str] = None        # e.g. "かんじ" for "漢字"
    pitch_accent: Optional[list[int]] = None

    # Chinese
    pinyin: Optional[str] = None          # e.g. "hànzì"
    bopomofo: Optional[str] = None

    # English
    ipa: Optional[str] = None


# ---- Requests ----

class FlashcardCreate(BaseModel):
    """Payload for creating a flashcard."""
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    language: ContentLanguage
    front_text: str = Field(..., min_length=1)
    back_text: str = Field(..., min_length=1)
    content_id: Optional[UUID] = None
    details: Optional[CardDetails] = None


class FlashcardUpdate(BaseModel):
    """
    Partial update of a flashcard's content.

    extra="forbid" rejects stability, due_date and every other scheduling field.
    """
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    language: Optional[ContentLanguage] = None
    front_text: Optional[str] = Field(None, min_length=1)
    back_text: Optional[str] = Field(None, min_length=1)
    content_id: Optional[UUID] = None
    details: Optional[CardDetails] = None

    @field_validator("front_text", "back_text", "language")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not set to null")
        return value


class FlashcardListQuery(BaseModel):
    """Filters and paging for the card browser."""
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    page: int = Field(1, ge=1)
    limit: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    q: Optional[str] = None
    language: Optional[ContentLanguage] = None


class ReviewSubmission(BaseModel):
    """A single rating for a single card."""
    flashcard_id: str = Field(..., min_length=1)
    rating: Rating

    @field_validator("rating", mode="before")
    @classmethod
    def _parse_rating(cls, value):
        try:
            return parse_rating(value)
        except ValidationError as e:
            raise ValueError(str(e)) from e


# ---- Responses ----

class FlashcardView(BaseModel):
    """Serialized flashcard (content + scheduling state)."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    content_id: Optional[str] = None
    language: ContentLanguage
    front_text: str
    back_text: str
    details: Optional[dict[str, Any]] = None
    stability: float
    difficulty: float
    learning_steps: int
    reps: int
    state: State
    due_date: datetime
    last_reviewed_at: Optional[datetime] = None
    lapses: int
    created_at: datetime


class PageMeta(BaseModel):
    total: int
    page: int
    limit: int
    last_page: int


class FlashcardPage(BaseModel):
    """One page of the card browser."""
    data: list[FlashcardView]
    meta: PageMeta

    @classmethod
    def build(cls, cards, total: int, query: FlashcardListQuery) -> "FlashcardPage":
        return cls(
            data=[FlashcardView.model_validate(card) for card in cards],
            meta=PageMeta(
                total=total,
                page=query.page,
                limit=query.limit,
                last_page=math.ceil(total / query.limit),
            ),
        )


class ReviewOutcome(BaseModel):
    """Acknowledgement of an applied review."""
    flashcard_id: str
    next_due_date: datetime
    state: State
    message: str = "Review submitted successfully."


# ---- Helpers ----

def parse_rating(value: Any) -> Rating:
    """
    Coerce a rating from a Rating, its number (1-4) or its name ("good").

    Raises:
        ValidationError: For anything outside the four ratings
    """
    if isinstance(value, Rating):
        return value
    if isinstance(value, bool):
        raise ValidationError(f"Invalid rating: {value!r}")
    if isinstance(value, int):
        try:
            return Rating(value)
        except ValueError:
            raise ValidationError(f"Invalid rating: {value!r}") from None
    if isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            return parse_rating(int(text))
        try:
            return Rating[text.upper()]
        except KeyError:
            raise ValidationError(f"Invalid rating: {value!r}") from None
    raise ValidationError(f"Invalid rating: {value!r}")


def validate_payload(model: type[BaseModel], payload: Any) -> BaseModel:
    """
    Validate a dict (or an instance of `model`) and translate pydantic errors.

    Raises:
        ValidationError: With pydantic's error list attached
    """
    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(
            f"Invalid {model.__name__} payload",
            errors=e.errors(include_url=False),
        ) from e
