import pytest
from pydantic import ValidationError as PydanticValidationError

from lingo.exceptions import ValidationError
from lingo.fsrs.constants import Rating
from lingo.schemas import (
    FlashcardCreate,
    FlashcardListQuery,
    FlashcardPage,
    FlashcardUpdate,
    ReviewSubmission,
    parse_rating,
    validate_payload,
)


# ---- Ratings ----

@pytest.mark.parametrize("value, expected", [
    (Rating.HARD, Rating.HARD),
    (1, Rating.AGAIN),
    (4, Rating.EASY),
    ("3", Rating.GOOD),
    ("good", Rating.GOOD),
    (" Easy ", Rating.EASY),
])
def test_parse_rating_accepts_numbers_and_names(value, expected):
    assert parse_rating(value) is expected


@pytest.mark.parametrize("value", [0, 5, -1, "meh", "", True, False, None, 2.5])
def test_parse_rating_rejects_everything_else(value):
    with pytest.raises(ValidationError):
        parse_rating(value)


def test_review_submission_uses_same_rating_rules():
    submission = ReviewSubmission(flashcard_id="abc", rating="again")
    assert submission.rating is Rating.AGAIN

    with pytest.raises(PydanticValidationError):
        ReviewSubmission(flashcard_id="abc", rating=7)


# ---- Create / update ----

def test_create_payload_strips_and_requires_text(card_payload):
    card = validate_payload(FlashcardCreate, {**card_payload, "front_text": "  漢字 "})
    assert card.front_text == "漢字"
    assert card.details.furigana == "かんじ"

    with pytest.raises(ValidationError) as exc_info:
        validate_payload(FlashcardCreate, {**card_payload, "back_text": "   "})
    assert exc_info.value.errors[0]["loc"] == ("back_text",)


def test_create_payload_rejects_unknown_language(card_payload):
    with pytest.raises(ValidationError):
        validate_payload(FlashcardCreate, {**card_payload, "language": "klingon"})


def test_create_payload_rejects_scheduling_fields(card_payload):
    with pytest.raises(ValidationError):
        validate_payload(FlashcardCreate, {**card_payload, "stability": 12.0})


@pytest.mark.parametrize("field", [
    "stability", "difficulty", "due_date", "state", "reps", "lapses",
    "learning_steps", "last_reviewed_at",
])
def test_update_payload_rejects_scheduling_fields(field):
    with pytest.raises(ValidationError):
        validate_payload(FlashcardUpdate, {field: 1})


def test_update_payload_rejects_null_text():
    with pytest.raises(ValidationError):
        validate_payload(FlashcardUpdate, {"front_text": None})


def test_update_payload_tracks_only_given_fields():
    update = validate_payload(FlashcardUpdate, {"back_text": "kanji"})
    assert update.model_dump(exclude_unset=True) == {"back_text": "kanji"}


def test_validate_payload_passes_model_instances_through():
    update = FlashcardUpdate(back_text="kanji")
    assert validate_payload(FlashcardUpdate, update) is update


# ---- Listing ----

def test_list_query_defaults_and_bounds():
    query = validate_payload(FlashcardListQuery, {})
    assert (query.page, query.limit, query.q, query.language) == (1, 20, None, None)

    with pytest.raises(ValidationError):
        validate_payload(FlashcardListQuery, {"limit": 101})
    with pytest.raises(ValidationError):
        validate_payload(FlashcardListQuery, {"page": 0})


@pytest.mark.parametrize("total, limit, last_page", [(0, 20, 0), (1, 20, 1), (40, 20, 2), (41, 20, 3)])
def test_page_meta_last_page(total, limit, last_page):
    query = FlashcardListQuery(limit=limit)
    page = FlashcardPage.build([], total, query)
    assert page.meta.last_page == last_page
    assert page.meta.total == total
