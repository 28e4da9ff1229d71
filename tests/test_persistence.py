from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import inspect
from sqlalchemy.exc import StatementError

from lingo.fsrs import Rating, Scheduler, SchedulerConfig, State
from lingo.fsrs.database import init_db, reset_db, session_scope
from lingo.fsrs.models import ContentLanguage, Flashcard, ReviewEvent
from lingo.fsrs.persistence import FlashcardRepository, card_from_row


START = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def make_row(user_id="alice", due=START, front="猫", created_at=START, **fields):
    return Flashcard(
        user_id=user_id,
        language=ContentLanguage.JAPANESE,
        front_text=front,
        back_text="cat",
        due_date=due,
        created_at=created_at,
        **fields,
    )


def add(session_factory, row):
    with session_scope(session_factory) as session:
        FlashcardRepository(session).add_card(row)
    return row


# ---- Schema ----

def test_init_db_is_idempotent(engine):
    init_db(engine)
    init_db(engine)
    assert {"flashcards", "review_events"} <= set(inspect(engine).get_table_names())


def test_reset_db_drops_data(engine, session_factory):
    add(session_factory, make_row())
    reset_db(engine)
    with session_scope(session_factory) as session:
        assert session.query(Flashcard).count() == 0


def test_session_scope_rolls_back_on_error(session_factory):
    with pytest.raises(RuntimeError):
        with session_scope(session_factory) as session:
            FlashcardRepository(session).add_card(make_row())
            raise RuntimeError("boom")

    with session_scope(session_factory) as session:
        assert session.query(Flashcard).count() == 0


# ---- Columns ----

def test_datetimes_come_back_aware_utc(session_factory):
    tokyo = timezone(timedelta(hours=9))
    row = add(session_factory, make_row(due=datetime(2024, 3, 1, 18, 0, tzinfo=tokyo)))

    with session_scope(session_factory) as session:
        stored = FlashcardRepository(session).find_card_by_id(row.id)

    assert stored.due_date == datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)
    assert stored.due_date.tzinfo is not None
    assert stored.created_at == START


def test_naive_datetimes_are_rejected(session_factory):
    with pytest.raises((ValueError, StatementError)):
        add(session_factory, make_row(due=datetime(2024, 3, 1, 9, 0)))


def test_new_row_defaults(session_factory):
    row = add(session_factory, make_row())

    assert len(row.id) == 36
    assert row.state == State.NEW
    assert (row.stability, row.difficulty) == (0.0, 0.0)
    assert (row.reps, row.lapses, row.learning_steps) == (0, 0, 0)
    assert row.last_reviewed_at is None
    assert row.version_id == 1


def test_version_increments_on_every_write(session_factory):
    row = add(session_factory, make_row())

    with session_scope(session_factory) as session:
        repo = FlashcardRepository(session)
        stored = repo.find_card_by_id(row.id)
        stored.back_text = "cat (animal)"
        repo.save_card(stored)

    assert stored.version_id == 2


def test_details_json_round_trip(session_factory):
    details = {"furigana": "ねこ", "pitch_accent": [1], "example_sentences": []}
    row = add(session_factory, make_row(details=details))

    with session_scope(session_factory) as session:
        assert FlashcardRepository(session).find_card_by_id(row.id).details == details


# ---- Ownership ----

def test_find_owned_card_hides_other_users(session_factory):
    row = add(session_factory, make_row(user_id="alice"))

    with session_scope(session_factory) as session:
        repo = FlashcardRepository(session)
        assert repo.find_owned_card(row.id, "alice").id == row.id
        assert repo.find_owned_card(row.id, "bob") is None
        assert repo.find_owned_card("missing", "alice") is None
        assert repo.find_owned_card(row.id, "alice", for_update=True) is not None


# ---- Reviews ----

def test_apply_review_writes_snapshot_and_event(session_factory):
    row = add(session_factory, make_row())
    scheduler = Scheduler(SchedulerConfig(enable_fuzz=False))
    now = START + timedelta(minutes=5)

    with session_scope(session_factory) as session:
        repo = FlashcardRepository(session)
        stored = repo.find_owned_card(row.id, "alice", for_update=True)
        result = scheduler.compute_next(card_from_row(stored), now, now, Rating.GOOD)
        event = repo.apply_review(stored, result)

    assert stored.state == State.LEARNING
    assert stored.learning_steps == 1
    assert stored.reps == 1
    assert stored.last_reviewed_at == now
    assert stored.due_date == now + timedelta(minutes=1)
    assert stored.version_id == 2

    assert event.id is not None
    assert event.rating == Rating.GOOD
    assert event.state_before == State.NEW
    assert event.state_after == State.LEARNING
    assert event.stability_before == 0.0
    assert event.stability_after == pytest.approx(2.3065)
    assert event.due_after == stored.due_date

    with session_scope(session_factory) as session:
        events = FlashcardRepository(session).list_review_events(row.id, "alice")
    assert [e.id for e in events] == [event.id]


def test_delete_removes_card_and_its_events(session_factory):
    row = add(session_factory, make_row())
    scheduler = Scheduler(SchedulerConfig(enable_fuzz=False))

    with session_scope(session_factory) as session:
        repo = FlashcardRepository(session)
        stored = repo.find_owned_card(row.id, "alice")
        repo.apply_review(stored, scheduler.compute_next(card_from_row(stored), START, START, Rating.AGAIN))

    with session_scope(session_factory) as session:
        assert FlashcardRepository(session).delete_card(row.id, "bob") == 0
    with session_scope(session_factory) as session:
        assert FlashcardRepository(session).delete_card(row.id, "alice") == 1

    with session_scope(session_factory) as session:
        assert session.query(Flashcard).count() == 0
        assert session.query(ReviewEvent).count() == 0


# ---- Browsing ----

def test_list_cards_search_filter_and_paging(session_factory):
    add(session_factory, make_row(front="猫", created_at=START))
    add(session_factory, make_row(front="犬", created_at=START + timedelta(minutes=1)))
    add(session_factory, make_row(front="Cathedral", created_at=START + timedelta(minutes=2)))
    add(session_factory, make_row(user_id="bob", front="猫"))

    with session_scope(session_factory) as session:
        repo = FlashcardRepository(session)

        cards, total = repo.list_cards("alice")
        assert total == 3
        assert [c.front_text for c in cards] == ["Cathedral", "犬", "猫"]

        cards, total = repo.list_cards("alice", offset=1, limit=1)
        assert total == 3
        assert [c.front_text for c in cards] == ["犬"]

        # "cat" matches the back text of every card and the front of "Cathedral"
        cards, total = repo.list_cards("alice", q="CAT")
        assert total == 3

        cards, total = repo.list_cards("alice", q="犬")
        assert [c.front_text for c in cards] == ["犬"]

        cards, total = repo.list_cards("alice", language=ContentLanguage.ENGLISH)
        assert (cards, total) == ([], 0)
