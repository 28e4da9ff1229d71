import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from lingo.fsrs import FixedFuzz, Scheduler, SchedulerConfig  # noqa: E402
from lingo.fsrs.database import create_db_engine, init_db, make_session_factory  # noqa: E402
from lingo.srs_service import SrsService  # noqa: E402


START = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    """Settable clock; call it to read the current instant."""

    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def engine(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'test.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler():
    return Scheduler(SchedulerConfig(), FixedFuzz(0.5))


@pytest.fixture
def service(session_factory, scheduler, clock):
    return SrsService(session_factory, scheduler, clock)


@pytest.fixture
def card_payload():
    return {
        "language": "jpn",
        "front_text": "漢字",
        "back_text": "kanji; Chinese characters",
        "details": {
            "part_of_speech": "noun",
            "furigana": "かんじ",
            "pitch_accent": [0],
            "example_sentences": [
                {"sentence": "漢字を勉強します。", "translation": "I study kanji."}
            ],
        },
    }
