from datetime import timedelta

import pytest

from lingo.fsrs.config import (
    SchedulerConfig,
    format_step,
    format_steps,
    load_scheduler_config,
    parse_step,
    parse_steps,
)
from lingo.fsrs.constants import DEFAULT_PARAMETERS


def test_parse_step_units():
    assert parse_step("30s") == timedelta(seconds=30)
    assert parse_step("10m") == timedelta(minutes=10)
    assert parse_step(" 1h ") == timedelta(hours=1)
    assert parse_step("2d") == timedelta(days=2)
    assert parse_step("1.5h") == timedelta(minutes=90)


@pytest.mark.parametrize("value", ["", "10", "m", "10x", "-1m", "ten minutes"])
def test_parse_step_rejects_malformed(value):
    with pytest.raises(ValueError):
        parse_step(value)


def test_parse_steps_list_and_empty():
    assert parse_steps("1m,10m,60m") == (
        timedelta(minutes=1), timedelta(minutes=10), timedelta(minutes=60)
    )
    assert parse_steps("") == ()
    assert parse_steps(" , ") == ()


def test_format_steps_roundtrip_readable():
    assert format_step(timedelta(minutes=10)) == "10m"
    assert format_step(timedelta(hours=1)) == "1h"
    assert format_step(timedelta(days=1)) == "1d"
    assert format_step(timedelta(seconds=45)) == "45s"
    assert format_steps(parse_steps("1m,10m,60m")) == "1m,10m,1h"


def test_default_config_matches_documented_defaults():
    config = SchedulerConfig()

    assert config.learning_steps == (
        timedelta(minutes=1), timedelta(minutes=10), timedelta(minutes=60)
    )
    assert config.relearning_steps == (timedelta(minutes=1), timedelta(minutes=10))
    assert config.enable_fuzz is True
    assert config.maximum_interval_days == 36500
    assert config.request_retention == pytest.approx(0.92)
    assert config.parameters == DEFAULT_PARAMETERS


def test_config_is_immutable():
    config = SchedulerConfig()
    with pytest.raises(AttributeError):
        config.request_retention = 0.5


def test_config_accepts_lists_and_stores_tuples():
    config = SchedulerConfig(learning_steps=[timedelta(minutes=5)], relearning_steps=[])
    assert config.learning_steps == (timedelta(minutes=5),)
    assert config.relearning_steps == ()


@pytest.mark.parametrize("kwargs", [
    {"request_retention": 0.0},
    {"request_retention": 1.0},
    {"maximum_interval_days": 0},
    {"learning_steps": (timedelta(0),)},
    {"relearning_steps": (timedelta(minutes=-1),)},
    {"parameters": DEFAULT_PARAMETERS[:-1]},
])
def test_config_rejects_bad_values(kwargs):
    with pytest.raises(ValueError):
        SchedulerConfig(**kwargs)


def test_load_scheduler_config_from_environment():
    config = load_scheduler_config({
        "SRS_LEARNING_STEPS": "30s,5m",
        "SRS_RELEARNING_STEPS": "",
        "SRS_ENABLE_FUZZ": "false",
        "SRS_MAXIMUM_INTERVAL": "365",
        "SRS_REQUEST_RETENTION": "0.85",
    })

    assert config.learning_steps == (timedelta(seconds=30), timedelta(minutes=5))
    assert config.relearning_steps == ()
    assert config.enable_fuzz is False
    assert config.maximum_interval_days == 365
    assert config.request_retention == pytest.approx(0.85)


def test_load_scheduler_config_defaults_when_unset():
    assert load_scheduler_config({}) == SchedulerConfig()


def test_load_scheduler_config_rejects_bad_retention():
    with pytest.raises(ValueError):
        load_scheduler_config({"SRS_REQUEST_RETENTION": "1.5"})
