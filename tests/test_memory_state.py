import math
from datetime import datetime, timedelta, timezone

import pytest

from lingo.exceptions import InvariantViolation
from lingo.fsrs.constants import DEFAULT_PARAMETERS as W, Rating, State
from lingo.fsrs.ltm_updates import (
    apply_ltm_update,
    initial_difficulty,
    initial_stability,
    update_difficulty,
    update_stability_on_failure,
    update_stability_on_success,
)
from lingo.fsrs.memory_state import (
    Card,
    calculate_retrievability,
    forgetting_factor,
    get_elapsed_days,
    new_card,
    next_interval,
    round_half_up,
)
from lingo.fsrs.stm_updates import apply_stm_update, is_same_day_review


NOW = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


# ---- Card snapshot ----

def test_new_card_is_due_immediately():
    card = new_card(NOW)
    assert card.state == State.NEW
    assert card.due == NOW
    assert (card.reps, card.lapses, card.learning_steps) == (0, 0, 0)
    assert card.last_review is None


def test_card_coerces_state_from_int():
    card = Card(due=NOW, stability=3.0, difficulty=5.0, state=2)
    assert card.state is State.REVIEW


@pytest.mark.parametrize("kwargs", [
    {"state": 7, "stability": 1.0, "difficulty": 5.0},
    {"state": State.REVIEW, "stability": -1.0, "difficulty": 5.0},
    {"state": State.REVIEW, "stability": 0.0, "difficulty": 5.0},
    {"state": State.REVIEW, "stability": 1.0, "difficulty": 11.0},
    {"state": State.LEARNING, "stability": 1.0, "difficulty": 0.5},
    {"state": State.REVIEW, "stability": 1.0, "difficulty": 5.0, "lapses": -1},
    {"state": State.NEW, "reps": -1},
])
def test_card_rejects_illegal_snapshots(kwargs):
    with pytest.raises(InvariantViolation):
        Card(due=NOW, **kwargs)


def test_card_rejects_naive_due_date():
    with pytest.raises(InvariantViolation):
        Card(due=datetime(2024, 3, 1, 9, 0))


# ---- Forgetting curve ----

def test_retrievability_is_ninety_percent_after_stability_days():
    assert calculate_retrievability(10.0, 10.0, W) == pytest.approx(0.9)
    assert calculate_retrievability(3.5, 3.5, W) == pytest.approx(0.9)


def test_retrievability_decreases_with_time():
    r_values = [calculate_retrievability(5.0, t, W) for t in (0, 1, 5, 20, 100)]
    assert r_values[0] == 1.0
    assert r_values == sorted(r_values, reverse=True)
    assert all(0.0 < r <= 1.0 for r in r_values)


def test_forgetting_factor_matches_decay():
    decay = -W[20]
    assert forgetting_factor(W) == pytest.approx(0.9 ** (1 / decay) - 1)


def test_elapsed_days_is_fractional_and_never_negative():
    assert get_elapsed_days(NOW, NOW + timedelta(hours=12)) == pytest.approx(0.5)
    assert get_elapsed_days(NOW + timedelta(days=1), NOW) == 0.0
    assert get_elapsed_days(None, NOW) == 0.0


# ---- Interval ----

def test_interval_equals_stability_at_ninety_percent_retention():
    assert next_interval(10.0, 0.9, 36500, W) == 10
    assert next_interval(42.0, 0.9, 36500, W) == 42


def test_higher_retention_gives_shorter_interval():
    low = next_interval(50.0, 0.8, 36500, W)
    default = next_interval(50.0, 0.92, 36500, W)
    high = next_interval(50.0, 0.97, 36500, W)
    assert low > default > high


def test_interval_is_clamped():
    assert next_interval(0.001, 0.92, 36500, W) == 1
    assert next_interval(1e9, 0.92, 365, W) == 365


@pytest.mark.parametrize("value, expected", [
    (0.5, 1), (1.5, 2), (2.5, 3), (2.4999, 2), (3.5001, 4), (7.0, 7),
])
def test_intervals_round_halves_up(value, expected):
    assert round_half_up(value) == expected


# ---- Initial values ----

def test_initial_stability_comes_from_first_four_weights():
    assert initial_stability(Rating.AGAIN, W) == pytest.approx(0.212)
    assert initial_stability(Rating.HARD, W) == pytest.approx(1.2931)
    assert initial_stability(Rating.GOOD, W) == pytest.approx(2.3065)
    assert initial_stability(Rating.EASY, W) == pytest.approx(8.2956)


def test_initial_difficulty_orders_by_rating_and_clamps():
    assert initial_difficulty(Rating.AGAIN, W) == pytest.approx(W[4])
    assert initial_difficulty(Rating.GOOD, W) == pytest.approx(W[4] - math.exp(2 * W[5]) + 1)
    assert initial_difficulty(Rating.EASY, W) == 1.0
    assert initial_difficulty(Rating.EASY, W, clamp=False) < 1.0
    assert (
        initial_difficulty(Rating.AGAIN, W)
        > initial_difficulty(Rating.HARD, W)
        > initial_difficulty(Rating.GOOD, W)
    )


# ---- Difficulty ----

def test_difficulty_moves_with_rating():
    again = update_difficulty(5.0, Rating.AGAIN, W)
    hard = update_difficulty(5.0, Rating.HARD, W)
    good = update_difficulty(5.0, Rating.GOOD, W)
    easy = update_difficulty(5.0, Rating.EASY, W)

    assert again > hard > good > easy
    assert good == pytest.approx(5.0, abs=0.02)


def test_difficulty_stays_within_bounds():
    assert update_difficulty(10.0, Rating.AGAIN, W) <= 10.0
    assert update_difficulty(1.0, Rating.EASY, W) == 1.0
    for rating in Rating:
        for difficulty in (1.0, 3.3, 7.7, 10.0):
            assert 1.0 <= update_difficulty(difficulty, rating, W) <= 10.0


def test_difficulty_increase_is_damped_near_the_top():
    low_gain = update_difficulty(2.0, Rating.AGAIN, W) - 2.0
    high_gain = update_difficulty(9.0, Rating.AGAIN, W) - 9.0
    assert low_gain > high_gain > 0


# ---- Stability ----

def test_success_grows_stability_most_when_recall_was_hard():
    early = update_stability_on_success(10.0, 5.0, 0.95, Rating.GOOD, W)
    late = update_stability_on_success(10.0, 5.0, 0.7, Rating.GOOD, W)
    assert 10.0 < early < late


def test_hard_penalty_and_easy_bonus():
    hard = update_stability_on_success(10.0, 5.0, 0.9, Rating.HARD, W)
    good = update_stability_on_success(10.0, 5.0, 0.9, Rating.GOOD, W)
    easy = update_stability_on_success(10.0, 5.0, 0.9, Rating.EASY, W)
    assert hard < good < easy


def test_success_update_refuses_again():
    with pytest.raises(ValueError):
        update_stability_on_success(10.0, 5.0, 0.9, Rating.AGAIN, W)


def test_lapse_drops_stability_sharply():
    after = update_stability_on_failure(10.0, 5.0, 0.9, W)
    assert 0.001 <= after < 10.0 / 2


def test_lapse_never_raises_stability():
    for stability in (0.01, 0.5, 2.0, 30.0, 400.0):
        assert update_stability_on_failure(stability, 9.0, 0.2, W) <= stability


def test_apply_ltm_update_uses_pre_review_difficulty():
    stability, difficulty = apply_ltm_update(10.0, 5.0, 0.9, Rating.AGAIN, W)
    assert stability == pytest.approx(update_stability_on_failure(10.0, 5.0, 0.9, W))
    assert difficulty == pytest.approx(update_difficulty(5.0, Rating.AGAIN, W))


# ---- Same-day updates ----

def test_same_day_threshold():
    assert is_same_day_review(0.0)
    assert is_same_day_review(0.99)
    assert not is_same_day_review(1.0)


def test_same_day_success_never_lowers_stability():
    for stability in (0.1, 2.3065, 50.0):
        assert apply_stm_update(stability, Rating.GOOD, W) >= stability
        assert apply_stm_update(stability, Rating.EASY, W) >= stability


def test_same_day_failure_lowers_stability():
    after = apply_stm_update(5.0, Rating.AGAIN, W)
    assert 5.0 / 4 < after < 5.0
