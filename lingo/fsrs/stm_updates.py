"""
Short-Term Memory (STM) Updates

Same-day stability update used when less than a day has passed since the
previous review (learning steps, relearning steps, or an early review).

Key principle:
Same-day successes can only hold or raise stability; same-day failures
shrink it, but far less than a long-term lapse would.
"""

from __future__ import annotations

import math
from typing import Sequence

from lingo.fsrs.constants import S_MIN, Rating


SAME_DAY_THRESHOLD_DAYS = 1.0


def is_same_day_review(elapsed_days: float) -> bool:
    """A review less than a day after the previous one is short-term."""
    return elapsed_days < SAME_DAY_THRESHOLD_DAYS


def apply_stm_update(
    stability: float,
    rating: Rating,
    parameters: Sequence[float]
) -> float:
    """
    Update stability for a same-day review.

    Formula:
        increase = e^(w17 * (G - 3 + w18)) * S^-w19
        increase = max(increase, 1) for Good and Easy
        S' = S * increase

    Args:
        stability: Current stability
        rating: User rating
        parameters: FSRS weights

    Returns:
        New stability value
    """
    increase = (
        math.exp(parameters[17] * (rating - 3 + parameters[18]))
        * stability ** -parameters[19]
    )
    if rating in (Rating.GOOD, Rating.EASY):
        increase = max(increase, 1.0)

    return max(stability * increase, S_MIN)
