"""
Long-Term Memory (LTM) Updates

Implements the FSRS-6 initial values and the stability/difficulty updates
applied when at least a day has passed since the previous review.

Key principles:
- Spaced, effortful success produces the largest stability gains
- A lapse drops stability sharply, more so when recall was expected (high R)
- Difficulty moves with the rating, damped near the top of the scale and
  pulled slightly back toward the initial "Easy" difficulty
"""

from __future__ import annotations

import math
from typing import Sequence

from lingo.fsrs.constants import D_MAX, D_MIN, S_MIN, Rating


def _clamp_difficulty(difficulty: float) -> float:
    return min(max(difficulty, D_MIN), D_MAX)


def initial_stability(rating: Rating, parameters: Sequence[float]) -> float:
    """
    Stability after the very first rating.

    Formula: S0(G) = w[G - 1]
    """
    return max(parameters[rating - 1], S_MIN)


def initial_difficulty(
    rating: Rating,
    parameters: Sequence[float],
    clamp: bool = True
) -> float:
    """
    Difficulty after the very first rating.

    Formula: D0(G) = w4 - exp(w5 * (G - 1)) + 1

    Args:
        rating: First rating
        parameters: FSRS weights
        clamp: Clip to [1, 10]; mean reversion uses the raw value

    Returns:
        Initial difficulty
    """
    difficulty = parameters[4] - math.exp(parameters[5] * (rating - 1)) + 1.0
    return _clamp_difficulty(difficulty) if clamp else difficulty


def update_difficulty(
    difficulty: float,
    rating: Rating,
    parameters: Sequence[float]
) -> float:
    """
    Update difficulty based on the rating.

    Formula:
        delta = -w6 * (G - 3)
        D' = D + delta * (10 - D) / 9                 (linear damping)
        D'' = w7 * D0(Easy) + (1 - w7) * D'           (mean reversion)
        clip(D'', 1, 10)

    Conceptually:
    - Again and Hard increase difficulty
    - Good leaves it (almost) unchanged
    - Easy decreases it

    Args:
        difficulty: Current difficulty
        rating: User rating
        parameters: FSRS weights

    Returns:
        New difficulty clipped to [1, 10]
    """
    delta = -parameters[6] * (rating - 3)
    damped = difficulty + delta * (10.0 - difficulty) / 9.0

    target = initial_difficulty(Rating.EASY, parameters, clamp=False)
    reverted = parameters[7] * target + (1.0 - parameters[7]) * damped

    return _clamp_difficulty(reverted)


def update_stability_on_success(
    stability: float,
    difficulty: float,
    retrievability: float,
    rating: Rating,
    parameters: Sequence[float]
) -> float:
    """
    Update stability after successful retrieval (Hard/Good/Easy).

    Formula:
        S' = S * (1 + e^w8 * (11 - D) * S^-w9 * (e^(w10 * (1 - R)) - 1) * hp * eb)

    Where hp = w15 for Hard (penalty) and eb = w16 for Easy (bonus).

    Args:
        stability: Current stability
        difficulty: Current difficulty
        retrievability: Retrievability at review time
        rating: HARD, GOOD or EASY
        parameters: FSRS weights

    Returns:
        New stability value
    """
    if rating == Rating.AGAIN:
        raise ValueError("Use update_stability_on_failure for AGAIN")

    hard_penalty = parameters[15] if rating == Rating.HARD else 1.0
    easy_bonus = parameters[16] if rating == Rating.EASY else 1.0

    growth = (
        math.exp(parameters[8])
        * (11.0 - difficulty)
        * stability ** -parameters[9]
        * (math.exp(parameters[10] * (1.0 - retrievability)) - 1.0)
        * hard_penalty
        * easy_bonus
    )
    return max(stability * (1.0 + growth), S_MIN)


def update_stability_on_failure(
    stability: float,
    difficulty: float,
    retrievability: float,
    parameters: Sequence[float]
) -> float:
    """
    Update stability after a lapse (Again).

    Formula:
        long  = w11 * D^-w12 * ((S + 1)^w13 - 1) * e^(w14 * (1 - R))
        short = S / e^(w17 * w18)
        S' = min(long, short)

    The short-term bound keeps a lapse from ever raising stability.
    """
    long_term = (
        parameters[11]
        * difficulty ** -parameters[12]
        * ((stability + 1.0) ** parameters[13] - 1.0)
        * math.exp(parameters[14] * (1.0 - retrievability))
    )
    short_term = stability / math.exp(parameters[17] * parameters[18])

    return max(min(long_term, short_term), S_MIN)


def apply_ltm_update(
    stability: float,
    difficulty: float,
    retrievability: float,
    rating: Rating,
    parameters: Sequence[float]
) -> tuple[float, float]:
    """
    Apply LTM update rules to get new S and D.

    Stability is updated from the pre-review difficulty.

    Returns:
        (new_stability, new_difficulty)
    """
    if rating == Rating.AGAIN:
        new_stability = update_stability_on_failure(
            stability, difficulty, retrievability, parameters
        )
    else:
        new_stability = update_stability_on_success(
            stability, difficulty, retrievability, rating, parameters
        )

    new_difficulty = update_difficulty(difficulty, rating, parameters)

    return new_stability, new_difficulty
