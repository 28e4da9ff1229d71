"""
FSRS Constants and Parameters

Enums shared by the card model and the scheduler, plus the default FSRS-6
weights and numeric bounds. Tunable scheduling options (steps, fuzz, retention)
live in SchedulerConfig, not here.
"""

from __future__ import annotations

from datetime import timedelta
from enum import IntEnum


# ---- Ratings ----

class Rating(IntEnum):
    """Four-point recall feedback submitted by the learner."""
    AGAIN = 1   # Retrieval failed
    HARD = 2    # Retrieved with high effort
    GOOD = 3    # Retrieved normally
    EASY = 4    # Retrieved fluently


# ---- Card lifecycle ----

class State(IntEnum):
    """Lifecycle phase of a card."""
    NEW = 0
    LEARNING = 1
    REVIEW = 2
    RELEARNING = 3


# ---- FSRS-6 default weights (w0..w20) ----

DEFAULT_PARAMETERS: tuple[float, ...] = (
    0.212,   # w0:  initial stability, Again
    1.2931,  # w1:  initial stability, Hard
    2.3065,  # w2:  initial stability, Good
    8.2956,  # w3:  initial stability, Easy
    6.4133,  # w4:  initial difficulty base
    0.8334,  # w5:  initial difficulty rating factor
    3.0194,  # w6:  difficulty delta per rating
    0.001,   # w7:  difficulty mean reversion
    1.8722,  # w8:  recall stability scale
    0.1666,  # w9:  recall stability saturation
    0.796,   # w10: recall stability retrievability factor
    1.4835,  # w11: forget stability scale
    0.0614,  # w12: forget stability difficulty exponent
    0.2629,  # w13: forget stability stability exponent
    1.6483,  # w14: forget stability retrievability factor
    0.6014,  # w15: hard penalty
    1.8729,  # w16: easy bonus
    0.5425,  # w17: short-term stability scale
    0.0912,  # w18: short-term stability offset
    0.0658,  # w19: short-term stability saturation
    0.1542,  # w20: forgetting curve decay
)

PARAMETER_COUNT = len(DEFAULT_PARAMETERS)


# ---- Bounds ----

S_MIN = 0.001    # Stability floor (days)
D_MIN = 1.0      # Minimum difficulty
D_MAX = 10.0     # Maximum difficulty


# ---- Fuzz ----
# Each range widens the fuzz window by `factor` days per interval day inside it.

FUZZ_MIN_INTERVAL_DAYS = 2.5

FUZZ_RANGES: tuple[dict[str, float], ...] = (
    {"start": 2.5, "end": 7.0, "factor": 0.15},
    {"start": 7.0, "end": 20.0, "factor": 0.1},
    {"start": 20.0, "end": float("inf"), "factor": 0.05},
)


# ---- Scheduler defaults ----

DEFAULT_LEARNING_STEPS = (timedelta(minutes=1), timedelta(minutes=10), timedelta(minutes=60))
DEFAULT_RELEARNING_STEPS = (timedelta(minutes=1), timedelta(minutes=10))
DEFAULT_REQUEST_RETENTION = 0.92
DEFAULT_MAXIMUM_INTERVAL = 36500  # 100 years
