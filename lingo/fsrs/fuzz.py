"""
Interval fuzzing.

Cards reviewed together would otherwise come due on the same day forever.
Long intervals are jittered inside a window that widens with the interval.
The randomness is injected so tests can pin exact intervals.
"""

from __future__ import annotations

import random
from typing import Protocol

from lingo.fsrs.constants import FUZZ_MIN_INTERVAL_DAYS, FUZZ_RANGES
from lingo.fsrs.memory_state import round_half_up


class FuzzSource(Protocol):
    """Anything with random() -> float in [0, 1); random.Random qualifies."""

    def random(self) -> float:
        ...


class FixedFuzz:
    """Deterministic fuzz source that always returns the same draw."""

    def __init__(self, value: float = 0.5):
        if not 0.0 <= value < 1.0:
            raise ValueError(f"Fuzz draw must be in [0, 1), got {value}")
        self.value = value

    def random(self) -> float:
        return self.value


def default_fuzz_source() -> FuzzSource:
    return random.Random()


def get_fuzz_range(
    interval_days: float,
    maximum_interval_days: int,
    elapsed_days: float = 0.0
) -> tuple[int, int]:
    """
    Inclusive [min, max] window of fuzzed intervals for a given interval.

    The window half-width is 1 day plus a share of the interval:
    15% of the part in 2.5-7 days, 10% of 7-20 days, 5% beyond 20 days.
    When the interval exceeds the days already elapsed, the window starts
    after them.
    """
    delta = 1.0
    for fuzz_range in FUZZ_RANGES:
        covered = min(interval_days, fuzz_range["end"]) - fuzz_range["start"]
        delta += fuzz_range["factor"] * max(covered, 0.0)

    min_ivl = round_half_up(interval_days - delta)
    max_ivl = round_half_up(interval_days + delta)

    min_ivl = max(2, min_ivl)
    if interval_days > elapsed_days:
        min_ivl = max(min_ivl, int(elapsed_days) + 1)
    max_ivl = min(max_ivl, maximum_interval_days)
    min_ivl = min(min_ivl, max_ivl)
    return min_ivl, max_ivl


def fuzz_interval(
    interval_days: int,
    maximum_interval_days: int,
    source: FuzzSource,
    elapsed_days: float = 0.0
) -> int:
    """
    Jitter an interval (in days) using one draw from `source`.

    Intervals below 2.5 days are returned unchanged.
    """
    if interval_days < FUZZ_MIN_INTERVAL_DAYS:
        return interval_days

    min_ivl, max_ivl = get_fuzz_range(interval_days, maximum_interval_days, elapsed_days)
    fuzzed = source.random() * (max_ivl - min_ivl + 1) + min_ivl
    return min(int(fuzzed), maximum_interval_days)
