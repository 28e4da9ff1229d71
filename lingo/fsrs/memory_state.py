"""
Memory State - FSRS Card Snapshot and Retrievability

Defines the scheduling snapshot of a card and the forgetting-curve math.

Key concepts:
- Stability (S): Days until recall probability decays to 90%
- Difficulty (D): How hard the card is to learn (1-10 scale)
- Retrievability (R): Probability of successful recall at time t

FSRS-6 uses a power-law forgetting curve:
    R(t, S) = (1 + F * t / S) ^ (-w20),  F = 0.9 ^ (-1 / w20) - 1
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Sequence

from lingo.exceptions import InvariantViolation
from lingo.fsrs.constants import D_MAX, D_MIN, State


SECONDS_PER_DAY = 86400.0


@dataclass(frozen=True)
class Card:
    """
    Scheduling snapshot of one flashcard.

    Only the Scheduler produces new snapshots; the orchestrator copies them
    onto the persisted row as one unit.
    """
    due: datetime
    stability: float = 0.0
    difficulty: float = 0.0
    state: State = State.NEW
    learning_steps: int = 0
    reps: int = 0
    lapses: int = 0
    last_review: Optional[datetime] = None

    def __post_init__(self):
        try:
            object.__setattr__(self, "state", State(self.state))
        except ValueError as e:
            raise InvariantViolation(f"Unknown card state: {self.state!r}") from e

        if self.stability < 0:
            raise InvariantViolation(f"Negative stability: {self.stability}")
        if self.state != State.NEW and not D_MIN <= self.difficulty <= D_MAX:
            raise InvariantViolation(
                f"Difficulty {self.difficulty} outside [{D_MIN}, {D_MAX}] for {self.state.name}"
            )
        if self.state != State.NEW and self.stability == 0:
            raise InvariantViolation(f"Zero stability for {self.state.name} card")
        for name in ("learning_steps", "reps", "lapses"):
            if getattr(self, name) < 0:
                raise InvariantViolation(f"Negative {name}: {getattr(self, name)}")
        if self.due.tzinfo is None:
            raise InvariantViolation("Card due date must be timezone-aware")


def new_card(now: datetime) -> Card:
    """Snapshot for a freshly created card: New and due immediately."""
    return Card(due=now)


def forgetting_factor(parameters: Sequence[float]) -> float:
    """F = 0.9 ^ (-1 / w20) - 1, chosen so that R(S, S) = 0.9."""
    decay = -parameters[20]
    return 0.9 ** (1.0 / decay) - 1.0


def calculate_retrievability(
    stability: float,
    elapsed_days: float,
    parameters: Sequence[float]
) -> float:
    """
    Calculate retrievability with the FSRS-6 power-law curve.

    Args:
        stability: Current stability in days
        elapsed_days: Time since the last review in (fractional) days
        parameters: FSRS weights

    Returns:
        Retrievability between 0 and 1
    """
    if stability <= 0:
        return 0.0
    if elapsed_days <= 0:
        return 1.0

    decay = -parameters[20]
    factor = forgetting_factor(parameters)
    return (1.0 + factor * elapsed_days / stability) ** decay


def get_elapsed_days(since: Optional[datetime], until: datetime) -> float:
    """
    Fractional days between two instants (0 if `since` is missing or later).
    """
    if since is None:
        return 0.0
    seconds = (until - since).total_seconds()
    return max(0.0, seconds / SECONDS_PER_DAY)


def round_half_up(value: float) -> int:
    """Nearest integer, halves away from zero for positive values (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def next_interval(
    stability: float,
    request_retention: float,
    maximum_interval_days: int,
    parameters: Sequence[float]
) -> int:
    """
    Days until recall probability falls to request_retention.

    Formula: I = S / F * (r ^ (1 / decay) - 1), rounded half up and clamped
    to [1, maximum_interval_days].
    """
    decay = -parameters[20]
    factor = forgetting_factor(parameters)
    interval = stability / factor * (request_retention ** (1.0 / decay) - 1.0)
    return min(max(round_half_up(interval), 1), maximum_interval_days)
