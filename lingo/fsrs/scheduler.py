"""
Scheduler - FSRS Algorithm Logic

Pure FSRS scheduling and state updates (no database calls).

Main workflow:
1. Load card snapshot (caller's responsibility)
2. Measure elapsed time since the previous review
3. Apply the transition for the card's current state
4. Compute the next interval (learning step or long-term interval)
5. Return the new snapshot with review metadata

This module handles ONLY the algorithm logic.
Database I/O is handled by the persistence module.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from lingo.fsrs import ltm_updates, stm_updates
from lingo.fsrs.config import SchedulerConfig
from lingo.fsrs.constants import Rating, State
from lingo.fsrs.fuzz import FuzzSource, default_fuzz_source, fuzz_interval
from lingo.fsrs.memory_state import (
    Card,
    calculate_retrievability,
    get_elapsed_days,
    next_interval,
)


@dataclass(frozen=True)
class SchedulingResult:
    """Outcome of one review: the new snapshot plus what led to it."""
    card: Card
    rating: Rating
    reviewed_at: datetime
    elapsed_days: float
    scheduled_days: float
    retrievability: float
    interval: timedelta

    @property
    def due(self) -> datetime:
        return self.card.due


@dataclass(frozen=True)
class _Transition:
    stability: float
    difficulty: float
    state: State
    learning_steps: int
    lapses: int
    interval: timedelta


class Scheduler:
    """
    FSRS review scheduler.

    Holds only immutable configuration and the injected fuzz source, so one
    instance can be shared by every request.
    """

    def __init__(
        self,
        config: Optional[SchedulerConfig] = None,
        fuzz_source: Optional[FuzzSource] = None
    ):
        self.config = config or SchedulerConfig()
        self.fuzz_source = fuzz_source or default_fuzz_source()

    @property
    def parameters(self) -> tuple[float, ...]:
        return self.config.parameters

    def compute_next(
        self,
        card: Card,
        last_reviewed_at: datetime,
        now: datetime,
        rating: Rating
    ) -> SchedulingResult:
        """
        Compute the card's next state for one rating.

        Args:
            card: Current snapshot
            last_reviewed_at: Previous review instant (creation/now if never reviewed)
            now: Instant of this review
            rating: AGAIN, HARD, GOOD or EASY

        Returns:
            SchedulingResult with the new snapshot (due = now + interval)

        Raises:
            InvariantViolation: If the computed snapshot is not a legal state
        """
        rating = Rating(rating)
        elapsed_days = get_elapsed_days(last_reviewed_at, now)

        if card.state == State.NEW:
            scheduled_days = 0.0
            retrievability = 1.0
            transition = self._review_new(card, rating)
        else:
            scheduled_days = get_elapsed_days(last_reviewed_at, card.due)
            retrievability = calculate_retrievability(
                card.stability, elapsed_days, self.parameters
            )
            if card.state == State.REVIEW:
                transition = self._review_review(card, rating, now, elapsed_days, retrievability)
            else:
                transition = self._review_learning(card, rating, elapsed_days, retrievability)

        next_card = Card(
            due=now + transition.interval,
            stability=transition.stability,
            difficulty=transition.difficulty,
            state=transition.state,
            learning_steps=transition.learning_steps,
            reps=card.reps + 1,
            lapses=transition.lapses,
            last_review=now,
        )

        return SchedulingResult(
            card=next_card,
            rating=rating,
            reviewed_at=now,
            elapsed_days=elapsed_days,
            scheduled_days=scheduled_days,
            retrievability=retrievability,
            interval=transition.interval,
        )

    def preview(
        self,
        card: Card,
        last_reviewed_at: datetime,
        now: datetime
    ) -> dict[Rating, SchedulingResult]:
        """Outcome of every rating, for showing intervals on grading buttons."""
        return {
            rating: self.compute_next(card, last_reviewed_at, now, rating)
            for rating in Rating
        }

    def retrievability(self, card: Card, now: datetime) -> float:
        """Current recall probability (1.0 for never-reviewed cards)."""
        if card.state == State.NEW or card.last_review is None:
            return 1.0
        elapsed_days = get_elapsed_days(card.last_review, now)
        return calculate_retrievability(card.stability, elapsed_days, self.parameters)

    # ---- State transitions ----

    def _review_new(self, card: Card, rating: Rating) -> _Transition:
        stability = ltm_updates.initial_stability(rating, self.parameters)
        difficulty = ltm_updates.initial_difficulty(rating, self.parameters)
        steps = self.config.learning_steps

        if not steps:
            return _Transition(
                stability, difficulty, State.REVIEW, 0, card.lapses,
                self._long_term_interval(stability),
            )
        if rating == Rating.AGAIN:
            # Shown again right away, still at the first step
            return _Transition(
                stability, difficulty, State.LEARNING, 0, card.lapses, timedelta(0)
            )
        return _Transition(
            stability, difficulty, State.LEARNING, 1, card.lapses, steps[0]
        )

    def _review_learning(
        self,
        card: Card,
        rating: Rating,
        elapsed_days: float,
        retrievability: float
    ) -> _Transition:
        stability, difficulty = self._update_memory(card, rating, elapsed_days, retrievability)
        steps = (
            self.config.learning_steps
            if card.state == State.LEARNING
            else self.config.relearning_steps
        )

        if not steps:
            return _Transition(
                stability, difficulty, State.REVIEW, 0, card.lapses,
                self._long_term_interval(stability, elapsed_days),
            )
        if rating == Rating.AGAIN:
            # First step is served again
            return _Transition(
                stability, difficulty, card.state, 1, card.lapses, steps[0]
            )
        if card.learning_steps < len(steps):
            return _Transition(
                stability, difficulty, card.state, card.learning_steps + 1, card.lapses,
                steps[card.learning_steps],
            )
        # Steps exhausted: graduate
        return _Transition(
            stability, difficulty, State.REVIEW, 0, card.lapses,
            self._long_term_interval(stability, elapsed_days),
        )

    def _review_review(
        self,
        card: Card,
        rating: Rating,
        now: datetime,
        elapsed_days: float,
        retrievability: float
    ) -> _Transition:
        stability, difficulty = self._update_memory(card, rating, elapsed_days, retrievability)

        if rating == Rating.AGAIN:
            lapses = card.lapses + 1
            steps = self.config.relearning_steps
            if steps:
                return _Transition(
                    stability, difficulty, State.RELEARNING, 1, lapses, steps[0]
                )
            return _Transition(
                stability, difficulty, State.REVIEW, 0, lapses,
                self._long_term_interval(stability, elapsed_days),
            )

        interval = self._long_term_interval(stability, elapsed_days)
        # Never earlier than the due date already promised
        interval = max(interval, card.due - now)
        return _Transition(
            stability, difficulty, State.REVIEW, 0, card.lapses, interval
        )

    # ---- Helpers ----

    def _update_memory(
        self,
        card: Card,
        rating: Rating,
        elapsed_days: float,
        retrievability: float
    ) -> tuple[float, float]:
        if stm_updates.is_same_day_review(elapsed_days):
            stability = stm_updates.apply_stm_update(card.stability, rating, self.parameters)
            difficulty = ltm_updates.update_difficulty(card.difficulty, rating, self.parameters)
            return stability, difficulty

        return ltm_updates.apply_ltm_update(
            card.stability, card.difficulty, retrievability, rating, self.parameters
        )

    def _long_term_interval(self, stability: float, elapsed_days: float = 0.0) -> timedelta:
        days = next_interval(
            stability,
            self.config.request_retention,
            self.config.maximum_interval_days,
            self.parameters,
        )
        if self.config.enable_fuzz:
            days = fuzz_interval(
                days, self.config.maximum_interval_days, self.fuzz_source, elapsed_days
            )
        return timedelta(days=days)
