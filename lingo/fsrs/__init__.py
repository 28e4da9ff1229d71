"""
FSRS - Free Spaced Repetition Scheduler

Scheduling engine for the flashcard review system.

This package implements FSRS-6 with:
- Four-phase card lifecycle (New, Learning, Review, Relearning)
- Configurable learning and relearning steps
- Power-law forgetting curve: R = (1 + F * t / S) ^ (-w20)
- Interval fuzzing with an injectable randomness source
- Interpretable memory state (Stability, Difficulty, Retrievability)

Quick start:
    from lingo import fsrs

    # Initialize database
    fsrs.init_db()

    # Compute a review (algorithm only, no DB calls)
    scheduler = fsrs.Scheduler(fsrs.load_scheduler_config())
    result = scheduler.compute_next(card, last_reviewed_at, now, fsrs.Rating.GOOD)
"""

# Core scheduler API (algorithm logic)
from lingo.fsrs.scheduler import Scheduler, SchedulingResult

# Configuration
from lingo.fsrs.config import (
    SchedulerConfig,
    load_scheduler_config,
    parse_step,
    parse_steps,
    format_step,
    format_steps,
)

# Constants and parameters
from lingo.fsrs.constants import (
    Rating,
    State,
    DEFAULT_PARAMETERS,
    S_MIN,
    D_MIN,
    D_MAX,
)

# Memory state (for advanced usage)
from lingo.fsrs.memory_state import (
    Card,
    new_card,
    calculate_retrievability,
    get_elapsed_days,
    next_interval,
)

# Fuzz strategy
from lingo.fsrs.fuzz import FuzzSource, FixedFuzz, fuzz_interval

# Database API
from lingo.fsrs.database import (
    init_db,
    reset_db,
    is_test_mode,
    get_session_factory,
    session_scope,
)
from lingo.fsrs.models import Flashcard, ReviewEvent
from lingo.fsrs.persistence import FlashcardRepository


__all__ = [
    # Core algorithm
    "Scheduler",
    "SchedulingResult",

    # Configuration
    "SchedulerConfig",
    "load_scheduler_config",
    "parse_step",
    "parse_steps",
    "format_step",
    "format_steps",

    # Enums
    "Rating",
    "State",

    # Memory state
    "Card",
    "new_card",
    "calculate_retrievability",
    "get_elapsed_days",
    "next_interval",

    # Fuzz
    "FuzzSource",
    "FixedFuzz",
    "fuzz_interval",

    # Database operations
    "init_db",
    "reset_db",
    "is_test_mode",
    "get_session_factory",
    "session_scope",
    "Flashcard",
    "ReviewEvent",
    "FlashcardRepository",

    # Parameters
    "DEFAULT_PARAMETERS",
    "S_MIN",
    "D_MIN",
    "D_MAX",
]
