"""
Scheduler configuration.

SchedulerConfig is an immutable value handed to the Scheduler at construction.
load_scheduler_config() builds one from environment variables (.env supported).
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Iterable, Optional

from dotenv import load_dotenv

from lingo.fsrs.constants import (
    DEFAULT_LEARNING_STEPS,
    DEFAULT_MAXIMUM_INTERVAL,
    DEFAULT_PARAMETERS,
    DEFAULT_RELEARNING_STEPS,
    DEFAULT_REQUEST_RETENTION,
    PARAMETER_COUNT,
)

load_dotenv()


_STEP_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([smhd])\s*$")
_STEP_UNITS = {
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
}


@dataclass(frozen=True)
class SchedulerConfig:
    """
    Fixed scheduling options for one Scheduler instance.

    Attributes:
        learning_steps: Short intervals served while a new card is Learning
        relearning_steps: Short intervals served after a lapse
        enable_fuzz: Jitter long intervals so bulk reviews spread out
        maximum_interval_days: Hard cap on any long-term interval
        request_retention: Target recall probability at the due date
        parameters: FSRS-6 weights w0..w20
    """
    learning_steps: tuple[timedelta, ...] = DEFAULT_LEARNING_STEPS
    relearning_steps: tuple[timedelta, ...] = DEFAULT_RELEARNING_STEPS
    enable_fuzz: bool = True
    maximum_interval_days: int = DEFAULT_MAXIMUM_INTERVAL
    request_retention: float = DEFAULT_REQUEST_RETENTION
    parameters: tuple[float, ...] = field(default=DEFAULT_PARAMETERS)

    def __post_init__(self):
        # Accept lists for convenience; store tuples so the config stays hashable
        object.__setattr__(self, "learning_steps", tuple(self.learning_steps))
        object.__setattr__(self, "relearning_steps", tuple(self.relearning_steps))
        object.__setattr__(self, "parameters", tuple(float(w) for w in self.parameters))

        for step in self.learning_steps + self.relearning_steps:
            if not isinstance(step, timedelta) or step <= timedelta(0):
                raise ValueError(f"Steps must be positive timedeltas, got {step!r}")
        if not 0.0 < self.request_retention < 1.0:
            raise ValueError(
                f"request_retention must be in (0, 1), got {self.request_retention}"
            )
        if self.maximum_interval_days < 1:
            raise ValueError(
                f"maximum_interval_days must be >= 1, got {self.maximum_interval_days}"
            )
        if len(self.parameters) != PARAMETER_COUNT:
            raise ValueError(
                f"Expected {PARAMETER_COUNT} FSRS parameters, got {len(self.parameters)}"
            )
        if self.parameters[20] <= 0:
            raise ValueError("Decay parameter w20 must be positive")


def parse_step(value: str) -> timedelta:
    """
    Parse a step such as "10m", "1h", "30s" or "1d".

    Raises:
        ValueError: If the value is not a number followed by s, m, h or d
    """
    match = _STEP_PATTERN.match(value)
    if match is None:
        raise ValueError(f"Invalid step {value!r}; expected e.g. '1m', '10m', '1h'")
    amount, unit = match.groups()
    return timedelta(**{_STEP_UNITS[unit]: float(amount)})


def parse_steps(value: str) -> tuple[timedelta, ...]:
    """Parse a comma-separated step list; an empty string means no steps."""
    return tuple(parse_step(part) for part in value.split(",") if part.strip())


def format_step(step: timedelta) -> str:
    """Render a step compactly for display ("10m", "1h", "1d")."""
    seconds = int(step.total_seconds())
    for suffix, size in (("d", 86400), ("h", 3600), ("m", 60)):
        if seconds % size == 0:
            return f"{seconds // size}{suffix}"
    return f"{seconds}s"


def _is_truthy(raw: str) -> bool:
    return raw.strip().lower() in ("1", "true", "yes", "on")


def load_scheduler_config(environ: Optional[dict[str, str]] = None) -> SchedulerConfig:
    """
    Build a SchedulerConfig from environment variables.

    Recognized variables:
        SRS_LEARNING_STEPS: e.g. "1m,10m,60m"
        SRS_RELEARNING_STEPS: e.g. "1m,10m"
        SRS_ENABLE_FUZZ: true/false
        SRS_MAXIMUM_INTERVAL: days
        SRS_REQUEST_RETENTION: e.g. 0.92

    Args:
        environ: Mapping to read instead of os.environ (for tests)

    Returns:
        SchedulerConfig with unset variables left at their defaults
    """
    env = os.environ if environ is None else environ

    kwargs: dict = {}
    if "SRS_LEARNING_STEPS" in env:
        kwargs["learning_steps"] = parse_steps(env["SRS_LEARNING_STEPS"])
    if "SRS_RELEARNING_STEPS" in env:
        kwargs["relearning_steps"] = parse_steps(env["SRS_RELEARNING_STEPS"])
    if "SRS_ENABLE_FUZZ" in env:
        kwargs["enable_fuzz"] = _is_truthy(env["SRS_ENABLE_FUZZ"])
    if "SRS_MAXIMUM_INTERVAL" in env:
        kwargs["maximum_interval_days"] = int(env["SRS_MAXIMUM_INTERVAL"])
    if "SRS_REQUEST_RETENTION" in env:
        kwargs["request_retention"] = float(env["SRS_REQUEST_RETENTION"])

    return SchedulerConfig(**kwargs)


def format_steps(steps: Iterable[timedelta]) -> str:
    return ",".join(format_step(step) for step in steps)
