"""
Error taxonomy for the flashcard review core.

NotFoundError and ValidationError are caller-facing and map to "not found"
and "invalid request" responses. InvariantViolation signals a scheduler bug or
corrupt persisted data and must never be swallowed.
"""

from __future__ import annotations

from typing import Any, Optional


class SrsError(Exception):
    """Base class for all review-engine errors."""


class NotFoundError(SrsError):
    """Card does not exist, or exists but belongs to another user."""

    def __init__(self, message: str = "Flashcard not found for this user."):
        super().__init__(message)


class ValidationError(SrsError):
    """Rejected input: unknown rating or malformed card payload."""

    def __init__(self, message: str, errors: Optional[list[dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []


class InvariantViolation(SrsError):
    """Scheduling state that the state machine can never legally produce."""


class ReviewConflictError(SrsError):
    """A concurrent review of the same card was committed first."""
