"""Application-level exception types.

This module defines domain errors used across the HTTP layer, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    action: str
    limit: int
    remaining: int
    retry_after: int


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class RateLimitExceededError(AppError):
    """Raised by the HTTP layer when a guarded action is throttled."""

    @classmethod
    def for_action(
        cls,
        action: str,
        *,
        retry_after: int | None = None,
        limit: int | None = None,
    ) -> "RateLimitExceededError":
        """Build the error with a user-facing retry message.

        Examples:
            >>> RateLimitExceededError.for_action("login", retry_after=30).message
            'Too many login attempts. Please try again in 30 seconds.'
            >>> RateLimitExceededError.for_action("login").message
            'Too many login attempts. Please try again later.'
        """
        retry_message = (
            f" Please try again in {retry_after} seconds."
            if retry_after
            else " Please try again later."
        )
        details: ErrorDetails = {"action": action}
        if retry_after is not None:
            details["retry_after"] = retry_after
        if limit is not None:
            details["limit"] = limit
            details["remaining"] = 0

        return cls(
            code="rate_limited",
            message=f"Too many {action} attempts.{retry_message}",
            details=details,
        )
