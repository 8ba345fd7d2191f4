"""Library-level exception types.

Gate operations report rate-limit denials as values (see
``rategate.core.results``). These exceptions exist for callers that prefer
raising, and for configuration problems detected while wiring a gate.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, NotRequired, TypedDict

if TYPE_CHECKING:
    from rategate.core.results import RateLimitFailure


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    code: str
    message: str
    hint: str
    limit: int
    window_ms: int
    retry_after: int
    category: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for rategate failures.

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


class ValidationAppError(AppError):
    """Raised when configuration validation fails."""


class RateLimitExceededError(AppError):
    """Raised on demand when a hit was denied.

    Attributes:
        failure: The denial payload the error was built from.
    """

    def __init__(self, failure: RateLimitFailure) -> None:
        self.failure = failure
        super().__init__(
            code="rate_limit_exceeded",
            message=failure.message,
            details={
                "limit": failure.limit,
                "window_ms": failure.window_ms,
                "retry_after": failure.reset_in,
                "category": failure.category,
            },
        )

    def __reduce__(self):
        # Rebuild from the failure payload; Exception would replay (message,)
        return (type(self), (self.failure,))

    @property
    def reset_in(self) -> int:
        return self.failure.reset_in

    @property
    def limit(self) -> int:
        return self.failure.limit

    @property
    def window_ms(self) -> int:
        return self.failure.window_ms
