"""Outcome types returned by gate operations."""

from __future__ import annotations

from dataclasses import dataclass

from rategate.core.errors import RateLimitExceededError


@dataclass(frozen=True)
class RateLimitFailure:
    """Details of a denied hit.

    Attributes:
        reset_in: Whole seconds until the oldest counted event leaves the window.
        limit: Max events per window.
        window_ms: Window size in milliseconds.
        category: Label of the gate that denied the hit.
        message: Human-readable description naming the category.
    """

    reset_in: int
    limit: int
    window_ms: int
    category: str
    message: str

    def to_error(self) -> RateLimitExceededError:
        return RateLimitExceededError(self)


@dataclass(frozen=True)
class HitResult:
    """Result of a hit.

    Attributes:
        allowed: Whether the event was admitted and recorded.
        limit: Max events per window.
        remaining: Events still admissible in the current window after this call.
        failure: Denial details, set only when ``allowed`` is False.
    """

    allowed: bool
    limit: int
    remaining: int
    failure: RateLimitFailure | None = None

    @property
    def retry_after_seconds(self) -> int | None:
        return self.failure.reset_in if self.failure else None

    def raise_for_failure(self) -> None:
        """Raise RateLimitExceededError if the hit was denied."""

        if self.failure is not None:
            raise self.failure.to_error()
