"""Sliding-window admission gate.

Each key's history is a log of epoch-millisecond timestamps held by a
backend. Every operation reads the log, drops entries that fell out of the
window ending at ``now`` and compares what is left against the limit:
- check / remaining / reset_in only report, they never write
- hit records ``now`` when under the limit and reports a failure otherwise
- cleanup sweeps every key, deleting or shrinking expired logs

Concurrency:
    Operations await their backend calls one at a time. The read and the
    write inside ``hit`` are separate calls, so concurrent hits on the same
    key can both be admitted unless the backend serializes them. Pass
    ``serialize_keys=True`` to hold a per-key lock around the
    read-modify-write; that only coordinates callers sharing this gate
    instance on one event loop, not other processes sharing a backend.
"""

from __future__ import annotations

import logging
import math
import time
from contextlib import AbstractAsyncContextManager, nullcontext
from typing import Callable

from rategate.adapters.backend.base import AbstractBackend
from rategate.adapters.backend.in_memory import InMemoryBackend
from rategate.core.config import DEFAULT_CATEGORY, DEFAULT_WINDOW_MS, GateConfig
from rategate.core.logging import hash_key
from rategate.core.results import HitResult, RateLimitFailure
from rategate.utils.keyed_lock import KeyedLock

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


def prune(timestamps: list[int], now: int, window_ms: int) -> list[int]:
    """Return the timestamps still inside the window ending at now.

    Order is preserved, so the first element is the oldest counted event.
    """
    window_start = now - window_ms
    return [ts for ts in timestamps if ts > window_start]


def seconds_until_reset(oldest: int, now: int, window_ms: int) -> int:
    """Whole seconds, rounded up, until ``oldest`` leaves the window."""
    return math.ceil((oldest + window_ms - now) / 1000)


class Gate:
    """Per-key sliding-window rate limiter over a pluggable backend.

    The gate keeps no per-key state of its own; the backend is the single
    source of truth, so one instance can be shared by any number of callers.

    Keys are arbitrary caller-supplied strings, except that the empty string
    is rejected with ValueError by every keyed operation.

    Attributes:
        config: Immutable limit/window/category shared by all keys.
        backend: Storage for per-key timestamp logs.
    """

    def __init__(
        self,
        config: GateConfig,
        backend: AbstractBackend | None = None,
        *,
        clock: Callable[[], int] | None = None,
        serialize_keys: bool = False,
    ) -> None:
        """Initialize the gate.

        Args:
            config: Gate parameters.
            backend: Timestamp storage; defaults to a fresh InMemoryBackend.
            clock: Returns the current instant in epoch milliseconds.
            serialize_keys: Hold a per-key lock around read-modify-write steps.
        """
        self._config = config
        self._backend = backend if backend is not None else InMemoryBackend()
        self._clock = clock or _now_ms
        self._locks = KeyedLock() if serialize_keys else None

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return (
            f"Gate(limit={self.limit}, window_ms={self.window_ms}, "
            f"category={self.category!r}, backend={type(self._backend).__name__})"
        )

    @property
    def config(self) -> GateConfig:
        return self._config

    @property
    def backend(self) -> AbstractBackend:
        return self._backend

    @property
    def limit(self) -> int:
        return self._config.limit

    @property
    def window_ms(self) -> int:
        return self._config.window_ms

    @property
    def category(self) -> str:
        return self._config.category

    def _guard(self, key: str) -> AbstractAsyncContextManager[None]:
        if self._locks is None:
            return nullcontext()
        return self._locks.acquire(key)

    async def _valid_timestamps(self, key: str, now: int) -> list[int]:
        if not key:
            raise ValueError("key must be a non-empty string")
        stored = await self._backend.get(key)
        return prune(stored, now, self.window_ms)

    async def check(self, key: str) -> bool:
        """Return True when a hit on key would currently be admitted.

        Nothing is recorded and expired entries are not written back.
        """
        now = self._clock()
        valid = await self._valid_timestamps(key, now)
        return len(valid) < self.limit

    async def hit(self, key: str) -> HitResult:
        """Admit and record an event for key, or report why it was denied.

        Args:
            key: Identifier being throttled (user, IP, API key).

        Returns:
            HitResult. When denied, ``failure`` carries the seconds until the
            oldest counted event leaves the window.

        Raises:
            ValueError: If key is empty.
        """
        async with self._guard(key):
            now = self._clock()
            valid = await self._valid_timestamps(key, now)

            if len(valid) >= self.limit:
                reset_in = seconds_until_reset(valid[0], now, self.window_ms)
                failure = RateLimitFailure(
                    reset_in=reset_in,
                    limit=self.limit,
                    window_ms=self.window_ms,
                    category=self.category,
                    message=(
                        f"Rate limit exceeded for {self.category}. "
                        f"Try again in {reset_in}s."
                    ),
                )
                logger.warning(
                    "gate.denied",
                    extra={
                        "key_hash": hash_key(key),
                        "category": self.category,
                        "limit": self.limit,
                        "remaining": 0,
                        "window_ms": self.window_ms,
                        "retry_after_s": reset_in,
                    },
                )
                return HitResult(allowed=False, limit=self.limit, remaining=0, failure=failure)

            valid.append(now)
            await self._backend.set(key, valid)

        remaining = self.limit - len(valid)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "gate.allowed",
                extra={
                    "key_hash": hash_key(key),
                    "category": self.category,
                    "limit": self.limit,
                    "remaining": remaining,
                    "window_ms": self.window_ms,
                },
            )
        return HitResult(allowed=True, limit=self.limit, remaining=remaining)

    async def enforce(self, key: str) -> HitResult:
        """Hit key and raise RateLimitExceededError if denied."""
        result = await self.hit(key)
        result.raise_for_failure()
        return result

    async def remaining(self, key: str) -> int:
        """Return how many more hits key would currently be admitted."""
        now = self._clock()
        valid = await self._valid_timestamps(key, now)
        return max(0, self.limit - len(valid))

    async def reset_in(self, key: str) -> int:
        """Return whole seconds until the oldest counted event for key expires.

        Returns 0 when key has no events inside the window. Negative values
        from clock skew are clamped to 0.
        """
        now = self._clock()
        valid = await self._valid_timestamps(key, now)
        if not valid:
            return 0
        return max(0, seconds_until_reset(valid[0], now, self.window_ms))

    async def reset(self, key: str) -> None:
        """Forget every recorded event for key."""
        if not key:
            raise ValueError("key must be a non-empty string")
        async with self._guard(key):
            await self._backend.delete(key)

    async def cleanup(self) -> None:
        """Drop expired entries for every key in the backend.

        Keys whose whole log expired are deleted. Logs that only partly
        expired are written back pruned; untouched logs are not rewritten.
        Call periodically so keys that stop being hit don't accumulate.
        """
        started = time.perf_counter()
        now = self._clock()
        deleted = pruned = 0

        keys = await self._backend.keys()
        for key in keys:
            async with self._guard(key):
                stored = await self._backend.get(key)
                valid = prune(stored, now, self.window_ms)
                if not valid:
                    await self._backend.delete(key)
                    deleted += 1
                elif len(valid) < len(stored):
                    await self._backend.set(key, valid)
                    pruned += 1

        logger.info(
            "gate.cleanup",
            extra={
                "category": self.category,
                "keys_scanned": len(keys),
                "keys_deleted": deleted,
                "keys_pruned": pruned,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            },
        )


def create_gate(
    limit: int,
    window_ms: int = DEFAULT_WINDOW_MS,
    category: str = DEFAULT_CATEGORY,
    **kwargs,
) -> Gate:
    """Build a gate backed by a fresh in-memory backend.

    Args:
        limit: Maximum events per window.
        window_ms: Window size in milliseconds.
        category: Label used in denial messages.
        **kwargs: Forwarded to Gate (clock, serialize_keys).

    Returns:
        Gate: Configured gate.
    """
    config = GateConfig(limit=limit, window_ms=window_ms, category=category)
    return Gate(config, InMemoryBackend(), **kwargs)
