"""Storage backend interface.

The gate depends on this abstraction (not a concrete store) so per-key
timestamp logs can live in process memory, Redis, or anything else that
can map a key to a list of integers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class AbstractBackend(ABC):
    """Interface for per-key timestamp storage.

    Every method is a coroutine, even for stores that answer immediately, so
    callers treat all backends the same way. No atomicity is promised across
    separate calls; a backend that needs it must provide it itself.
    """

    @abstractmethod
    async def get(self, key: str) -> list[int]:
        """Return the timestamps stored for key.

        Args:
            key: Rate limit key.

        Returns:
            Stored epoch-millisecond timestamps in insertion order, or an
            empty list if the key is absent.
        """
        ...

    @abstractmethod
    async def set(self, key: str, timestamps: list[int]) -> None:
        """Replace the timestamps stored for key, creating it if absent."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove all state for key. No-op if absent."""
        ...

    @abstractmethod
    async def keys(self) -> list[str]:
        """Return every key currently holding state, in no particular order."""
        ...
