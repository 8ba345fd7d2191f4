"""In-memory timestamp backend.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Not atomic across a get/set pair. Concurrent hits for one key may both
  pass; use ``Gate(serialize_keys=True)`` when that matters.
"""

from __future__ import annotations

from rategate.adapters.backend.base import AbstractBackend


class InMemoryBackend(AbstractBackend):
    """Backend keeping one timestamp list per key in a dict.

    State lives as long as the instance and is never shared across
    processes.
    """

    def __init__(self) -> None:
        self._store: dict[str, list[int]] = {}

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return f"InMemoryBackend(keys={len(self._store)})"

    def __len__(self) -> int:
        return len(self._store)

    async def get(self, key: str) -> list[int]:
        # Copy so callers can't mutate stored state in place
        return list(self._store.get(key, ()))

    async def set(self, key: str, timestamps: list[int]) -> None:
        self._store[key] = list(timestamps)

    async def delete(self, key: str) -> None:
        self._store.pop(key, None)

    async def keys(self) -> list[str]:
        return list(self._store)
