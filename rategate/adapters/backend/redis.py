"""Redis-backed timestamp backend.

Each key's timestamp list is stored as a JSON array under
``"{key_prefix}:{key}"``, so several gates (or processes) can share one
Redis database. The keys a backend owns are tracked in a Redis set under
``"{key_prefix}#keys"``; enumeration reads that set instead of pattern
matching, so a backend never sees keys written under another prefix, even
one nested inside its own (``svc`` vs ``svc:api``).

Reads and writes are separate commands: like the in-memory backend, a
get/set pair is not atomic.
"""

from __future__ import annotations

import json
import logging

from redis.asyncio import Redis

from rategate.adapters.backend.base import AbstractBackend

logger = logging.getLogger(__name__)


class RedisBackend(AbstractBackend):
    """Backend storing timestamp lists in Redis strings."""

    def __init__(
        self,
        client: Redis,
        *,
        key_prefix: str = "rategate",
        ttl_ms: int | None = None,
    ) -> None:
        """Initialise the backend.

        Args:
            client: Async Redis client.
            key_prefix: Namespace prepended to every stored key.
            ttl_ms: Optional expiry applied on every write, so keys that stop
                being hit disappear without a cleanup sweep.

        Raises:
            ValueError: If ttl_ms is invalid.
        """
        if ttl_ms is not None and ttl_ms < 1:
            raise ValueError("ttl_ms must be >= 1")

        self._client = client
        self._prefix = f"{key_prefix}:"
        self._index_key = f"{key_prefix}#keys"
        self._ttl_ms = ttl_ms

    @classmethod
    def from_url(cls, url: str, **kwargs) -> RedisBackend:
        """Build a backend with a client created from a redis:// URL."""
        return cls(Redis.from_url(url), **kwargs)

    def _redis_key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def get(self, key: str) -> list[int]:
        raw = await self._client.get(self._redis_key(key))
        if raw is None:
            return []
        return [int(ts) for ts in json.loads(raw)]

    async def set(self, key: str, timestamps: list[int]) -> None:
        payload = json.dumps([int(ts) for ts in timestamps])
        async with self._client.pipeline(transaction=True) as pipe:
            pipe.set(self._redis_key(key), payload, px=self._ttl_ms)
            pipe.sadd(self._index_key, key)
            if self._ttl_ms is not None:
                # Index outlives every entry it lists by at most one TTL
                pipe.pexpire(self._index_key, self._ttl_ms)
            await pipe.execute()
        logger.debug(
            "backend.redis.set",
            extra={"size": len(timestamps), "ttl_ms": self._ttl_ms},
        )

    async def delete(self, key: str) -> None:
        async with self._client.pipeline(transaction=True) as pipe:
            pipe.delete(self._redis_key(key))
            pipe.srem(self._index_key, key)
            await pipe.execute()

    async def keys(self) -> list[str]:
        members = [
            m.decode() if isinstance(m, bytes) else m
            for m in await self._client.smembers(self._index_key)
        ]
        if not members:
            return []

        async with self._client.pipeline(transaction=False) as pipe:
            for key in members:
                pipe.exists(self._redis_key(key))
            exists = await pipe.execute()

        live = [key for key, found in zip(members, exists) if found]
        # Entries that expired through TTL leave stale index members behind
        stale = [key for key, found in zip(members, exists) if not found]
        if stale:
            await self._client.srem(self._index_key, *stale)

        logger.debug(
            "backend.redis.keys",
            extra={"count": len(live), "stale": len(stale)},
        )
        return live

    async def aclose(self) -> None:
        """Close the underlying client connection pool."""
        await self._client.aclose()
