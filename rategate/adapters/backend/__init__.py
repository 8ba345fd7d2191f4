"""Backend adapters - pluggable storage for per-key timestamp logs.

``RedisBackend`` lives in ``rategate.adapters.backend.redis`` and is not
imported here so the redis dependency stays optional.
"""

from rategate.adapters.backend.base import AbstractBackend
from rategate.adapters.backend.factory import create_backend
from rategate.adapters.backend.in_memory import InMemoryBackend

__all__ = [
    "AbstractBackend",
    "InMemoryBackend",
    "create_backend",
]
