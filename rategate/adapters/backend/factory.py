"""Factory for creating backend instances from settings."""

from __future__ import annotations

from rategate.adapters.backend.base import AbstractBackend
from rategate.adapters.backend.in_memory import InMemoryBackend
from rategate.core.config import BackendSettings, get_settings
from rategate.core.errors import ValidationAppError


def create_backend(backend_settings: BackendSettings | None = None) -> AbstractBackend:
    """Instantiate the backend selected by configuration.

    Args:
        backend_settings: Optional settings; defaults to environment settings.

    Returns:
        AbstractBackend: Configured backend instance.

    Raises:
        ValidationAppError: If the kind is unknown or its requirements are not met.
    """
    cfg = backend_settings or get_settings().backend
    kind = cfg.kind.lower()

    if kind == "memory":
        return InMemoryBackend()

    if kind == "redis":
        if not cfg.redis_url:
            raise ValidationAppError(
                code="backend_missing_redis_url",
                message="Redis backend requires RATEGATE_BACKEND_REDIS_URL",
            )
        # Imported lazily so the redis extra stays optional
        from rategate.adapters.backend.redis import RedisBackend

        return RedisBackend.from_url(
            cfg.redis_url,
            key_prefix=cfg.key_prefix,
            ttl_ms=cfg.ttl_ms,
        )

    raise ValidationAppError(
        code="backend_unknown_kind",
        message=f"Unknown backend kind: '{cfg.kind}'. Supported kinds: memory, redis",
        details={"hint": "Set RATEGATE_BACKEND_KIND to memory or redis"},
    )
