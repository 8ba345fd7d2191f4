"""Build gates from environment settings."""

from __future__ import annotations

from rategate.adapters.backend.factory import create_backend
from rategate.core.config import Settings, get_settings
from rategate.services.gate import Gate


def create_gate_from_settings(settings: Settings | None = None) -> Gate:
    """Assemble a gate and its backend from configuration.

    Reads RATEGATE_* and RATEGATE_BACKEND_* settings (see rategate.core.config).

    Args:
        settings: Optional settings; defaults to ``get_settings()``.

    Returns:
        Gate: Configured gate.

    Raises:
        ValidationAppError: If the backend configuration is invalid.
    """
    cfg = settings or get_settings()
    return Gate(
        cfg.gate.to_config(),
        create_backend(cfg.backend),
        serialize_keys=cfg.gate.serialize_keys,
    )
