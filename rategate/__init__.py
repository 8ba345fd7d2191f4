"""rategate - per-key sliding-window rate limiting over pluggable storage."""

from rategate.adapters.backend import AbstractBackend, InMemoryBackend, create_backend
from rategate.core.config import GateConfig
from rategate.core.errors import AppError, RateLimitExceededError, ValidationAppError
from rategate.core.results import HitResult, RateLimitFailure
from rategate.services.factory import create_gate_from_settings
from rategate.services.gate import Gate, create_gate

__all__ = [
    "AbstractBackend",
    "AppError",
    "Gate",
    "GateConfig",
    "HitResult",
    "InMemoryBackend",
    "RateLimitExceededError",
    "RateLimitFailure",
    "ValidationAppError",
    "create_backend",
    "create_gate",
    "create_gate_from_settings",
]
