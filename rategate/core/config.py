"""Gate configuration and optional environment-driven settings.

``GateConfig`` is the immutable value a ``Gate`` is built from. The
``*Settings`` classes read the environment (and an optional ``.env`` file)
through Pydantic Settings; nothing here is loaded until ``get_settings()``
is called, so importing rategate never touches the environment.

Environment variables:
- RATEGATE_LIMIT, RATEGATE_WINDOW_MS, RATEGATE_CATEGORY, RATEGATE_SERIALIZE_KEYS
- RATEGATE_BACKEND_KIND, RATEGATE_BACKEND_REDIS_URL, RATEGATE_BACKEND_KEY_PREFIX,
  RATEGATE_BACKEND_TTL_MS
- LOG_LEVEL, LOG_FORMAT, LOG_OUTPUT, LOG_FILE_PATH, LOG_MAX_BYTES, LOG_BACKUP_COUNT
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_WINDOW_MS = 60_000
DEFAULT_CATEGORY = "rate-limit"


class GateConfig(BaseModel):
    """Immutable gate parameters shared by every key of one gate."""

    limit: int = Field(
        ...,
        description="Maximum number of events admitted per window",
        ge=1,
    )
    window_ms: int = Field(
        DEFAULT_WINDOW_MS,
        description="Sliding window size in milliseconds",
        ge=1,
    )
    category: str = Field(
        DEFAULT_CATEGORY,
        description="Label used in denial messages and logs",
    )

    model_config = ConfigDict(frozen=True)


class GateSettings(BaseSettings):
    """Default gate parameters taken from the environment."""

    limit: int = Field(
        60,
        description="Maximum number of events admitted per window",
        ge=1,
    )
    window_ms: int = Field(
        DEFAULT_WINDOW_MS,
        description="Sliding window size in milliseconds",
        ge=1,
    )
    category: str = Field(
        DEFAULT_CATEGORY,
        description="Label used in denial messages and logs",
    )
    serialize_keys: bool = Field(
        False,
        description="Serialize read-modify-write per key within one gate instance",
    )

    model_config = SettingsConfigDict(
        env_prefix="RATEGATE_",
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )

    def to_config(self) -> GateConfig:
        return GateConfig(
            limit=self.limit,
            window_ms=self.window_ms,
            category=self.category,
        )


class BackendSettings(BaseSettings):
    """Storage backend selection.

    Validation of backend-specific requirements happens in the factory.
    """

    kind: str = Field(
        "memory",
        description="Backend implementation (memory or redis)",
    )
    redis_url: str | None = Field(
        None,
        description="Redis connection URL (required for the redis backend)",
    )
    key_prefix: str = Field(
        "rategate",
        description="Namespace prepended to every stored key",
    )
    ttl_ms: int | None = Field(
        None,
        description="Expiry applied to stored keys; usually the gate window",
        ge=1,
    )

    model_config = SettingsConfigDict(
        env_prefix="RATEGATE_BACKEND_",
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Log format: json or plain")
    output: str = Field("stdout", description="Log destination: stdout or file")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int | None = Field(
        None,
        description="Rotate the log file after this many bytes (no rotation when unset)",
    )
    backup_count: int = Field(5, description="Rotated files to keep")

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )


class Settings(BaseModel):
    """Settings container composed from the domain-specific settings."""

    gate: GateSettings = Field(default_factory=GateSettings)
    backend: BackendSettings = Field(default_factory=BackendSettings)
    log: LogSettings = Field(default_factory=LogSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use."""

    return Settings()
