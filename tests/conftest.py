"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
"""

from unittest.mock import Mock

import pytest

from rategate.core.config import get_settings


@pytest.fixture()
def clock() -> Mock:
    """Controllable epoch-millisecond clock; set ``clock.return_value`` to move time."""
    return Mock(return_value=1_000_000)


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path):
    """Keep settings tests independent of the host environment and .env files."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "RATEGATE_LIMIT",
        "RATEGATE_WINDOW_MS",
        "RATEGATE_CATEGORY",
        "RATEGATE_SERIALIZE_KEYS",
        "RATEGATE_BACKEND_KIND",
        "RATEGATE_BACKEND_REDIS_URL",
        "RATEGATE_BACKEND_KEY_PREFIX",
        "RATEGATE_BACKEND_TTL_MS",
        "LOG_LEVEL",
        "LOG_FORMAT",
        "LOG_OUTPUT",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
