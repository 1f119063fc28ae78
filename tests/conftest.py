"""Shared pytest fixtures for request validator test suites."""

from collections.abc import Generator
from pathlib import Path
import sys

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture(autouse=True)
def restore_message_formatters() -> Generator[None, None, None]:
    """Keep process-wide formatter changes from leaking between tests."""
    from request_validator.formatting.engine import message_formatter

    snapshot = message_formatter.snapshot()
    yield
    message_formatter.restore(snapshot)


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Reload environment-driven settings for every test."""
    from request_validator.core.config import get_middleware_settings

    get_middleware_settings.cache_clear()
    yield
    get_middleware_settings.cache_clear()
