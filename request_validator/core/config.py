"""Runtime defaults for request validation middleware."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_CHECK_RECURSIVE = False
DEFAULT_BAN_UNKNOWN_PROPERTIES = False
DEFAULT_EMBED_VALIDATION_ERROR = False
DEFAULT_EMBED_VALIDATION_ERROR_CODE = False

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


def _get_bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default

    normalized = raw.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")


@dataclass(frozen=True)
class MiddlewareSettings:
    """Process-wide fallbacks used when neither factory config nor call options set a field."""

    check_recursive: bool = DEFAULT_CHECK_RECURSIVE
    ban_unknown_properties: bool = DEFAULT_BAN_UNKNOWN_PROPERTIES
    embed_validation_error: bool = DEFAULT_EMBED_VALIDATION_ERROR
    embed_validation_error_code: bool = DEFAULT_EMBED_VALIDATION_ERROR_CODE

    def safe_for_logging(self) -> dict[str, bool]:
        """Return settings as a flat dict for log lines."""
        return {
            "check_recursive": self.check_recursive,
            "ban_unknown_properties": self.ban_unknown_properties,
            "embed_validation_error": self.embed_validation_error,
            "embed_validation_error_code": self.embed_validation_error_code,
        }


@lru_cache(maxsize=1)
def get_middleware_settings() -> MiddlewareSettings:
    """Load middleware defaults from the environment."""
    settings = MiddlewareSettings(
        check_recursive=_get_bool_env("REQUEST_VALIDATOR_CHECK_RECURSIVE", DEFAULT_CHECK_RECURSIVE),
        ban_unknown_properties=_get_bool_env(
            "REQUEST_VALIDATOR_BAN_UNKNOWN_PROPERTIES",
            DEFAULT_BAN_UNKNOWN_PROPERTIES,
        ),
        embed_validation_error=_get_bool_env(
            "REQUEST_VALIDATOR_EMBED_VALIDATION_ERROR",
            DEFAULT_EMBED_VALIDATION_ERROR,
        ),
        embed_validation_error_code=_get_bool_env(
            "REQUEST_VALIDATOR_EMBED_VALIDATION_ERROR_CODE",
            DEFAULT_EMBED_VALIDATION_ERROR_CODE,
        ),
    )
    logger.info("Loaded middleware settings=%s", settings.safe_for_logging())
    return settings
