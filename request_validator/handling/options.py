"""Factory-level and call-level option structs with field-by-field resolution."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any
from typing import TypeVar

from request_validator.core.config import MiddlewareSettings
from request_validator.core.config import get_middleware_settings
from request_validator.formatting.renderers import RendererSet
from request_validator.validation.failure import ValidationFailure

# error_handler(error, failure, response, continuation)
ErrorHandler = Callable[[Any, ValidationFailure, Any, Callable[..., Any]], Any]
ErrorFactory = Callable[[str], Any]

_T = TypeVar("_T")


@dataclass(frozen=True)
class ValidationOptions:
    """Per-call options; `None` means "not given" and defers to the factory config."""

    error_class: ErrorFactory | None = None
    error_handler: ErrorHandler | None = None
    embed_validation_error: bool | None = None
    embed_validation_error_code: bool | None = None
    replace_message_formatters: RendererSet | None = None
    add_message_formatters: RendererSet | None = None
    check_only: str | None = None
    check_recursive: bool | None = None
    ban_unknown_properties: bool | None = None


@dataclass(frozen=True)
class MiddlewareConfig(ValidationOptions):
    """Factory-level defaults shared by every handler a middleware factory creates."""


@dataclass(frozen=True)
class ErrorHandlingConfig:
    """Options resolved for one request."""

    error_class: ErrorFactory | None = None
    error_handler: ErrorHandler | None = None
    embed_validation_error: bool = False
    embed_validation_error_code: bool = False
    replace_message_formatters: RendererSet | None = None
    add_message_formatters: RendererSet | None = None
    check_only: str | None = None
    check_recursive: bool = False
    ban_unknown_properties: bool = False


def _first_given(*candidates: _T | None, default: _T) -> _T:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return default


def resolve_options(
    config: ValidationOptions | None,
    options: ValidationOptions | None,
    settings: MiddlewareSettings | None = None,
) -> ErrorHandlingConfig:
    """Resolve each field independently: call option, then factory config, then settings."""
    config = config or MiddlewareConfig()
    options = options or ValidationOptions()
    settings = settings or get_middleware_settings()

    def pick(name: str, default: Any = None) -> Any:
        return _first_given(getattr(options, name), getattr(config, name), default=default)

    return ErrorHandlingConfig(
        error_class=pick("error_class"),
        error_handler=pick("error_handler"),
        embed_validation_error=pick("embed_validation_error", settings.embed_validation_error),
        embed_validation_error_code=pick("embed_validation_error_code", settings.embed_validation_error_code),
        replace_message_formatters=pick("replace_message_formatters"),
        add_message_formatters=pick("add_message_formatters"),
        check_only=pick("check_only"),
        check_recursive=pick("check_recursive", settings.check_recursive),
        ban_unknown_properties=pick("ban_unknown_properties", settings.ban_unknown_properties),
    )
