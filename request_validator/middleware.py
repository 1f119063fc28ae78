"""Middleware factory wiring schemas, data selection and error reporting together."""

from __future__ import annotations

from collections.abc import Callable
from collections.abc import Mapping
from dataclasses import replace
from typing import Any
import logging

from request_validator.core.config import MiddlewareSettings
from request_validator.handling.builder import build_error
from request_validator.handling.options import MiddlewareConfig
from request_validator.handling.options import ValidationOptions
from request_validator.handling.options import resolve_options
from request_validator.validation.validator import to_validation_failure
from request_validator.validation.validator import validate_result

logger = logging.getLogger(__name__)

# handler(request, response, continuation)
RequestHandler = Callable[[Any, Any, Callable[..., Any]], Any]
Schema = Mapping[str, Any] | bool

_MISSING = object()


def select_data(request: Any, check_only: str | None) -> Any:
    """Extract the dotted sub-path `check_only` from `request`, `{}` when it is absent."""
    if not check_only:
        return request

    current = request
    for segment in check_only.split("."):
        if isinstance(current, Mapping):
            current = current.get(segment, _MISSING)
        else:
            current = getattr(current, segment, _MISSING)
        if current is _MISSING or current is None:
            return {}
    return current


def _with_fields(options: ValidationOptions | None, option_cls: type, fields: Mapping[str, Any]) -> Any:
    if not fields:
        return options
    if options is None:
        return option_cls(**fields)
    return replace(options, **fields)


class ValidationMiddleware:
    """Create request handlers validating request data against JSON schemas."""

    def __init__(
        self,
        config: MiddlewareConfig | None = None,
        *,
        settings: MiddlewareSettings | None = None,
    ) -> None:
        self.config = config or MiddlewareConfig()
        self._settings = settings

    def __call__(
        self,
        schema: Schema,
        options: ValidationOptions | None = None,
        **option_fields: Any,
    ) -> RequestHandler:
        call_options = _with_fields(options, ValidationOptions, option_fields)

        def handler(request: Any, response: Any, continuation: Callable[..., Any]) -> Any:
            resolved = resolve_options(self.config, call_options, self._settings)
            data = select_data(request, resolved.check_only)

            result = validate_result(
                data,
                schema,
                check_recursive=resolved.check_recursive,
                ban_unknown_properties=resolved.ban_unknown_properties,
            )
            if result.valid:
                return continuation()

            failure = to_validation_failure(result.error)
            logger.debug(
                "Request validation failed code=%s path=%s check_only=%s",
                failure.code_name,
                failure.path,
                resolved.check_only,
            )
            return build_error(failure, resolved, response, continuation)

        return handler

    def _selecting(self, check_only: str, schema: Schema, options: ValidationOptions | None, fields: Any) -> RequestHandler:
        call_options = _with_fields(options, ValidationOptions, fields)
        return self(schema, _with_fields(call_options, ValidationOptions, {"check_only": check_only}))

    def headers(self, schema: Schema, options: ValidationOptions | None = None, **option_fields: Any) -> RequestHandler:
        return self._selecting("headers", schema, options, option_fields)

    def body(self, schema: Schema, options: ValidationOptions | None = None, **option_fields: Any) -> RequestHandler:
        return self._selecting("body", schema, options, option_fields)

    def query(self, schema: Schema, options: ValidationOptions | None = None, **option_fields: Any) -> RequestHandler:
        return self._selecting("query", schema, options, option_fields)

    def params(self, schema: Schema, options: ValidationOptions | None = None, **option_fields: Any) -> RequestHandler:
        return self._selecting("params", schema, options, option_fields)


def create_middleware(
    config: MiddlewareConfig | None = None,
    *,
    settings: MiddlewareSettings | None = None,
    **config_fields: Any,
) -> ValidationMiddleware:
    """Create a middleware factory whose handlers share `config` as their defaults."""
    return ValidationMiddleware(_with_fields(config, MiddlewareConfig, config_fields), settings=settings)
