"""Turn a validation failure into an application error and dispatch it."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any
import logging

from request_validator.core.errors import BadRequestError
from request_validator.core.errors import HttpError
from request_validator.formatting.engine import format_message
from request_validator.handling.options import ErrorHandlingConfig
from request_validator.validation.failure import ValidationFailure

logger = logging.getLogger(__name__)


def _embed_requested(error: Any, failure: ValidationFailure, config: ErrorHandlingConfig) -> None:
    if isinstance(error, HttpError):
        if config.embed_validation_error:
            error.body["validationError"] = failure
        if config.embed_validation_error_code:
            error.body["validationErrorCode"] = failure.code
        return

    if config.embed_validation_error:
        error.validation_error = failure
    if config.embed_validation_error_code:
        error.validation_error_code = failure.code


def create_error(failure: ValidationFailure, config: ErrorHandlingConfig) -> Any:
    """Build the application error for `failure` without dispatching it."""
    message = format_message(failure, config.replace_message_formatters, config.add_message_formatters)

    error = config.error_class(message) if config.error_class is not None else BadRequestError(message)
    _embed_requested(error, failure, config)
    return error


def build_error(
    failure: ValidationFailure,
    config: ErrorHandlingConfig,
    response: Any,
    continuation: Callable[..., Any],
) -> Any:
    """Report `failure` through the configured error handler, or `continuation(error)`."""
    error = create_error(failure, config)

    if config.error_handler is not None:
        logger.debug("Dispatching validation error to custom handler code=%s", failure.code_name)
        return config.error_handler(error, failure, response, continuation)

    return continuation(error)
