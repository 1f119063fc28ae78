"""JSON-schema request validation middleware with pluggable error messages."""

from request_validator.api.dependencies import validation_dependency
from request_validator.core.errors import BadRequestError
from request_validator.core.errors import HttpError
from request_validator.core.errors import register_error_handlers
from request_validator.formatting.engine import MessageFormatter
from request_validator.formatting.engine import add_formatters
from request_validator.formatting.engine import format_message
from request_validator.formatting.engine import get_formatters
from request_validator.formatting.engine import message_formatter
from request_validator.formatting.engine import replace_formatters
from request_validator.formatting.engine import reset_formatters
from request_validator.handling.builder import build_error
from request_validator.handling.options import ErrorHandlingConfig
from request_validator.handling.options import MiddlewareConfig
from request_validator.handling.options import ValidationOptions
from request_validator.middleware import ValidationMiddleware
from request_validator.middleware import create_middleware
from request_validator.validation.codes import FailureCode
from request_validator.validation.failure import ValidationFailure
from request_validator.validation.validator import add_format

__all__ = [
    "BadRequestError",
    "ErrorHandlingConfig",
    "FailureCode",
    "HttpError",
    "MessageFormatter",
    "MiddlewareConfig",
    "ValidationFailure",
    "ValidationMiddleware",
    "ValidationOptions",
    "add_format",
    "add_formatters",
    "build_error",
    "create_middleware",
    "format_message",
    "get_formatters",
    "message_formatter",
    "register_error_handlers",
    "replace_formatters",
    "reset_formatters",
    "validation_dependency",
]
