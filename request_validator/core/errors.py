"""HTTP error types and FastAPI exception handler registration."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
import logging

from fastapi import FastAPI
from fastapi import Request
from fastapi import status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from request_validator.schemas.error import ErrorObject
from request_validator.schemas.error import ErrorResponse
from request_validator.validation.codes import FailureCode
from request_validator.validation.failure import ValidationFailure

logger = logging.getLogger(__name__)

_STATUS_ERROR_CODES = {
    status.HTTP_400_BAD_REQUEST: "BadRequestError",
    status.HTTP_404_NOT_FOUND: "NotFoundError",
    status.HTTP_405_METHOD_NOT_ALLOWED: "MethodNotAllowedError",
}


class HttpError(Exception):
    """Base application exception carrying an HTTP status and a response body."""

    default_status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code = "InternalServerError"

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code or self.default_status_code
        self.code = code or self.default_code
        self.body: dict[str, Any] = {"code": self.code, "message": message}


class BadRequestError(HttpError):
    """Request data failed validation."""

    default_status_code = status.HTTP_400_BAD_REQUEST
    default_code = "BadRequestError"


def _build_error_response(
    *,
    status_code: int,
    code: str,
    message: str,
    validation_error_code: str | None = None,
    validation_error: Mapping[str, Any] | None = None,
) -> JSONResponse:
    payload = ErrorResponse(
        error=ErrorObject(
            code=code,
            message=message,
            validation_error_code=validation_error_code,
            validation_error=dict(validation_error) if validation_error is not None else None,
        )
    )
    return JSONResponse(status_code=status_code, content=payload.model_dump(by_alias=True, exclude_none=True))


def _embedded_code(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, FailureCode):
        return value.value
    return str(value)


def _embedded_failure(value: Any) -> Mapping[str, Any] | None:
    if isinstance(value, ValidationFailure):
        return value.to_dict()
    if isinstance(value, Mapping):
        return value
    return None


async def http_error_handler(_: Request, exc: HttpError) -> JSONResponse:
    """Render application HTTP errors, including embedded validation details."""

    return _build_error_response(
        status_code=exc.status_code,
        code=str(exc.body.get("code", exc.code)),
        message=str(exc.body.get("message", exc.message)),
        validation_error_code=_embedded_code(exc.body.get("validationErrorCode")),
        validation_error=_embedded_failure(exc.body.get("validationError")),
    )


async def http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Wrap framework HTTP exceptions in the same envelope."""

    message = str(exc.detail) if isinstance(exc.detail, str) and exc.detail else "Request failed"
    code = _STATUS_ERROR_CODES.get(exc.status_code, "HttpError")
    return _build_error_response(status_code=exc.status_code, code=code, message=message)


async def unhandled_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    """Avoid leaking internal exceptions while keeping response shape stable."""

    logger.exception("Unhandled exception while processing request", exc_info=exc)
    return _build_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        code="InternalServerError",
        message="Internal server error",
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach the validation error handlers to a FastAPI app instance."""

    app.add_exception_handler(HttpError, http_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
