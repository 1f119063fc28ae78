"""FastAPI dependency adapter for validation request handlers."""

from __future__ import annotations

from collections.abc import Awaitable
from collections.abc import Callable
from typing import Any
import json
import logging

from fastapi import Request
from fastapi import Response

from request_validator.core.errors import BadRequestError
from request_validator.middleware import RequestHandler

logger = logging.getLogger(__name__)


async def snapshot_request(request: Request) -> dict[str, Any]:
    """Collect the validatable parts of a request into plain dicts."""
    raw_body = await request.body()
    body: Any = None
    if raw_body:
        try:
            body = json.loads(raw_body)
        except ValueError as exc:
            raise BadRequestError("request body is not valid JSON") from exc

    return {
        "method": request.method,
        "path": request.url.path,
        "headers": dict(request.headers),
        "query": dict(request.query_params),
        "params": dict(request.path_params),
        "body": body,
    }


def _as_exception(error: Any) -> BaseException:
    if isinstance(error, BaseException):
        return error
    message = getattr(error, "message", None) or str(error)
    return BadRequestError(message)


def validation_dependency(handler: RequestHandler) -> Callable[[Request, Response], Awaitable[None]]:
    """Wrap a validation request handler as a FastAPI dependency that raises on failure."""

    async def dependency(request: Request, response: Response) -> None:
        data = await snapshot_request(request)
        outcome: list[Any] = []

        def continuation(error: Any = None) -> None:
            outcome.append(error)

        handler(data, response, continuation)

        if outcome and outcome[0] is not None:
            logger.debug("Rejecting request path=%s", data["path"])
            raise _as_exception(outcome[0])

    return dependency
