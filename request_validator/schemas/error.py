"""Error envelope schemas for validation failure responses."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class ErrorObject(BaseModel):
    """Canonical error payload object."""

    model_config = ConfigDict(populate_by_name=True)

    code: str
    message: str
    validation_error_code: str | None = Field(default=None, alias="validationErrorCode")
    validation_error: dict[str, Any] | None = Field(default=None, alias="validationError")


class ErrorResponse(BaseModel):
    """Top-level API error response envelope."""

    error: ErrorObject
