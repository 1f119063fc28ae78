"""Structured validation failure handed from the validator adapter to formatting."""

from __future__ import annotations

from collections.abc import Iterable
from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from dataclasses import replace
from types import MappingProxyType
from typing import Any

from request_validator.validation.codes import FailureCode
from request_validator.validation.codes import normalize_code

PATH_SEPARATOR = "/"


def escape_segment(segment: Any) -> str:
    return str(segment).replace("~", "~0").replace("/", "~1")


def unescape_segment(segment: str) -> str:
    return segment.replace("~1", "/").replace("~0", "~")


def build_path(segments: Iterable[Any]) -> str:
    """Join raw path segments into a slash-delimited pointer, `""` for the root."""
    return "".join(PATH_SEPARATOR + escape_segment(segment) for segment in segments)


def split_path(path: str) -> list[str]:
    """Split a slash-delimited pointer into unescaped segments."""
    if not path:
        return []
    return [unescape_segment(segment) for segment in path.lstrip(PATH_SEPARATOR).split(PATH_SEPARATOR)]


def json_type_name(value: Any) -> str:
    """Name the JSON type of a Python value the way validators report it."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    return type(value).__name__


@dataclass(frozen=True)
class ValidationFailure:
    """One failed rule: where it failed, why, and the validator's own message."""

    code: FailureCode | str
    path: str = ""
    params: Mapping[str, Any] = field(default_factory=dict, hash=False)
    sub_failures: tuple[ValidationFailure, ...] = ()
    message: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "code", normalize_code(self.code))
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))
        object.__setattr__(self, "sub_failures", tuple(self.sub_failures))

    @property
    def code_name(self) -> str:
        return self.code.value if isinstance(self.code, FailureCode) else self.code

    def relocate(self, base_path: str | None) -> ValidationFailure:
        """Return a copy whose path sits below `base_path` (dotted or slash-delimited)."""
        if not base_path:
            return self

        if base_path.startswith(PATH_SEPARATOR):
            prefix = base_path.rstrip(PATH_SEPARATOR)
        else:
            prefix = build_path(segment for segment in base_path.split(".") if segment)
        return replace(self, path=prefix + self.path)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly representation for embedding in responses."""
        return {
            "code": self.code_name,
            "path": self.path,
            "params": dict(self.params),
            "message": self.message,
            "subFailures": [sub_failure.to_dict() for sub_failure in self.sub_failures],
        }
