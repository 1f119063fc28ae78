"""Built-in renderers turning a `ValidationFailure` into a one-line message."""

from __future__ import annotations

from collections.abc import Callable
from collections.abc import Mapping
from types import MappingProxyType

from request_validator.validation.codes import FailureCode
from request_validator.validation.failure import ValidationFailure
from request_validator.validation.failure import split_path

Renderer = Callable[[ValidationFailure], str]
RendererSet = Mapping[FailureCode | str, Renderer]


def render_path(path: str) -> str:
    """Render a slash-delimited pointer as a dotted path, `""` for the root."""
    return ".".join(split_path(path))


def join_path(path: str, key: object) -> str:
    rendered = render_path(path)
    if not rendered:
        return str(key)
    return f"{rendered}.{key}"


def first_to_lower(text: str | None) -> str:
    if not text:
        return ""
    return text[0].lower() + text[1:]


def render_object_required(failure: ValidationFailure) -> str:
    return f"missing required property: {join_path(failure.path, failure.params.get('key'))}"


def render_object_additional_properties(failure: ValidationFailure) -> str:
    return f"additional properties not allowed: {render_path(failure.path)}"


def render_invalid_type(failure: ValidationFailure) -> str:
    expected = failure.params.get("expected")
    actual = failure.params.get("type")
    return f"invalid type (expected {expected}, got {actual}): {render_path(failure.path)}"


def render_string_length_short(failure: ValidationFailure) -> str:
    minimum = failure.params.get("minimum")
    length = failure.params.get("length")
    return f"string is too short (minimum {minimum}, actual {length}): {render_path(failure.path)}"


def render_string_length_long(failure: ValidationFailure) -> str:
    maximum = failure.params.get("maximum")
    length = failure.params.get("length")
    return f"string is too long (maximum {maximum}, actual {length}): {render_path(failure.path)}"


def render_one_of_missing(failure: ValidationFailure) -> str:
    # Only the first alternative's actual type is reported.
    sub_failures = failure.sub_failures
    actual = failure.params.get("type")
    if sub_failures:
        actual = sub_failures[0].params.get("type", actual)
    expected = ", ".join(
        str(sub_failure.params["expected"]) for sub_failure in sub_failures if "expected" in sub_failure.params
    )
    return f"data does not match any schemas (expected {expected}, got {actual}): {render_path(failure.path)}"


def render_format_custom(failure: ValidationFailure) -> str:
    return f"format validation failed ({failure.params.get('message')}): {render_path(failure.path)}"


def render_default(failure: ValidationFailure) -> str:
    """Fallback for codes without a dedicated renderer: the validator's own message."""
    return first_to_lower(failure.message)


DEFAULT_RENDERERS: Mapping[FailureCode, Renderer] = MappingProxyType(
    {
        FailureCode.OBJECT_REQUIRED: render_object_required,
        FailureCode.OBJECT_ADDITIONAL_PROPERTIES: render_object_additional_properties,
        FailureCode.INVALID_TYPE: render_invalid_type,
        FailureCode.STRING_LENGTH_SHORT: render_string_length_short,
        FailureCode.STRING_LENGTH_LONG: render_string_length_long,
        FailureCode.ONE_OF_MISSING: render_one_of_missing,
        FailureCode.FORMAT_CUSTOM: render_format_custom,
    }
)
