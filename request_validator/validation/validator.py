"""jsonschema adapter producing symbolic validation failures."""

from __future__ import annotations

from collections.abc import Callable
from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import replace
from typing import Any
import re

from jsonschema import Draft7Validator
from jsonschema import FormatChecker
from jsonschema.exceptions import ValidationError
from jsonschema.validators import validator_for

from request_validator.validation.codes import CIRCULAR_REFERENCE_KEYWORD
from request_validator.validation.codes import UNKNOWN_PROPERTY_KEYWORD
from request_validator.validation.codes import FailureCode
from request_validator.validation.codes import failure_code_for_keyword
from request_validator.validation.failure import ValidationFailure
from request_validator.validation.failure import build_path
from request_validator.validation.failure import json_type_name
from request_validator.validation.failure import split_path

format_checker = FormatChecker()


class FormatViolation(ValueError):
    """Raised from custom format checks to carry their failure message."""


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of one validation call; `error` holds the first native failure."""

    valid: bool
    error: ValidationError | None = None


def add_format(name: str, check: Callable[[Any], str | None]) -> None:
    """Register a custom format; `check` returns `None` when valid, else a failure message."""

    def _checker(instance: Any) -> bool:
        message = check(instance)
        if message:
            raise FormatViolation(message)
        return True

    format_checker.checks(name, raises=FormatViolation)(_checker)


def validate_result(
    data: Any,
    schema: Mapping[str, Any] | bool,
    check_recursive: bool = False,
    ban_unknown_properties: bool = False,
) -> ValidationResult:
    """Validate `data` against `schema` and report the first failure found."""
    if check_recursive:
        cycle_path = _find_cycle(data, [], set())
        if cycle_path is not None:
            error = ValidationError(
                "Circular reference detected in data",
                validator=CIRCULAR_REFERENCE_KEYWORD,
                validator_value=True,
                path=cycle_path,
            )
            return ValidationResult(valid=False, error=error)

    validator_cls = validator_for(schema, default=Draft7Validator)
    validator = validator_cls(schema, format_checker=format_checker)
    error = next(iter(validator.iter_errors(data)), None)
    if error is None and ban_unknown_properties:
        error = _first_unknown_property(validator, schema, data, [schema], [])
    if error is None:
        return ValidationResult(valid=True)
    return ValidationResult(valid=False, error=error)


def to_validation_failure(error: ValidationError) -> ValidationFailure:
    """Translate a native jsonschema error into a symbolic `ValidationFailure`."""
    keyword = error.validator if isinstance(error.validator, str) else None
    segments: list[Any] = list(error.absolute_path)
    instance = error.instance
    value = error.validator_value
    params: dict[str, Any] = {}
    sub_failures: tuple[ValidationFailure, ...] = ()

    if keyword in ("oneOf", "anyOf"):
        sub_failures = _alternative_failures(error)
        params["type"] = json_type_name(instance)

    # jsonschema attaches no per-alternative context when several oneOf branches matched.
    code = failure_code_for_keyword(keyword, several_matched=keyword == "oneOf" and not error.context)

    if code is FailureCode.OBJECT_REQUIRED:
        params["key"] = _missing_key(value, instance)
    elif code is FailureCode.OBJECT_ADDITIONAL_PROPERTIES:
        extras = _additional_properties(error.schema, instance)
        if extras:
            params["key"] = extras[0]
            segments.append(extras[0])
    elif code is FailureCode.UNKNOWN_PROPERTY:
        params["key"] = segments[-1] if segments else None
    elif code is FailureCode.INVALID_TYPE:
        params["expected"] = _type_names(value)
        params["type"] = json_type_name(instance)
    elif code in (FailureCode.STRING_LENGTH_SHORT, FailureCode.ARRAY_LENGTH_SHORT, FailureCode.OBJECT_PROPERTIES_MINIMUM):
        params["minimum"] = value
        params["length"] = len(instance)
    elif code in (FailureCode.STRING_LENGTH_LONG, FailureCode.ARRAY_LENGTH_LONG, FailureCode.OBJECT_PROPERTIES_MAXIMUM):
        params["maximum"] = value
        params["length"] = len(instance)
    elif code is FailureCode.FORMAT_CUSTOM:
        params["format"] = value
        params["message"] = str(error.cause) if error.cause is not None else error.message
    elif keyword is not None and keyword not in ("oneOf", "anyOf"):
        params["value"] = instance
        params[keyword] = value

    return ValidationFailure(
        code=code,
        path=build_path(segments),
        params=params,
        sub_failures=sub_failures,
        message=error.message,
    )


def _alternative_failures(error: ValidationError) -> tuple[ValidationFailure, ...]:
    first_by_alternative: dict[int, ValidationError] = {}
    for sub_error in error.context or ():
        schema_path = sub_error.relative_schema_path
        index = schema_path[0] if schema_path else len(first_by_alternative)
        first_by_alternative.setdefault(index, sub_error)

    alternatives = error.validator_value if isinstance(error.validator_value, list) else []
    sub_failures = []
    for index in sorted(first_by_alternative):
        sub_failure = to_validation_failure(first_by_alternative[index])
        subschema = alternatives[index] if isinstance(index, int) and index < len(alternatives) else None
        # Alternatives failing on a non-type rule still name the type they expect.
        if "expected" not in sub_failure.params and isinstance(subschema, Mapping) and "type" in subschema:
            sub_failure = replace(sub_failure, params={**sub_failure.params, "expected": _type_names(subschema["type"])})
        sub_failures.append(sub_failure)
    return tuple(sub_failures)


def _type_names(value: Any) -> str:
    return value if isinstance(value, str) else "/".join(str(item) for item in value)


def _missing_key(required: Any, instance: Any) -> Any:
    if not isinstance(instance, Mapping):
        return None
    return next((key for key in required if key not in instance), None)


def _additional_properties(schema: Any, instance: Any) -> list[str]:
    if not isinstance(schema, Mapping) or not isinstance(instance, Mapping):
        return []

    declared = schema.get("properties", {})
    patterns = schema.get("patternProperties", {})
    return [
        key
        for key in instance
        if key not in declared and not any(re.search(pattern, key) for pattern in patterns)
    ]


def _find_cycle(value: Any, path: list[Any], ancestors: set[int]) -> list[Any] | None:
    if isinstance(value, Mapping):
        children = list(value.items())
    elif isinstance(value, (list, tuple)):
        children = list(enumerate(value))
    else:
        return None

    marker = id(value)
    if marker in ancestors:
        return path

    ancestors.add(marker)
    try:
        for key, child in children:
            found = _find_cycle(child, [*path, key], ancestors)
            if found is not None:
                return found
    finally:
        ancestors.discard(marker)
    return None



def _resolve_ref(root: Any, ref: Any) -> Any:
    if not isinstance(ref, str) or not ref.startswith("#"):
        return None

    target = root
    for segment in split_path(ref[1:]):
        if isinstance(target, Mapping) and segment in target:
            target = target[segment]
        elif isinstance(target, list) and segment.isdigit() and int(segment) < len(target):
            target = target[int(segment)]
        else:
            return None
    return target


def _expand(validator: Any, root: Any, instance: Any, schema: Any, seen: frozenset[int]) -> list[Mapping[str, Any]] | None:
    """Collect every subschema that applies to `instance`; `None` when a `$ref` cannot be followed."""
    if not isinstance(schema, Mapping) or id(schema) in seen:
        return []

    seen = seen | {id(schema)}
    nested: list[Any] = []
    if "$ref" in schema:
        target = _resolve_ref(root, schema["$ref"])
        if target is None:
            return None
        nested.append(target)
    nested.extend(schema.get("allOf", ()))
    for keyword in ("anyOf", "oneOf"):
        nested.extend(sub for sub in schema.get(keyword, ()) if validator.evolve(schema=sub).is_valid(instance))
    if "if" in schema:
        branch = "then" if validator.evolve(schema=schema["if"]).is_valid(instance) else "else"
        if branch in schema:
            nested.append(schema[branch])

    applied = [schema]
    for sub in nested:
        expanded = _expand(validator, root, instance, sub, seen)
        if expanded is None:
            return None
        applied.extend(expanded)
    return applied


def _child_schemas(applied: list[Mapping[str, Any]], key: Any) -> list[Any]:
    children: list[Any] = []
    for schema in applied:
        if isinstance(key, int):
            prefix = schema.get("prefixItems", schema.get("items"))
            if isinstance(prefix, list):
                if key < len(prefix):
                    children.append(prefix[key])
                elif "prefixItems" in schema and "items" in schema:
                    children.append(schema["items"])
                elif "additionalItems" in schema:
                    children.append(schema["additionalItems"])
            elif "items" in schema:
                children.append(schema["items"])
            continue

        matched = [sub for pattern, sub in schema.get("patternProperties", {}).items() if re.search(pattern, key)]
        if key in schema.get("properties", {}):
            matched.append(schema["properties"][key])
        if not matched and "additionalProperties" in schema:
            matched.append(schema["additionalProperties"])
        children.extend(matched)
    return children


def _first_unknown_property(
    validator: Any,
    root: Any,
    instance: Any,
    schemas: list[Any],
    path: list[Any],
) -> ValidationError | None:
    """Find the first object key no applied schema declares, judged across `allOf`, `$ref` and matching branches."""
    if isinstance(instance, Mapping):
        children = list(instance.items())
    elif isinstance(instance, (list, tuple)):
        children = list(enumerate(instance))
    else:
        return None

    applied: list[Mapping[str, Any]] = []
    for schema in schemas:
        expanded = _expand(validator, root, instance, schema, frozenset())
        if expanded is None:
            return None
        applied.extend(expanded)

    if isinstance(instance, Mapping):
        declares = any("properties" in schema for schema in applied)
        is_open = any("additionalProperties" in schema for schema in applied)
        if declares and not is_open:
            declared = {key for schema in applied for key in schema.get("properties", {})}
            patterns = [pattern for schema in applied for pattern in schema.get("patternProperties", {})]
            for key, child in children:
                if key not in declared and not any(re.search(pattern, key) for pattern in patterns):
                    return ValidationError(
                        "Unknown property (not in schema)",
                        validator=UNKNOWN_PROPERTY_KEYWORD,
                        validator_value=True,
                        instance=child,
                        path=[*path, key],
                    )

    for key, child in children:
        found = _first_unknown_property(validator, root, child, _child_schemas(applied, key), [*path, key])
        if found is not None:
            return found
    return None
