"""Symbolic validation failure codes and the jsonschema keyword mapping."""

from __future__ import annotations

from enum import Enum


class FailureCode(str, Enum):
    INVALID_TYPE = "INVALID_TYPE"
    ENUM_MISMATCH = "ENUM_MISMATCH"
    ANY_OF_MISSING = "ANY_OF_MISSING"
    ONE_OF_MISSING = "ONE_OF_MISSING"
    ONE_OF_MULTIPLE = "ONE_OF_MULTIPLE"
    NOT_PASSED = "NOT_PASSED"
    NUMBER_MULTIPLE_OF = "NUMBER_MULTIPLE_OF"
    NUMBER_MINIMUM = "NUMBER_MINIMUM"
    NUMBER_MINIMUM_EXCLUSIVE = "NUMBER_MINIMUM_EXCLUSIVE"
    NUMBER_MAXIMUM = "NUMBER_MAXIMUM"
    NUMBER_MAXIMUM_EXCLUSIVE = "NUMBER_MAXIMUM_EXCLUSIVE"
    STRING_LENGTH_SHORT = "STRING_LENGTH_SHORT"
    STRING_LENGTH_LONG = "STRING_LENGTH_LONG"
    STRING_PATTERN = "STRING_PATTERN"
    OBJECT_PROPERTIES_MINIMUM = "OBJECT_PROPERTIES_MINIMUM"
    OBJECT_PROPERTIES_MAXIMUM = "OBJECT_PROPERTIES_MAXIMUM"
    OBJECT_REQUIRED = "OBJECT_REQUIRED"
    OBJECT_ADDITIONAL_PROPERTIES = "OBJECT_ADDITIONAL_PROPERTIES"
    OBJECT_DEPENDENCY_KEY = "OBJECT_DEPENDENCY_KEY"
    ARRAY_LENGTH_SHORT = "ARRAY_LENGTH_SHORT"
    ARRAY_LENGTH_LONG = "ARRAY_LENGTH_LONG"
    ARRAY_UNIQUE = "ARRAY_UNIQUE"
    ARRAY_ADDITIONAL_ITEMS = "ARRAY_ADDITIONAL_ITEMS"
    FORMAT_CUSTOM = "FORMAT_CUSTOM"
    CIRCULAR_REFERENCE = "CIRCULAR_REFERENCE"
    UNKNOWN_PROPERTY = "UNKNOWN_PROPERTY"
    UNKNOWN = "UNKNOWN"


# Keywords emitted by the adapter itself rather than by jsonschema.
CIRCULAR_REFERENCE_KEYWORD = "circularReference"
UNKNOWN_PROPERTY_KEYWORD = "banUnknownProperties"

_KEYWORD_MAP: dict[str, FailureCode] = {
    "type": FailureCode.INVALID_TYPE,
    "enum": FailureCode.ENUM_MISMATCH,
    "const": FailureCode.ENUM_MISMATCH,
    "anyOf": FailureCode.ANY_OF_MISSING,
    "not": FailureCode.NOT_PASSED,
    "multipleOf": FailureCode.NUMBER_MULTIPLE_OF,
    "minimum": FailureCode.NUMBER_MINIMUM,
    "exclusiveMinimum": FailureCode.NUMBER_MINIMUM_EXCLUSIVE,
    "maximum": FailureCode.NUMBER_MAXIMUM,
    "exclusiveMaximum": FailureCode.NUMBER_MAXIMUM_EXCLUSIVE,
    "minLength": FailureCode.STRING_LENGTH_SHORT,
    "maxLength": FailureCode.STRING_LENGTH_LONG,
    "pattern": FailureCode.STRING_PATTERN,
    "minProperties": FailureCode.OBJECT_PROPERTIES_MINIMUM,
    "maxProperties": FailureCode.OBJECT_PROPERTIES_MAXIMUM,
    "required": FailureCode.OBJECT_REQUIRED,
    "additionalProperties": FailureCode.OBJECT_ADDITIONAL_PROPERTIES,
    "dependencies": FailureCode.OBJECT_DEPENDENCY_KEY,
    "dependentRequired": FailureCode.OBJECT_DEPENDENCY_KEY,
    "minItems": FailureCode.ARRAY_LENGTH_SHORT,
    "maxItems": FailureCode.ARRAY_LENGTH_LONG,
    "uniqueItems": FailureCode.ARRAY_UNIQUE,
    "additionalItems": FailureCode.ARRAY_ADDITIONAL_ITEMS,
    "format": FailureCode.FORMAT_CUSTOM,
    CIRCULAR_REFERENCE_KEYWORD: FailureCode.CIRCULAR_REFERENCE,
    UNKNOWN_PROPERTY_KEYWORD: FailureCode.UNKNOWN_PROPERTY,
}


def failure_code_for_keyword(keyword: str | None, *, several_matched: bool = False) -> FailureCode:
    """Map a jsonschema keyword to its symbolic failure code, `UNKNOWN` when unmapped."""
    if keyword == "oneOf":
        if several_matched:
            return FailureCode.ONE_OF_MULTIPLE
        return FailureCode.ONE_OF_MISSING

    if keyword is None:
        return FailureCode.UNKNOWN

    return _KEYWORD_MAP.get(keyword, FailureCode.UNKNOWN)


def normalize_code(code: FailureCode | str) -> FailureCode | str:
    """Return the enum member for known code names, the raw string otherwise."""
    if isinstance(code, FailureCode):
        return code

    try:
        return FailureCode(code)
    except ValueError:
        return code
