"""Unit tests for failure renderers and the process-wide message formatter."""

from __future__ import annotations

from request_validator.formatting.engine import MessageFormatter
from request_validator.formatting.engine import add_formatters
from request_validator.formatting.engine import format_message
from request_validator.formatting.engine import get_formatters
from request_validator.formatting.engine import replace_formatters
from request_validator.formatting.engine import reset_formatters
from request_validator.formatting.renderers import render_path
from request_validator.validation.codes import FailureCode
from request_validator.validation.failure import ValidationFailure


def _required(path: str = "", key: str = "test") -> ValidationFailure:
    return ValidationFailure(
        code=FailureCode.OBJECT_REQUIRED,
        path=path,
        params={"key": key},
        message=f"Missing required property: {key}",
    )


def _invalid_type(path: str = "/test") -> ValidationFailure:
    return ValidationFailure(
        code=FailureCode.INVALID_TYPE,
        path=path,
        params={"expected": "string", "type": "number"},
        message="Invalid type: number (expected string)",
    )


def test_render_path_converts_pointer_to_dotted_path() -> None:
    assert render_path("") == ""
    assert render_path("/user") == "user"
    assert render_path("/user/name") == "user.name"
    assert render_path("/items/0/a~1b") == "items.0.a/b"


def test_object_required_at_root_uses_key_alone() -> None:
    assert format_message(_required()) == "missing required property: test"


def test_object_required_below_root_joins_path_and_key() -> None:
    assert format_message(_required(path="/user/address", key="city")) == "missing required property: user.address.city"


def test_additional_properties_reports_offending_property_path() -> None:
    failure = ValidationFailure(
        code=FailureCode.OBJECT_ADDITIONAL_PROPERTIES,
        path="/user/extra",
        params={"key": "extra"},
    )

    assert format_message(failure) == "additional properties not allowed: user.extra"


def test_invalid_type_message_has_no_leading_dot() -> None:
    assert format_message(_invalid_type()) == "invalid type (expected string, got number): test"
    assert format_message(_invalid_type("/a/b")) == "invalid type (expected string, got number): a.b"


def test_string_length_messages() -> None:
    short = ValidationFailure(
        code=FailureCode.STRING_LENGTH_SHORT,
        path="/test",
        params={"minimum": 10, "length": 3},
    )
    long = ValidationFailure(
        code=FailureCode.STRING_LENGTH_LONG,
        path="/test",
        params={"maximum": 2, "length": 3},
    )

    assert format_message(short) == "string is too short (minimum 10, actual 3): test"
    assert format_message(long) == "string is too long (maximum 2, actual 3): test"


def test_one_of_missing_reports_first_alternative_actual_type() -> None:
    failure = ValidationFailure(
        code=FailureCode.ONE_OF_MISSING,
        path="/test",
        sub_failures=(
            ValidationFailure(code=FailureCode.INVALID_TYPE, path="/test", params={"expected": "string", "type": "object"}),
            ValidationFailure(code=FailureCode.INVALID_TYPE, path="/test", params={"expected": "number", "type": "array"}),
        ),
    )

    assert format_message(failure) == "data does not match any schemas (expected string, number, got object): test"


def test_format_custom_includes_check_message() -> None:
    failure = ValidationFailure(
        code=FailureCode.FORMAT_CUSTOM,
        path="/test",
        params={"message": "Data is invalid"},
    )

    assert format_message(failure) == "format validation failed (Data is invalid): test"


def test_unknown_code_lower_cases_first_character_of_validator_message() -> None:
    failure = ValidationFailure(code="SOMETHING_ELSE", path="/test", message="Invalid type: number (expected string)")

    assert failure.code == "SOMETHING_ELSE"
    assert format_message(failure) == "invalid type: number (expected string)"


def test_unknown_code_with_empty_message_renders_empty_string() -> None:
    assert format_message(ValidationFailure(code=FailureCode.UNKNOWN)) == ""


def test_string_codes_dispatch_to_enum_renderers() -> None:
    failure = ValidationFailure(code="OBJECT_REQUIRED", params={"key": "id"})

    assert failure.code is FailureCode.OBJECT_REQUIRED
    assert format_message(failure) == "missing required property: id"


def test_replace_falls_back_to_default_for_absent_codes() -> None:
    replace_formatters({FailureCode.OBJECT_REQUIRED: lambda failure: "custom required"})

    assert format_message(_required()) == "custom required"
    assert format_message(_invalid_type()) == "invalid type: number (expected string)"


def test_add_only_changes_named_codes() -> None:
    before = format_message(_invalid_type())

    add_formatters({"OBJECT_REQUIRED": lambda failure: f"need {failure.params['key']}"})

    assert format_message(_required()) == "need test"
    assert format_message(_invalid_type()) == before


def test_get_formatters_returns_free_standing_copy_usable_for_revert() -> None:
    saved = get_formatters()
    saved[FailureCode.INVALID_TYPE] = lambda failure: "mutated copy"

    assert format_message(_invalid_type()) == "invalid type (expected string, got number): test"

    original = get_formatters()
    replace_formatters({})
    assert format_message(_invalid_type()) == "invalid type: number (expected string)"

    replace_formatters(original)
    assert format_message(_invalid_type()) == "invalid type (expected string, got number): test"


def test_call_scoped_overrides_do_not_touch_active_set() -> None:
    before = format_message(_required())

    replaced = format_message(_required(), {FailureCode.INVALID_TYPE: lambda failure: "only type"})
    added = format_message(_required(), None, {FailureCode.OBJECT_REQUIRED: lambda failure: "added"})

    assert replaced == "missing required property: test"
    assert added == "added"
    assert format_message(_required()) == before


def test_call_scoped_add_merges_on_top_of_replace() -> None:
    message = format_message(
        _invalid_type(),
        {FailureCode.INVALID_TYPE: lambda failure: "base"},
        {FailureCode.INVALID_TYPE: lambda failure: "added"},
    )

    assert message == "added"


def test_format_is_idempotent() -> None:
    failure = _invalid_type("/a/b")

    assert format_message(failure) == format_message(failure)


def test_reset_reinstalls_built_in_renderers() -> None:
    replace_formatters({})

    reset_formatters()

    assert format_message(_required()) == "missing required property: test"


def test_bind_prefixes_failure_paths() -> None:
    formatter = MessageFormatter()
    rooted = formatter.bind("root")

    assert rooted(_required()) == "missing required property: root.test"
    assert rooted(_invalid_type()) == "invalid type (expected string, got number): root.test"
    assert formatter.bind("body.user")(_invalid_type("/name")) == "invalid type (expected string, got number): body.user.name"


def test_formatter_instances_are_isolated_from_process_wide_state() -> None:
    formatter = MessageFormatter({FailureCode.OBJECT_REQUIRED: lambda failure: "local"})
    replace_formatters({})

    assert formatter.format(_required()) == "local"
    assert formatter.format(_invalid_type()) == "invalid type: number (expected string)"
