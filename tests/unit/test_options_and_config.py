"""Unit tests for option precedence and environment-driven settings."""

from __future__ import annotations

import logging

import pytest

from request_validator.core.config import MiddlewareSettings
from request_validator.core.config import get_middleware_settings
from request_validator.handling.options import MiddlewareConfig
from request_validator.handling.options import ValidationOptions
from request_validator.handling.options import resolve_options


def test_call_option_wins_per_field() -> None:
    resolved = resolve_options(
        MiddlewareConfig(embed_validation_error_code=False, check_only="body"),
        ValidationOptions(embed_validation_error_code=True),
        MiddlewareSettings(),
    )

    assert resolved.embed_validation_error_code is True
    assert resolved.check_only == "body"


def test_factory_config_applies_when_call_option_missing() -> None:
    resolved = resolve_options(MiddlewareConfig(embed_validation_error_code=False), None, MiddlewareSettings())

    assert resolved.embed_validation_error_code is False


def test_explicit_false_call_option_overrides_true_factory_config() -> None:
    resolved = resolve_options(
        MiddlewareConfig(embed_validation_error=True, ban_unknown_properties=True),
        ValidationOptions(embed_validation_error=False),
        MiddlewareSettings(),
    )

    assert resolved.embed_validation_error is False
    assert resolved.ban_unknown_properties is True


def test_settings_supply_defaults_for_unset_fields() -> None:
    settings = MiddlewareSettings(check_recursive=True, embed_validation_error_code=True)

    resolved = resolve_options(None, None, settings)

    assert resolved.check_recursive is True
    assert resolved.embed_validation_error_code is True
    assert resolved.ban_unknown_properties is False
    assert resolved.error_class is None
    assert resolved.check_only is None


def test_settings_load_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REQUEST_VALIDATOR_CHECK_RECURSIVE", "true")
    monkeypatch.setenv("REQUEST_VALIDATOR_EMBED_VALIDATION_ERROR_CODE", "1")

    settings = get_middleware_settings()

    assert settings.check_recursive is True
    assert settings.embed_validation_error_code is True
    assert settings.ban_unknown_properties is False
    assert settings.safe_for_logging()["check_recursive"] is True


def test_settings_reject_malformed_flags(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REQUEST_VALIDATOR_BAN_UNKNOWN_PROPERTIES", "sometimes")

    with pytest.raises(ValueError, match="REQUEST_VALIDATOR_BAN_UNKNOWN_PROPERTIES"):
        get_middleware_settings()


def test_settings_are_logged_when_loaded(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
    monkeypatch.setenv("REQUEST_VALIDATOR_BAN_UNKNOWN_PROPERTIES", "yes")

    with caplog.at_level(logging.INFO, logger="request_validator.core.config"):
        get_middleware_settings()
        get_middleware_settings()

    records = [record for record in caplog.records if record.name == "request_validator.core.config"]
    assert len(records) == 1
    assert "'ban_unknown_properties': True" in records[0].getMessage()
