"""Unit tests for environment-driven settings."""

from __future__ import annotations

import logging

import pytest

from app.core.config import Profile
from app.core.config import ResolverSetup
from app.core.config import load_settings
from app.core.logging import set_log_level


def test_defaults_select_controller_profile_with_switchable_resolver() -> None:
    settings = load_settings()

    assert settings.profile is Profile.CONTROLLER
    assert settings.resolver_setup is ResolverSetup.SWITCHABLE
    assert settings.resolver_initially_enabled is False
    assert settings.profiles == "controller, switchable"
    assert settings.exception_attribute == "exception"
    assert settings.default_error_view == "defaultErrorPage"
    assert dict(settings.exception_mappings) == {
        "DatabaseException": "databaseException",
        "InvalidCreditCardException": "creditCardError",
    }


def test_static_setup_is_enabled_and_maps_database_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXDEMO_PROFILE", "GLOBAL")
    monkeypatch.setenv("EXDEMO_RESOLVER_SETUP", "static")

    settings = load_settings()

    assert settings.profiles == "global, static"
    assert settings.resolver_initially_enabled is True
    assert settings.exception_mappings["DatabaseException"] == "databaseError"
    assert settings.default_error_view == "error"


def test_none_setup_has_no_mappings_even_when_configured(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXDEMO_RESOLVER_SETUP", "none")
    monkeypatch.setenv("EXDEMO_EXCEPTION_MAPPINGS", "DatabaseException=databaseError")

    assert len(load_settings().exception_mappings) == 0


def test_mappings_and_attribute_can_be_overridden(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXDEMO_EXCEPTION_MAPPINGS", "UnhandledException=oops")
    monkeypatch.setenv("EXDEMO_EXCEPTION_ATTRIBUTE", "ex")

    settings = load_settings()

    assert dict(settings.exception_mappings) == {"UnhandledException": "oops"}
    assert settings.exception_attribute == "ex"
    assert settings.safe_for_logging()["exception_mappings"] == "UnhandledException=oops"


def test_unknown_profile_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXDEMO_PROFILE", "everywhere")

    with pytest.raises(ValueError, match="EXDEMO_PROFILE must be one of: controller, global"):
        load_settings()


def test_set_log_level_ignores_unknown_levels() -> None:
    assert set_log_level("app.tests.logger", "debug") is True
    assert logging.getLogger("app.tests.logger").level == logging.DEBUG
    assert set_log_level("app.tests.logger", "LOUD") is False
    assert logging.getLogger("app.tests.logger").level == logging.DEBUG
