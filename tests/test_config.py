"""Tests for settings and logging configuration."""

import sys

import pytest
from loguru import logger

from state_flow.config import FlowSettings, configure_logging, get_settings
from state_flow.flows import RunOptions
from state_flow.reporting import FailFastReporter, LoggingReporter


@pytest.mark.unit
class TestSettings:
    """Environment-driven defaults."""

    def test_defaults(self):
        settings = FlowSettings()

        assert settings.breadcrumb_separator == " -> "
        assert settings.fail_fast is False

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("STATE_FLOW_BREADCRUMB_SEPARATOR", " / ")
        monkeypatch.setenv("STATE_FLOW_FAIL_FAST", "1")

        settings = get_settings()

        assert settings.breadcrumb_separator == " / "
        assert settings.fail_fast is True

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_options_from_settings(self):
        settings = FlowSettings(fail_fast=True, breadcrumb_separator="|")

        options = RunOptions.from_settings(settings)

        assert options.breadcrumb_separator == "|"
        assert isinstance(options.build_reporter(), FailFastReporter)

    def test_overrides_win_over_settings(self):
        options = RunOptions.from_settings(FlowSettings(fail_fast=True), fail_fast=False)

        assert type(options.build_reporter()) is LoggingReporter

    def test_run_options_ignore_environment(self, monkeypatch):
        monkeypatch.setenv("STATE_FLOW_FAIL_FAST", "1")

        assert RunOptions().fail_fast is False


@pytest.mark.unit
def test_configure_logging_installs_single_sink():
    handler_id = configure_logging(FlowSettings(log_level="error"))
    try:
        assert isinstance(handler_id, int)
    finally:
        logger.remove(handler_id)
        logger.add(sys.stderr)
