"""Tests for settings, logging helpers and the launcher."""

import json
import logging
from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from incident_tracker.config import Settings
from incident_tracker.config.logging import JsonLineFormatter, parse_size
from incident_tracker.main import ApplicationManager, server_options


class TestSettings:
    @pytest.mark.parametrize(
        "raw, expected",
        [("dev", "development"), ("LOCAL", "development"), ("prod", "production"), ("stage", "staging"), ("test", "test")],
    )
    def test_environment_aliases(self, raw, expected):
        assert Settings(environment=raw).environment == expected

    def test_unknown_environment(self):
        with pytest.raises(ValidationError):
            Settings(environment="qa")

    def test_log_level_is_upper_cased(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError):
            Settings(log_level="verbose")

    def test_cors_is_open_outside_production(self):
        assert Settings(environment="development").get_cors_settings()["allow_origins"] == ["*"]

    def test_cors_is_restricted_in_production(self):
        cors = Settings(environment="production", cors_origins=["https://ops.example.com"]).get_cors_settings()

        assert cors["allow_origins"] == ["https://ops.example.com"]
        assert "PATCH" in cors["allow_methods"]
        assert "DELETE" not in cors["allow_methods"]

    def test_defaults(self):
        settings = Settings(_env_file=None, database_url="sqlite://")

        assert settings.api_port == 5000
        assert settings.default_page_size == 10
        assert settings.max_page_size == 100


class TestLoggingHelpers:
    @pytest.mark.parametrize("raw, expected", [("100MB", 100 * 1024**2), ("512kb", 512 * 1024), ("1GB", 1024**3), ("2048", 2048)])
    def test_parse_size(self, raw, expected):
        assert parse_size(raw) == expected

    def test_json_line_formatter_escapes_messages(self):
        record = logging.LogRecord("uvicorn", logging.INFO, __file__, 1, 'said "hello"', None, None)

        entry = json.loads(JsonLineFormatter().format(record))

        assert entry["event"] == 'said "hello"'
        assert entry["level"] == "info"
        assert entry["logger"] == "uvicorn"


class TestLauncher:
    def test_server_options_fall_back_to_settings(self):
        options = server_options(Settings(api_host="127.0.0.1", api_port=8080))

        assert options["host"] == "127.0.0.1"
        assert options["port"] == 8080

    def test_server_options_overrides(self):
        options = server_options(Settings(), host="0.0.0.0", port=9000, workers=2)

        assert options["port"] == 9000
        assert options["workers"] == 2

    def test_shutdown_runs_callbacks_newest_first_and_stops_server(self):
        manager = ApplicationManager()
        calls = []
        manager.on_shutdown(lambda: calls.append("first"))
        manager.on_shutdown(lambda: calls.append("second"))
        manager.server = MagicMock(should_exit=False)

        manager.shutdown()

        assert calls == ["second", "first"]
        assert manager.server.should_exit is True

    def test_failing_callback_does_not_stop_others(self):
        def broken():
            raise RuntimeError("boom")

        manager = ApplicationManager()
        calls = []
        manager.on_shutdown(lambda: calls.append("ran"))
        manager.on_shutdown(broken)

        manager.shutdown()

        assert calls == ["ran"]
