"""Tests for the structlog configurator module."""

import json
import logging
from unittest.mock import Mock, patch

import pytest
import structlog

from florafauna.config import LibraryConfig
from florafauna.config.models import LoggingConfig
from florafauna.system.structlog_configurator import (
    _renderer,
    _shared_processors,
    _static_fields,
    _use_json,
    configure_structlog,
)


@pytest.fixture
def restore_logging():
    """Restore root logging and structlog state after a test."""
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
    structlog.reset_defaults()


class TestStaticFields:
    """Test the static field processor."""

    def test_adds_fields_to_event_dict(self):
        """Should stamp the configured fields onto every event."""
        processor = _static_fields({"service": "florafauna", "region": "vic"})

        result = processor(Mock(), "info", {"event": "built"})

        assert result == {"event": "built", "service": "florafauna", "region": "vic"}


class TestUseJson:
    """Test output format selection."""

    def test_explicit_configuration_wins(self, monkeypatch):
        """Should follow json_logs when set."""
        monkeypatch.setenv("FLORAFAUNA_JSON_LOGS", "true")

        assert _use_json(LoggingConfig(json_logs=False)) is False

    def test_environment_variable(self, monkeypatch):
        """Should read FLORAFAUNA_JSON_LOGS when not configured."""
        monkeypatch.setenv("FLORAFAUNA_JSON_LOGS", "yes")

        assert _use_json(LoggingConfig()) is True

    @pytest.mark.parametrize("isatty,expected", [(True, False), (False, True)])
    def test_terminal_detection(self, monkeypatch, isatty, expected):
        """Should use JSON unless stderr is a terminal."""
        monkeypatch.delenv("FLORAFAUNA_JSON_LOGS", raising=False)

        with patch("florafauna.system.structlog_configurator.sys.stderr") as mock_stderr:
            mock_stderr.isatty.return_value = isatty
            assert _use_json(LoggingConfig()) is expected

    def test_renderer_matches_format(self):
        """Should return the renderer for the chosen format."""
        json_renderer = _renderer(LoggingConfig(json_logs=True))
        console_renderer = _renderer(LoggingConfig(json_logs=False))

        assert isinstance(json_renderer, structlog.processors.JSONRenderer)
        assert isinstance(console_renderer, structlog.dev.ConsoleRenderer)


class TestSharedProcessors:
    """Test the shared processor chain."""

    def test_callsite_only_when_requested(self):
        """Should add call-site parameters only when include_caller is set."""
        plain = _shared_processors(LoggingConfig())
        with_caller = _shared_processors(LoggingConfig(include_caller=True))

        assert len(with_caller) == len(plain) + 1
        assert isinstance(with_caller[-1], structlog.processors.CallsiteParameterAdder)


class TestConfigureStructlog:
    """Test full logging configuration."""

    def test_installs_single_stderr_handler(self, restore_logging):
        """Should replace root handlers with one structlog-formatted handler."""
        configure_structlog(LibraryConfig(logging=LoggingConfig(level="DEBUG", json_logs=True)))

        root_logger = logging.getLogger()
        assert root_logger.level == logging.DEBUG
        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)

    def test_reconfiguring_does_not_duplicate_handlers(self, restore_logging):
        """Should be safe to call repeatedly."""
        configure_structlog(LibraryConfig())
        configure_structlog(LibraryConfig())

        assert len(logging.getLogger().handlers) == 1

    def test_quiets_http_client_loggers(self, restore_logging):
        """Should keep per-request httpx logs out of INFO output."""
        configure_structlog(LibraryConfig())

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING

    def test_stdlib_records_render_as_json(self, restore_logging):
        """Should format stdlib records with the shared fields."""
        config = LibraryConfig(
            logging=LoggingConfig(json_logs=True, extra_fields={"site": "test"})
        )
        configure_structlog(config)
        formatter = logging.getLogger().handlers[0].formatter
        record = logging.LogRecord(
            "florafauna.archive.builder", logging.WARNING, __file__, 1, "Folder %s", ("X",), None
        )

        payload = json.loads(formatter.format(record))

        assert payload["event"] == "Folder X"
        assert payload["level"] == "warning"
        assert payload["logger"] == "florafauna.archive.builder"
        assert payload["service"] == "florafauna"
        assert payload["site"] == "test"
