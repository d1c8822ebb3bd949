# Assumptions:
# - structlog configuration is global and is reset after each test
# - Root and transport logger state is restored after each test

import logging

import pytest
import structlog
from pythonjsonlogger.json import JsonFormatter

from api_interaction.config.settings import HttpClientSettings
from api_interaction.logging.setup import (
    TRANSPORT_LOGGERS,
    add_request_context,
    get_correlation_id,
    get_logger,
    get_trace_id,
    set_correlation_id,
    set_trace_id,
    setup_logging,
    setup_logging_from_settings,
)


@pytest.fixture(autouse=True)
def restore_logging():
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    levels = {name: logging.getLogger(name).level for name in (None, *TRANSPORT_LOGGERS)}
    yield
    root_logger.handlers = handlers
    for name, level in levels.items():
        logging.getLogger(name).setLevel(level)
    structlog.reset_defaults()
    set_correlation_id(None)
    set_trace_id(None)


class TestLoggingSetup:
    """Test cases for structured logging setup"""

    def test_console_format_uses_console_renderer(self):
        setup_logging("api-interaction", level="DEBUG", format_type="console")

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
        assert not isinstance(logging.getLogger().handlers[0].formatter, JsonFormatter)

    def test_json_format_installs_json_handler(self):
        setup_logging("api-interaction")

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
        root_handlers = logging.getLogger().handlers
        assert len(root_handlers) == 1
        assert isinstance(root_handlers[0].formatter, JsonFormatter)

    def test_unknown_format_rejected(self):
        with pytest.raises(ValueError, match="Unknown log format"):
            setup_logging("api-interaction", format_type="xml")

    def test_transport_loggers_quiet_unless_debug(self):
        """Test httpx/httpcore follow DEBUG only when the adapter does"""
        setup_logging("api-interaction", level="INFO")
        assert all(logging.getLogger(name).level == logging.WARNING for name in TRANSPORT_LOGGERS)

        setup_logging("api-interaction", level="DEBUG")
        assert all(logging.getLogger(name).level == logging.DEBUG for name in TRANSPORT_LOGGERS)

    def test_setup_from_settings(self):
        """Test service name, level and format come from settings"""
        # Arrange
        settings = HttpClientSettings(_env_file=None, service_name="media-client", log_level="WARNING", log_format="console")

        # Act
        setup_logging_from_settings(settings)

        # Assert
        assert logging.getLogger().level == logging.WARNING
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
        assert processors[-2](None, "info", {})["service"] == "media-client"


class TestRequestContext:
    """Test cases for the request context processor and accessors"""

    def test_adds_service_only_without_ids(self):
        processor = add_request_context("api-interaction")

        assert processor(None, "info", {}) == {"service": "api-interaction"}

    def test_adds_correlation_and_trace_ids(self):
        processor = add_request_context("api-interaction")
        set_correlation_id("corr-1")
        set_trace_id("trace-1")

        assert processor(None, "info", {}) == {
            "service": "api-interaction",
            "correlation_id": "corr-1",
            "trace_id": "trace-1",
        }

    def test_context_accessors(self):
        set_correlation_id("corr-2")
        set_trace_id("trace-2")

        assert get_correlation_id() == "corr-2"
        assert get_trace_id() == "trace-2"

    def test_get_logger_returns_bindable_logger(self):
        logger = get_logger("api_interaction.http")

        assert hasattr(logger, "bind")
