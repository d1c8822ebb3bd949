import contextvars
import logging
import sys

import structlog
from pythonjsonlogger.json import JsonFormatter
from structlog.stdlib import LoggerFactory

from ..config.settings import HttpClientSettings, get_settings

# Context variables for correlation and trace IDs
_correlation_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar("correlation_id", default=None)
_trace_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar("trace_id", default=None)

# Transport loggers that flood DEBUG output with connection-level events
TRANSPORT_LOGGERS = ("httpx", "httpcore")

RENDERERS = {
    "json": structlog.processors.JSONRenderer,
    "console": lambda: structlog.dev.ConsoleRenderer(colors=True),
}


def setup_logging(
    service_name: str,
    level: str = "INFO",
    format_type: str = "json",
) -> None:
    """
    Configure structlog for the HTTP adapter

    Args:
        service_name: Name of the calling service, added to every entry
        level: Log level for the adapter (DEBUG, INFO, WARNING, ERROR)
        format_type: "json" for production, "console" for development

    The httpx and httpcore loggers stay at WARNING unless the adapter
    itself logs at DEBUG.
    """
    if format_type not in RENDERERS:
        raise ValueError(f"Unknown log format: {format_type}")

    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    if format_type == "json":
        handler.setFormatter(
            JsonFormatter(
                fmt="%(asctime)s %(name)s %(levelname)s %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S%z",
            )
        )
    else:
        handler.setFormatter(logging.Formatter("%(message)s"))

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(log_level)

    transport_level = logging.DEBUG if log_level <= logging.DEBUG else logging.WARNING
    for name in TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            add_request_context(service_name),
            RENDERERS[format_type](),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def setup_logging_from_settings(settings: HttpClientSettings | None = None) -> None:
    """Configure logging from HTTP_CLIENT_* settings"""
    settings = settings or get_settings()
    setup_logging(settings.service_name, level=settings.log_level, format_type=settings.log_format)


def add_request_context(service_name: str):
    """Add service name and any correlation/trace IDs to each entry"""

    def processor(logger, method_name, event_dict):
        event_dict["service"] = service_name

        correlation_id = get_correlation_id()
        if correlation_id:
            event_dict["correlation_id"] = correlation_id

        trace_id = get_trace_id()
        if trace_id:
            event_dict["trace_id"] = trace_id

        return event_dict

    return processor


def set_correlation_id(correlation_id: str | None) -> None:
    _correlation_id_var.set(correlation_id)


def set_trace_id(trace_id: str | None) -> None:
    _trace_id_var.set(trace_id)


def get_correlation_id() -> str | None:
    return _correlation_id_var.get()


def get_trace_id() -> str | None:
    return _trace_id_var.get()


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance"""
    return structlog.get_logger(name)
