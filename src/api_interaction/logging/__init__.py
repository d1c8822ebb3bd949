"""Structured logging utilities with correlation and tracing support."""

from .setup import (
    add_request_context,
    get_correlation_id,
    get_logger,
    get_trace_id,
    set_correlation_id,
    set_trace_id,
    setup_logging,
    setup_logging_from_settings,
)

__all__ = [
    "setup_logging",
    "setup_logging_from_settings",
    "add_request_context",
    "get_logger",
    "get_correlation_id",
    "get_trace_id",
    "set_correlation_id",
    "set_trace_id",
]
