"""
Telemetry module for gpx-stream.

Provides structured, run-scoped logging.
"""

from gpx_stream.telemetry.logger import (
    JsonFormatter,
    LogContext,
    LogLevel,
    SensitiveDataMasker,
    StreamLogger,
    TextFormatter,
    bound_log_context,
    clear_log_context,
    get_log_context,
    get_logger,
    set_log_context,
)

__all__ = [
    "JsonFormatter",
    "LogContext",
    "LogLevel",
    "SensitiveDataMasker",
    "StreamLogger",
    "TextFormatter",
    "bound_log_context",
    "clear_log_context",
    "get_log_context",
    "get_logger",
    "set_log_context",
]
