"""Error hierarchy for gpx-stream.

Provides structured error types for the fatal conditions of a transcode run.
"""

from gpx_stream.errors.base import (
    ConfigError,
    ErrorContext,
    GpxStreamError,
    SinkError,
    SourceError,
    StructuralError,
)

__all__ = [
    "ConfigError",
    "ErrorContext",
    "GpxStreamError",
    "SinkError",
    "SourceError",
    "StructuralError",
]
