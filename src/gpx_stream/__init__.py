"""gpx-stream: bounded-memory GPX to JSON transcoding.

Streams waypoint-like records out of an arbitrarily large XML document and
writes them as a JSON array of coordinates, holding at most one record per
pipeline stage at any time.
"""
from __future__ import annotations

from gpx_stream.config import TranscodeConfig, load_config
from gpx_stream.convert import (
    configure_logging,
    transcode,
    transcode_bytes,
    transcode_file,
    transcode_url,
)
from gpx_stream.errors import (
    ConfigError,
    GpxStreamError,
    SinkError,
    SourceError,
    StructuralError,
)
from gpx_stream.pipeline import Pipeline, PipelineStats
from gpx_stream.types import Coordinate, Record

__version__ = "0.1.0"

__all__ = [
    # Errors
    "ConfigError",
    "Coordinate",
    "GpxStreamError",
    # Pipeline
    "Pipeline",
    "PipelineStats",
    "Record",
    "SinkError",
    "SourceError",
    "StructuralError",
    # Config
    "TranscodeConfig",
    # Version
    "__version__",
    "configure_logging",
    "load_config",
    # Helpers
    "transcode",
    "transcode_bytes",
    "transcode_file",
    "transcode_url",
]
