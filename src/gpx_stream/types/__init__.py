"""Type definitions for gpx-stream."""

from gpx_stream.types.record import Coordinate, Record

__all__ = [
    "Coordinate",
    "Record",
]
