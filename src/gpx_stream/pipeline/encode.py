"""
Incremental JSON array encoder.

Writes ``[``, the comma-separated coordinate objects and ``]`` to a binary
sink while pulling coordinates one at a time.
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import TYPE_CHECKING, Protocol

from gpx_stream.errors import SinkError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from gpx_stream.types import Coordinate


class Sink(Protocol):
    """Binary writable owned by the caller."""

    def write(self, data: bytes, /) -> object: ...


def format_number(value: Decimal | float) -> str:
    """Render a finite number as JSON number text.

    Decimals keep their exact digits (``str(Decimal)``); floats use the
    shortest round-tripping ``repr``.

    Raises:
        ValueError: If the value is not finite
    """
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"Cannot encode non-finite number: {value}")
        return str(value)
    if not math.isfinite(value):
        raise ValueError(f"Cannot encode non-finite number: {value}")
    return repr(float(value))


def serialize_coordinate(coordinate: Coordinate) -> bytes:
    """Serialize one coordinate as a compact JSON object."""
    lat = format_number(coordinate.lat)
    lon = format_number(coordinate.lon)
    return f'{{"lat":{lat},"lon":{lon}}}'.encode()


class JsonArrayEncoder:
    """Writes a JSON array of coordinates to a sink, one element per pull.

    The only state carried between pulls is the count of elements written;
    a non-zero count means the next element needs a leading comma.

    Example:
        >>> import io
        >>> sink = io.BytesIO()
        >>> JsonArrayEncoder(sink).encode(iter([]))
        0
        >>> sink.getvalue()
        b'[]'
    """

    def __init__(self, sink: Sink) -> None:
        """Initialize the encoder.

        Args:
            sink: Binary writable; its lifecycle stays with the caller
        """
        self._sink = sink

    def _write(self, data: bytes) -> None:
        try:
            self._sink.write(data)
        except OSError as e:
            raise SinkError(f"Failed to write output: {e}", cause=e) from e

    def encode(self, coordinates: Iterable[Coordinate]) -> int:
        """Drive ``coordinates`` to exhaustion, writing the array.

        Args:
            coordinates: Cursor of coordinates, pulled one at a time

        Returns:
            Number of elements written

        Raises:
            SinkError: If a write fails; bytes already written stay in the sink
        """
        written = 0
        self._write(b"[")
        for coordinate in coordinates:
            if written:
                self._write(b",")
            self._write(serialize_coordinate(coordinate))
            written += 1
        self._write(b"]")
        return written
