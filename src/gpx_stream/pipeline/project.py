"""
Record projection: lazy mapping and the Record -> Coordinate transform.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal, TypeVar

from gpx_stream.pipeline.base import Cursor
from gpx_stream.pipeline.select import parse_number, skip_reason
from gpx_stream.types import Coordinate

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from gpx_stream.types import Record

S = TypeVar("S")
T = TypeVar("T")


class MapCursor(Cursor[T]):
    """Cursor applying a transform to each upstream element as it is pulled.

    Exactly one upstream element is pulled per ``next()``; nothing is read
    ahead.

    Example:
        >>> doubled = MapCursor(iter([1, 2, 3]), lambda n: n * 2)
        >>> next(doubled)
        2
    """

    def __init__(self, source: Iterable[S], transform: Callable[[S], T]) -> None:
        """Initialize the mapper.

        Args:
            source: Upstream cursor or iterable
            transform: Function applied to every element
        """
        self._source = iter(source)
        self._transform = transform
        self.produced = 0

    def __next__(self) -> T:
        result = self._transform(next(self._source))
        self.produced += 1
        return result


def lazy_map(source: Iterable[S], transform: Callable[[S], T]) -> MapCursor[T]:
    """Wrap ``source`` in a lazily evaluated map."""
    return MapCursor(source, transform)


def to_coordinate(
    record: Record, number_mode: Literal["decimal", "float"] = "decimal"
) -> Coordinate:
    """Project a valid Record onto a Coordinate.

    Only the numeric values are carried over; the returned Coordinate holds
    no reference to the Record or its extra fields.

    Args:
        record: Record that passed ``is_valid_record``
        number_mode: 'decimal' keeps the exact value, 'float' converts to binary

    Returns:
        Coordinate with latitude and longitude

    Raises:
        ValueError: If the record is not valid
    """
    lat = parse_number(record.lat)
    lon = parse_number(record.lon)
    if lat is None or lon is None or skip_reason(record, number_mode) is not None:
        raise ValueError("Record has no valid coordinates; filter before projecting")
    if number_mode == "float":
        return Coordinate(lat=float(lat), lon=float(lon))
    return Coordinate(lat=lat, lon=lon)
