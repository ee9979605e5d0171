"""
Record selector: lazy filtering and the record validity rules.

A record is valid when both coordinates are present and parse as finite
decimal numbers. In float mode they must also stay finite once converted
to binary floating point. Invalid records are dropped silently.
"""

from __future__ import annotations

import math
import re
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Literal, TypeVar

from gpx_stream.pipeline.base import Cursor

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from gpx_stream.types import Record

T = TypeVar("T")

# Plain decimal notation; rejects inf/nan, hex and digit separators.
_NUMBER_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


class FilterCursor(Cursor[T]):
    """Cursor yielding only the upstream elements that satisfy a predicate.

    Each ``next()`` pulls from the source until the predicate holds or the
    source is exhausted. The predicate runs at most once per upstream
    element, and only when downstream asks for the next element.

    Example:
        >>> evens = FilterCursor(iter(range(6)), lambda n: n % 2 == 0)
        >>> list(evens)
        [0, 2, 4]
    """

    def __init__(self, source: Iterable[T], predicate: Callable[[T], bool]) -> None:
        """Initialize the filter.

        Args:
            source: Upstream cursor or iterable
            predicate: Returns True for elements to keep
        """
        self._source = iter(source)
        self._predicate = predicate
        self.accepted = 0
        self.rejected = 0

    def __next__(self) -> T:
        for item in self._source:
            if self._predicate(item):
                self.accepted += 1
                return item
            self.rejected += 1
        raise StopIteration


def lazy_filter(source: Iterable[T], predicate: Callable[[T], bool]) -> FilterCursor[T]:
    """Wrap ``source`` in a lazily evaluated filter."""
    return FilterCursor(source, predicate)


def parse_number(text: str | None) -> Decimal | None:
    """Parse decimal numeric text.

    Args:
        text: Raw attribute text

    Returns:
        Finite Decimal, or None if the text is absent or not a number
    """
    if text is None:
        return None
    text = text.strip()
    if not _NUMBER_RE.fullmatch(text):
        return None
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def _representable(value: Decimal | None, number_mode: str) -> bool:
    if value is None:
        return False
    return number_mode != "float" or math.isfinite(float(value))


def skip_reason(
    record: Record, number_mode: Literal["decimal", "float"] = "decimal"
) -> str | None:
    """Explain why a record would be dropped.

    Args:
        record: Decoded record
        number_mode: 'float' also rejects values that overflow a binary float

    Returns:
        None for a valid record, else one of ``missing_lat``, ``missing_lon``,
        ``invalid_lat`` or ``invalid_lon``
    """
    if record.lat is None:
        return "missing_lat"
    if record.lon is None:
        return "missing_lon"
    if not _representable(parse_number(record.lat), number_mode):
        return "invalid_lat"
    if not _representable(parse_number(record.lon), number_mode):
        return "invalid_lon"
    return None


def is_valid_record(
    record: Record, number_mode: Literal["decimal", "float"] = "decimal"
) -> bool:
    """Check that both coordinates are present and numeric."""
    return skip_reason(record, number_mode) is None
