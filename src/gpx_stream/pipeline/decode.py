"""
Record decoder: an explicit pull state machine over the token cursor.

Each ``next()`` call consumes tokens up to and including one record end and
returns the resulting Record, or signals exhaustion once the envelope end
has been seen. Running out of tokens before that is a structural error.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, NoReturn

from gpx_stream.errors import GpxStreamError, StructuralError
from gpx_stream.pipeline.base import Cursor
from gpx_stream.pipeline.tokenize import STREAM_END, TokenKind
from gpx_stream.types import Record

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from gpx_stream.pipeline.tokenize import Token


class DecoderState(str, Enum):
    """Decoder states."""

    SEEKING = "seeking"
    DONE = "done"
    ERROR = "error"


class RecordDecoder(Cursor[Record]):
    """Turns structural tokens into a lazy sequence of Records.

    Only the fixed field set (latitude, longitude) and any explicitly
    requested extra fields are read; all other attributes are dropped as
    they stream past. The decoder strictly advances its token cursor and
    is single-use.

    Example:
        >>> from gpx_stream.pipeline.tokenize import XmlTokenCursor
        >>> decoder = RecordDecoder(XmlTokenCursor([b'<gpx><wpt lat="1"/></gpx>']))
        >>> list(decoder)
        [Record(lat='1', lon=None, extras={})]
    """

    def __init__(
        self,
        tokens: Iterable[Token],
        *,
        lat_field: str = "lat",
        lon_field: str = "lon",
        extra_fields: Iterable[str] = (),
    ) -> None:
        """Initialize the decoder.

        Args:
            tokens: Token cursor in forward document order
            lat_field: Attribute name holding the latitude
            lon_field: Attribute name holding the longitude
            extra_fields: Auxiliary attribute names to keep on each Record
        """
        self._tokens: Iterator[Token] = iter(tokens)
        self._lat_field = lat_field
        self._lon_field = lon_field
        self._extra_fields = frozenset(extra_fields)
        self._state = DecoderState.SEEKING
        self.records_decoded = 0

    @property
    def state(self) -> DecoderState:
        """Current decoder state."""
        return self._state

    def __next__(self) -> Record:
        if self._state is DecoderState.DONE:
            raise StopIteration
        if self._state is DecoderState.ERROR:
            raise StructuralError(
                "Decoder already failed on this input", state=self._state.value
            )

        token = self._next_token()
        if token.kind is TokenKind.RECORD_START:
            record = self._read_record()
            self.records_decoded += 1
            return record
        if token.kind is TokenKind.ENVELOPE_END:
            self._state = DecoderState.DONE
            raise StopIteration
        if token.kind is TokenKind.STREAM_END:
            self._fail("Input ended before the envelope terminator")
        self._fail(f"Unexpected {token.kind.value} token between records")

    def _next_token(self) -> Token:
        # An exhausted token cursor counts as the stream ending.
        try:
            return next(self._tokens, STREAM_END)
        except GpxStreamError:
            self._state = DecoderState.ERROR
            raise

    def _read_record(self) -> Record:
        """Consume attribute tokens up to the matching record end."""
        lat: str | None = None
        lon: str | None = None
        extras: dict[str, str] = {}

        while True:
            token = self._next_token()
            if token.kind is TokenKind.RECORD_END:
                return Record(lat=lat, lon=lon, extras=extras)
            if token.kind is not TokenKind.ATTRIBUTE:
                self._fail(f"Record end missing: got {token.kind.value} inside a record")

            name = token.name
            if name == self._lat_field:
                lat = token.value
            elif name == self._lon_field:
                lon = token.value
            elif name in self._extra_fields:
                extras[name] = token.value

    def _fail(self, message: str) -> NoReturn:
        state = self._state.value
        self._state = DecoderState.ERROR
        raise StructuralError(message, state=state)
