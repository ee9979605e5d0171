"""
Tokenizer adapter over a GPX-style XML byte stream.

Turns raw byte chunks into a forward-only cursor of structural tokens:
record start, attribute, record end, envelope end, and an explicit
stream end when the bytes run out before the envelope is closed.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

import httpx

from gpx_stream.errors import GpxStreamError, SourceError, StructuralError
from gpx_stream.pipeline.base import Cursor

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


class TokenKind(str, Enum):
    """Kinds of structural token."""

    RECORD_START = "record_start"
    ATTRIBUTE = "attribute"
    RECORD_END = "record_end"
    ENVELOPE_END = "envelope_end"
    STREAM_END = "stream_end"


@dataclass(frozen=True)
class Token:
    """One structural event.

    ``name`` and ``value`` are only set for ATTRIBUTE tokens.
    """

    kind: TokenKind
    name: str | None = None
    value: str | None = None


RECORD_START = Token(TokenKind.RECORD_START)
RECORD_END = Token(TokenKind.RECORD_END)
ENVELOPE_END = Token(TokenKind.ENVELOPE_END)
STREAM_END = Token(TokenKind.STREAM_END)


def _local_name(tag: str) -> str:
    """Strip a '{namespace}' prefix from an element or attribute name."""
    if tag.startswith("{"):
        return tag.rpartition("}")[2]
    return tag


class XmlTokenCursor(Cursor[Token]):
    """Forward-only token cursor backed by an incremental XML pull parser.

    A chunk is fed to the parser only when no parsed event is pending, and
    every finished element is detached from its parent and cleared, so the
    parser never holds more than the open element path plus one chunk.

    Records are elements named ``record_tag`` anywhere below the envelope
    (not nested in another record). Their XML attributes and the text of
    their direct children become ATTRIBUTE tokens; deeper content is dropped.

    Example:
        >>> cursor = XmlTokenCursor([b'<gpx><wpt lat="1" lon="2"/></gpx>'])
        >>> [t.kind.value for t in cursor]
        ['record_start', 'attribute', 'attribute', 'record_end', 'envelope_end']
    """

    def __init__(
        self,
        chunks: Iterable[bytes],
        *,
        envelope_tag: str = "gpx",
        record_tag: str = "wpt",
    ) -> None:
        """Initialize the cursor.

        Args:
            chunks: Byte chunks of the document, pulled one at a time
            envelope_tag: Local name of the document root
            record_tag: Local name of record elements
        """
        self._chunks = iter(chunks)
        self._envelope_tag = envelope_tag
        self._record_tag = record_tag
        self._parser = ET.XMLPullParser(events=("start", "end"))
        self._tokens = self._generate()

    def __next__(self) -> Token:
        return next(self._tokens)

    def _read_chunks(self) -> Iterator[bytes]:
        """Pull raw chunks, wrapping source failures."""
        while True:
            try:
                chunk = next(self._chunks)
            except StopIteration:
                return
            except GpxStreamError:
                raise
            except (OSError, httpx.HTTPError) as e:
                raise SourceError(f"Failed to read source: {e}", cause=e) from e
            if chunk:
                yield chunk

    def _parse_events(self) -> Iterator[tuple[str, ET.Element]]:
        """Feed chunks on demand and yield parser events in document order."""
        for chunk in self._read_chunks():
            # Syntax errors are queued by feed() and raised by read_events(),
            # after every event that precedes them.
            try:
                self._parser.feed(chunk)
                yield from self._parser.read_events()
            except ET.ParseError as e:
                line, column = e.position
                raise StructuralError(
                    f"Malformed input: {e}", line=line, column=column
                ) from e

        try:
            self._parser.close()
        except ET.ParseError:
            # Unterminated document; reported as STREAM_END by the caller.
            return
        yield from self._parser.read_events()

    def _generate(self) -> Iterator[Token]:
        open_elements: list[ET.Element] = []
        record_depth: int | None = None

        for event, elem in self._parse_events():
            if event == "start":
                open_elements.append(elem)
                depth = len(open_elements)
                name = _local_name(elem.tag)

                if depth == 1:
                    if name != self._envelope_tag:
                        raise StructuralError(
                            f"Expected envelope <{self._envelope_tag}>, found <{name}>"
                        )
                    continue

                if record_depth is None and name == self._record_tag:
                    record_depth = depth
                    yield RECORD_START
                    for attr_name, value in elem.attrib.items():
                        yield Token(TokenKind.ATTRIBUTE, _local_name(attr_name), value)
                continue

            depth = len(open_elements)
            open_elements.pop()

            if depth == 1:
                yield ENVELOPE_END
                return

            if record_depth is not None:
                if depth == record_depth:
                    record_depth = None
                    yield RECORD_END
                elif depth == record_depth + 1:
                    text = (elem.text or "").strip()
                    if text:
                        yield Token(TokenKind.ATTRIBUTE, _local_name(elem.tag), text)

            open_elements[-1].remove(elem)
            elem.clear()

        yield STREAM_END
