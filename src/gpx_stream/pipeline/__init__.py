"""
Pipeline layer - Bounded-memory stream processing stages.

This module implements the pull-driven transcode pipeline:
- Tokenizer: Turns raw bytes into structural tokens (XmlTokenCursor)
- Decoder: Turns tokens into Records (RecordDecoder)
- Selector: Drops invalid Records lazily (FilterCursor)
- Projection: Turns Records into Coordinates lazily (MapCursor)
- Encoder: Writes the JSON array while pulling (JsonArrayEncoder)

Every stage is a Cursor holding at most one element in flight; the encoder
is the only driver.
"""

from gpx_stream.pipeline.base import Cursor, Pipeline, PipelineStats
from gpx_stream.pipeline.decode import DecoderState, RecordDecoder
from gpx_stream.pipeline.encode import (
    JsonArrayEncoder,
    Sink,
    format_number,
    serialize_coordinate,
)
from gpx_stream.pipeline.project import MapCursor, lazy_map, to_coordinate
from gpx_stream.pipeline.select import (
    FilterCursor,
    is_valid_record,
    lazy_filter,
    parse_number,
    skip_reason,
)
from gpx_stream.pipeline.tokenize import Token, TokenKind, XmlTokenCursor

__all__ = [
    # Base abstractions
    "Cursor",
    "DecoderState",
    "FilterCursor",
    "JsonArrayEncoder",
    "MapCursor",
    "Pipeline",
    "PipelineStats",
    "RecordDecoder",
    "Sink",
    "Token",
    "TokenKind",
    "XmlTokenCursor",
    # Functions
    "format_number",
    "is_valid_record",
    "lazy_filter",
    "lazy_map",
    "parse_number",
    "serialize_coordinate",
    "skip_reason",
    "to_coordinate",
]
