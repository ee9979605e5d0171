"""
Base abstractions for the pipeline layer.

Defines the cursor interface every stage implements and the Pipeline that
wires tokenizer, decoder, filter, projection and encoder together.
"""

from __future__ import annotations

import time
import uuid
from abc import abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, TypeVar

from gpx_stream.errors import GpxStreamError
from gpx_stream.telemetry import (
    LogContext,
    LogLevel,
    bound_log_context,
    get_log_context,
    get_logger,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from gpx_stream.config import TranscodeConfig
    from gpx_stream.pipeline.decode import RecordDecoder
    from gpx_stream.pipeline.encode import JsonArrayEncoder, Sink
    from gpx_stream.pipeline.select import FilterCursor
    from gpx_stream.types import Coordinate, Record

T = TypeVar("T")

logger = get_logger("gpx_stream.pipeline")


class Cursor(Iterator, Generic[T]):
    """Abstract lazy sequence: produces the next element on demand.

    A cursor has a single operation, ``next()``, which returns the next
    element or raises ``StopIteration`` once exhausted. Implementations
    hold at most the one element in flight and never read ahead of what
    their consumer asked for.
    """

    @abstractmethod
    def __next__(self) -> T:
        """Produce the next element.

        Raises:
            StopIteration: When the sequence is exhausted
        """
        ...


@dataclass
class PipelineStats:
    """Statistics for a single transcode run.

    Attributes:
        run_id: Identifier used in log context
        records_decoded: Records produced by the decoder
        records_skipped: Records dropped by validation
        coordinates_written: Elements written by the encoder
        elapsed_ms: Wall time of the run in milliseconds
        completed: Whether the closing bracket was written
    """

    run_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    records_decoded: int = 0
    records_skipped: int = 0
    coordinates_written: int = 0
    elapsed_ms: float = 0.0
    completed: bool = False


class Pipeline:
    """Bounded-memory transcode pipeline.

    The chain is:
    1. A tokenizer (bytes -> structural tokens)
    2. A decoder (tokens -> Records)
    3. A filter keeping valid Records
    4. A projection (Record -> Coordinate)
    5. An encoder writing the JSON array, which drives every pull

    Example:
        >>> pipeline = Pipeline()
        >>> with open("out.json", "wb") as sink:
        ...     stats = pipeline.run(iter_file_chunks("in.gpx"), sink)
    """

    def __init__(self, config: TranscodeConfig | None = None) -> None:
        """Initialize the pipeline.

        Args:
            config: Run settings (defaults when omitted)
        """
        if config is None:
            from gpx_stream.config import TranscodeConfig

            config = TranscodeConfig()
        self._config = config

    @property
    def config(self) -> TranscodeConfig:
        """Run settings."""
        return self._config

    def _accept(self, record: Record) -> bool:
        """Validity predicate that logs why a record is dropped."""
        from gpx_stream.pipeline.select import skip_reason

        reason = skip_reason(record, self._config.number_mode)
        if reason is None:
            return True
        if logger.is_enabled_for(LogLevel.DEBUG):
            logger.debug("Record skipped", reason=reason)
        return False

    def _build(
        self, chunks: Iterable[bytes]
    ) -> tuple[Cursor[Coordinate], RecordDecoder, FilterCursor[Record]]:
        from gpx_stream.pipeline.decode import RecordDecoder
        from gpx_stream.pipeline.project import lazy_map, to_coordinate
        from gpx_stream.pipeline.select import lazy_filter
        from gpx_stream.pipeline.tokenize import XmlTokenCursor

        config = self._config
        tokens = XmlTokenCursor(
            chunks,
            envelope_tag=config.envelope_tag,
            record_tag=config.record_tag,
        )
        records = RecordDecoder(
            tokens,
            lat_field=config.lat_field,
            lon_field=config.lon_field,
            extra_fields=config.extra_fields,
        )
        valid = lazy_filter(records, self._accept)
        number_mode = config.number_mode
        coordinates = lazy_map(valid, lambda record: to_coordinate(record, number_mode))
        return coordinates, records, valid

    def cursor(self, chunks: Iterable[bytes]) -> Cursor[Coordinate]:
        """Compose the lazy chain without pulling anything.

        Stopping iteration at any point cancels the run; nothing runs in
        the background.

        Args:
            chunks: Byte chunks of the input document

        Returns:
            Cursor of validated Coordinates in input order
        """
        coordinates, _, _ = self._build(chunks)
        return coordinates

    def run(
        self, chunks: Iterable[bytes], sink: Sink, *, source: str | None = None
    ) -> PipelineStats:
        """Transcode ``chunks`` into a JSON array written to ``sink``.

        Args:
            chunks: Byte chunks of the input document
            sink: Binary writable receiving the output
            source: Optional label for log context (path or URL)

        Returns:
            PipelineStats for the run

        Raises:
            StructuralError: If the input is truncated or malformed
            SourceError: If reading the input fails
            SinkError: If writing the output fails
        """
        from gpx_stream.pipeline.encode import JsonArrayEncoder

        stats = PipelineStats()
        context = LogContext(run_id=stats.run_id, source=source or get_log_context().source)
        with bound_log_context(context):
            self._drive(chunks, JsonArrayEncoder(sink), stats)
        return stats

    def _drive(
        self, chunks: Iterable[bytes], encoder: JsonArrayEncoder, stats: PipelineStats
    ) -> None:
        coordinates, records, valid = self._build(chunks)
        start = time.perf_counter()
        try:
            stats.coordinates_written = encoder.encode(coordinates)
            stats.completed = True
        except GpxStreamError as e:
            logger.error(
                "Transcode aborted",
                error=type(e).__name__,
                detail=e.message,
                records_decoded=records.records_decoded,
            )
            raise
        finally:
            stats.records_decoded = records.records_decoded
            stats.records_skipped = valid.rejected
            stats.elapsed_ms = (time.perf_counter() - start) * 1000

        logger.info(
            "Transcode finished",
            records_decoded=stats.records_decoded,
            records_skipped=stats.records_skipped,
            coordinates_written=stats.coordinates_written,
            elapsed_ms=round(stats.elapsed_ms, 3),
        )
