"""
High-level transcode helpers.

Wire a byte source, the pipeline and a sink together for the common cases:
in-memory bytes, local files and HTTP downloads.
"""

from __future__ import annotations

import io
from contextlib import closing
from pathlib import Path
from typing import TYPE_CHECKING

from gpx_stream.config import TranscodeConfig, load_config
from gpx_stream.errors import SinkError
from gpx_stream.pipeline import Pipeline
from gpx_stream.telemetry import StreamLogger
from gpx_stream.transport import atomic_file_sink, iter_file_chunks, iter_http_chunks

if TYPE_CHECKING:
    from collections.abc import Iterable

    import httpx

    from gpx_stream.pipeline import PipelineStats, Sink


def _resolve(config: TranscodeConfig | None) -> TranscodeConfig:
    # Settings loaded from file/environment also carry the logging setup.
    if config is None:
        config = load_config()
        configure_logging(config)
    return config


def configure_logging(config: TranscodeConfig) -> None:
    """Apply the logging settings of ``config``."""
    StreamLogger.configure(level=config.log_level, format=config.log_format)


def transcode(
    chunks: Iterable[bytes],
    sink: Sink,
    config: TranscodeConfig | None = None,
    *,
    source: str | None = None,
) -> PipelineStats:
    """Transcode byte chunks into a JSON array written to ``sink``.

    Args:
        chunks: Byte chunks of the input document
        sink: Binary writable receiving the output
        config: Run settings (loaded from file/environment when omitted)
        source: Optional label for log context

    Returns:
        PipelineStats for the run
    """
    return Pipeline(_resolve(config)).run(chunks, sink, source=source)


def transcode_bytes(data: bytes, config: TranscodeConfig | None = None) -> bytes:
    """Transcode an in-memory document and return the JSON array bytes."""
    sink = io.BytesIO()
    transcode([data], sink, config)
    return sink.getvalue()


def transcode_file(
    src: str | Path,
    dst: str | Path,
    config: TranscodeConfig | None = None,
    *,
    atomic: bool = True,
) -> PipelineStats:
    """Transcode a local file into a JSON file.

    Args:
        src: Input document path
        dst: Output path
        config: Run settings
        atomic: Write through a temporary file swapped in on success

    Returns:
        PipelineStats for the run
    """
    config = _resolve(config)
    with closing(iter_file_chunks(src, config.chunk_size)) as chunks:
        if atomic:
            with atomic_file_sink(dst) as sink:
                return transcode(chunks, sink, config, source=str(src))
        try:
            out = Path(dst).open("wb")
        except OSError as e:
            raise SinkError(f"Cannot open output {dst}: {e}", cause=e) from e
        with out:
            return transcode(chunks, out, config, source=str(src))


def transcode_url(
    url: str,
    dst: str | Path,
    config: TranscodeConfig | None = None,
    *,
    client: httpx.Client | None = None,
) -> PipelineStats:
    """Stream a remote document into a local JSON file.

    The output is written atomically.

    Args:
        url: Input document URL
        dst: Output path
        config: Run settings
        client: Optional httpx client

    Returns:
        PipelineStats for the run
    """
    config = _resolve(config)
    chunks = iter_http_chunks(
        url,
        client=client,
        chunk_size=config.chunk_size,
        timeout=config.http_timeout,
    )
    with closing(chunks), atomic_file_sink(dst) as sink:
        return transcode(chunks, sink, config, source=url)
