"""
Byte sources feeding the tokenizer.

Provides:
- Chunked file reading
- Streaming HTTP download using httpx
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO

import httpx

from gpx_stream.config import DEFAULT_CHUNK_SIZE
from gpx_stream.errors import SourceError

if TYPE_CHECKING:
    from collections.abc import Iterator

_DEFAULT_TIMEOUT = 30.0
_DEFAULT_CONNECT_TIMEOUT = 10.0


def iter_file_chunks(
    source: str | Path | BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE
) -> Iterator[bytes]:
    """Read a file lazily in fixed-size chunks.

    A path is opened on the first pull and closed when the generator is
    exhausted or closed; an already open binary file is left open.

    Args:
        source: Path or binary file object
        chunk_size: Bytes per chunk

    Yields:
        Raw byte chunks

    Raises:
        SourceError: If the file cannot be opened or read
    """
    if isinstance(source, (str, Path)):
        path = Path(source)
        try:
            f = path.open("rb")
        except OSError as e:
            raise SourceError(
                f"Cannot open source: {e}", location=str(path), cause=e
            ) from e
        with f:
            yield from _read_chunks(f, chunk_size, str(path))
    else:
        yield from _read_chunks(source, chunk_size, getattr(source, "name", None))


def _read_chunks(f: BinaryIO, chunk_size: int, location: str | None) -> Iterator[bytes]:
    while True:
        try:
            chunk = f.read(chunk_size)
        except OSError as e:
            raise SourceError(f"Failed to read source: {e}", location=location, cause=e) from e
        if not chunk:
            return
        yield chunk


def iter_http_chunks(
    url: str,
    *,
    client: httpx.Client | None = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    timeout: float | None = None,
    headers: dict[str, str] | None = None,
) -> Iterator[bytes]:
    """Stream a document over HTTP.

    The request is only sent on the first pull, and the response is closed
    when the generator finishes or is closed.

    Args:
        url: Document URL
        client: Optional httpx client (a private one is created otherwise)
        chunk_size: Bytes per chunk
        timeout: Read timeout in seconds
        headers: Additional request headers

    Yields:
        Raw byte chunks

    Raises:
        SourceError: On connection failures, timeouts or error status codes

    Example:
        >>> for chunk in iter_http_chunks("https://example.com/track.gpx"):
        ...     process(chunk)
    """
    owns_client = client is None
    if client is None:
        client = httpx.Client(
            timeout=httpx.Timeout(
                timeout or _DEFAULT_TIMEOUT, connect=_DEFAULT_CONNECT_TIMEOUT
            ),
            follow_redirects=True,
        )

    request_headers = {"Accept": "application/gpx+xml, application/xml, text/xml, */*"}
    if headers:
        request_headers.update(headers)

    try:
        with client.stream("GET", url, headers=request_headers) as response:
            if response.status_code >= 400:
                raise SourceError(
                    f"HTTP {response.status_code} fetching source",
                    location=url,
                    status_code=response.status_code,
                )
            yield from response.iter_bytes(chunk_size)
    except httpx.ConnectError as e:
        raise SourceError(f"Connection failed: {e}", location=url, cause=e) from e
    except httpx.TimeoutException as e:
        raise SourceError(f"Request timed out: {e}", location=url, cause=e) from e
    except httpx.HTTPError as e:
        raise SourceError(f"HTTP error: {e}", location=url, cause=e) from e
    finally:
        if owns_client:
            client.close()
