"""Root pytest fixtures for gpx-stream tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator

import pytest

GPX_HEADER = (
    b'<?xml version="1.0" encoding="UTF-8"?>\n'
    b'<gpx version="1.1" creator="tests" xmlns="http://www.topografix.com/GPX/1/1">\n'
)
GPX_FOOTER = b"</gpx>\n"


def waypoint(lat: object = None, lon: object = None, **children: object) -> bytes:
    """Render one <wpt> element; None leaves the attribute out."""
    attrs = ""
    if lat is not None:
        attrs += f' lat="{lat}"'
    if lon is not None:
        attrs += f' lon="{lon}"'
    body = "".join(f"<{name}>{value}</{name}>" for name, value in children.items())
    return f"  <wpt{attrs}>{body}</wpt>\n".encode()


def build_gpx(*records: bytes, closed: bool = True) -> bytes:
    """Wrap rendered records in a GPX envelope."""
    return GPX_HEADER + b"".join(records) + (GPX_FOOTER if closed else b"")


def chunked(data: bytes, size: int) -> Iterator[bytes]:
    """Split ``data`` into chunks of ``size`` bytes."""
    for i in range(0, len(data), size):
        yield data[i : i + size]


class CountingSink:
    """Binary sink that only counts bytes, for long-running inputs."""

    def __init__(self) -> None:
        self.bytes_written = 0
        self.head = b""

    def write(self, data: bytes) -> int:
        if len(self.head) < 64:
            self.head += data[: 64 - len(self.head)]
        self.bytes_written += len(data)
        return len(data)


@pytest.fixture
def gpx() -> Callable[..., bytes]:
    """Factory building a GPX document from rendered waypoints."""
    return build_gpx


@pytest.fixture
def wpt() -> Callable[..., bytes]:
    """Factory rendering a single waypoint."""
    return waypoint


@pytest.fixture
def scenario_three_records() -> bytes:
    """(1, 2), (3, missing), (4, 5)."""
    return build_gpx(waypoint(1, 2), waypoint(3, None), waypoint(4, 5))


@pytest.fixture
def chunker() -> Callable[[bytes, int], Iterator[bytes]]:
    """Splits a document into fixed-size chunks."""
    return chunked


@pytest.fixture
def counting_sink() -> CountingSink:
    """Sink that discards output and counts bytes."""
    return CountingSink()
