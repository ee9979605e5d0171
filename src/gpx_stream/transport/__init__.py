"""
Transport layer - byte sources and output sinks owned by the caller.
"""

from gpx_stream.transport.sink import atomic_file_sink
from gpx_stream.transport.source import iter_file_chunks, iter_http_chunks

__all__ = [
    "atomic_file_sink",
    "iter_file_chunks",
    "iter_http_chunks",
]
