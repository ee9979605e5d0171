#!/usr/bin/env python3
"""
Streaming example.

Downloads a remote GPX document and prints the first coordinates as they
are decoded, then stops; the rest of the document is never fetched.

Usage:
    python examples/stream_url.py https://example.com/track.gpx
"""

import sys
from contextlib import closing
from itertools import islice

from gpx_stream import Pipeline, TranscodeConfig
from gpx_stream.transport import iter_http_chunks


def main() -> None:
    """Run streaming example."""
    url = sys.argv[1] if len(sys.argv) > 1 else "https://www.topografix.com/fells_loop.gpx"
    config = TranscodeConfig(chunk_size=4096, number_mode="float")
    pipeline = Pipeline(config)

    with closing(iter_http_chunks(url, chunk_size=config.chunk_size)) as chunks:
        print("First ten coordinates:\n")
        print("-" * 50)
        for coordinate in islice(pipeline.cursor(chunks), 10):
            print(f"{coordinate.lat:>12.6f} {coordinate.lon:>12.6f}")
        print("-" * 50)


if __name__ == "__main__":
    main()
