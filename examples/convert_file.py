#!/usr/bin/env python3
"""
File conversion example.

Converts a GPX file into a JSON array of coordinates, writing the output
atomically so a truncated input never leaves a half-written file.

Usage:
    python examples/convert_file.py track.gpx track.json
    GPX_STREAM_CONFIG=gpx.yaml python examples/convert_file.py track.gpx track.json
"""

import sys

from gpx_stream import GpxStreamError, StructuralError, transcode_file


def main() -> int:
    """Run file conversion example."""
    if len(sys.argv) != 3:
        print(__doc__)
        return 2

    src, dst = sys.argv[1], sys.argv[2]
    try:
        # Settings come from GPX_STREAM_CONFIG / GPX_STREAM_* when not passed
        stats = transcode_file(src, dst)
    except StructuralError as e:
        print(f"Input is not a complete document: {e}", file=sys.stderr)
        return 1
    except GpxStreamError as e:
        print(f"Conversion failed: {e}", file=sys.stderr)
        return 1

    print(
        f"Wrote {stats.coordinates_written} coordinates "
        f"({stats.records_skipped} records skipped) in {stats.elapsed_ms:.1f} ms"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
