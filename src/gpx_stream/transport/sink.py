"""
Output sinks for the encoder.

The encoder never retracts bytes it has written, so a failed run leaves a
partial array behind. ``atomic_file_sink`` writes to a temporary file next
to the destination and swaps it into place only when the run succeeds.
"""

from __future__ import annotations

import contextlib
import os
import stat
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO

from gpx_stream.errors import SinkError

if TYPE_CHECKING:
    from collections.abc import Iterator


def _output_mode(path: Path) -> int:
    """Permission bits for the finished output.

    An existing destination keeps its mode; a new one gets what a plain
    ``open()`` would give it under the current umask.
    """
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


@contextmanager
def atomic_file_sink(path: str | Path) -> Iterator[BinaryIO]:
    """Open a binary sink that replaces ``path`` only on success.

    Args:
        path: Destination file

    Yields:
        Writable binary file in the destination directory

    Raises:
        SinkError: If the temporary file cannot be created or swapped in
    """
    path = Path(path)
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
        )
    except OSError as e:
        raise SinkError(f"Cannot create temporary output next to {path}: {e}", cause=e) from e

    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            yield f
        os.chmod(tmp_path, _output_mode(path))
        os.replace(tmp_path, path)
    except OSError as e:
        with contextlib.suppress(FileNotFoundError):
            tmp_path.unlink()
        raise SinkError(f"Failed to finalize output {path}: {e}", cause=e) from e
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            tmp_path.unlink()
        raise
