"""Tests for byte sources and sinks."""

import io
import os
import stat
from pathlib import Path

import httpx
import pytest
from pytest_httpx import HTTPXMock

from gpx_stream.errors import SinkError, SourceError
from gpx_stream.transport import atomic_file_sink, iter_file_chunks, iter_http_chunks

URL = "https://tracks.example.com/ride.gpx"


class TestFileSource:
    """Tests for iter_file_chunks."""

    def test_reads_in_chunks(self, tmp_path: Path) -> None:
        """Test fixed-size chunking of a file."""
        path = tmp_path / "in.gpx"
        path.write_bytes(b"abcdefghij")

        assert list(iter_file_chunks(path, chunk_size=4)) == [b"abcd", b"efgh", b"ij"]

    def test_file_object(self) -> None:
        """Test reading from an open binary file."""
        f = io.BytesIO(b"abc")

        assert list(iter_file_chunks(f, chunk_size=2)) == [b"ab", b"c"]
        assert not f.closed

    def test_opened_lazily(self, tmp_path: Path) -> None:
        """Test that a missing file is reported on the first pull."""
        chunks = iter_file_chunks(tmp_path / "absent.gpx")

        with pytest.raises(SourceError, match="Cannot open source") as exc_info:
            next(chunks)

        assert isinstance(exc_info.value.__cause__, FileNotFoundError)

    def test_read_failure(self) -> None:
        """Test that read errors become SourceError."""

        class BrokenFile(io.RawIOBase):
            def readable(self) -> bool:
                return True

            def read(self, size: int = -1) -> bytes:
                raise OSError("I/O error")

        with pytest.raises(SourceError, match="I/O error"):
            list(iter_file_chunks(BrokenFile()))


class TestHttpSource:
    """Tests for iter_http_chunks."""

    def test_streams_body(self, httpx_mock: HTTPXMock) -> None:
        """Test that the response body is yielded."""
        httpx_mock.add_response(url=URL, content=b"<gpx></gpx>")

        assert b"".join(iter_http_chunks(URL, chunk_size=4)) == b"<gpx></gpx>"

    def test_request_sent_on_first_pull(self, httpx_mock: HTTPXMock) -> None:
        """Test that nothing is requested before iteration starts."""
        httpx_mock.add_response(url=URL, content=b"<gpx/>")

        chunks = iter_http_chunks(URL)
        assert httpx_mock.get_requests() == []

        list(chunks)
        assert len(httpx_mock.get_requests()) == 1

    def test_custom_headers(self, httpx_mock: HTTPXMock) -> None:
        """Test extra request headers."""
        httpx_mock.add_response(url=URL, content=b"")

        list(iter_http_chunks(URL, headers={"X-Trace": "1"}))

        request = httpx_mock.get_requests()[0]
        assert request.headers["X-Trace"] == "1"
        assert "application/gpx+xml" in request.headers["Accept"]

    def test_error_status(self, httpx_mock: HTTPXMock) -> None:
        """Test that error statuses become SourceError."""
        httpx_mock.add_response(url=URL, status_code=404)

        with pytest.raises(SourceError, match="HTTP 404") as exc_info:
            list(iter_http_chunks(URL))

        assert exc_info.value.status_code == 404

    def test_timeout(self, httpx_mock: HTTPXMock) -> None:
        """Test that timeouts become SourceError."""
        httpx_mock.add_exception(httpx.ReadTimeout("read timed out"))

        with pytest.raises(SourceError, match="timed out") as exc_info:
            list(iter_http_chunks(URL))

        assert isinstance(exc_info.value.__cause__, httpx.TimeoutException)

    def test_connection_failure(self, httpx_mock: HTTPXMock) -> None:
        """Test that connection errors become SourceError."""
        httpx_mock.add_exception(httpx.ConnectError("refused"))

        with pytest.raises(SourceError, match="Connection failed"):
            list(iter_http_chunks(URL))

    def test_shared_client_left_open(self, httpx_mock: HTTPXMock) -> None:
        """Test that a caller-owned client is not closed."""
        httpx_mock.add_response(url=URL, content=b"<gpx/>")

        with httpx.Client() as client:
            list(iter_http_chunks(URL, client=client))
            assert not client.is_closed


class TestAtomicFileSink:
    """Tests for atomic_file_sink."""

    def test_replaces_on_success(self, tmp_path: Path) -> None:
        """Test that the destination appears only after success."""
        dst = tmp_path / "out.json"

        with atomic_file_sink(dst) as sink:
            sink.write(b"[]")
            assert not dst.exists()

        assert dst.read_bytes() == b"[]"
        assert list(tmp_path.iterdir()) == [dst]

    def test_existing_file_kept_on_failure(self, tmp_path: Path) -> None:
        """Test that a failed run leaves the previous output untouched."""
        dst = tmp_path / "out.json"
        dst.write_bytes(b"[1]")

        with pytest.raises(RuntimeError), atomic_file_sink(dst) as sink:
            sink.write(b"[{")
            raise RuntimeError("aborted")

        assert dst.read_bytes() == b"[1]"
        assert list(tmp_path.iterdir()) == [dst]

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
    def test_new_file_mode_follows_umask(self, tmp_path: Path) -> None:
        """Test that a new output gets the same mode as a plainly opened file."""
        reference = tmp_path / "plain.json"
        reference.write_bytes(b"[]")
        dst = tmp_path / "out.json"

        with atomic_file_sink(dst) as sink:
            sink.write(b"[]")

        assert stat.S_IMODE(dst.stat().st_mode) == stat.S_IMODE(reference.stat().st_mode)

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
    def test_existing_file_mode_kept(self, tmp_path: Path) -> None:
        """Test that replacing an output keeps its permissions."""
        dst = tmp_path / "out.json"
        dst.write_bytes(b"[1]")
        dst.chmod(0o640)

        with atomic_file_sink(dst) as sink:
            sink.write(b"[]")

        assert stat.S_IMODE(dst.stat().st_mode) == 0o640

    def test_write_failure_becomes_sink_error(self, tmp_path: Path) -> None:
        """Test that OSError inside the block is reported as SinkError."""
        dst = tmp_path / "out.json"

        with pytest.raises(SinkError), atomic_file_sink(dst):
            raise OSError("disk full")

        assert not dst.exists()

    def test_missing_directory(self, tmp_path: Path) -> None:
        """Test that an unusable destination directory is a SinkError."""
        with pytest.raises(SinkError, match="Cannot create temporary output"):
            with atomic_file_sink(tmp_path / "missing" / "out.json"):
                pass
