"""Tests for line sources."""
from __future__ import annotations

import io

import pytest

from logfmtscan.scanner.errors import LineTooLongError
from logfmtscan.scanner.source import IterableLineSource, LineSource, StreamLineSource


def _drain(source: LineSource) -> list[bytes]:
    lines = []
    while (line := source.next_line()) is not None:
        lines.append(line)
    return lines


class TestStreamLineSource:
    def test_splits_lines(self) -> None:
        assert _drain(StreamLineSource.from_bytes(b"a=1\nb=2\n")) == [b"a=1", b"b=2"]

    def test_final_line_without_newline(self) -> None:
        assert _drain(StreamLineSource.from_bytes(b"a=1\nb=2")) == [b"a=1", b"b=2"]

    def test_drops_carriage_return(self) -> None:
        assert _drain(StreamLineSource.from_bytes(b"a=1\r\nb=2\r\n")) == [b"a=1", b"b=2"]

    def test_keeps_blank_lines(self) -> None:
        assert _drain(StreamLineSource.from_bytes(b"\n\na\n")) == [b"", b"", b"a"]

    def test_empty_input(self) -> None:
        assert StreamLineSource.from_bytes(b"").next_line() is None

    def test_reads_file(self, tmp_log_file, app_log_lines) -> None:
        path = tmp_log_file(app_log_lines)
        with path.open("rb") as fh:
            assert _drain(StreamLineSource(fh)) == app_log_lines

    @pytest.mark.parametrize("data", [b"abcd\n", b"abcd\r\n", b"abcd"])
    def test_line_at_limit(self, data: bytes) -> None:
        assert _drain(StreamLineSource.from_bytes(data, max_line_bytes=4)) == [b"abcd"]

    @pytest.mark.parametrize("data", [b"abcde\n", b"abcde\r\n", b"abcde", b"abcdefghij\n"])
    def test_line_over_limit(self, data: bytes) -> None:
        source = StreamLineSource.from_bytes(data, max_line_bytes=4)
        with pytest.raises(LineTooLongError) as exc:
            source.next_line()
        assert exc.value.limit == 4

    def test_invalid_limit(self) -> None:
        with pytest.raises(ValueError):
            StreamLineSource(io.BytesIO(b""), max_line_bytes=0)


class TestIterableLineSource:
    def test_bytes_and_str(self) -> None:
        source = IterableLineSource(["a=1", b"b=2\n", "c=é\r\n"])
        assert _drain(source) == [b"a=1", b"b=2", "c=é".encode()]

    def test_generator(self) -> None:
        source = IterableLineSource(f"n={i}" for i in range(3))
        assert _drain(source) == [b"n=0", b"n=1", b"n=2"]


def test_sources_satisfy_protocol() -> None:
    assert isinstance(StreamLineSource.from_bytes(b""), LineSource)
    assert isinstance(IterableLineSource([]), LineSource)
