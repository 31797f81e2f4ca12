"""Line sources: where the decoder gets its records from.

A line source hands out one line of bytes at a time, without the line
terminator. Returning None (or raising EOFError) means the input ended
cleanly; any other exception is a read failure and ends decoding.
"""
from __future__ import annotations

import io
from typing import BinaryIO, Iterable, Iterator, Protocol, runtime_checkable

from .errors import LineTooLongError

DEFAULT_MAX_LINE_BYTES = 64 * 1024


@runtime_checkable
class LineSource(Protocol):
    """Protocol for line sources — duck-typed, no inheritance required."""

    def next_line(self) -> bytes | None:
        """Return the next line without its terminator, or None at end of input."""
        ...


def _strip_terminator(raw: bytes) -> bytes:
    if raw.endswith(b"\n"):
        raw = raw[:-1]
    if raw.endswith(b"\r"):
        raw = raw[:-1]
    return raw


class StreamLineSource:
    """Read lines from a binary stream (file opened 'rb', socket file, BytesIO).

    Lines end at ``\\n``; a single ``\\r`` before it is dropped. A final line
    without a terminator is still returned. Lines longer than
    *max_line_bytes* raise LineTooLongError.
    """

    def __init__(self, stream: BinaryIO, max_line_bytes: int = DEFAULT_MAX_LINE_BYTES) -> None:
        if max_line_bytes < 1:
            raise ValueError("max_line_bytes must be >= 1")
        self._stream = stream
        self._max = max_line_bytes

    @classmethod
    def from_bytes(cls, data: bytes, max_line_bytes: int = DEFAULT_MAX_LINE_BYTES) -> "StreamLineSource":
        return cls(io.BytesIO(data), max_line_bytes=max_line_bytes)

    def next_line(self) -> bytes | None:
        # One extra byte leaves room for the newline of a maximal line,
        # and one more for a \r before it.
        raw = self._stream.readline(self._max + 2)
        if not raw:
            return None
        line = _strip_terminator(raw)
        if len(line) > self._max or (len(raw) == self._max + 2 and not raw.endswith(b"\n")):
            raise LineTooLongError(self._max)
        return line


class IterableLineSource:
    """Serve lines from any iterable of ``bytes`` or ``str`` (encoded as UTF-8)."""

    def __init__(self, lines: Iterable[bytes | str]) -> None:
        self._lines: Iterator[bytes | str] = iter(lines)

    def next_line(self) -> bytes | None:
        line = next(self._lines, None)
        if line is None:
            return None
        if isinstance(line, str):
            line = line.encode("utf-8")
        return _strip_terminator(line)
