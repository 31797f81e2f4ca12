"""Record/keyval decoder — the stateful half of the logfmt scanner.

Usage::

    dec = Decoder(StreamLineSource(fh))
    while dec.scan_record():
        while dec.scan_keyval():
            handle(bytes(dec.key()), dec.value())
    if dec.err() is not None:
        raise dec.err()

``key()`` and ``value()`` are memoryviews borrowed from the current line.
They are released on the next ``scan_record``/``scan_keyval`` call; copy
them with ``bytes(...)`` to keep the data.

A Decoder is not safe for concurrent use. Decode in parallel with one
Decoder/LineSource pair per thread.
"""
from __future__ import annotations

import contextlib
import logging
from enum import Enum

from .errors import LogfmtSyntaxError, TokenError
from .source import LineSource
from .tokenizer import scan_keyval

logger = logging.getLogger(__name__)


class DecoderState(str, Enum):
    READY = "ready"
    IN_RECORD = "in_record"
    EXHAUSTED = "exhausted"
    FAILED = "failed"


class ScanOutcome(Enum):
    """Result of ``Decoder.scan_keyval``. Only FOUND is truthy."""

    FOUND = "found"
    END_OF_RECORD = "end_of_record"
    ERROR = "error"

    def __bool__(self) -> bool:
        return self is ScanOutcome.FOUND


def _release(view: memoryview | None) -> None:
    if view is None:
        return
    # A caller that exported a buffer from the view keeps it alive.
    with contextlib.suppress(BufferError):
        view.release()


class Decoder:
    """Decode logfmt records from a LineSource, one pair at a time."""

    def __init__(self, source: LineSource) -> None:
        self._source = source
        self._state = DecoderState.READY
        self._line = b""
        self._view = memoryview(self._line)
        self._cursor = 0
        self._line_number = 0
        self._key: memoryview | None = None
        self._value: memoryview | None = None
        self._err: BaseException | None = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> DecoderState:
        return self._state

    @property
    def line_number(self) -> int:
        """Number of records advanced so far (1-based line of the current record)."""
        return self._line_number

    @property
    def cursor(self) -> int:
        return self._cursor

    # ------------------------------------------------------------------
    # Advancing
    # ------------------------------------------------------------------

    def scan_record(self) -> bool:
        """Advance to the next record.

        Returns False when decoding stops, at the end of the input or on an
        error; ``err()`` tells the two apart. Once stopped, the source is
        never read again.
        """
        self._clear_pair()
        if self._state in (DecoderState.FAILED, DecoderState.EXHAUSTED):
            return False

        try:
            line = self._source.next_line()
        except EOFError:
            line = None
        except Exception as exc:
            logger.debug("Line source failed after line %d: %s", self._line_number, exc)
            self._fail(exc)
            return False

        if line is None:
            logger.debug("Input exhausted after %d records", self._line_number)
            self._state = DecoderState.EXHAUSTED
            self._set_line(b"")
            return False

        self._set_line(line)
        self._line_number += 1
        self._state = DecoderState.IN_RECORD
        return True

    def scan_keyval(self) -> ScanOutcome:
        """Advance to the next key/value pair of the current record."""
        self._clear_pair()
        if self._state is DecoderState.FAILED:
            return ScanOutcome.ERROR
        if self._state is not DecoderState.IN_RECORD:
            return ScanOutcome.END_OF_RECORD

        try:
            kv = scan_keyval(self._line, self._cursor)
        except TokenError as exc:
            self._cursor = exc.cursor
            self._syntax_error(exc.msg)
            return ScanOutcome.ERROR

        if kv is None:
            self._cursor = len(self._line)
            return ScanOutcome.END_OF_RECORD

        self._cursor = kv.cursor
        self._key = self._view[kv.key[0]:kv.key[1]]
        if kv.unescaped is not None:
            self._value = memoryview(kv.unescaped)
        elif kv.value is not None:
            self._value = self._view[kv.value[0]:kv.value[1]]
        return ScanOutcome.FOUND

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def key(self) -> memoryview | None:
        """Key of the last pair; valid until the next advance."""
        return self._key

    def value(self) -> memoryview | None:
        """Value of the last pair, None for a bare flag; valid until the next advance."""
        return self._value

    def err(self) -> BaseException | None:
        """The error that stopped decoding, or None (clean end of input included)."""
        return self._err

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _set_line(self, line: bytes) -> None:
        _release(self._view)
        self._line = line
        self._view = memoryview(line)
        self._cursor = 0

    def _clear_pair(self) -> None:
        _release(self._key)
        _release(self._value)
        self._key = None
        self._value = None

    def _fail(self, exc: BaseException) -> None:
        self._err = exc
        self._state = DecoderState.FAILED

    def _syntax_error(self, msg: str) -> None:
        err = LogfmtSyntaxError(msg, line=self._line_number, pos=self._cursor + 1)
        logger.debug("%s", err)
        self._fail(err)

    def __repr__(self) -> str:
        return f"Decoder(state={self._state.value}, line={self._line_number}, cursor={self._cursor})"
