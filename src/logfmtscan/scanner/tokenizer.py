"""Pure scanning steps for a single logfmt record.

Every step takes the record bytes and a cursor and returns new offsets; none
of them keeps state. Failures raise TokenError with the cursor of the byte
that broke the grammar, and the decoder turns that into a located
LogfmtSyntaxError.

Record grammar::

    record  = *( sep / keyval )
    keyval  = key [ "=" [ bare / quoted ] ]
    key     = 1*tokbyte
    bare    = 1*tokbyte
    quoted  = '"' *( qbyte / "\\" any ) '"'

where ``sep`` is any byte <= 0x20 and ``tokbyte`` is any other byte except
``=`` and ``"``.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from .errors import TokenError
from .unquote import unquote

QUOTE = ord('"')
SEPARATOR_MAX = 0x20

_SEPARATORS = re.compile(rb"[\x00-\x20]*")
_TOKEN_BYTES = re.compile(rb'[^\x00-\x20="]*')
# Body of a quoted value: plain runs separated by backslash pairs.
_QUOTED_BODY = re.compile(rb'[^"\\]*(?:\\.[^"\\]*)*', re.DOTALL)

UNTERMINATED_QUOTE = "unterminated quoted value"
INVALID_QUOTE = "invalid quoted value"


@dataclass(frozen=True, slots=True)
class Keyval:
    """Result of scanning one key/value pair.

    ``key`` and ``value`` are ``(start, end)`` spans into the line. When the
    quoted value had escapes, ``unescaped`` holds the decoded bytes and
    ``value`` is None. A pair with neither is a bare flag.
    """

    cursor: int
    key: tuple[int, int]
    value: tuple[int, int] | None = None
    unescaped: bytes | None = None

    @property
    def is_flag(self) -> bool:
        return self.value is None and self.unescaped is None


def skip_separators(line: bytes, cursor: int) -> int:
    """Return the offset of the first non-separator byte at or after *cursor*."""
    return _SEPARATORS.match(line, cursor).end()


def scan_key(line: bytes, cursor: int) -> tuple[int, bool]:
    """Scan a key starting at *cursor*.

    Returns ``(end, has_equals)``; when ``has_equals`` is true, ``line[end]``
    is the ``=`` sign.
    """
    end = _TOKEN_BYTES.match(line, cursor).end()
    if end == len(line) or line[end] <= SEPARATOR_MAX:
        return end, False
    c = line[end]
    if c == QUOTE or end == cursor:
        raise TokenError.unexpected(c, end)
    return end, True


def scan_bare_value(line: bytes, cursor: int) -> int:
    """Scan an unquoted value; returns the offset just past it."""
    end = _TOKEN_BYTES.match(line, cursor).end()
    if end < len(line) and line[end] > SEPARATOR_MAX:
        raise TokenError.unexpected(line[end], end)
    return end


def scan_quoted_value(line: bytes, cursor: int) -> Keyval:
    """Scan a quoted value whose opening quote is at *cursor*.

    The returned Keyval has no key span set (``(0, 0)``); the caller fills
    it in.
    """
    body_start = cursor + 1
    body_end = _QUOTED_BODY.match(line, body_start).end()
    # Stopping short of the end on anything but a quote means a lone
    # trailing backslash.
    if body_end >= len(line) or line[body_end] != QUOTE:
        raise TokenError(UNTERMINATED_QUOTE, len(line))

    after = body_end + 1
    if line.find(b"\\", body_start, body_end) < 0:
        return Keyval(cursor=after, key=(0, 0), value=(body_start, body_end))
    try:
        decoded = unquote(line[body_start:body_end])
    except ValueError as exc:
        raise TokenError(INVALID_QUOTE, cursor) from exc
    return Keyval(cursor=after, key=(0, 0), unescaped=decoded)


def scan_keyval(line: bytes, cursor: int) -> Keyval | None:
    """Scan the next pair at or after *cursor*; None at end of record."""
    start = skip_separators(line, cursor)
    if start == len(line):
        return None

    key_end, has_equals = scan_key(line, start)
    key = (start, key_end)
    if not has_equals:
        return Keyval(cursor=key_end, key=key)

    value_start = key_end + 1
    if value_start == len(line) or line[value_start] <= SEPARATOR_MAX:
        return Keyval(cursor=value_start, key=key, value=(value_start, value_start))

    if line[value_start] == QUOTE:
        quoted = scan_quoted_value(line, value_start)
        return Keyval(
            cursor=quoted.cursor,
            key=key,
            value=quoted.value,
            unescaped=quoted.unescaped,
        )

    value_end = scan_bare_value(line, value_start)
    return Keyval(cursor=value_end, key=key, value=(value_start, value_end))
