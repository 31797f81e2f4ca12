"""Minimal logfmt encoder.

Produces text the decoder reads back to the same pairs: flags stay flags,
empty values stay empty, and anything the bare grammar cannot carry is
quoted with backslash escapes. Escaped values must be valid UTF-8; bytes
that are not are only carried inside quotes that need no escapes.
"""
from __future__ import annotations

import re
from typing import Iterable

# Bytes allowed in a key or an unquoted value.
_BARE = re.compile(rb'[^\x00-\x20="]+')
_NEEDS_ESCAPE = re.compile(rb'[\x00-\x1f"\\\x7f]')

_ESCAPES = {
    ord('"'): b'\\"',
    ord("\\"): b"\\\\",
    ord("\n"): b"\\n",
    ord("\r"): b"\\r",
    ord("\t"): b"\\t",
}


def _as_bytes(s: bytes | str) -> bytes:
    return s.encode("utf-8") if isinstance(s, str) else bytes(s)


def _escape_byte(m: re.Match[bytes]) -> bytes:
    c = m.group()[0]
    return _ESCAPES.get(c) or b"\\u%04x" % c


def _is_utf8(value: bytes) -> bool:
    try:
        value.decode("utf-8")
    except UnicodeDecodeError:
        return False
    return True


def encode_key(key: bytes | str) -> bytes:
    k = _as_bytes(key)
    if not _BARE.fullmatch(k):
        raise ValueError(f"invalid logfmt key: {k!r}")
    return k


def encode_value(value: bytes | str) -> bytes:
    v = _as_bytes(value)
    if not v or _BARE.fullmatch(v):
        return v
    if not _NEEDS_ESCAPE.search(v):
        return b'"' + v + b'"'
    if not _is_utf8(v):
        raise ValueError(f"cannot escape a value that is not valid UTF-8: {v!r}")
    return b'"' + _NEEDS_ESCAPE.sub(_escape_byte, v) + b'"'


def encode_keyval(key: bytes | str, value: bytes | str | None) -> bytes:
    """Encode one pair; a None value gives a bare flag key."""
    k = encode_key(key)
    if value is None:
        return k
    return k + b"=" + encode_value(value)


def encode_record(pairs: Iterable[tuple[bytes | str, bytes | str | None]]) -> bytes:
    """Encode pairs as one space-separated line, without a terminator."""
    return b" ".join(encode_keyval(k, v) for k, v in pairs)
