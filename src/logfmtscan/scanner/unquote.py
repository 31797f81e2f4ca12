"""Backslash-escape decoding for the inside of a quoted logfmt value.

Supported escapes::

    \\a \\b \\f \\n \\r \\t \\v \\\\ \\"   single control/literal bytes
    \\uXXXX  \\UXXXXXXXX           a Unicode scalar value, emitted as UTF-8

A ``\\uD8xx\\uDCxx`` surrogate pair combines into one non-BMP character.
Anything else is malformed and raises ValueError, as does a result that is
not valid UTF-8.
"""
from __future__ import annotations

_SIMPLE_ESCAPES = {
    ord("a"): b"\a",
    ord("b"): b"\b",
    ord("f"): b"\f",
    ord("n"): b"\n",
    ord("r"): b"\r",
    ord("t"): b"\t",
    ord("v"): b"\v",
    ord("\\"): b"\\",
    ord('"'): b'"',
}

_HEX_DIGITS = frozenset(b"0123456789abcdefABCDEF")

# escape letter -> number of hex digits that follow it
_CODE_POINT_WIDTH = {ord("u"): 4, ord("U"): 8}

_BACKSLASH = b"\\"
_LOW_SURROGATE_ESCAPE = b"\\u"


def _hex(inner: bytes, start: int, count: int) -> int:
    chunk = inner[start:start + count]
    if len(chunk) != count or not all(c in _HEX_DIGITS for c in chunk):
        raise ValueError(f"malformed escape at offset {start - 2}")
    return int(chunk, 16)


def _code_point(inner: bytes, i: int, width: int, offset: int) -> tuple[int, int]:
    """Read the digits of a \\u or \\U escape at *i*; returns (code point, next i)."""
    cp = _hex(inner, i, width)
    i += width
    if 0xD800 <= cp <= 0xDBFF and inner.startswith(_LOW_SURROGATE_ESCAPE, i):
        low = _hex(inner, i + 2, 4)
        if 0xDC00 <= low <= 0xDFFF:
            return 0x10000 + ((cp - 0xD800) << 10) + (low - 0xDC00), i + 6
    if cp > 0x10FFFF or 0xD800 <= cp <= 0xDFFF:
        raise ValueError(f"invalid code point U+{cp:X} at offset {offset}")
    return cp, i


def unquote(inner: bytes) -> bytes:
    """Decode the escapes in *inner*, the bytes between the two quotes."""
    out = bytearray()
    i = 0
    n = len(inner)
    while i < n:
        j = inner.find(_BACKSLASH, i)
        if j < 0:
            out += inner[i:]
            break
        out += inner[i:j]
        if j + 1 == n:
            raise ValueError("trailing backslash")

        c = inner[j + 1]
        i = j + 2
        simple = _SIMPLE_ESCAPES.get(c)
        if simple is not None:
            out += simple
        elif c in _CODE_POINT_WIDTH:
            cp, i = _code_point(inner, i, _CODE_POINT_WIDTH[c], j)
            out += chr(cp).encode("utf-8")
        else:
            raise ValueError(f"unknown escape {chr(c)!r} at offset {j}")

    result = bytes(out)
    try:
        result.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ValueError("quoted value is not valid UTF-8") from exc
    return result
