"""Error types raised or stored while decoding logfmt input."""
from __future__ import annotations


class LogfmtSyntaxError(ValueError):
    """A malformed record, located by 1-based line number and byte column."""

    def __init__(self, msg: str, line: int, pos: int) -> None:
        super().__init__(msg, line, pos)
        self.msg = msg
        self.line = line
        self.pos = pos

    def __str__(self) -> str:
        return f"logfmt syntax error at pos {self.pos} on line {self.line}: {self.msg}"


class LineTooLongError(ValueError):
    """A line source met a line longer than its configured limit."""

    def __init__(self, limit: int) -> None:
        super().__init__(f"line exceeds {limit} bytes")
        self.limit = limit


class TokenError(Exception):
    """Raised by the tokenizer; carries the 0-based cursor of the failure."""

    def __init__(self, msg: str, cursor: int) -> None:
        super().__init__(msg)
        self.msg = msg
        self.cursor = cursor

    @classmethod
    def unexpected(cls, byte: int, cursor: int) -> "TokenError":
        return cls(f"unexpected {chr(byte)!r}", cursor)
