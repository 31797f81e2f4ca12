"""Count keys, or the values of one key, across decoded records."""
from __future__ import annotations

from collections import Counter as _Counter

from ..scanner.records import Record

FLAG = "(flag)"
MISSING = "(missing)"


class FieldCounter:
    """Count key occurrences, or the values of *field* when one is given."""

    def __init__(
        self,
        field: str | None = None,
        encoding: str = "utf-8",
        errors: str = "replace",
    ) -> None:
        self._name = field
        self._field = field.encode(encoding) if field is not None else None
        self._encoding = encoding
        self._errors = errors
        self._counts: _Counter[str] = _Counter()
        self._records = 0

    def _text(self, raw: bytes) -> str:
        return raw.decode(self._encoding, self._errors)

    def add(self, record: Record) -> None:
        self._records += 1
        if self._field is None:
            self._counts.update(self._text(k) for k in record.keys())
            return
        if self._field not in record.keys():
            self._counts[MISSING] += 1
            return
        value = record.get(self._field)
        if value is None:
            self._counts[FLAG] += 1
        else:
            self._counts[self._text(value)] += 1

    def top(self, n: int = 10) -> list[tuple[str, int]]:
        return self._counts.most_common(n)

    @property
    def field(self) -> str | None:
        return self._name

    @property
    def total(self) -> int:
        return sum(self._counts.values())

    @property
    def records(self) -> int:
        return self._records
