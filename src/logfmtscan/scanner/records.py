"""Copying record iterator on top of Decoder."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from .decoder import Decoder
from .source import LineSource

Pair = tuple[bytes, bytes | None]


@dataclass(frozen=True, slots=True)
class Record:
    """One decoded line. Pairs are copies and outlive the decoder."""

    line_no: int
    pairs: tuple[Pair, ...]

    def keys(self) -> list[bytes]:
        return [k for k, _ in self.pairs]

    def get(self, key: bytes, default: bytes | None = None) -> bytes | None:
        """Value of the last pair named *key* (None for a flag), else *default*."""
        for k, v in reversed(self.pairs):
            if k == key:
                return v
        return default

    def as_dict(self, encoding: str = "utf-8", errors: str = "replace") -> dict[str, str | None]:
        """Decode to a str mapping; later duplicates win, flags map to None."""
        return {
            k.decode(encoding, errors): (None if v is None else v.decode(encoding, errors))
            for k, v in self.pairs
        }

    def __len__(self) -> int:
        return len(self.pairs)


def iter_records(source: LineSource | Decoder) -> Iterator[Record]:
    """Yield every record of *source*, then raise the error that stopped decoding, if any.

    Blank lines come through as empty records so line numbers stay aligned
    with the input. A record that fails mid-line is not yielded.
    """
    dec = source if isinstance(source, Decoder) else Decoder(source)
    while dec.scan_record():
        pairs: list[Pair] = []
        while dec.scan_keyval():
            value = dec.value()
            pairs.append((bytes(dec.key()), None if value is None else bytes(value)))
        if dec.err() is not None:
            break
        yield Record(line_no=dec.line_number, pairs=tuple(pairs))

    err = dec.err()
    if err is not None:
        raise err
