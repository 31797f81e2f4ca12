"""Shared pytest fixtures for logfmtscan tests."""
from __future__ import annotations

from pathlib import Path

import pytest

from logfmtscan.scanner.decoder import Decoder
from logfmtscan.scanner.source import StreamLineSource


@pytest.fixture()
def tmp_log_file(tmp_path: Path):
    """Return a factory that creates temporary logfmt files from byte lines."""

    def _make(lines: list[bytes], name: str = "test.log") -> Path:
        p = tmp_path / name
        p.write_bytes(b"".join(line + b"\n" for line in lines))
        return p

    return _make


@pytest.fixture()
def make_decoder():
    """Return a factory building a Decoder over in-memory bytes."""

    def _make(data: bytes, max_line_bytes: int = 64 * 1024) -> Decoder:
        return Decoder(StreamLineSource.from_bytes(data, max_line_bytes=max_line_bytes))

    return _make


@pytest.fixture()
def app_log_lines() -> list[bytes]:
    return [
        b'ts=2025-08-01T10:00:00Z level=info msg="service started" port=8080',
        b'ts=2025-08-01T10:00:01Z level=error msg="disk full" path=/var/data retry',
        b'ts=2025-08-01T10:00:02Z level=warn msg="slow request" took=1.2s',
        b'ts=2025-08-01T10:00:03Z level=info msg=done',
    ]
