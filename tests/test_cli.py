"""Tests for the click command-line interface."""
from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from logfmtscan.cli import main


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


def _json_lines(output: str) -> list[dict]:
    return [json.loads(line) for line in output.splitlines() if line.startswith("{")]


class TestDecode:
    def test_json_output(self, runner, tmp_log_file) -> None:
        path = tmp_log_file([b'a=1 b="x y"', b"level=info flag"])
        result = runner.invoke(main, ["decode", str(path), "--output", "json"])
        assert result.exit_code == 0, result.output
        assert _json_lines(result.output) == [
            {"a": "1", "b": "x y"},
            {"level": "info", "flag": None},
        ]

    def test_fields_and_limit(self, runner, tmp_log_file, app_log_lines) -> None:
        path = tmp_log_file(app_log_lines)
        result = runner.invoke(
            main, ["decode", str(path), "-o", "json", "--fields", "level,msg", "-n", "2"]
        )
        assert result.exit_code == 0, result.output
        assert _json_lines(result.output) == [
            {"level": "info", "msg": "service started"},
            {"level": "error", "msg": "disk full"},
        ]

    def test_logfmt_output(self, runner, tmp_log_file) -> None:
        path = tmp_log_file([b'msg="x y"   flag  e=""'])
        result = runner.invoke(main, ["decode", str(path), "-o", "logfmt"])
        assert result.exit_code == 0, result.output
        assert 'msg="x y" flag e=' in result.output

    def test_table_output(self, runner, tmp_log_file, app_log_lines) -> None:
        path = tmp_log_file(app_log_lines)
        result = runner.invoke(main, ["decode", str(path), "-o", "table", "--fields", "level"])
        assert result.exit_code == 0, result.output
        assert "error" in result.output
        assert "Decoded 4 records" in result.output

    def test_stream_output_from_stdin(self, runner) -> None:
        result = runner.invoke(main, ["decode", "-", "-o", "stream"], input=b"level=warn msg=slow\n")
        assert result.exit_code == 0, result.output
        assert "level=warn" in result.output

    def test_syntax_error_exits_1(self, runner, tmp_log_file) -> None:
        path = tmp_log_file([b"a=1", b'b="open'])
        result = runner.invoke(main, ["decode", str(path), "-o", "json"])
        assert result.exit_code == 1
        assert _json_lines(result.output) == [{"a": "1"}]
        assert "unterminated quoted value" in result.output
        assert "on line 2" in result.output

    def test_limit_stops_before_bad_line(self, runner, tmp_log_file) -> None:
        path = tmp_log_file([b"a=1", b'b="open'])
        result = runner.invoke(main, ["decode", str(path), "-o", "json", "-n", "1"])
        assert result.exit_code == 0, result.output
        assert _json_lines(result.output) == [{"a": "1"}]
        assert "unterminated" not in result.output

    def test_logfmt_output_escapes_control_bytes(self, runner, tmp_log_file) -> None:
        path = tmp_log_file([b'k="a\\u0001b"'])
        result = runner.invoke(main, ["decode", str(path), "-o", "logfmt"])
        assert result.exit_code == 0, result.output
        assert 'k="a\\u0001b"' in result.output


class TestCheck:
    def test_valid_file(self, runner, tmp_log_file, app_log_lines) -> None:
        path = tmp_log_file(app_log_lines)
        result = runner.invoke(main, ["check", str(path)])
        assert result.exit_code == 0, result.output
        assert "OK" in result.output
        assert "4 records" in result.output

    def test_invalid_stdin(self, runner) -> None:
        result = runner.invoke(main, ["check", "-"], input=b"a=1\nk=a=b\n")
        assert result.exit_code == 1
        assert "unexpected '='" in result.output
        assert "1 valid records" in result.output

    def test_line_too_long(self, runner, tmp_log_file, monkeypatch) -> None:
        from logfmtscan import cli

        monkeypatch.setattr(cli.settings, "max_line_bytes", 8)
        path = tmp_log_file([b"a=1", b"k=" + b"v" * 30])
        result = runner.invoke(main, ["check", str(path)])
        assert result.exit_code == 1
        assert "exceeds 8 bytes" in result.output


class TestStats:
    def test_key_counts(self, runner, tmp_log_file, app_log_lines) -> None:
        path = tmp_log_file(app_log_lines)
        result = runner.invoke(main, ["stats", str(path)])
        assert result.exit_code == 0, result.output
        assert "Records:" in result.output
        assert "msg" in result.output

    def test_by_field_chart(self, runner, tmp_log_file, app_log_lines) -> None:
        path = tmp_log_file(app_log_lines)
        result = runner.invoke(main, ["stats", str(path), "--by", "level", "--chart"])
        assert result.exit_code == 0, result.output
        assert "info" in result.output
        assert "warn" in result.output


def test_version(runner) -> None:
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output
