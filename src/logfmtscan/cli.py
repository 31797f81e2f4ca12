"""logfmtscan CLI — entry point.

Commands:
    logfmtscan decode <file>   Decode records and display them
    logfmtscan check  <file>   Validate logfmt syntax, report the first error
    logfmtscan stats  <file>   Count keys, or the values of one key
"""
from __future__ import annotations

import json
import logging
import sys
from typing import Any, BinaryIO

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .aggregators.counter import FieldCounter
from .config import settings
from .output.encoder import encode_record
from .scanner.records import Record, iter_records
from .scanner.source import StreamLineSource

console = Console()
err_console = Console(stderr=True)

OUTPUT_FORMATS = ["table", "stream", "json", "logfmt"]

# Syntax errors, overlong lines and read failures all end decoding.
DECODE_ERRORS = (ValueError, OSError)

# ── Helpers ─────────────────────────────────────────────────────────────────


def _level_colour(level: str) -> str:
    return {
        "ERROR": "red",
        "CRITICAL": "bold red",
        "CRIT": "bold red",
        "WARN": "yellow",
        "WARNING": "yellow",
        "DEBUG": "dim",
        "INFO": "green",
    }.get(level.upper(), "white")


def _source(file: BinaryIO) -> StreamLineSource:
    return StreamLineSource(file, max_line_bytes=settings.max_line_bytes)


def _name(file: BinaryIO) -> str:
    # Binary stdin wrappers do not always carry a name.
    return str(getattr(file, "name", "<stdin>"))


def _as_dict(record: Record) -> dict[str, str | None]:
    return record.as_dict(settings.encoding, settings.decode_errors)


def _select(entry: dict[str, Any], fields: list[str]) -> dict[str, Any]:
    if not fields:
        return entry
    return {k: entry[k] for k in fields if k in entry}


def _stream_line(record: Record, fields: list[str]) -> str:
    """Colour one record for terminal output: keys cyan, level by severity."""
    entry = _select(_as_dict(record), fields)
    parts = []
    for key, value in entry.items():
        if value is None:
            parts.append(f"[cyan]{escape(key)}[/cyan]")
            continue
        shown = escape(value)
        if key.lower() in ("level", "lvl", "severity"):
            colour = _level_colour(value)
            shown = f"[{colour}]{shown}[/{colour}]"
        parts.append(f"[cyan]{escape(key)}[/cyan]={shown}")
    return f"[dim]{record.line_no:>6}[/dim] " + " ".join(parts)


def _report_error(exc: BaseException) -> None:
    err_console.print(f"[red]error:[/red] {escape(str(exc))}", soft_wrap=True)


# ── CLI root ─────────────────────────────────────────────────────────────────


@click.group()
@click.version_option(version="0.1.0", prog_name="logfmtscan")
@click.option(
    "--log-level", default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level (default: LOGFMTSCAN_LOG_LEVEL or WARNING).",
)
def main(log_level: str | None) -> None:
    """logfmtscan — decode and inspect logfmt (key=value) logs."""
    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


# ── decode ───────────────────────────────────────────────────────────────────


@main.command()
@click.argument("file", type=click.File("rb"))
@click.option(
    "--output", "-o", "output_fmt", default=None,
    type=click.Choice(OUTPUT_FORMATS, case_sensitive=False),
    help="Output format (default: LOGFMTSCAN_DEFAULT_OUTPUT or table).",
)
@click.option("--limit", "-n", default=0, type=int, help="Max records to display (0 = all).")
@click.option("--fields", default="", help="Comma-separated keys to include.")
def decode(file: BinaryIO, output_fmt: str | None, limit: int, fields: str) -> None:
    """Decode a logfmt file ('-' for stdin) and display its records.

    Records decoded before a syntax error are still shown; the error is
    reported on stderr and the exit status is 1.

    \b
    Examples:
      logfmtscan decode app.log
      logfmtscan decode app.log --output json --limit 100
      tail -f app.log | logfmtscan decode - --output stream
    """
    output_fmt = (output_fmt or settings.default_output).lower()
    if output_fmt not in OUTPUT_FORMATS:
        raise click.BadParameter(
            f"{output_fmt!r} is not one of {', '.join(OUTPUT_FORMATS)}", param_hint="--output"
        )

    selected = [f.strip() for f in fields.split(",") if f.strip()]
    wanted = {f.encode(settings.encoding) for f in selected}
    rows: list[dict[str, Any]] = []
    count = 0
    error: BaseException | None = None

    try:
        for record in iter_records(_source(file)):
            count += 1
            if output_fmt == "table":
                rows.append(_select(_as_dict(record), selected))
            elif output_fmt == "json":
                click.echo(json.dumps(_select(_as_dict(record), selected), ensure_ascii=False))
            elif output_fmt == "logfmt":
                pairs = [(k, v) for k, v in record.pairs if not wanted or k in wanted]
                click.echo(encode_record(pairs) + b"\n", nl=False)
            else:
                console.print(_stream_line(record, selected), soft_wrap=True)
            if limit and count >= limit:
                break
    except DECODE_ERRORS as exc:
        error = exc

    if output_fmt == "table":
        from .output.tables import print_records_table

        print_records_table(rows, fields=selected or None, title=escape(_name(file)), max_rows=max(len(rows), 1))

    err_console.print(f"[dim]Decoded {count} records from {escape(_name(file))}[/dim]")
    if error is not None:
        _report_error(error)
        sys.exit(1)


# ── check ────────────────────────────────────────────────────────────────────


@main.command()
@click.argument("file", type=click.File("rb"))
def check(file: BinaryIO) -> None:
    """Validate a logfmt file and report the first syntax error.

    \b
    Examples:
      logfmtscan check app.log
      some-service 2>&1 | logfmtscan check -
    """
    records = 0
    pairs = 0
    try:
        for record in iter_records(_source(file)):
            records += 1
            pairs += len(record)
    except DECODE_ERRORS as exc:
        _report_error(exc)
        err_console.print(f"[dim]{records} valid records before the error[/dim]")
        sys.exit(1)

    console.print(f"[green]OK[/green] {records} records, {pairs} pairs in {escape(_name(file))}")


# ── stats ────────────────────────────────────────────────────────────────────


@main.command()
@click.argument("file", type=click.File("rb"))
@click.option("--by", "-b", default=None, help="Count the values of this key instead of the keys.")
@click.option("--top", "-t", default=10, type=int, help="Show top N values.", show_default=True)
@click.option("--chart", "-c", is_flag=True, help="Show ASCII bar chart.")
def stats(file: BinaryIO, by: str | None, top: int, chart: bool) -> None:
    """Show key frequencies, or value frequencies for one key.

    \b
    Examples:
      logfmtscan stats app.log
      logfmtscan stats app.log --by level --chart
    """
    from .output.tables import print_counts

    counter = FieldCounter(field=by, encoding=settings.encoding, errors=settings.decode_errors)
    error: BaseException | None = None
    try:
        for record in iter_records(_source(file)):
            counter.add(record)
    except DECODE_ERRORS as exc:
        error = exc

    console.print(f"\n[bold]File:[/bold] {escape(_name(file))}  [bold]Records:[/bold] {counter.records}")

    print_counts(counter, top=top, chart=chart)

    if error is not None:
        _report_error(error)
        sys.exit(1)


if __name__ == "__main__":
    main()
