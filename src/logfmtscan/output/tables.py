"""Rich-powered rendering for decoded records and FieldCounter results."""
from __future__ import annotations

from typing import Any

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..aggregators.counter import FLAG, MISSING, FieldCounter

_console = Console()


def print_records_table(
    entries: list[dict[str, Any]],
    fields: list[str] | None = None,
    title: str = "Records",
    max_rows: int = 100,
) -> None:
    """Render decoded records as a Rich table.

    Args:
        entries:   Decoded records as str mappings; flags map to None.
        fields:    Columns to display. Defaults to every key seen, in
                   first-seen order.
        title:     Table title shown in the header.
        max_rows:  Hard cap — large inputs are truncated with a notice.
    """
    if not entries:
        _console.print("[yellow]No records to display.[/yellow]")
        return

    cols = fields or list(dict.fromkeys(k for entry in entries for k in entry))
    table = Table(title=title, box=box.ROUNDED, show_lines=False)
    for col in cols:
        table.add_column(col, overflow="fold", max_width=60)

    for entry in entries[:max_rows]:
        table.add_row(*[_cell(entry, c) for c in cols])

    _console.print(table)
    if len(entries) > max_rows:
        _console.print(
            f"[dim]... and {len(entries) - max_rows} more rows (use --limit to adjust)[/dim]"
        )


def _cell(entry: dict[str, Any], col: str) -> str:
    if col not in entry:
        return ""
    value = entry[col]
    # Bare flag key
    return "✓" if value is None else escape(str(value))


def _label(value: str) -> str:
    if value in (FLAG, MISSING):
        return f"[dim italic]{value}[/dim italic]"
    return escape(value)


def print_counts(counter: FieldCounter, top: int = 10, chart: bool = False, width: int = 40) -> None:
    """Render the *top* entries of a FieldCounter as a table or a bar chart.

    Shares are relative to the counter total, not to the rows shown.
    """
    counts = counter.top(top)
    subject = f"'{counter.field}' values" if counter.field else "keys"
    if not counts:
        _console.print(f"[yellow]No {escape(subject)} counted.[/yellow]")
        return

    total = counter.total
    if not chart:
        table = Table(title=f"Top {top} {escape(subject)}", box=box.SIMPLE_HEAVY)
        table.add_column("#", style="dim", width=4)
        table.add_column(escape((counter.field or "key").title()))
        table.add_column("Count", justify="right", style="cyan")
        table.add_column("Share", justify="right", style="dim")
        for rank, (value, count) in enumerate(counts, start=1):
            table.add_row(str(rank), _label(value), str(count), f"{count / total:.1%}")
        _console.print(table)
        return

    peak = counts[0][1]
    pad = max(len(value) for value, _ in counts)
    _console.print(f"\n[bold]Distribution of {escape(subject)}[/bold]")
    for value, count in counts:
        bar = "█" * max(1, round(count / peak * width))
        _console.print(
            f"  {_label(value)}{' ' * (pad - len(value))}  [green]{bar:<{width}}[/green]"
            f"  [cyan]{count:>6}[/cyan] [dim]({count / total:.1%})[/dim]"
        )
    _console.print()
