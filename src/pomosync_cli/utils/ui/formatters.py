"""Output formatters shared by the commands."""

from __future__ import annotations

from rich.table import Table

from pomosync_cli.models.session import DayGroup
from pomosync_cli.utils.ui.console import get_console

console = get_console()


def format_error(message: str) -> None:
    """Print *message* with a red Error: prefix."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    console.print(f"[bold green]Success:[/bold green] {message}")


def format_warning(message: str) -> None:
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def format_duration(seconds: int) -> str:
    """``25m 00s`` style duration for a single record."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60}m {seconds % 60:02d}s"


def format_total(seconds: int) -> str:
    """Coarser duration for day totals: ``2h 5m`` or ``25m 0s``."""
    seconds = max(0, int(seconds))
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m {secs}s"


def day_group_table(group: DayGroup) -> Table:
    """Build the table for one day of history."""
    table = Table(
        title=(
            f"{group.date}  [dim]({len(group.records)} cycles · "
            f"focus {format_total(group.total_focus)} · "
            f"break {format_total(group.total_break)})[/dim]"
        ),
        title_justify="left",
        show_header=True,
    )
    table.add_column("Time", style="cyan")
    table.add_column("Focus", justify="right", style="blue")
    table.add_column("Break", justify="right", style="green")
    table.add_column("ID", style="dim")

    for record in group.records:
        table.add_row(
            record.time_key,
            format_duration(record.focus_seconds),
            format_duration(record.break_seconds),
            record.id[:8],
        )
    return table
