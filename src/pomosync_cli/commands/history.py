"""History commands for PomoSync CLI."""

import typer
from rich.prompt import Confirm

from pomosync_cli.models.session import group_by_day
from pomosync_cli.utils.ui.console import get_console
from pomosync_cli.utils.ui.formatters import (
    day_group_table,
    format_success,
    format_total,
)

from .decorators import command_wrapper
from .utils import get_history_store

console = get_console()
app = typer.Typer(help="Completed focus/break cycles")


@app.command("list")
@command_wrapper
def list_history(
    limit: int = typer.Option(
        0, "--limit", "-n", min=0, help="Show only the N most recent cycles (0 = all)"
    ),
):
    """Show history grouped by day, newest first."""
    records = get_history_store().records()
    if limit:
        records = records[:limit]

    if not records:
        console.print("[yellow]No cycles recorded yet[/yellow]")
        return

    groups = group_by_day(records)
    for group in groups:
        console.print(day_group_table(group))
        console.print()

    total_focus = sum(g.total_focus for g in groups)
    total_break = sum(g.total_break for g in groups)
    console.print(
        f"[bold]{len(records)}[/bold] cycles · focus [blue]{format_total(total_focus)}[/blue]"
        f" · break [green]{format_total(total_break)}[/green]"
    )


@app.command("clear")
@command_wrapper
def clear_history(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
):
    """Delete all local history."""
    store = get_history_store()
    count = len(store)
    if count == 0:
        console.print("[yellow]History is already empty[/yellow]")
        return

    if not yes and not Confirm.ask(f"Delete {count} cycles from local history?"):
        console.print("[dim]Cancelled[/dim]")
        return

    store.clear()
    format_success(f"Deleted {count} cycles")
