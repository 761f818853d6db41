"""Main entry point for PomoSync CLI."""

import typer

from pomosync_cli import __version__
from pomosync_cli.commands import config, history, sync, timer
from pomosync_cli.utils.typer_helpers import SuggestingGroup
from pomosync_cli.utils.ui.console import get_console

app = typer.Typer(
    name="pomosync",
    cls=SuggestingGroup,
    help="Pomodoro focus timer with cross-device history sync",
    no_args_is_help=True,
)

console = get_console()

app.add_typer(timer.app, name="timer", help="Pomodoro timer for focus sessions")
app.add_typer(history.app, name="history", help="Completed focus/break cycles")
app.add_typer(config.app, name="config", help="Configuration management")
app.command("sync")(sync.sync_command)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]PomoSync CLI[/bold] version [cyan]{__version__}[/cyan]")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
