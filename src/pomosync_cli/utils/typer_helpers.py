"""Typer helper utilities."""

from difflib import get_close_matches

import click
import typer
from typer.core import TyperGroup

from pomosync_cli.utils.ui.console import get_console


def suggest_commands(attempted: str, names: list[str], limit: int = 3) -> list[str]:
    """Command names close enough to *attempted* to be a likely typo."""
    return get_close_matches(attempted, names, n=limit, cutoff=0.6)


class SuggestingGroup(TyperGroup):
    """Typer group that answers an unknown command with near matches."""

    def resolve_command(self, ctx, args):
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError as e:
            suggestions = suggest_commands(args[0], list(self.commands)) if args else []
            if not suggestions:
                raise

            console = get_console()
            console.print(f'[red]Error:[/red] no such command "{args[0]}"')
            console.print(
                "[yellow]Did you mean:[/yellow] "
                + ", ".join(f"[bold]{ctx.info_name} {s}[/bold]" for s in suggestions)
            )
            raise typer.Exit(1) from e
