"""Configuration commands for PomoSync CLI."""

import json

import typer
from rich.syntax import Syntax

from pomosync_cli.services.config_service import get_config_service
from pomosync_cli.utils.ui.console import get_console
from pomosync_cli.utils.ui.formatters import format_success

from .decorators import command_wrapper

console = get_console()
app = typer.Typer(help="Configuration management")


@app.command("show")
@command_wrapper
def show_config():
    """Print the whole configuration."""
    data = get_config_service().config.model_dump()
    console.print(Syntax(json.dumps(data, indent=2), "json"))


@app.command("get")
@command_wrapper
def get_value(key: str = typer.Argument(..., help="Dot-separated key, e.g. timer.focus_minutes")):
    """Print one configuration value."""
    value = get_config_service().get(key)
    if hasattr(value, "model_dump"):
        value = value.model_dump()
    console.print(json.dumps(value) if not isinstance(value, str) else value)


@app.command("set")
@command_wrapper
def set_value(
    key: str = typer.Argument(..., help="Dot-separated key, e.g. timer.focus_minutes"),
    value: str = typer.Argument(..., help="New value"),
):
    """Change one configuration value.

    Invalid values (e.g. a non-positive duration) are rejected and the
    previous value stays in effect.
    """
    get_config_service().set(key, value)
    format_success(f"{key} = {value}")


@app.command("reset")
@command_wrapper
def reset_config(
    key: str | None = typer.Argument(None, help="Key to reset (default: everything)"),
):
    """Restore defaults."""
    get_config_service().reset(key)
    format_success(f"Reset {key or 'configuration'} to defaults")
