"""Sync command for PomoSync CLI.

Merges local session history with the remote sync endpoint.
"""

import typer
from rich.progress import Progress, SpinnerColumn, TextColumn

from pomosync_cli.services.config_service import get_config_service
from pomosync_cli.utils.exit_codes import ERROR_NETWORK
from pomosync_cli.utils.ui.console import get_console
from pomosync_cli.utils.ui.formatters import format_error, format_success

from .decorators import command_wrapper
from .utils import get_history_store, get_sync_service, resolve_sync_code

console = get_console()


@command_wrapper
async def sync_command(
    code: str | None = typer.Option(
        None, "--code", "-c", help="Sync code (defaults to the saved one)"
    ),
    save_code: bool = typer.Option(
        False, "--save-code", help="Remember --code for future syncs"
    ),
):
    """Merge local history with the remote history for a sync code.

    Examples:
        pomosync sync --code 123456 --save-code
        pomosync sync
    """
    resolved = resolve_sync_code(code)
    if save_code and code:
        get_config_service().set("sync.code", resolved)

    store = get_history_store()
    service = get_sync_service(store)

    previous = service.sync_state.get_last_sync(resolved)
    if previous is not None:
        console.print(
            f"[dim]Previous sync: {previous.astimezone():%Y-%m-%d %H:%M} "
            f"({service.sync_state.get_record_count(resolved)} cycles)[/dim]"
        )

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task("Syncing history...", total=None)
            result = await service.sync(resolved)
    finally:
        await service.client.close()

    if not result.success:
        format_error(f"Sync failed: {result.error}")
        console.print("[dim]Local history was not changed.[/dim]")
        raise typer.Exit(ERROR_NETWORK)

    format_success(
        f"Synced in {result.duration:.1f}s: sent {result.local_count}, "
        f"received {result.remote_count}, now {result.merged_count} cycles"
    )
    if result.added or result.replaced:
        console.print(
            f"[dim]{result.added} new from remote, {result.replaced} already known (remote version kept)[/dim]"
        )
