"""Interactive Pomodoro timer command."""

import asyncio

import typer
from rich.live import Live

from pomosync_cli.models.alarm import AlarmScheduler, BellAlarmSink, NullAlarmSink
from pomosync_cli.models.errors import SyncInProgressError
from pomosync_cli.models.timer import PhaseTimer
from pomosync_cli.services.config_service import get_config_service
from pomosync_cli.services.sync_service import SyncResult, SyncService
from pomosync_cli.services.timer_driver import TimerDriver
from pomosync_cli.utils.keyboard import get_keyboard_handler
from pomosync_cli.utils.ui.console import get_console
from pomosync_cli.utils.ui.formatters import format_duration, format_warning
from pomosync_cli.utils.ui.timer_view import TimerView

from .decorators import command_wrapper
from .utils import get_history_store, get_sync_service

console = get_console()
app = typer.Typer(help="Pomodoro timer for focus sessions")

UI_POLL_SECONDS = 0.05


def handle_key(engine: PhaseTimer, key: str) -> bool:
    """Apply one keypress to the engine. Returns False for keys it ignores."""
    state = engine.state
    if key == " ":
        if state.running:
            engine.pause()
        else:
            engine.start()
    elif key == "s":
        engine.skip_phase()
    elif key == "r":
        engine.reset()
    elif key == "c" and state.phase_end_pending:
        engine.continue_overtime()
    elif key == "y" and state.phase_end_pending:
        engine.confirm_phase_switch()
    else:
        return False
    return True


def request_sync(service: SyncService, view: TimerView) -> asyncio.Task | None:
    """Start a background sync with the saved code, reporting into the view."""
    code = get_config_service().config.sync.code.strip()
    if not code:
        view.status_line = "No saved sync code (pomosync config set sync.code CODE)"
        return None
    try:
        task = service.sync_in_background(code)
    except SyncInProgressError:
        view.status_line = "Sync already in progress"
        return None

    view.status_line = "Syncing..."

    def done(t: asyncio.Task) -> None:
        if t.cancelled():
            return
        result: SyncResult = t.result()
        if result.success:
            view.status_line = f"Synced: {result.merged_count} cycles"
        else:
            view.status_line = f"Sync failed: {result.error}"

    task.add_done_callback(done)
    return task


@app.command("start")
@command_wrapper
async def start_timer(
    focus: int | None = typer.Option(
        None, "--focus", "-f", min=1, help="Focus minutes for this run"
    ),
    break_minutes: int | None = typer.Option(
        None, "--break", "-b", min=1, help="Break minutes for this run"
    ),
    quiet: bool = typer.Option(False, "--quiet", help="Do not ring the bell"),
):
    """Run the focus/break timer full-screen.

    Keys: space start/pause, s skip phase, r reset, c keep going in overtime,
    y switch phase after the alarm, u sync in the background, q quit.
    """
    settings = get_config_service().timer_settings()
    store = get_history_store()
    alarm = AlarmScheduler(NullAlarmSink() if quiet else BellAlarmSink(console))
    engine = PhaseTimer(settings, history=store, alarm=alarm)
    engine.update_settings(focus_minutes=focus, break_minutes=break_minutes)

    driver = TimerDriver(engine)
    view = TimerView()
    sync_service = get_sync_service(store)
    sync_task: asyncio.Task | None = None

    engine.start()
    driver.start()
    try:
        with get_keyboard_handler() as keyboard, Live(
            view.create_layout(engine.state),
            console=console,
            screen=True,
            refresh_per_second=10,
        ) as live:
            while True:
                key = keyboard.get_key()
                if key == "q":
                    break
                if key == "u":
                    sync_task = request_sync(sync_service, view) or sync_task
                elif key:
                    handle_key(engine, key)

                state = engine.state
                live.update(view.create_layout(state, state.cycles_committed))
                await asyncio.sleep(UI_POLL_SECONDS)
    finally:
        await driver.stop()
        alarm.cancel()
        if sync_task is not None and not sync_task.done():
            console.print("[dim]Waiting for sync to finish...[/dim]")
            await asyncio.gather(sync_task, return_exceptions=True)
        await sync_service.client.close()

    state = engine.state
    console.print(
        f"[bold]Stopped.[/bold] {state.cycles_committed} cycles committed this run."
    )
    if state.focus_accumulated is not None:
        format_warning(
            f"Uncommitted cycle discarded: focus {format_duration(int(state.focus_accumulated))}, "
            f"break {format_duration(int(state.break_accumulated or 0))}"
        )
