"""Full-screen timer view for the interactive session."""

from __future__ import annotations

from rich.align import Align
from rich.console import Group
from rich.layout import Layout
from rich.text import Text

from pomosync_cli.models.timer import Mode, PhaseTimerState

BAR_WIDTH = 40

KEY_HINTS = (
    "[space] start/pause   [s] skip   [r] reset   [u] sync   [q] quit"
)
ALERT_HINTS = "[y] switch phase   [c] keep going"


def _timer_color(state: PhaseTimerState) -> str:
    if state.is_overtime:
        return "red"
    if state.paused:
        return "yellow"
    return "blue" if state.mode is Mode.FOCUS else "green"


def progress_bar(progress: float, width: int = BAR_WIDTH) -> str:
    filled = int(width * min(max(progress, 0.0), 1.0))
    return "▓" * filled + "░" * (width - filled)


class TimerView:
    """Renders PhaseTimerState snapshots."""

    def __init__(self):
        self.status_line = ""

    def create_layout(self, state: PhaseTimerState, cycles_committed: int = 0) -> Layout:
        """Create the timer layout with all components."""
        layout = Layout()
        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=3),
        )

        color = _timer_color(state)
        title = state.status_label.upper()
        if state.paused:
            title += " (paused)"
        header_text = Text(f"🍅  {title}", style=f"bold {color}", justify="center")
        layout["header"].update(Align.center(header_text, vertical="middle"))

        layout["body"].update(
            Align.center(self._body(state, color, cycles_committed), vertical="middle")
        )

        hints = ALERT_HINTS if state.phase_end_pending else KEY_HINTS
        footer = Text(hints, style="dim", justify="center")
        layout["footer"].update(Align.center(footer, vertical="middle"))
        return layout

    def _body(self, state: PhaseTimerState, color: str, cycles_committed: int) -> Group:
        components = []

        if state.alert_message:
            components.append(
                Text(state.alert_message, style="bold red", justify="center")
            )
            components.append(Text(""))

        components.append(
            Text(state.display, style=f"bold {color}", justify="center")
        )
        components.append(Text(""))

        pct = int(state.progress * 100)
        components.append(
            Text(f"{progress_bar(state.progress)}  {pct}%", style="dim", justify="center")
        )

        components.append(Text(""))
        components.append(
            Text(f"Cycles committed this session: {cycles_committed}", justify="center")
        )
        if self.status_line:
            components.append(Text(self.status_line, style="italic", justify="center"))

        return Group(*components)
