"""Phase-end alarm: a sink that makes noise and a scheduler that strikes it."""

from __future__ import annotations

import threading
from collections.abc import Callable, Sequence
from typing import Protocol

from rich.console import Console

from pomosync_cli.utils.logger import get_logger

DEFAULT_STRIKE_OFFSETS = (0.0, 0.8, 1.6)


class AlarmSink(Protocol):
    """Anything that can emit one audible/visual alert."""

    def ring(self) -> None: ...


class BellAlarmSink:
    """Rings the terminal bell."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def ring(self) -> None:
        self.console.bell()


class NullAlarmSink:
    """Silent sink."""

    def ring(self) -> None:
        pass


class AlarmScheduler:
    """Strikes a sink at fixed offsets after a phase ends.

    Each strike runs on its own timer so the caller is never blocked. All
    pending strikes can be cancelled together.
    """

    def __init__(
        self,
        sink: AlarmSink | None = None,
        offsets: Sequence[float] = DEFAULT_STRIKE_OFFSETS,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ):
        self.sink = sink or NullAlarmSink()
        self.offsets = tuple(offsets)
        self._timer_factory = timer_factory
        self._timers: list[threading.Timer] = []
        self._lock = threading.Lock()

    def _strike(self) -> None:
        try:
            self.sink.ring()
        except Exception:
            get_logger("alarm").exception("alarm sink failed")

    def trigger(self) -> None:
        """Schedule one strike per offset."""
        with self._lock:
            self._timers = [t for t in self._timers if t.is_alive()]
            for offset in self.offsets:
                timer = self._timer_factory(offset, self._strike)
                timer.daemon = True
                timer.start()
                self._timers.append(timer)

    def cancel(self) -> None:
        """Cancel every strike that has not fired yet."""
        with self._lock:
            for timer in self._timers:
                timer.cancel()
            self._timers.clear()

    @property
    def pending(self) -> int:
        with self._lock:
            return sum(1 for t in self._timers if t.is_alive())
