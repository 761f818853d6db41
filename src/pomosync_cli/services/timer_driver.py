"""Asyncio loop that feeds real elapsed time into a PhaseTimer."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable

from pomosync_cli.models.timer import PhaseTimer


class TimerDriver:
    """Ticks *engine* every ``tick_interval_seconds`` with the measured delta.

    The delta comes from a monotonic clock, so a late wake-up is accounted
    for in full instead of being rounded to the nominal interval.
    """

    def __init__(
        self,
        engine: PhaseTimer,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.engine = engine
        self._clock = clock
        self._task: asyncio.Task | None = None
        self._last: float | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start ticking on the running event loop."""
        if self.running:
            return
        self._last = self._clock()
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        """Stop ticking; safe to call more than once."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    def step(self) -> bool:
        """Tick once with the time elapsed since the previous step."""
        now = self._clock()
        last = self._last if self._last is not None else now
        self._last = now
        return self.engine.tick(now - last)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.engine.settings.tick_interval_seconds)
            self.step()
