"""Focus/break phase timer engine.

The engine is a plain state machine: callers feed it user events
(``start``, ``pause``, ``reset``, ``skip_phase``...) and elapsed-time
``tick`` calls, and it keeps the countdown, the overtime flag and the
per-cycle accumulator. A cycle is one focus phase followed by one break
phase; it is committed to history as a single ``SessionRecord`` when the
break phase is left.

Every transition runs under one re-entrant lock, so a driver ticking from
one task and a UI calling ``pause`` from another cannot interleave.
Observers are notified after the lock is released with the set of
snapshot fields that changed.
"""

from __future__ import annotations

import math
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, fields
from datetime import UTC, datetime
from enum import Enum
from typing import Protocol

from pomosync_cli.models.alarm import AlarmScheduler
from pomosync_cli.models.session import SessionRecord
from pomosync_cli.utils.logger import get_logger

MICROS_PER_SECOND = 1_000_000


class Mode(str, Enum):
    """Timer phase."""

    FOCUS = "focus"
    BREAK = "break"

    @property
    def other(self) -> "Mode":
        return Mode.BREAK if self is Mode.FOCUS else Mode.FOCUS

    @property
    def label(self) -> str:
        return "Focus" if self is Mode.FOCUS else "Break"


@dataclass
class TimerSettings:
    """Durations the engine derives each phase from."""

    focus_minutes: float = 25
    break_minutes: float = 5
    tick_interval_seconds: float = 0.1

    def duration_seconds(self, mode: Mode) -> int:
        minutes = self.focus_minutes if mode is Mode.FOCUS else self.break_minutes
        return round(minutes * 60)


@dataclass
class CycleAccumulator:
    """Elapsed time of the uncommitted cycle, in microseconds."""

    planned_focus_seconds: int
    planned_break_seconds: int
    focus_micros: int = 0
    break_micros: int = 0

    @classmethod
    def from_settings(cls, settings: TimerSettings) -> "CycleAccumulator":
        return cls(
            planned_focus_seconds=settings.duration_seconds(Mode.FOCUS),
            planned_break_seconds=settings.duration_seconds(Mode.BREAK),
        )

    def add(self, mode: Mode, micros: int) -> None:
        if mode is Mode.FOCUS:
            self.focus_micros += micros
        else:
            self.break_micros += micros

    @property
    def focus_seconds(self) -> int:
        return self.focus_micros // MICROS_PER_SECOND

    @property
    def break_seconds(self) -> int:
        return self.break_micros // MICROS_PER_SECOND


@dataclass(frozen=True)
class PhaseTimerState:
    """Read-only snapshot of the engine."""

    mode: Mode
    running: bool
    paused: bool
    remaining_seconds: float
    phase_duration_seconds: float
    focus_accumulated: float | None
    break_accumulated: float | None
    phase_end_pending: bool
    alert_message: str
    cycles_committed: int

    @property
    def is_overtime(self) -> bool:
        return self.remaining_seconds <= 0

    @property
    def progress(self) -> float:
        """Fraction of the phase that has elapsed, saturating at 1.0."""
        if self.remaining_seconds <= 0:
            return 1.0
        if self.phase_duration_seconds <= 0:
            return 0.0
        return 1 - (self.remaining_seconds / self.phase_duration_seconds)

    @property
    def display(self) -> str:
        """``MM:SS`` countdown, or ``+MM:SS`` once in overtime."""
        seconds = int(math.ceil(abs(self.remaining_seconds)))
        prefix = "+" if self.remaining_seconds <= 0 else ""
        return f"{prefix}{seconds // 60:02d}:{seconds % 60:02d}"

    @property
    def status_label(self) -> str:
        if self.is_overtime:
            return "Overtime"
        return self.mode.label


class HistorySink(Protocol):
    """Where committed records go."""

    def prepend(self, record: SessionRecord) -> None: ...


StateObserver = Callable[[frozenset[str], PhaseTimerState], None]


def _changed_fields(before: PhaseTimerState, after: PhaseTimerState) -> frozenset[str]:
    return frozenset(
        f.name
        for f in fields(PhaseTimerState)
        if getattr(before, f.name) != getattr(after, f.name)
    )


class PhaseTimer:
    """Pomodoro state machine alternating focus and break phases."""

    def __init__(
        self,
        settings: TimerSettings | None = None,
        history: HistorySink | None = None,
        alarm: AlarmScheduler | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.settings = settings or TimerSettings()
        self.history = history
        self.alarm = alarm or AlarmScheduler()
        self._clock = clock or (lambda: datetime.now(UTC))
        self._logger = get_logger("timer")

        self._lock = threading.RLock()
        self._observers: list[StateObserver] = []

        self._mode = Mode.FOCUS
        self._running = False
        self._paused = False
        self._duration_micros = 0
        self._elapsed_micros = 0
        self._accumulator: CycleAccumulator | None = None
        self._phase_end_pending = False
        self._alert_message = ""
        self._cycles_committed = 0

        self._load_phase()

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    def subscribe(self, observer: StateObserver) -> Callable[[], None]:
        """Register *observer*; returns a callable that unregisters it."""
        with self._lock:
            self._observers.append(observer)

        def unsubscribe() -> None:
            with self._lock:
                if observer in self._observers:
                    self._observers.remove(observer)

        return unsubscribe

    @property
    def state(self) -> PhaseTimerState:
        with self._lock:
            return self._snapshot()

    @property
    def accumulator(self) -> CycleAccumulator | None:
        with self._lock:
            return self._accumulator

    @property
    def display(self) -> str:
        return self.state.display

    @property
    def progress(self) -> float:
        return self.state.progress

    # ------------------------------------------------------------------
    # User events
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start a fresh phase, or resume a paused one."""
        with self._transition():
            if self._running:
                return
            if not self._paused and self._remaining_micros() > 0:
                self._setup_new_phase()
            self._running = True
            self._paused = False

    def pause(self) -> None:
        with self._transition():
            if not self._running:
                return
            self._running = False
            self._paused = True

    def reset(self) -> None:
        """Stop and rewind the current phase to its configured duration.

        A half-finished cycle survives a reset of its break phase; resetting
        a focus phase throws the cycle away.
        """
        with self._transition():
            self._running = False
            self._paused = False
            self._phase_end_pending = False
            self._alert_message = ""
            self._load_phase()
            if self._mode is Mode.FOCUS:
                self._accumulator = None

    def continue_overtime(self) -> None:
        """Dismiss the phase-end signal and keep counting past zero."""
        with self._transition():
            self._phase_end_pending = False
            self._alert_message = ""

    def confirm_phase_switch(self) -> SessionRecord | None:
        """Leave the current phase and start the next one.

        Returns the committed record when a break phase was left.
        """
        record = None
        with self._transition():
            self._phase_end_pending = False
            self._alert_message = ""
            self._running = False

            if self._accumulator is None:
                self._accumulator = CycleAccumulator.from_settings(self.settings)

            if self._mode is Mode.BREAK:
                record = self._commit()

            self._mode = self._mode.other
            self._setup_new_phase()
            self._running = True
            self._paused = False
        return record

    def skip_phase(self) -> SessionRecord | None:
        return self.confirm_phase_switch()

    # ------------------------------------------------------------------
    # Time
    # ------------------------------------------------------------------

    def tick(self, delta: float) -> bool:
        """Advance the running countdown by *delta* seconds.

        Returns True when this tick crossed zero and fired the phase-end
        signal.
        """
        crossed = False
        micros = round(delta * MICROS_PER_SECOND)
        if micros <= 0:
            return crossed

        with self._transition():
            if not self._running:
                return crossed

            previous = self._remaining_micros()
            self._elapsed_micros += micros
            if self._accumulator is not None:
                self._accumulator.add(self._mode, micros)

            if previous > 0 >= self._remaining_micros():
                crossed = True
                self._fire_phase_end()
        return crossed

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def update_settings(
        self,
        focus_minutes: float | None = None,
        break_minutes: float | None = None,
        tick_interval_seconds: float | None = None,
    ) -> bool:
        """Apply new durations; non-positive values are ignored.

        An idle phase picks up its new duration immediately. A countdown in
        flight (running or paused) keeps the duration it started with.
        """
        applied = False
        with self._transition():
            touched: set[Mode] = set()
            if focus_minutes is not None and focus_minutes > 0:
                self.settings.focus_minutes = focus_minutes
                touched.add(Mode.FOCUS)
                applied = True
            if break_minutes is not None and break_minutes > 0:
                self.settings.break_minutes = break_minutes
                touched.add(Mode.BREAK)
                applied = True
            if tick_interval_seconds is not None and 0 < tick_interval_seconds <= 1:
                self.settings.tick_interval_seconds = float(tick_interval_seconds)
                applied = True

            idle = (
                not self._running
                and not self._paused
                and self._remaining_micros() > 0
            )
            if idle and self._mode in touched:
                self._load_phase()
        return applied

    # ------------------------------------------------------------------
    # Internals (call with the lock held)
    # ------------------------------------------------------------------

    @contextmanager
    def _transition(self) -> Iterator[None]:
        with self._lock:
            before = self._snapshot()
            yield
            after = self._snapshot()
            observers = list(self._observers)

        changed = _changed_fields(before, after)
        if not changed:
            return
        for observer in observers:
            try:
                observer(changed, after)
            except Exception:
                self._logger.exception("timer observer failed")

    def _snapshot(self) -> PhaseTimerState:
        acc = self._accumulator
        return PhaseTimerState(
            mode=self._mode,
            running=self._running,
            paused=self._paused,
            remaining_seconds=self._remaining_micros() / MICROS_PER_SECOND,
            phase_duration_seconds=self._duration_micros / MICROS_PER_SECOND,
            focus_accumulated=(
                acc.focus_micros / MICROS_PER_SECOND if acc is not None else None
            ),
            break_accumulated=(
                acc.break_micros / MICROS_PER_SECOND if acc is not None else None
            ),
            phase_end_pending=self._phase_end_pending,
            alert_message=self._alert_message,
            cycles_committed=self._cycles_committed,
        )

    def _remaining_micros(self) -> int:
        return self._duration_micros - self._elapsed_micros

    def _load_phase(self) -> None:
        self._duration_micros = (
            self.settings.duration_seconds(self._mode) * MICROS_PER_SECOND
        )
        self._elapsed_micros = 0

    def _setup_new_phase(self) -> None:
        self._load_phase()
        if self._accumulator is None:
            self._accumulator = CycleAccumulator.from_settings(self.settings)

    def _fire_phase_end(self) -> None:
        self._phase_end_pending = True
        self._alert_message = (
            "Focus session complete!" if self._mode is Mode.FOCUS else "Break over!"
        )
        self._logger.info("%s phase reached zero", self._mode.value)
        self.alarm.trigger()

    def _commit(self) -> SessionRecord:
        acc = self._accumulator
        assert acc is not None
        record = SessionRecord.create(
            focus_seconds=acc.focus_seconds,
            break_seconds=acc.break_seconds,
            timestamp=self._clock(),
        )
        self._accumulator = None
        self._cycles_committed += 1
        self._logger.info(
            "cycle committed: id=%s focus=%ss break=%ss",
            record.id,
            record.focus_seconds,
            record.break_seconds,
        )
        if self.history is not None:
            self.history.prepend(record)
        return record
