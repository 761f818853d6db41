"""Unit tests for TimerDriver."""

from __future__ import annotations

import asyncio

import pytest

from pomosync_cli.models.timer import PhaseTimer, TimerSettings
from pomosync_cli.services.timer_driver import TimerDriver


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


def _engine() -> PhaseTimer:
    return PhaseTimer(TimerSettings(focus_minutes=1, tick_interval_seconds=0.01))


def test_step_feeds_measured_delta():
    engine = _engine()
    engine.start()
    clock = FakeClock()
    driver = TimerDriver(engine, clock=clock)

    driver.step()
    clock.now += 2.5
    driver.step()

    assert engine.state.remaining_seconds == pytest.approx(57.5)


def test_late_wakeup_counted_in_full():
    engine = _engine()
    engine.start()
    clock = FakeClock()
    driver = TimerDriver(engine, clock=clock)
    driver.step()

    clock.now += 61
    assert driver.step() is True
    assert engine.state.remaining_seconds == pytest.approx(-1)


@pytest.mark.asyncio
async def test_start_and_stop():
    engine = _engine()
    engine.start()
    driver = TimerDriver(engine)

    driver.start()
    assert driver.running is True
    await asyncio.sleep(0.05)
    await driver.stop()

    assert driver.running is False
    assert engine.state.remaining_seconds < 60


@pytest.mark.asyncio
async def test_stop_is_idempotent():
    driver = TimerDriver(_engine())
    await driver.stop()
    driver.start()
    await driver.stop()
    await driver.stop()
    assert driver.running is False


@pytest.mark.asyncio
async def test_start_twice_keeps_one_task():
    driver = TimerDriver(_engine())
    driver.start()
    task = driver._task
    driver.start()
    assert driver._task is task
    await driver.stop()
