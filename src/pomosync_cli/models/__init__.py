"""Domain models for PomoSync CLI."""

from .alarm import AlarmScheduler, BellAlarmSink, NullAlarmSink
from .errors import (
    RecordDecodeError,
    SyncError,
    SyncInProgressError,
    SyncResponseError,
    TimestampParseError,
)
from .session import DayGroup, SessionRecord, group_by_day, sort_records
from .timer import Mode, PhaseTimer, PhaseTimerState, TimerSettings

__all__ = [
    "AlarmScheduler",
    "BellAlarmSink",
    "NullAlarmSink",
    "RecordDecodeError",
    "TimestampParseError",
    "SyncError",
    "SyncResponseError",
    "SyncInProgressError",
    "SessionRecord",
    "DayGroup",
    "group_by_day",
    "sort_records",
    "Mode",
    "PhaseTimer",
    "PhaseTimerState",
    "TimerSettings",
]
