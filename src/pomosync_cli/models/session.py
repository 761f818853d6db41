"""Completed pomodoro cycles and helpers for grouping them by day."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime


@dataclass(frozen=True)
class SessionRecord:
    """One committed focus interval plus the break that followed it."""

    id: str
    timestamp: datetime  # aware, UTC
    focus_seconds: int
    break_seconds: int

    @classmethod
    def create(
        cls,
        focus_seconds: int,
        break_seconds: int,
        timestamp: datetime | None = None,
    ) -> "SessionRecord":
        """Create a record with a fresh identity."""
        if timestamp is None:
            timestamp = datetime.now(UTC)
        return cls(
            id=str(uuid.uuid4()),
            timestamp=timestamp,
            focus_seconds=max(0, int(focus_seconds)),
            break_seconds=max(0, int(break_seconds)),
        )

    @property
    def local_timestamp(self) -> datetime:
        """Timestamp converted to the machine's local timezone."""
        return self.timestamp.astimezone()

    @property
    def date_key(self) -> str:
        """Day label used to group history, e.g. ``Jan 2, 2026``."""
        ts = self.local_timestamp
        return f"{ts.strftime('%b')} {ts.day}, {ts.year}"

    @property
    def time_key(self) -> str:
        """Completion time as ``HH:MM``."""
        return self.local_timestamp.strftime("%H:%M")


@dataclass
class DayGroup:
    """All records completed on the same local day, newest first."""

    date: str
    records: list[SessionRecord] = field(default_factory=list)

    @property
    def total_focus(self) -> int:
        return sum(r.focus_seconds for r in self.records)

    @property
    def total_break(self) -> int:
        return sum(r.break_seconds for r in self.records)


def sort_records(records: list[SessionRecord]) -> list[SessionRecord]:
    """Return records ordered most recent first."""
    return sorted(records, key=lambda r: r.timestamp, reverse=True)


def group_by_day(records: list[SessionRecord]) -> list[DayGroup]:
    """Group records by local day; groups are ordered by their newest record."""
    groups: dict[str, DayGroup] = {}
    for record in sort_records(records):
        group = groups.setdefault(record.date_key, DayGroup(date=record.date_key))
        group.records.append(record)

    return sorted(
        groups.values(),
        key=lambda g: g.records[0].timestamp,
        reverse=True,
    )
