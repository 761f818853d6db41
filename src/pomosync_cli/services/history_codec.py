"""Serialization of session history.

Outbound timestamps are always written as ``YYYY-MM-DD HH:MM:SS`` in UTC.
Inbound timestamps go through a prioritized list of parsers; each parser
returns a datetime or ``None`` ("not mine") and the first hit wins.

Records may be in the current layout::

    {"id": "...", "date_record": "...", "study_actual": 1500, "break_actual": 300}

or in the older layout written by early versions, which used ``date``,
``studyActual`` and ``breakActual``. Identity is never backfilled.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from datetime import UTC, datetime, timedelta
from typing import Any

from pomosync_cli.models.errors import (
    RecordDecodeError,
    SyncResponseError,
    TimestampParseError,
)
from pomosync_cli.models.session import SessionRecord

SQL_FORMAT = "%Y-%m-%d %H:%M:%S"

# Early versions stored dates as seconds since 2001-01-01 UTC.
REFERENCE_EPOCH = datetime(2001, 1, 1, tzinfo=UTC)

TimestampParser = Callable[[Any], datetime | None]

_MISSING = object()

DATE_KEYS = ("date_record", "date", "updated_at")
FOCUS_KEYS = ("study_actual", "studyActual")
BREAK_KEYS = ("break_actual", "breakActual")


def _strptime(value: Any, fmt: str) -> datetime | None:
    if not isinstance(value, str):
        return None
    try:
        return datetime.strptime(value.strip(), fmt)
    except ValueError:
        return None


def parse_iso_fractional(value: Any) -> datetime | None:
    """ISO-8601 with fractional seconds and an offset, e.g. ``2026-01-02T10:00:00.123Z``."""
    parsed = _strptime(value, "%Y-%m-%dT%H:%M:%S.%f%z")
    return parsed.astimezone(UTC) if parsed else None


def parse_iso_basic(value: Any) -> datetime | None:
    """ISO-8601 without fractional seconds, e.g. ``2026-01-02T10:00:00+00:00``."""
    parsed = _strptime(value, "%Y-%m-%dT%H:%M:%S%z")
    return parsed.astimezone(UTC) if parsed else None


def parse_sql(value: Any) -> datetime | None:
    """``YYYY-MM-DD HH:MM:SS`` interpreted as UTC."""
    parsed = _strptime(value, SQL_FORMAT)
    return parsed.replace(tzinfo=UTC) if parsed else None


def parse_reference_seconds(value: Any) -> datetime | None:
    """Numeric seconds since 2001-01-01 UTC."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        return REFERENCE_EPOCH + timedelta(seconds=value)
    except (OverflowError, ValueError):
        return None


REMOTE_TIMESTAMP_PARSERS: tuple[TimestampParser, ...] = (
    parse_iso_fractional,
    parse_iso_basic,
    parse_sql,
)

STORED_TIMESTAMP_PARSERS: tuple[TimestampParser, ...] = (
    parse_sql,
    parse_iso_fractional,
    parse_iso_basic,
    parse_reference_seconds,
)


def parse_timestamp(
    value: Any, parsers: Sequence[TimestampParser] = REMOTE_TIMESTAMP_PARSERS
) -> datetime:
    """Run *value* through *parsers* in order.

    Raises:
        TimestampParseError: if every parser declined
    """
    for parser in parsers:
        parsed = parser(value)
        if parsed is not None:
            return parsed
    raise TimestampParseError(value)


def format_timestamp(value: datetime) -> str:
    """Format as ``YYYY-MM-DD HH:MM:SS`` in UTC; naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).strftime(SQL_FORMAT)


def _first_present(data: Mapping[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return _MISSING


def _as_seconds(value: Any, key: str) -> int:
    if isinstance(value, bool):
        raise RecordDecodeError(f"'{key}' must be a number")
    try:
        return max(0, int(value))
    except (TypeError, ValueError, OverflowError) as e:
        raise RecordDecodeError(f"'{key}' must be a number, got {value!r}") from e


def decode_record(
    data: Any,
    parsers: Sequence[TimestampParser] = STORED_TIMESTAMP_PARSERS,
    now: datetime | None = None,
) -> SessionRecord:
    """Build a SessionRecord from a decoded JSON object.

    Current field names win over legacy ones; a record without any date
    falls back to ``updated_at`` and then to *now*.

    Raises:
        RecordDecodeError: if the identity is missing or a field is malformed
    """
    if not isinstance(data, Mapping):
        raise RecordDecodeError(f"Expected an object, got {type(data).__name__}")

    record_id = data.get("id")
    if not isinstance(record_id, str) or not record_id:
        raise RecordDecodeError("Record has no id")

    raw_date = _first_present(data, DATE_KEYS)
    if raw_date is _MISSING:
        timestamp = now or datetime.now(UTC)
    else:
        timestamp = parse_timestamp(raw_date, parsers)

    raw_focus = _first_present(data, FOCUS_KEYS)
    raw_break = _first_present(data, BREAK_KEYS)

    return SessionRecord(
        id=record_id,
        timestamp=timestamp,
        focus_seconds=0 if raw_focus is _MISSING else _as_seconds(raw_focus, "focus"),
        break_seconds=0 if raw_break is _MISSING else _as_seconds(raw_break, "break"),
    )


def encode_record(record: SessionRecord) -> dict[str, Any]:
    """Serialize a record using the current field names."""
    return {
        "id": record.id,
        "date_record": format_timestamp(record.timestamp),
        "study_actual": record.focus_seconds,
        "break_actual": record.break_seconds,
    }


def encode_history(records: Sequence[SessionRecord]) -> list[dict[str, Any]]:
    return [encode_record(r) for r in records]


def decode_history(
    items: Any, parsers: Sequence[TimestampParser] = REMOTE_TIMESTAMP_PARSERS
) -> list[SessionRecord]:
    """Decode a whole list; any bad record fails the list."""
    if not isinstance(items, list):
        raise RecordDecodeError(f"Expected a list, got {type(items).__name__}")
    return [decode_record(item, parsers) for item in items]


def decode_sync_response(payload: Any) -> list[SessionRecord]:
    """Decode the remote's view of history.

    The wrapped shape ``{"history": [...]}`` is tried first, then a bare list.

    Raises:
        SyncResponseError: if neither shape decodes
    """
    errors: list[str] = []

    if isinstance(payload, Mapping):
        try:
            return decode_history(payload.get("history"))
        except RecordDecodeError as e:
            errors.append(f"wrapped: {e}")
    else:
        errors.append("wrapped: body is not an object")

    try:
        return decode_history(payload)
    except RecordDecodeError as e:
        errors.append(f"bare: {e}")

    raise SyncResponseError("Unrecognized sync response (" + "; ".join(errors) + ")")
