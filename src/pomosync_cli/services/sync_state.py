"""Bookkeeping for completed syncs.

For every sync code the time of the last successful sync and the size of
the history it produced are kept in ``sync-state.json`` in the config dir::

    {"codes": {"123456": {"at": "2026-01-02T10:00:00Z", "records": 12}}}
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pomosync_cli.utils.logger import get_logger

STATE_FILE = "sync-state.json"


class SyncState:
    """Per-code record of the last successful sync."""

    def __init__(self, config_dir: Path | None = None):
        """Initialize sync state manager.

        Args:
            config_dir: Directory holding sync-state.json. Defaults to the user config dir
        """
        if config_dir is None:
            from platformdirs import user_config_dir

            config_dir = Path(user_config_dir("pomosync_cli"))

        self.state_file = Path(config_dir) / STATE_FILE
        self._codes: dict[str, dict[str, Any]] = self._read()

    def _read(self) -> dict[str, dict[str, Any]]:
        if not self.state_file.exists():
            return {}
        try:
            data = json.loads(self.state_file.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            get_logger("sync").warning("ignoring unreadable %s: %s", STATE_FILE, e)
            return {}

        codes = data.get("codes") if isinstance(data, dict) else None
        if not isinstance(codes, dict):
            return {}
        return {code: entry for code, entry in codes.items() if isinstance(entry, dict)}

    def _write(self) -> None:
        self.state_file.parent.mkdir(parents=True, exist_ok=True)
        self.state_file.write_text(
            json.dumps({"codes": self._codes}, indent=2), encoding="utf-8"
        )

    def get_last_sync(self, code: str) -> datetime | None:
        """When *code* was last synced successfully, as an aware UTC datetime."""
        entry = self._codes.get(code, {})
        raw = entry.get("at")
        if not isinstance(raw, str):
            return None
        try:
            parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            return None
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)

    def get_record_count(self, code: str) -> int | None:
        """History size after the last successful sync of *code*."""
        entry = self._codes.get(code, {})
        count = entry.get("records")
        return count if isinstance(count, int) else None

    def record_sync(
        self, code: str, record_count: int, timestamp: datetime | None = None
    ) -> None:
        """Remember a successful sync of *code*."""
        timestamp = (timestamp or datetime.now(UTC)).astimezone(UTC)
        self._codes[code] = {
            "at": timestamp.strftime("%Y-%m-%dT%H:%M:%SZ"),
            "records": record_count,
        }
        self._write()
