"""Local session history persisted as a JSON file."""

from __future__ import annotations

import json
import threading
from collections.abc import Callable
from pathlib import Path

from pomosync_cli.models.errors import RecordDecodeError
from pomosync_cli.models.session import SessionRecord
from pomosync_cli.services.history_codec import (
    STORED_TIMESTAMP_PARSERS,
    decode_record,
    encode_history,
)
from pomosync_cli.utils.logger import get_logger


class HistoryStore:
    """Most-recent-first collection of committed cycles.

    The in-memory list is the source of truth; the file is rewritten after
    every mutation. All access goes through one lock so a commit from the
    timer and the application of a sync result cannot interleave.
    """

    def __init__(self, path: Path | None = None, autoload: bool = True):
        """Initialize history store.

        Args:
            path: JSON file to use. Defaults to history.json in the user data dir.
            autoload: Read the file immediately
        """
        if path is None:
            from platformdirs import user_data_dir

            path = Path(user_data_dir("pomosync_cli")) / "history.json"

        self.path = Path(path)
        self._records: list[SessionRecord] = []
        self._lock = threading.RLock()
        self._logger = get_logger("history")

        if autoload:
            self.load()

    def load(self) -> list[SessionRecord]:
        """Read the file, dropping records that cannot be decoded."""
        with self._lock:
            self._records = self._read()
            return list(self._records)

    def _read(self) -> list[SessionRecord]:
        if not self.path.exists():
            return []

        try:
            with open(self.path, encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            self._logger.warning("history file unreadable, starting empty: %s", e)
            return []

        if not isinstance(raw, list):
            self._logger.warning("history file is not a list, starting empty")
            return []

        records = []
        for index, item in enumerate(raw):
            try:
                records.append(decode_record(item, STORED_TIMESTAMP_PARSERS))
            except RecordDecodeError as e:
                self._logger.warning("dropping history entry %d: %s", index, e)
        return records

    def _write(self, records: list[SessionRecord]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(encode_history(records), f, indent=2)
        tmp.replace(self.path)

    def records(self) -> list[SessionRecord]:
        with self._lock:
            return list(self._records)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def prepend(self, record: SessionRecord) -> None:
        """Add a freshly committed record at the front."""
        with self._lock:
            updated = [record, *self._records]
            self._write(updated)
            self._records = updated

    def replace_all(self, records: list[SessionRecord]) -> None:
        """Persist *records*, then make them the in-memory collection."""
        with self._lock:
            updated = list(records)
            self._write(updated)
            self._records = updated

    def update(
        self, fn: Callable[[list[SessionRecord]], list[SessionRecord]]
    ) -> list[SessionRecord]:
        """Atomically replace the collection with ``fn(current)``."""
        with self._lock:
            updated = fn(list(self._records))
            self.replace_all(updated)
            return list(updated)

    def clear(self) -> None:
        self.replace_all([])
