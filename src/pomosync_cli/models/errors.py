"""Exceptions raised by the history codec and the sync service."""

from __future__ import annotations


class RecordDecodeError(ValueError):
    """A serialized session record could not be turned into a SessionRecord."""


class TimestampParseError(RecordDecodeError):
    """No timestamp parser accepted the given value."""

    def __init__(self, value: object):
        super().__init__(f"Cannot decode date value {value!r}")
        self.value = value


class SyncError(Exception):
    """Sync round trip failed; local history was left untouched."""


class SyncResponseError(SyncError):
    """The remote answered with a body that is neither a wrapped nor a bare history list."""


class SyncInProgressError(SyncError):
    """Another sync is still outstanding."""

    def __init__(self):
        super().__init__("A sync is already in progress")
