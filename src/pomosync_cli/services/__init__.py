"""Services module for PomoSync CLI - storage, sync and timing."""

from .history_store import HistoryStore
from .sync_service import SyncResult, SyncService, merge_records
from .sync_state import SyncState
from .timer_driver import TimerDriver

__all__ = [
    "HistoryStore",
    "SyncService",
    "SyncResult",
    "SyncState",
    "TimerDriver",
    "merge_records",
]
