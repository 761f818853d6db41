"""History synchronization with the remote endpoint.

One sync is a single round trip: the full local history and the sync code
go out, the remote's view of history comes back, and the two are merged by
record id with the remote winning every conflict.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Iterable
from typing import Any

import httpx

from pomosync_cli.models.errors import SyncError, SyncInProgressError
from pomosync_cli.models.session import SessionRecord, sort_records
from pomosync_cli.services.api.client import SyncClient
from pomosync_cli.services.history_codec import (
    decode_sync_response,
    encode_history,
)
from pomosync_cli.services.history_store import HistoryStore
from pomosync_cli.services.sync_state import SyncState
from pomosync_cli.utils.logger import get_logger


def merge_records(
    local: Iterable[SessionRecord], remote: Iterable[SessionRecord]
) -> list[SessionRecord]:
    """Merge two collections keyed by id.

    Local-only records are kept, remote-only records are added and a record
    present on both sides is replaced by the remote version. The result is
    sorted most recent first.
    """
    merged: dict[str, SessionRecord] = {r.id: r for r in local}
    for record in remote:
        merged[record.id] = record
    return sort_records(list(merged.values()))


class SyncResult:
    """Result of a sync operation."""

    def __init__(self):
        """Initialize sync result."""
        self.local_count = 0
        self.remote_count = 0
        self.merged_count = 0
        self.added = 0
        self.replaced = 0

        self.success = False
        self.error: str | None = None
        self.duration: float = 0.0


class SyncService:
    """Runs sync round trips against a HistoryStore.

    Only one sync may be outstanding at a time; a second request while one
    is in flight is rejected with SyncInProgressError rather than queued.
    """

    def __init__(
        self,
        client: SyncClient,
        store: HistoryStore,
        sync_state: SyncState | None = None,
    ):
        self.client = client
        self.store = store
        self.sync_state = sync_state
        self._busy = False
        self._logger = get_logger("sync")

    @property
    def busy(self) -> bool:
        return self._busy

    async def fetch_remote(
        self, local_records: list[SessionRecord], code: str
    ) -> list[SessionRecord]:
        """Send local history and return the remote's records.

        Raises:
            SyncError: network failure, bad status, non-JSON or unrecognized body
        """
        payload: dict[str, Any] = {
            "code": code,
            "history": encode_history(local_records),
        }
        self._logger.info("sending %d records", len(local_records))

        try:
            body = await self.client.post(payload)
        except httpx.TimeoutException as e:
            raise SyncError(f"Sync timed out: {e}") from e
        except httpx.HTTPStatusError as e:
            raise SyncError(
                f"Sync endpoint returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise SyncError(f"Sync request failed: {e}") from e
        except ValueError as e:
            raise SyncError(f"Sync response is not JSON: {e}") from e

        remote = decode_sync_response(body)
        self._logger.info("received %d records", len(remote))
        return remote

    async def reconcile(
        self, local_records: list[SessionRecord], code: str
    ) -> list[SessionRecord]:
        """Round trip plus merge, without touching the store."""
        remote = await self.fetch_remote(local_records, code)
        return merge_records(local_records, remote)

    async def sync(self, code: str) -> SyncResult:
        """Sync the store with the remote and persist the merge.

        The merge is applied to whatever the store holds when the response
        arrives, so a cycle committed while the request was in flight is
        kept. On failure the store is left as it was.

        Raises:
            SyncInProgressError: another sync is outstanding
        """
        self._acquire()
        return await self._run(code)

    def sync_in_background(self, code: str) -> asyncio.Task[SyncResult]:
        """Schedule a sync on the running loop and return its task.

        Raises:
            SyncInProgressError: another sync is outstanding
        """
        self._acquire()
        try:
            return asyncio.get_running_loop().create_task(self._run(code))
        except RuntimeError:
            self._busy = False
            raise

    def _acquire(self) -> None:
        if self._busy:
            raise SyncInProgressError()
        self._busy = True

    async def _run(self, code: str) -> SyncResult:
        result = SyncResult()
        start_time = time.monotonic()
        try:
            outbound = self.store.records()
            result.local_count = len(outbound)

            remote = await self.fetch_remote(outbound, code)
            result.remote_count = len(remote)

            def apply(current: list[SessionRecord]) -> list[SessionRecord]:
                known = {r.id for r in current}
                result.added = sum(1 for r in remote if r.id not in known)
                result.replaced = len(remote) - result.added
                return merge_records(current, remote)

            try:
                merged = self.store.update(apply)
            except OSError as e:
                raise SyncError(f"Could not save merged history: {e}") from e
            result.merged_count = len(merged)
            result.success = True

            if self.sync_state is not None:
                self.sync_state.record_sync(code, result.merged_count)

            self._logger.info(
                "sync merged: local=%d remote=%d final=%d",
                result.local_count,
                result.remote_count,
                result.merged_count,
            )
        except SyncError as e:
            result.success = False
            result.error = str(e)
            self._logger.warning("sync failed: %s", e)
        finally:
            self._busy = False
            result.duration = time.monotonic() - start_time

        return result
