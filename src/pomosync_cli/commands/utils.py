"""Helpers shared by the command modules."""

from pomosync_cli.services.api.client import SyncClient
from pomosync_cli.services.config_service import get_config_service
from pomosync_cli.services.history_store import HistoryStore
from pomosync_cli.services.sync_service import SyncService
from pomosync_cli.services.sync_state import SyncState
from pomosync_cli.utils.exit_codes import ERROR_INVALID_ARGS

from .decorators import AppError


def get_history_store() -> HistoryStore:
    """History store living next to the configuration's data dir."""
    return HistoryStore(get_config_service().history_path)


def get_sync_service(store: HistoryStore) -> SyncService:
    config_service = get_config_service()
    return SyncService(
        client=SyncClient(config_service.config.sync),
        store=store,
        sync_state=SyncState(config_service.config_dir),
    )


def resolve_sync_code(code: str | None) -> str:
    """Explicit code, else the saved one."""
    resolved = (code or get_config_service().config.sync.code).strip()
    if not resolved:
        raise AppError(
            "No sync code given. Pass --code or run 'pomosync config set sync.code CODE'.",
            exit_code=ERROR_INVALID_ARGS,
        )
    return resolved
