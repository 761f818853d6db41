"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from real filesystem state.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from unittest.mock import patch

import pytest

from pomosync_cli.models.session import SessionRecord


# ---------------------------------------------------------------------------
# Logger isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_logger(tmp_path):
    """Send the application log into *tmp_path* and reset the singleton."""
    import pomosync_cli.utils.logger as logger_mod

    app_logger = logging.getLogger("pomosync_cli")
    logger_mod._logger = None
    app_logger.handlers.clear()

    with patch(
        "pomosync_cli.utils.logger.user_log_dir", return_value=str(tmp_path / "logs")
    ):
        yield

    for handler in app_logger.handlers:
        handler.close()
    app_logger.handlers.clear()
    logger_mod._logger = None


# ---------------------------------------------------------------------------
# Config isolation
# ---------------------------------------------------------------------------


@pytest.fixture()
def tmp_config(tmp_path):
    """Provide the real ConfigService backed by a temporary directory.

    Patches platform dirs so config/data files land in *tmp_path* only and
    clears the lru_cache so every command in the test sees this instance.
    """
    from pomosync_cli.services.config_service import get_config_service

    config_dir = str(tmp_path / "config")
    data_dir = str(tmp_path / "data")
    get_config_service.cache_clear()
    with patch(
        "pomosync_cli.services.config_service.user_config_dir", return_value=config_dir
    ):
        with patch(
            "pomosync_cli.services.config_service.user_data_dir", return_value=data_dir
        ):
            yield get_config_service()
    get_config_service.cache_clear()


# ---------------------------------------------------------------------------
# Record helpers
# ---------------------------------------------------------------------------


def make_record(
    record_id: str,
    hour: int = 10,
    minute: int = 0,
    focus: int = 1500,
    brk: int = 300,
    day: int = 2,
) -> SessionRecord:
    return SessionRecord(
        id=record_id,
        timestamp=datetime(2026, 1, day, hour, minute, tzinfo=UTC),
        focus_seconds=focus,
        break_seconds=brk,
    )


@pytest.fixture()
def record_factory():
    return make_record
