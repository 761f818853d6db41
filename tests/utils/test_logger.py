"""Tests for the application logger utility."""

from __future__ import annotations

import logging
import logging.handlers
from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def reset_logger():
    """Reset the logger singleton and logging state between tests."""
    import pomosync_cli.utils.logger as logger_mod

    logger_mod._logger = None
    logging.getLogger("pomosync_cli").handlers.clear()

    yield

    for handler in logging.getLogger("pomosync_cli").handlers:
        handler.close()
    logging.getLogger("pomosync_cli").handlers.clear()
    logger_mod._logger = None


def _flush(logger: logging.Logger) -> None:
    for handler in logger.handlers:
        handler.flush()


def test_get_logger_creates_log_file(tmp_path):
    """Logger creates the log file inside user_log_dir."""
    with patch("pomosync_cli.utils.logger.user_log_dir", return_value=str(tmp_path)):
        from pomosync_cli.utils.logger import get_logger

        logger = get_logger()

    assert (tmp_path / "pomosync.log").exists()
    assert isinstance(logger, logging.Logger)


def test_get_logger_returns_singleton(tmp_path):
    with patch("pomosync_cli.utils.logger.user_log_dir", return_value=str(tmp_path)):
        from pomosync_cli.utils.logger import get_logger

        assert get_logger() is get_logger()


def test_named_logger_is_child(tmp_path):
    """Named loggers share the application file handler."""
    with patch("pomosync_cli.utils.logger.user_log_dir", return_value=str(tmp_path)):
        from pomosync_cli.utils.logger import get_logger

        child = get_logger("sync")
        child.warning("sync failed: boom")
        root = get_logger()

    assert child.name == "pomosync_cli.sync"
    assert child.parent is root
    _flush(root)
    content = (tmp_path / "pomosync.log").read_text()
    assert "[pomosync_cli.sync] sync failed: boom" in content


def test_file_handler_added_alongside_foreign_handlers(tmp_path):
    """Handlers attached by someone else do not stop the file log."""
    import pomosync_cli.utils.logger as logger_mod

    foreign = logging.NullHandler()
    logging.getLogger("pomosync_cli").addHandler(foreign)
    with patch("pomosync_cli.utils.logger.user_log_dir", return_value=str(tmp_path)):
        logger = logger_mod.get_logger()
        logger.info("still written")

        logger_mod._logger = None
        again = logger_mod.get_logger()

    file_handlers = [
        h for h in again.handlers if isinstance(h, logging.handlers.RotatingFileHandler)
    ]
    assert foreign in again.handlers
    assert len(file_handlers) == 1
    _flush(logger)
    assert "still written" in (tmp_path / "pomosync.log").read_text()


def test_debug_messages_are_recorded(tmp_path):
    with patch("pomosync_cli.utils.logger.user_log_dir", return_value=str(tmp_path)):
        from pomosync_cli.utils.logger import get_logger

        logger = get_logger()
        logger.debug("low level detail")

    _flush(logger)
    assert "low level detail" in (tmp_path / "pomosync.log").read_text()


def test_logger_does_not_propagate(tmp_path):
    with patch("pomosync_cli.utils.logger.user_log_dir", return_value=str(tmp_path)):
        from pomosync_cli.utils.logger import get_logger

        assert get_logger().propagate is False


def test_get_logger_creates_parent_dirs(tmp_path):
    nested = tmp_path / "a" / "b" / "c"
    with patch("pomosync_cli.utils.logger.user_log_dir", return_value=str(nested)):
        from pomosync_cli.utils.logger import get_logger

        get_logger()

    assert nested.is_dir()


def test_level_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("POMOSYNC_LOG_LEVEL", "warning")
    with patch("pomosync_cli.utils.logger.user_log_dir", return_value=str(tmp_path)):
        from pomosync_cli.utils.logger import get_logger

        logger = get_logger()

    assert logger.level == logging.WARNING


def test_unknown_level_falls_back_to_debug(tmp_path, monkeypatch):
    monkeypatch.setenv("POMOSYNC_LOG_LEVEL", "chatty")
    with patch("pomosync_cli.utils.logger.user_log_dir", return_value=str(tmp_path)):
        from pomosync_cli.utils.logger import get_logger

        assert get_logger().level == logging.DEBUG
