"""Decorators for command functions."""

import asyncio
import functools
import inspect
import time
import traceback
from collections.abc import Callable

import typer

from pomosync_cli.models.errors import SyncError, SyncInProgressError
from pomosync_cli.utils.exit_codes import (
    ERROR_BUSY,
    ERROR_GENERAL,
    ERROR_INVALID_ARGS,
    ERROR_NETWORK,
    get_exit_code_name,
)
from pomosync_cli.utils.logger import get_logger
from pomosync_cli.utils.ui.formatters import format_error


class AppError(Exception):
    """Custom application error with exit code."""

    def __init__(self, message: str, exit_code: int = ERROR_GENERAL):
        super().__init__(message)
        self.exit_code = exit_code


def _exit_code_for(error: Exception) -> int:
    if isinstance(error, AppError):
        return error.exit_code
    if isinstance(error, SyncInProgressError):
        return ERROR_BUSY
    if isinstance(error, SyncError):
        return ERROR_NETWORK
    if isinstance(error, (KeyError, ValueError)):
        return ERROR_INVALID_ARGS
    return ERROR_GENERAL


def command_wrapper(func: Callable):
    """Log the command, run it (awaiting coroutines) and map errors to exit codes."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = get_logger()
        cmd = func.__name__
        start = time.monotonic()
        logger.info("command started: %s", cmd)
        try:
            if inspect.iscoroutinefunction(func):
                result = asyncio.run(func(*args, **kwargs))
            else:
                result = func(*args, **kwargs)

            elapsed = time.monotonic() - start
            logger.info("command completed: %s (%.3fs)", cmd, elapsed)
            return result

        except typer.Exit:
            raise

        except (AppError, SyncError, KeyError, ValueError) as e:
            elapsed = time.monotonic() - start
            message = f"Unknown key: {e.args[0]}" if isinstance(e, KeyError) else str(e)
            code = _exit_code_for(e)
            logger.error(
                "command failed: %s (%.3fs) %s - %s",
                cmd,
                elapsed,
                get_exit_code_name(code),
                message,
            )
            format_error(message)
            raise typer.Exit(code=code) from e

        except Exception as e:
            elapsed = time.monotonic() - start
            logger.error(
                "command failed: %s (%.3fs) - %s\n%s",
                cmd,
                elapsed,
                str(e),
                traceback.format_exc(),
            )
            format_error(f"An unexpected error occurred: {str(e)}")
            raise typer.Exit(code=ERROR_GENERAL) from e

    return wrapper
