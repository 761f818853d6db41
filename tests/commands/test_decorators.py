"""Unit tests for command decorators."""

from unittest.mock import patch

import pytest
import typer

from pomosync_cli.commands.decorators import AppError, command_wrapper
from pomosync_cli.models.errors import SyncError, SyncInProgressError
from pomosync_cli.utils.exit_codes import (
    ERROR_BUSY,
    ERROR_GENERAL,
    ERROR_INVALID_ARGS,
    ERROR_NETWORK,
)


def _raising(error):
    @command_wrapper
    def cmd():
        raise error

    return cmd


class TestAppError:
    def test_default_exit_code(self):
        assert AppError("x").exit_code == ERROR_GENERAL

    def test_custom_exit_code(self):
        assert AppError("x", exit_code=ERROR_INVALID_ARGS).exit_code == ERROR_INVALID_ARGS


class TestCommandWrapper:
    def test_returns_result(self):
        @command_wrapper
        def cmd(x):
            return x * 2

        assert cmd(4) == 8

    def test_runs_coroutines(self):
        @command_wrapper
        async def cmd():
            return "async"

        assert cmd() == "async"

    def test_preserves_name(self):
        @command_wrapper
        def my_command():
            pass

        assert my_command.__name__ == "my_command"

    def test_exit_passes_through(self):
        with pytest.raises(typer.Exit) as exc:
            _raising(typer.Exit(3))()
        assert exc.value.exit_code == 3

    @pytest.mark.parametrize(
        "error, code",
        [
            (AppError("bad", exit_code=ERROR_INVALID_ARGS), ERROR_INVALID_ARGS),
            (SyncError("down"), ERROR_NETWORK),
            (SyncInProgressError(), ERROR_BUSY),
            (KeyError("timer.nope"), ERROR_INVALID_ARGS),
            (ValueError("Invalid value"), ERROR_INVALID_ARGS),
            (RuntimeError("boom"), ERROR_GENERAL),
        ],
    )
    def test_maps_errors_to_exit_codes(self, error, code):
        with patch("pomosync_cli.commands.decorators.format_error"):
            with pytest.raises(typer.Exit) as exc:
                _raising(error)()
        assert exc.value.exit_code == code

    def test_key_error_message(self):
        with patch("pomosync_cli.commands.decorators.format_error") as fmt:
            with pytest.raises(typer.Exit):
                _raising(KeyError("timer.nope"))()
        fmt.assert_called_once_with("Unknown key: timer.nope")

    def test_unexpected_error_message(self):
        with patch("pomosync_cli.commands.decorators.format_error") as fmt:
            with pytest.raises(typer.Exit):
                _raising(RuntimeError("boom"))()
        assert "An unexpected error occurred: boom" in fmt.call_args.args[0]
