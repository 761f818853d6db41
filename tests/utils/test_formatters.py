"""Tests for output formatters."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from rich.console import Console

from pomosync_cli.models.session import group_by_day
from pomosync_cli.utils.ui.formatters import (
    day_group_table,
    format_duration,
    format_error,
    format_success,
    format_total,
)


@pytest.mark.parametrize(
    "seconds, expected",
    [(0, "0m 00s"), (59, "0m 59s"), (1500, "25m 00s"), (3725, "62m 05s"), (-3, "0m 00s")],
)
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


@pytest.mark.parametrize(
    "seconds, expected",
    [(0, "0m 0s"), (1500, "25m 0s"), (7500, "2h 5m"), (3600, "1h 0m")],
)
def test_format_total(seconds, expected):
    assert format_total(seconds) == expected


def test_format_error_prints_prefix():
    with patch("pomosync_cli.utils.ui.formatters.console") as console:
        format_error("boom")
    console.print.assert_called_once_with("[bold red]Error:[/bold red] boom")


def test_format_success_prints_prefix():
    with patch("pomosync_cli.utils.ui.formatters.console") as console:
        format_success("done")
    assert "done" in console.print.call_args.args[0]


def test_day_group_table(record_factory):
    group = group_by_day(
        [record_factory("aaaaaaaa-1111", hour=10), record_factory("bbbbbbbb-2222", hour=9)]
    )[0]
    table = day_group_table(group)

    assert [c.header for c in table.columns] == ["Time", "Focus", "Break", "ID"]
    assert table.row_count == 2

    console = Console(record=True, width=120, color_system=None)
    console.print(table)
    text = console.export_text()
    assert "25m 00s" in text
    assert "aaaaaaaa" in text
    assert "-1111" not in text
