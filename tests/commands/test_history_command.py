"""Unit tests for the history commands."""

import re

from typer.testing import CliRunner

from pomosync_cli.main import app
from pomosync_cli.services.history_store import HistoryStore

runner = CliRunner()


def strip_ansi(text: str) -> str:
    ansi = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")
    return ansi.sub("", text)


def _seed(tmp_config, records):
    store = HistoryStore(tmp_config.history_path)
    store.replace_all(records)
    return store


class TestHistoryList:
    def test_empty(self, tmp_config):
        result = runner.invoke(app, ["history", "list"])
        assert result.exit_code == 0
        assert "No cycles recorded yet" in strip_ansi(result.output)

    def test_lists_records(self, tmp_config, record_factory):
        _seed(
            tmp_config,
            [
                record_factory("aaaaaaaa-1", hour=10),
                record_factory("bbbbbbbb-2", hour=9, focus=600, brk=60),
            ],
        )
        result = runner.invoke(app, ["history", "list"])
        output = strip_ansi(result.output)

        assert result.exit_code == 0
        assert "aaaaaaaa" in output
        assert "bbbbbbbb" in output
        assert "10m 00s" in output
        assert "2 cycles" in output

    def test_limit(self, tmp_config, record_factory):
        _seed(
            tmp_config,
            [record_factory("aaaaaaaa-1", hour=10), record_factory("bbbbbbbb-2", hour=9)],
        )
        result = runner.invoke(app, ["history", "list", "--limit", "1"])
        output = strip_ansi(result.output)

        assert result.exit_code == 0
        assert "aaaaaaaa" in output
        assert "bbbbbbbb" not in output


class TestHistoryClear:
    def test_already_empty(self, tmp_config):
        result = runner.invoke(app, ["history", "clear", "--yes"])
        assert result.exit_code == 0
        assert "already empty" in strip_ansi(result.output)

    def test_clear_with_yes(self, tmp_config, record_factory):
        _seed(tmp_config, [record_factory("a"), record_factory("b", hour=9)])
        result = runner.invoke(app, ["history", "clear", "-y"])

        assert result.exit_code == 0
        assert "Deleted 2 cycles" in strip_ansi(result.output)
        assert HistoryStore(tmp_config.history_path).records() == []

    def test_clear_cancelled(self, tmp_config, record_factory):
        _seed(tmp_config, [record_factory("a")])
        result = runner.invoke(app, ["history", "clear"], input="n\n")

        assert result.exit_code == 0
        assert "Cancelled" in strip_ansi(result.output)
        assert len(HistoryStore(tmp_config.history_path)) == 1

    def test_clear_confirmed(self, tmp_config, record_factory):
        _seed(tmp_config, [record_factory("a")])
        result = runner.invoke(app, ["history", "clear"], input="y\n")

        assert result.exit_code == 0
        assert len(HistoryStore(tmp_config.history_path)) == 0
