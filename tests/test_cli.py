"""Tests for the command-line interface."""

import pytest
from typer.testing import CliRunner

from conftest import dumps
from mclaunch import cli
from mclaunch.core.game_launcher import GameLauncher
from test_launcher import MODERN_ARGUMENTS, VERSION, _serve

runner = CliRunner()


@pytest.fixture
def wired(settings, fetcher, monkeypatch):
    monkeypatch.setattr(cli, "LauncherSettings", lambda: settings)
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)
    monkeypatch.setattr(cli, "new_launcher", lambda s: GameLauncher(s, fetcher))
    monkeypatch.setattr(cli, "select_fetcher", lambda s: fetcher)
    return settings, fetcher


def test_launch_without_version_prints_usage():
    result = runner.invoke(cli.app, ["launch"])

    assert result.exit_code == 1
    assert "Usage: mclaunch launch <VERSION> [USERNAME]" in result.output


def test_dry_run_prints_command(wired):
    settings, fetcher = wired
    _serve(settings, fetcher, arguments=MODERN_ARGUMENTS)

    result = runner.invoke(cli.app, ["launch", VERSION, "Steve", "--dry-run"])

    assert result.exit_code == 0, result.output
    assert result.output.startswith("java ")
    assert "net.minecraft.client.main.Main --username Steve" in result.output


def test_launch_execs_prepared_command(wired, monkeypatch):
    settings, fetcher = wired
    _serve(settings, fetcher, arguments=MODERN_ARGUMENTS)
    launched = []
    monkeypatch.setattr(GameLauncher, "launch_game", staticmethod(launched.append))

    result = runner.invoke(cli.app, ["launch", VERSION])

    assert result.exit_code == 0, result.output
    assert launched[0].args[-7] == "Player"


def test_unknown_version_exits_with_message(wired):
    settings, fetcher = wired
    _serve(settings, fetcher)

    result = runner.invoke(cli.app, ["launch", "9.9.9"])

    assert result.exit_code == 1
    assert "Error: Version 9.9.9 not found" in result.output
    assert "Traceback" not in result.output


def test_versions_lists_index(wired):
    settings, fetcher = wired
    fetcher.responses[settings.manifest_url] = dumps({"versions": [
        {"id": "1.21.5", "type": "release", "url": "https://meta.test/a.json"},
        {"id": "25w14a", "type": "snapshot", "url": "https://meta.test/b.json"},
    ]})

    result = runner.invoke(cli.app, ["versions", "--type", "snapshot"])

    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == ["25w14a\tsnapshot"]
