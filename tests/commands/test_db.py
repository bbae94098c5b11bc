"""Tests for the db command group."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from socialgraph.cli import cli


@pytest.mark.usefixtures("_isolated_project")
class TestDbCommands:
    def test_init_creates_and_stamps(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "db", "init"])
        assert result.exit_code == 0
        data = json.loads(result.output)["data"]
        assert data["current"] == "001_baseline"
        assert (tmp_path / "socialgraph.db").exists()

    def test_status(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["db", "init"])
        result = cli_runner.invoke(cli, ["--json", "db", "status"])
        assert result.exit_code == 0
        assert json.loads(result.output)["data"]["up_to_date"] is True

    def test_upgrade(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "db", "upgrade"])
        assert result.exit_code == 0
        assert json.loads(result.output)["data"]["current"] == "001_baseline"

    def test_config_path_respected(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "socialgraph.toml").write_text('[store]\npath = "data/app.db"\n')
        result = cli_runner.invoke(cli, ["db", "init"])
        assert result.exit_code == 0
        assert (tmp_path / "data" / "app.db").exists()

    def test_memory_backend_refused(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--memory", "db", "init"])
        assert result.exit_code == 1
        assert "UNAVAILABLE" in result.output
