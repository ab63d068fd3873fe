"""Tests for ``soildeploy status``."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from click.testing import CliRunner

from soildeploy.cli import cli


class TestStatusCommand:
    def test_running(self, cli_runner: CliRunner, project_dir: Path, fake_run: Any) -> None:
        result = cli_runner.invoke(cli, ["-C", str(project_dir), "status"])
        assert result.exit_code == 0, result.output
        assert "2/2 services running" in result.output

    def test_json(self, cli_runner: CliRunner, project_dir: Path, fake_run: Any) -> None:
        result = cli_runner.invoke(cli, ["-C", str(project_dir), "--json", "status"])
        assert json.loads(result.output)["data"]["total"] == 2

    def test_down_exits_nonzero(
        self, cli_runner: CliRunner, project_dir: Path, fake_run: Any
    ) -> None:
        fake_run.set("docker-compose", "ps", "--format", "json", stdout="")
        result = cli_runner.invoke(cli, ["-C", str(project_dir), "status"])
        assert result.exit_code == 1
        assert "docker-compose logs" in result.output
