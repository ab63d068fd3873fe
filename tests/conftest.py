"""Shared pytest fixtures and test helpers for soildeploy tests."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from soildeploy.config.settings import DeploySettings
from soildeploy.infrastructure.compose import ComposeClient

COMPOSE_PS_JSON = ("docker-compose", "ps", "--format", "json")

RUNNING_PS = (
    '{"Name":"dataverse","Service":"dataverse","State":"running","Status":"Up 30 seconds"}\n'
    '{"Name":"solr","Service":"solr","State":"running","Status":"Up 31 seconds"}\n'
)

SECRET_FILES = (
    "secrets/admin/password",
    "secrets/api/key",
    "secrets/db/password",
    "secrets/doi/password",
)


class FakeRun:
    """Stand-in for ``subprocess.run`` that records argv and replays responses.

    Unregistered commands succeed with empty output.
    """

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self._responses: dict[tuple[str, ...], tuple[int, str, str]] = {}

    def set(self, *args: str, returncode: int = 0, stdout: str = "", stderr: str = "") -> None:
        self._responses[tuple(args)] = (returncode, stdout, stderr)

    def __call__(self, args: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        self.calls.append(list(args))
        returncode, stdout, stderr = self._responses.get(tuple(args), (0, "", ""))
        return subprocess.CompletedProcess(args, returncode, stdout, stderr)

    @property
    def commands(self) -> list[str]:
        return [" ".join(call) for call in self.calls]


def write_env(project_dir: Path, **values: str) -> Path:
    """Write a ``.env`` file with the given key/value pairs."""
    path = project_dir / ".env"
    path.write_text("".join(f"{k}={v}\n" for k, v in values.items()), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _not_root(monkeypatch: pytest.MonkeyPatch) -> None:
    """Tests run as a regular user unless they say otherwise."""
    monkeypatch.setattr("soildeploy.services.preflight.running_as_root", lambda: False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A SOILDATA checkout with .env, secrets, and init scripts.

    Secrets start world-readable and scripts non-executable so tests can
    observe the permission changes.
    """
    write_env(tmp_path, traefikhost="localhost", useremail="admin@example.org")
    (tmp_path / "docker-compose.yml").write_text("services: {}\n", encoding="utf-8")
    for rel in SECRET_FILES:
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("admin1\n", encoding="utf-8")
        path.chmod(0o644)
    init_dir = tmp_path / "init.d"
    init_dir.mkdir()
    script = init_dir / "01-setup.sh"
    script.write_text("#!/bin/sh\necho setup\n", encoding="utf-8")
    script.chmod(0o644)
    return tmp_path


@pytest.fixture
def tools_present(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pretend ``docker`` and ``docker-compose`` are on PATH."""
    monkeypatch.setattr("shutil.which", lambda cmd: f"/usr/bin/{cmd}")


@pytest.fixture
def fake_run(monkeypatch: pytest.MonkeyPatch, tools_present: None) -> FakeRun:
    """Replace ``subprocess.run``; ``ps`` reports two running services."""
    fake = FakeRun()
    fake.set(*COMPOSE_PS_JSON, stdout=RUNNING_PS)
    monkeypatch.setattr("subprocess.run", fake)
    return fake


@pytest.fixture
def settings(project_dir: Path) -> DeploySettings:
    return DeploySettings.from_cli(project_dir=project_dir)


@pytest.fixture
def client(settings: DeploySettings) -> ComposeClient:
    return ComposeClient(settings.docker, settings.project_dir)
