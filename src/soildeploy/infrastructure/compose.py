"""Thin wrapper over the ``docker`` and ``docker-compose`` command lines.

The orchestration tool owns container lifecycle, networking, and volumes.
This client only invokes it from the project directory and interprets exit
codes and ``ps`` output. Every invocation is logged at debug level.
"""

from __future__ import annotations

import json
import logging
import shlex
import shutil
import subprocess
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from soildeploy.config.models import DockerConfig

logger = logging.getLogger(__name__)

RUNNING_STATES = frozenset({"running", "restarting"})


class ComposeError(Exception):
    """An orchestration command exited non-zero (or could not start)."""

    def __init__(self, command: list[str], returncode: int, stderr: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr.strip()
        super().__init__(f"{shlex.join(command)} exited with status {returncode}")


class ServiceState(BaseModel):
    """One service as reported by ``docker-compose ps``."""

    model_config = {"frozen": True}

    name: str
    service: str = ""
    state: str = ""
    status: str = ""
    running: bool = False


class ComposeClient:
    """Invoke the orchestration tool for one project directory.

    Usage::

        client = ComposeClient(settings.docker, settings.project_dir)
        client.pull()
        client.up()
        running = [s for s in client.ps() if s.running]
    """

    def __init__(self, config: DockerConfig, project_dir: Path) -> None:
        self._config = config
        self._project_dir = project_dir

    @property
    def compose_command(self) -> list[str]:
        return list(self._config.compose_command)

    # ------------------------------------------------------------------
    # Tool discovery
    # ------------------------------------------------------------------

    def missing_tools(self) -> list[str]:
        """Return the labels of required tools not found on ``PATH``.

        Order matches the check order: Docker first, then Docker Compose.
        """
        missing: list[str] = []
        if shutil.which(self._config.docker_command) is None:
            missing.append("Docker")
        if shutil.which(self._config.compose_command[0]) is None:
            missing.append("Docker Compose")
        return missing

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def create_network(self, name: str | None = None) -> bool:
        """Create the shared network. False if creation failed for any reason."""
        network = name or self._config.network
        try:
            result = self._run([self._config.docker_command, "network", "create", network])
        except ComposeError as exc:
            logger.debug("network create %s failed: %s", network, exc)
            return False
        if result.returncode != 0:
            logger.debug("network create %s failed: %s", network, result.stderr.strip())
            return False
        return True

    def down(self) -> bool:
        """Stop any previous deployment. False if nothing was stopped cleanly."""
        try:
            result = self._run([*self.compose_command, "down"])
        except ComposeError as exc:
            logger.debug("down failed: %s", exc)
            return False
        return result.returncode == 0

    def pull(self) -> None:
        """Refresh images. Raises :class:`ComposeError` on failure."""
        self._run_checked([*self.compose_command, "pull"])

    def up(self) -> None:
        """Start every service detached. Raises :class:`ComposeError` on failure."""
        self._run_checked([*self.compose_command, "up", "-d"])

    def ps(self) -> list[ServiceState]:
        """Report service states.

        Prefers ``ps --format json``; tools without structured output fall
        back to the plain table, where a service counts as running when its
        line contains ``Up``.
        """
        result = self._run([*self.compose_command, "ps", "--format", "json"])
        if result.returncode == 0:
            try:
                return parse_ps_json(result.stdout)
            except (json.JSONDecodeError, AttributeError, TypeError, ValueError):
                logger.debug("Unparseable ps JSON output, using table output")

        table = self._run_checked([*self.compose_command, "ps"])
        return parse_ps_table(table.stdout)

    def logs_command(self, *, follow: bool = False) -> str:
        """Shell command a user can run to inspect service logs."""
        args = [*self.compose_command, "logs"]
        if follow:
            args.append("-f")
        return shlex.join(args)

    # ------------------------------------------------------------------
    # Subprocess helpers
    # ------------------------------------------------------------------

    def _run(self, args: list[str]) -> subprocess.CompletedProcess[str]:
        """Run a command in the project directory. Never raises on exit status."""
        logger.debug("Running %s", shlex.join(args))
        try:
            return subprocess.run(
                args,
                cwd=self._project_dir,
                capture_output=True,
                text=True,
                timeout=self._config.command_timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise ComposeError(args, -1, f"timed out after {exc.timeout}s") from exc
        except OSError as exc:
            raise ComposeError(args, 127, str(exc)) from exc

    def _run_checked(self, args: list[str]) -> subprocess.CompletedProcess[str]:
        result = self._run(args)
        if result.returncode != 0:
            raise ComposeError(args, result.returncode, result.stderr)
        return result


# ---------------------------------------------------------------------------
# Output parsing
# ---------------------------------------------------------------------------


def _state_from_record(record: dict[str, Any]) -> ServiceState:
    state = str(record.get("State", "")).lower()
    status = str(record.get("Status", ""))
    running = state in RUNNING_STATES or (not state and status.startswith("Up"))
    return ServiceState(
        name=str(record.get("Name", record.get("Service", ""))),
        service=str(record.get("Service", "")),
        state=state,
        status=status,
        running=running,
    )


def parse_ps_json(output: str) -> list[ServiceState]:
    """Parse ``ps --format json`` output.

    Accepts a JSON array (older Compose v2) or newline-delimited objects.
    """
    text = output.strip()
    if not text:
        return []
    if text.startswith("["):
        records = json.loads(text)
    else:
        records = [json.loads(line) for line in text.splitlines() if line.strip()]
    return [_state_from_record(record) for record in records]


def parse_ps_table(output: str) -> list[ServiceState]:
    """Parse the plain ``ps`` table, skipping header and separator lines."""
    services: list[ServiceState] = []
    for line in output.splitlines():
        stripped = line.strip()
        if not stripped or set(stripped) <= {"-"}:
            continue
        if stripped.split()[0].upper() == "NAME":
            continue
        running = "Up" in stripped
        services.append(
            ServiceState(
                name=stripped.split()[0],
                status=stripped,
                state="running" if running else "",
                running=running,
            )
        )
    return services
