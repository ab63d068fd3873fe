"""DeployService — the full deployment pass.

Linear, single pass, no retries beyond the bounded status poll:

1. Preflight (tools, ``.env``, required keys) — no mutation before this.
2. Data directories, secret permissions, init script permissions.
3. Shared network (best effort).
4. Reachability probe of the configured host (warning only).
5. ``down`` (ignored), ``pull`` (fatal), ``up -d`` (fatal).
6. Fixed wait, then status poll; at least one running service is success.

Recovery from any failure is re-running the command: every step is
idempotent.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from soildeploy.config.models import StackEnvironment
from soildeploy.infrastructure.compose import ComposeError, ServiceState
from soildeploy.infrastructure.filesystem import (
    PreparationError,
    ensure_directories,
    prepare_init_scripts,
    read_secret,
    restrict_secrets,
)
from soildeploy.infrastructure.probe import is_local_host, probe_host
from soildeploy.services.base import BaseService
from soildeploy.services.preflight import PreflightFailure, PreflightService
from soildeploy.services.result import ServiceResult

logger = logging.getLogger(__name__)

NEXT_STEPS: tuple[str, ...] = (
    "Wait 2-5 minutes for full initialization",
    "Access the web interface and change admin password",
    "Configure your dataverse settings",
    "Set up backup procedures",
    "Configure monitoring",
)

REMINDERS: tuple[str, ...] = (
    "IMPORTANT: Change default passwords in production!",
    "Configure DOI, SMTP, and other production settings in .env",
)


class DeployService(BaseService):
    """Bring the stack up and report how to reach it."""

    def deploy(
        self,
        *,
        pull: bool = True,
        probe: bool = True,
        wait_seconds: float | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> ServiceResult:
        op = "deploy"
        warnings: list[str] = []
        root = self._settings.project_dir
        layout = self._settings.layout

        try:
            env = PreflightService(
                self._settings, self._client, progress=self._progress
            ).verify(warnings)
        except PreflightFailure as exc:
            return exc.to_result(op, warnings)

        # --- Filesystem ---
        try:
            self._step("info", "Creating necessary directories...")
            ensure_directories(root, layout.data_dirs)

            self._step("info", "Setting proper permissions...")
            restrict_secrets(root, layout.secret_files)
            prepare_init_scripts(root, layout.init_dir)
        except PreparationError as exc:
            return ServiceResult.failure(
                op, exc.code, exc.message, warnings=warnings, path=str(exc.path)
            )

        # --- Network ---
        network = self._settings.docker.network
        self._step("info", f"Creating Docker network '{network}'...")
        if not self._client.create_network(network):
            self._warn(f"Network '{network}' already exists", warnings)

        # --- Reachability ---
        self._step("info", "Running pre-deployment checks...")
        if probe and not is_local_host(env.traefikhost):
            self._step("info", f"Checking domain accessibility for {env.traefikhost}...")
            if not probe_host(env.traefikhost, timeout=self._settings.startup.probe_timeout):
                self._warn(
                    f"Domain {env.traefikhost} is not reachable. "
                    "Make sure DNS is configured properly.",
                    warnings,
                )

        # --- Orchestration ---
        self._step("info", "Stopping existing containers...")
        if not self._client.down():
            self._warn("No previous deployment was stopped", warnings)

        try:
            if pull:
                self._step("info", "Pulling latest Docker images...")
                self._client.pull()
            self._step("info", "Starting SOILDATA services...")
            self._client.up()
        except ComposeError as exc:
            return ServiceResult.failure(
                op,
                "COMPOSE_FAILED",
                str(exc),
                warnings=warnings,
                command=exc.command,
                returncode=exc.returncode,
                stderr=exc.stderr,
                logs_command=self._client.logs_command(),
            )

        # --- Readiness ---
        wait = self._settings.startup.wait_seconds if wait_seconds is None else wait_seconds
        self._step("info", "Waiting for services to start...")
        if wait > 0:
            sleep(wait)

        self._step("info", "Checking service status...")
        try:
            services = self._poll_running(sleep)
        except ComposeError as exc:
            return ServiceResult.failure(
                op,
                "STATUS_FAILED",
                str(exc),
                warnings=warnings,
                stderr=exc.stderr,
                logs_command=self._client.logs_command(),
            )

        if not any(s.running for s in services):
            return ServiceResult.failure(
                op,
                "SERVICES_DOWN",
                "Some services failed to start. "
                f"Check logs with: {self._client.logs_command()}",
                warnings=warnings,
                services=[s.model_dump() for s in services],
                logs_command=self._client.logs_command(),
            )

        self._step("success", "Services are starting up...")
        data = self._summary(env, services, warnings)
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _poll_running(self, sleep: Callable[[float], None]) -> list[ServiceState]:
        """Query status up to ``poll_attempts`` times until something runs."""
        startup = self._settings.startup
        services: list[ServiceState] = []
        for attempt in range(1, startup.poll_attempts + 1):
            services = self._client.ps()
            if any(s.running for s in services):
                break
            logger.debug("No running services (attempt %d/%d)", attempt, startup.poll_attempts)
            if attempt < startup.poll_attempts and startup.poll_interval > 0:
                sleep(startup.poll_interval)
        return services

    def _summary(
        self,
        env: StackEnvironment,
        services: list[ServiceState],
        warnings: list[str],
    ) -> dict[str, Any]:
        host = env.traefikhost
        password_path = self._settings.project_dir / self._settings.layout.admin_password_file
        try:
            password = read_secret(password_path)
        except OSError:
            password = ""
            self._warn(
                f"Could not read {self._settings.layout.admin_password_file}", warnings
            )

        return {
            "project_dir": str(self._settings.project_dir),
            "access_url": env.access_url,
            "admin_interfaces": {
                "Traefik": self._settings.summary.traefik_dashboard,
                "Solr": f"https://solr.{host}",
                "MinIO": f"https://minio-console.{host}",
            },
            "admin_username": self._settings.summary.admin_username,
            "admin_password": password,
            "services": [s.model_dump() for s in services],
            "reminders": list(REMINDERS),
            "next_steps": list(NEXT_STEPS),
            "logs_command": self._client.logs_command(follow=True),
        }
