"""PreflightService — precondition checks that never mutate anything.

Order is fixed: privilege warning, orchestration tools, configuration
file, required configuration keys. The first fatal condition wins.
"""

from __future__ import annotations

import logging
import os
from typing import Any

from soildeploy.config.discovery import load_environment
from soildeploy.config.models import StackEnvironment
from soildeploy.services.base import BaseService
from soildeploy.services.result import ServiceResult

logger = logging.getLogger(__name__)

ENV_SAMPLE_HINT = "Copy .env_sample to .env and edit it with your production settings."


class PreflightFailure(Exception):
    """A fatal precondition. Carries the ServiceError fields."""

    def __init__(self, code: str, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.detail = detail

    def to_result(self, op: str, warnings: list[str]) -> ServiceResult:
        return ServiceResult.failure(op, self.code, self.message, warnings=warnings, **self.detail)


def running_as_root() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


class PreflightService(BaseService):
    """Validate tools and stack configuration."""

    def verify(self, warnings: list[str]) -> StackEnvironment:
        """Run every check, appending warnings. Returns the parsed environment.

        Raises :class:`PreflightFailure` on the first fatal condition.
        """
        if running_as_root():
            self._warn(
                "Running as root. Consider running as non-root user for security.", warnings
            )

        missing_tools = self._client.missing_tools()
        if missing_tools:
            tool = missing_tools[0]
            raise PreflightFailure(
                "TOOL_MISSING",
                f"{tool} is not installed. Please install {tool} first.",
                tool=tool,
            )

        env_path = self._settings.env_path
        try:
            env = load_environment(env_path)
        except FileNotFoundError:
            raise PreflightFailure(
                "CONFIG_MISSING",
                f"{self._settings.env_file} file not found. "
                "Please configure your environment variables first.",
                path=str(env_path),
                hint=ENV_SAMPLE_HINT,
            ) from None

        missing_keys = env.missing_keys()
        if missing_keys:
            key = missing_keys[0]
            raise PreflightFailure(
                "CONFIG_INVALID",
                f"{key} is not set in {self._settings.env_file} file",
                key=key,
                path=str(env_path),
            )

        logger.debug("Loaded %d settings from %s", len(env.values), env_path)
        return env

    def check(self) -> ServiceResult:
        """Run preflight only, for ``soildeploy check``."""
        warnings: list[str] = []
        try:
            env = self.verify(warnings)
        except PreflightFailure as exc:
            return exc.to_result("check", warnings)

        return ServiceResult(
            ok=True,
            op="check",
            data={
                "project_dir": str(self._settings.project_dir),
                "env_file": str(self._settings.env_path),
                "traefikhost": env.traefikhost,
                "useremail": env.useremail,
                "access_url": env.access_url,
            },
            warnings=warnings,
        )
