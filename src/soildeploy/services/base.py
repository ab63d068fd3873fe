"""BaseService — shared foundation for soildeploy services.

Every service receives the frozen :class:`DeploySettings` and a
:class:`ComposeClient` at construction time, plus an optional progress
callback used to stream ``[INFO]``-style step lines while a long
operation runs.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from soildeploy.config.settings import DeploySettings
    from soildeploy.infrastructure.compose import ComposeClient

logger = logging.getLogger(__name__)

Progress = Callable[[str, str], None]
"""``progress(level, message)`` with level in info/success/warning/error."""


def _silent(level: str, message: str) -> None:
    return None


class BaseService:
    """Base for service-layer classes.

    Usage::

        class StatusService(BaseService):
            def status(self) -> ServiceResult:
                self._step("info", "Checking service status...")
                services = self._client.ps()
                ...
    """

    def __init__(
        self,
        settings: DeploySettings,
        client: ComposeClient,
        *,
        progress: Progress | None = None,
    ) -> None:
        self._settings = settings
        self._client = client
        self._progress = progress or _silent

    def _step(self, level: str, message: str) -> None:
        logger.debug("%s: %s", level, message)
        self._progress(level, message)

    def _warn(self, message: str, warnings: list[str]) -> None:
        """Record a non-fatal issue and surface it immediately."""
        warnings.append(message)
        self._step("warning", message)
