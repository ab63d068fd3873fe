"""StatusService — report what the orchestration tool says is running."""

from __future__ import annotations

from soildeploy.infrastructure.compose import ComposeError
from soildeploy.services.base import BaseService
from soildeploy.services.result import ServiceResult


class StatusService(BaseService):
    """Read service states back from the orchestration tool."""

    def status(self) -> ServiceResult:
        """List service states. Fails when no service is running."""
        op = "status"
        missing = self._client.missing_tools()
        if "Docker Compose" in missing:
            return ServiceResult.failure(
                op,
                "TOOL_MISSING",
                "Docker Compose is not installed. Please install Docker Compose first.",
                tool="Docker Compose",
            )

        try:
            services = self._client.ps()
        except ComposeError as exc:
            return ServiceResult.failure(
                op,
                "STATUS_FAILED",
                str(exc),
                stderr=exc.stderr,
                logs_command=self._client.logs_command(),
            )

        payload = [s.model_dump() for s in services]
        running = sum(1 for s in services if s.running)
        if running == 0:
            return ServiceResult.failure(
                op,
                "SERVICES_DOWN",
                f"No services are running. Check logs with: {self._client.logs_command()}",
                services=payload,
                logs_command=self._client.logs_command(),
            )

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "project_dir": str(self._settings.project_dir),
                "running": running,
                "total": len(services),
                "services": payload,
            },
        )
