"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Builds the orchestration client lazily and
centralizes result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from soildeploy.output.console import StepReporter
from soildeploy.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from soildeploy.config.settings import DeploySettings
    from soildeploy.infrastructure.compose import ComposeClient
    from soildeploy.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: DeploySettings) -> None:
        self.settings = settings
        self._client: ComposeClient | None = None

        from soildeploy.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        self.progress = StepReporter(
            quiet=settings.quiet,
            enabled=not settings.json_output,
        )

    @property
    def client(self) -> ComposeClient:
        """The orchestration client (created on first access)."""
        if self._client is None:
            from soildeploy.infrastructure.compose import ComposeClient

            self._client = ComposeClient(self.settings.docker, self.settings.project_dir)
        return self._client

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings were already streamed to stderr by the step reporter.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
