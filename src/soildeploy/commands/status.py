"""Command: show service states reported by the orchestration tool."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from soildeploy.commands._base import SoilCommand

if TYPE_CHECKING:
    from soildeploy.commands._context import AppContext


@click.command(
    cls=SoilCommand,
    examples="""\
  soildeploy status
  soildeploy --json status""",
)
@click.pass_obj
def status(app: AppContext) -> None:
    """Show service status. Exits 1 when nothing is running."""
    from soildeploy.services.status import StatusService

    app.emit(StatusService(app.settings, app.client, progress=app.progress).status())
