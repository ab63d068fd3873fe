"""Command: preflight checks without touching anything."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from soildeploy.commands._base import SoilCommand

if TYPE_CHECKING:
    from soildeploy.commands._context import AppContext


@click.command(
    cls=SoilCommand,
    examples="""\
  soildeploy check
  soildeploy --env-file .env.production check""",
)
@click.pass_obj
def check(app: AppContext) -> None:
    """Verify tools and .env settings. Makes no changes."""
    from soildeploy.services.preflight import PreflightService

    app.emit(PreflightService(app.settings, app.client, progress=app.progress).check())
