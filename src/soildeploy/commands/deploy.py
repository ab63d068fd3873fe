"""Command: bring the SOILDATA stack up."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from soildeploy.commands._base import SoilCommand

if TYPE_CHECKING:
    from soildeploy.commands._context import AppContext


@click.command(
    cls=SoilCommand,
    examples="""\
  soildeploy deploy
  soildeploy -C /srv/soildata deploy
  soildeploy deploy --skip-pull --wait 60
  soildeploy --json deploy --no-probe""",
)
@click.option("--skip-pull", is_flag=True, help="Do not refresh images before starting.")
@click.option("--no-probe", is_flag=True, help="Skip the reachability probe of traefikhost.")
@click.option(
    "--wait",
    "wait_seconds",
    type=click.FloatRange(min=0),
    default=None,
    help="Seconds to wait before checking status (default from config: 30).",
)
@click.pass_obj
def deploy(app: AppContext, skip_pull: bool, no_probe: bool, wait_seconds: float | None) -> None:
    """Validate, prepare, and start the stack, then print access details."""
    from soildeploy.services.deploy import DeployService

    app.progress("info", "Starting SOILDATA Dataverse Deployment...")
    svc = DeployService(app.settings, app.client, progress=app.progress)
    app.emit(svc.deploy(pull=not skip_pull, probe=not no_probe, wait_seconds=wait_seconds))
