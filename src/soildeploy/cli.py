"""Root CLI group for soildeploy with global flags and command registration."""

from __future__ import annotations

from pathlib import Path

import click

from soildeploy import __version__
from soildeploy.commands import register_commands
from soildeploy.commands._context import AppContext
from soildeploy.config.logging import bind_command_context
from soildeploy.config.settings import DeploySettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="soildeploy")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "-C",
    "--project-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Stack directory holding docker-compose.yml and .env.",
)
@click.option("--env-file", default=None, help="Stack configuration file (default: .env).")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    project_dir: Path | None,
    env_file: str | None,
) -> None:
    """soildeploy — deploy the SOILDATA Dataverse stack with docker-compose."""
    ctx.ensure_object(dict)
    settings = DeploySettings.from_cli(
        config_path=config_path,
        project_dir=project_dir,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        env_file=env_file,
    )
    ctx.obj = AppContext(settings)
    bind_command_context(command=ctx.invoked_subcommand, project_dir=settings.project_dir)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
