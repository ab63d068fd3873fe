"""Subcommand modules for soildeploy.

Provides register_commands() which uses deferred imports to keep
``soildeploy --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from soildeploy.commands.check import check
    from soildeploy.commands.deploy import deploy
    from soildeploy.commands.status import status

    cli.add_command(deploy)
    cli.add_command(check)
    cli.add_command(status)
