"""Main CLI entry point for homesphere.

Defines the CLI group and registers all subcommands.

Commands:
    admin      - Admin dashboard (stats)
    agents     - Agent directory (list, show)
    auth       - Authentication (login, register, logout, status)
    contact    - Send a message to the HomeSphere team
    favorites  - Saved properties (list, add, remove, toggle)
    properties - Property listings (list, show)
    reviews    - Reviews (list, submit, like, dislike)

Subcommand help:
    homesphere COMMAND -h         Show help for a specific command
"""

from __future__ import annotations

__all__ = ["cli", "main"]

import logging
import sys
from pathlib import Path

import click

from homesphere import __version__
from homesphere.telemetry.system_logger import set_console_level

from .commands.admin import admin
from .commands.agents import agents
from .commands.auth import auth
from .commands.contact import contact
from .commands.favorites import favorites
from .commands.properties import properties
from .commands.reviews import reviews
from .runtime import RuntimeOptions


class ReorderedGroup(click.Group):
    """Group that shows a quick start after the commands section."""

    def format_epilog(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        formatter.write(
            """
Quick Start:
  homesphere auth login                      Sign in (prompts for email and password)
  homesphere properties list --filter city=Lagos
  homesphere favorites toggle <property-id>

Environment:
  HOMESPHERE_API_URL   Override the API base URL from the config file
"""
        )


@click.group(
    cls=ReorderedGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.option("--verbose", is_flag=True, help="Log progress to stderr")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: platform config dir)",
)
@click.option("--ephemeral", is_flag=True, help="Do not persist the session")
@click.pass_context
def cli(
    ctx: click.Context,
    version: bool,
    verbose: bool,
    config_path: Path | None,
    ephemeral: bool,
) -> None:
    """homesphere: command-line client for the HomeSphere marketplace."""
    if version:
        click.echo(f"homesphere {__version__}")
        sys.exit(0)

    options = ctx.ensure_object(RuntimeOptions)
    if config_path is not None:
        options.config_path = config_path
    if ephemeral:
        options.ephemeral = True
    if verbose:
        options.verbose = True
        set_console_level(logging.INFO)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Register commands
cli.add_command(admin)
cli.add_command(agents)
cli.add_command(auth)
cli.add_command(contact)
cli.add_command(favorites)
cli.add_command(properties)
cli.add_command(reviews)


def main() -> None:
    """CLI entry point."""
    cli()
