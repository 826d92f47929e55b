"""Admin commands for homesphere CLI.

Commands:
    admin stats - Dashboard statistics (admins only)
    admin agents - Registered agents (admins only)
"""

from __future__ import annotations

__all__ = ["admin"]

import json
from typing import Any

import click

from homesphere.models import Role

from ..runtime import Runtime, RuntimeOptions, pass_options, run_command
from ..styling import style_dim, style_header, style_label


@click.group()
def admin() -> None:
    """Admin commands."""
    pass


@admin.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@pass_options
def stats(options: RuntimeOptions, as_json: bool) -> None:
    """Show dashboard statistics."""

    async def _stats(rt: Runtime) -> Any:
        rt.session.require_role(Role.ADMIN)
        return await rt.api.get_admin_dashboard_stats()

    data = run_command(options, _stats)

    if as_json or not isinstance(data, dict):
        click.echo(json.dumps(data, indent=2))
        return

    click.echo(style_header("Dashboard"))
    width = max((len(str(key)) for key in data), default=0) + 1
    for key, value in data.items():
        click.echo(f"  {str(key) + ':':<{width}} {value}")


@admin.command("agents")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@pass_options
def admin_agents(options: RuntimeOptions, as_json: bool) -> None:
    """List registered agents with their business details."""

    async def _agents(rt: Runtime) -> list[dict[str, Any]]:
        rt.session.require_role(Role.ADMIN)
        return await rt.api.get_admin_agents()

    items = run_command(options, _agents)

    if as_json:
        click.echo(json.dumps(items, indent=2))
        return

    if not items:
        click.echo(style_dim("No agents registered."))
        return

    click.echo("\n" + style_label("Agents") + f" {len(items)}\n")
    for agent in items:
        name = " ".join(str(agent[field]) for field in ("firstName", "lastName") if agent.get(field))
        details = ", ".join(
            str(agent[field]) for field in ("businessName", "registrationNumber", "email") if agent.get(field)
        )
        click.echo(f"  [{agent.get('id', '?')}] {name or '?'}  {style_dim(details)}")
    click.echo()
