"""Agent directory commands for homesphere CLI.

Commands:
    agents list - List agents
    agents show - Show an agent with their listings and reviews
    agents dashboard - Your own listings, reviews and totals (agents only)
"""

from __future__ import annotations

__all__ = ["agents", "dashboard_stats"]

import json
from typing import Any

import click

from homesphere.gateway.retry import retry_read
from homesphere.models import Role
from homesphere.sync import ScreenScope

from ..runtime import Runtime, RuntimeOptions, pass_options, run_command
from ..styling import format_price, format_rating, style_dim, style_header, style_label


def _agent_name(agent: dict[str, Any]) -> str:
    name = " ".join(str(agent[field]) for field in ("firstName", "lastName") if agent.get(field))
    return name or str(agent.get("businessName") or agent.get("email") or agent.get("id", "?"))


@click.group()
def agents() -> None:
    """Agent directory commands."""
    pass


@agents.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@pass_options
def agents_list(options: RuntimeOptions, as_json: bool) -> None:
    """List agents."""

    async def _list(rt: Runtime) -> list[dict[str, Any]]:
        return await rt.api.get_agents()

    items = run_command(options, _list)

    if as_json:
        click.echo(json.dumps(items, indent=2))
        return

    if not items:
        click.echo(style_dim("No agents."))
        return

    click.echo("\n" + style_label("Agents") + f" {len(items)}\n")
    for agent in items:
        business = f"  ({agent['businessName']})" if agent.get("businessName") else ""
        click.echo(f"  [{agent.get('id', '?')}] {_agent_name(agent)}{business}")
    click.echo()


@agents.command("show")
@click.argument("agent_id")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@pass_options
def agents_show(options: RuntimeOptions, agent_id: str, as_json: bool) -> None:
    """Show an agent, their listings and their reviews."""

    async def _show(rt: Runtime) -> list[Any]:
        async with ScreenScope("agent-profile") as scope:
            return await scope.gather(
                rt.api.get_agent(agent_id),
                rt.api.get_agent_properties(agent_id),
                rt.api.get_agent_reviews(agent_id),
            )

    agent, listings, agent_reviews = run_command(options, _show)

    if as_json:
        click.echo(json.dumps({"agent": agent, "properties": listings, "reviews": agent_reviews}, indent=2))
        return

    click.echo(style_header(_agent_name(agent)))
    for label, field in (("Email", "email"), ("Phone", "phone"), ("Business", "businessName")):
        if agent.get(field):
            click.echo(f"  {label + ':':<9} {agent[field]}")

    click.echo()
    click.echo(style_label("Listings") + f" {len(listings)}")
    for record in listings:
        click.echo(f"  [{record.get('id', '?')}] {record.get('title', '?')}  {format_price(record.get('price'))}")

    click.echo()
    click.echo(style_label("Reviews") + f" {len(agent_reviews)}")
    for review in agent_reviews:
        click.echo(f"  {format_rating(review.get('rating'))}  {review.get('comment', '')}")


def dashboard_stats(listings: list[dict[str, Any]], agent_reviews: list[dict[str, Any]]) -> dict[str, Any]:
    """Totals shown on the agent dashboard. Average rating is rounded to one decimal."""
    ratings = [review["rating"] for review in agent_reviews if isinstance(review.get("rating"), (int, float))]
    return {
        "totalProperties": len(listings),
        "activeListings": sum(1 for record in listings if record.get("status") == "ACTIVE"),
        "totalReviews": len(agent_reviews),
        "averageRating": round(sum(ratings) / len(ratings), 1) if ratings else 0,
    }


@agents.command("dashboard")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@pass_options
def agents_dashboard(options: RuntimeOptions, as_json: bool) -> None:
    """Show your agent profile, listings, reviews and totals."""

    async def _dashboard(rt: Runtime) -> tuple[dict[str, Any], list[Any], list[Any]]:
        rt.session.require_role(Role.AGENT)
        async with ScreenScope("agent-dashboard") as scope:
            profile = await scope.run(retry_read(rt.api.get_agent_profile))
            agent_id = profile.get("id")
            if agent_id is None:
                raise click.ClickException("Your agent profile is not set up yet.")
            listings, agent_reviews = await scope.gather(
                retry_read(lambda: rt.api.get_agent_properties(agent_id)),
                retry_read(lambda: rt.api.get_agent_reviews(agent_id)),
            )
        return profile, listings, agent_reviews

    profile, listings, agent_reviews = run_command(options, _dashboard)
    stats = dashboard_stats(listings, agent_reviews)

    if as_json:
        click.echo(
            json.dumps({"agent": profile, "stats": stats, "properties": listings, "reviews": agent_reviews}, indent=2)
        )
        return

    click.echo(style_header(_agent_name(profile)))
    click.echo(f"  Listings: {stats['totalProperties']} ({stats['activeListings']} active)")
    click.echo(f"  Reviews:  {stats['totalReviews']} (average {stats['averageRating']})")

    click.echo()
    click.echo(style_label("Listings") + f" {len(listings)}")
    for record in listings:
        status = record.get("status", "?")
        click.echo(f"  [{record.get('id', '?')}] {record.get('title', '?')}  {format_price(record.get('price'))}  {status}")
    if not listings:
        click.echo(style_dim("  No listings yet. Add one with 'homesphere properties create'."))
