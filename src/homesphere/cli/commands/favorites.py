"""Favorites commands for homesphere CLI.

Commands:
    favorites list   - Show saved properties
    favorites add    - Save a property
    favorites remove - Unsave a property
    favorites toggle - Flip the saved state of a property
"""

from __future__ import annotations

__all__ = ["favorites"]

import json
from collections.abc import Awaitable, Callable
from typing import Any

import click

from homesphere.sync import FavoritesController, ScreenScope

from ..runtime import Runtime, RuntimeOptions, pass_options, require_signed_in, run_command
from ..styling import format_price, style_dim, style_label, style_success


def _with_favorites(
    options: RuntimeOptions,
    action: Callable[[Runtime, FavoritesController], Awaitable[Any]],
) -> Any:
    async def _run(rt: Runtime) -> Any:
        require_signed_in(rt)
        async with ScreenScope("favorites") as scope:
            controller = FavoritesController(rt.api, rt.session, scope)
            await controller.refresh()
            return await action(rt, controller)

    return run_command(options, _run)


@click.group()
def favorites() -> None:
    """Saved property commands (requires sign-in)."""
    pass


@favorites.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@pass_options
def favorites_list(options: RuntimeOptions, as_json: bool) -> None:
    """List saved properties."""

    async def _list(rt: Runtime) -> list[dict[str, Any]]:
        require_signed_in(rt)
        return await rt.api.get_favorites()

    items = run_command(options, _list)

    if as_json:
        click.echo(json.dumps(items, indent=2))
        return

    if not items:
        click.echo(style_dim("No saved properties."))
        return

    click.echo("\n" + style_label("Saved properties") + f" {len(items)}\n")
    for item in items:
        click.echo(f"  [{item.get('id', '?')}] {item.get('title', '?')}  {format_price(item.get('price'))}")
    click.echo()


@favorites.command("add")
@click.argument("property_id")
@pass_options
def favorites_add(options: RuntimeOptions, property_id: str) -> None:
    """Save a property."""

    async def _add(rt: Runtime, controller: FavoritesController) -> bool:
        if controller.is_favorite(property_id):
            return False
        await controller.add(property_id)
        return True

    if _with_favorites(options, _add):
        click.echo(style_success(f"Saved property {property_id}"))
    else:
        click.echo(style_dim(f"Property {property_id} is already saved."))


@favorites.command("remove")
@click.argument("property_id")
@pass_options
def favorites_remove(options: RuntimeOptions, property_id: str) -> None:
    """Unsave a property."""

    async def _remove(rt: Runtime, controller: FavoritesController) -> bool:
        if not controller.is_favorite(property_id):
            return False
        await controller.remove(property_id)
        return True

    if _with_favorites(options, _remove):
        click.echo(style_success(f"Removed property {property_id} from favorites"))
    else:
        click.echo(style_dim(f"Property {property_id} is not saved."))


@favorites.command("toggle")
@click.argument("property_id")
@pass_options
def favorites_toggle(options: RuntimeOptions, property_id: str) -> None:
    """Save the property if unsaved, unsave it otherwise."""

    async def _toggle(rt: Runtime, controller: FavoritesController) -> bool:
        return await controller.toggle(property_id)

    if _with_favorites(options, _toggle):
        click.echo(style_success(f"Saved property {property_id}"))
    else:
        click.echo(style_success(f"Removed property {property_id} from favorites"))
