"""Property listing commands for homesphere CLI.

Commands:
    properties list - Browse listings, optionally filtered
    properties show - Show one property with its reviews
    properties create - List a new property (agents only)
    properties update - Edit one of your listings (agents only)
    properties delete - Remove one of your listings (agents only)
"""

from __future__ import annotations

__all__ = ["properties"]

import json
from typing import Any

import click

from homesphere.gateway.retry import retry_read
from homesphere.models import Role
from homesphere.sync import FavoritesController, ScreenScope, load_listing
from homesphere.validation import build_property_payload

from ..runtime import Runtime, RuntimeOptions, pass_options, run_command
from ..styling import (
    format_price,
    format_rating,
    style_dim,
    style_favorite,
    style_header,
    style_label,
    style_success,
)


def _parse_filters(values: tuple[str, ...]) -> dict[str, str]:
    filters: dict[str, str] = {}
    for value in values:
        key, sep, raw = value.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"expected key=value, got {value!r}", param_hint="--filter")
        filters[key.strip()] = raw.strip()
    return filters


def _location(record: dict[str, Any]) -> str:
    return ", ".join(str(record[field]) for field in ("city", "state") if record.get(field))


@click.group()
def properties() -> None:
    """Property listing commands."""
    pass


@properties.command("list")
@click.option(
    "--filter",
    "filters",
    multiple=True,
    metavar="KEY=VALUE",
    help="Query filter, repeatable (e.g. city=Lagos, propertyType=HOUSE)",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@pass_options
def properties_list(options: RuntimeOptions, filters: tuple[str, ...], as_json: bool) -> None:
    """List properties. Favorites are starred when signed in."""
    params = _parse_filters(filters)

    async def _list(rt: Runtime) -> list[dict[str, Any]]:
        async with ScreenScope("properties") as scope:
            favorites = FavoritesController(rt.api, rt.session, scope)
            items = await retry_read(lambda: load_listing(rt.api, favorites, scope, params))
        return [{**item.record, "isFavorite": item.is_favorite} for item in items]

    rows = run_command(options, _list)

    if as_json:
        click.echo(json.dumps(rows, indent=2))
        return

    if not rows:
        click.echo(style_dim("No properties match."))
        return

    click.echo("\n" + style_label("Properties") + f" {len(rows)}\n")
    for row in rows:
        click.echo(f" {style_favorite(row['isFavorite'])} [{row['id']}] {row.get('title', '?')}")
        click.echo(f"     {format_price(row.get('price'))}  {_location(row)}")
    click.echo()


@properties.command("show")
@click.argument("property_id")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@pass_options
def properties_show(options: RuntimeOptions, property_id: str, as_json: bool) -> None:
    """Show one property and its reviews."""

    async def _show(rt: Runtime) -> tuple[dict[str, Any], list[dict[str, Any]]]:
        async with ScreenScope("property-details") as scope:
            record, reviews = await scope.gather(
                retry_read(lambda: rt.api.get_property(property_id)),
                retry_read(lambda: rt.api.get_property_reviews(property_id)),
            )
        return record, reviews

    record, reviews = run_command(options, _show)

    if as_json:
        click.echo(json.dumps({"property": record, "reviews": reviews}, indent=2))
        return

    click.echo(style_header(str(record.get("title", property_id))))
    click.echo(f"  Price:    {format_price(record.get('price'))}")
    click.echo(f"  Type:     {record.get('propertyType', '?')}")
    click.echo(f"  Address:  {record.get('address', '?')}, {_location(record)}")
    for label, field in (("Bedrooms", "bedrooms"), ("Bathrooms", "bathrooms"), ("Sq. ft", "squareFootage")):
        if record.get(field) is not None:
            click.echo(f"  {label + ':':<9} {record[field]}")
    if record.get("description"):
        click.echo()
        click.echo(f"  {record['description']}")

    click.echo()
    if not reviews:
        click.echo(style_dim("No reviews yet."))
        return
    click.echo(style_label("Reviews") + f" {len(reviews)}")
    for review in reviews:
        click.echo(f"  {format_rating(review.get('rating'))}  {review.get('comment', '')}")


PROPERTY_TYPES = ("apartment", "house", "duplex", "bungalow", "land", "commercial")
LISTING_STATUSES = ("ACTIVE", "PENDING", "SOLD", "INACTIVE")

# (option name, form field, help)
_FORM_OPTIONS: tuple[tuple[str, str, str], ...] = (
    ("--title", "title", "Listing title"),
    ("--address", "address", "Street address"),
    ("--city", "city", "City"),
    ("--state", "state", "State, e.g. Lagos"),
    ("--zip-code", "zipCode", "Postal code"),
    ("--price", "price", "Asking price"),
    ("--bedrooms", "bedrooms", "Number of bedrooms"),
    ("--bathrooms", "bathrooms", "Number of bathrooms"),
    ("--square-footage", "squareFootage", "Floor area in square feet"),
    ("--description", "description", "Free-text description"),
)
_FORM_FIELDS = tuple(field for _, field, _ in _FORM_OPTIONS) + ("propertyType", "status")


def _form_options(command: Any) -> Any:
    """Attach one option per property form field."""
    for option, field, help_text in reversed(_FORM_OPTIONS):
        command = click.option(option, field, default=None, help=help_text)(command)
    command = click.option(
        "--type",
        "propertyType",
        type=click.Choice(PROPERTY_TYPES, case_sensitive=False),
        default=None,
        help="Property type",
    )(command)
    return click.option(
        "--status",
        type=click.Choice(LISTING_STATUSES, case_sensitive=False),
        default=None,
        help="Listing status (default ACTIVE)",
    )(command)


def _given(fields: dict[str, Any]) -> dict[str, Any]:
    form = {key: value for key, value in fields.items() if value is not None}
    if "status" in form:
        form["status"] = form["status"].upper()
    if "propertyType" in form:
        form["propertyType"] = form["propertyType"].lower()
    return form


@properties.command("create")
@_form_options
@pass_options
def properties_create(options: RuntimeOptions, **fields: Any) -> None:
    """List a new property. It is reviewed by an admin before it is published."""

    async def _create(rt: Runtime) -> dict[str, Any]:
        rt.session.require_role(Role.AGENT)
        payload = build_property_payload(_given(fields))
        return await rt.api.create_property(payload)

    record = run_command(options, _create)
    click.echo(style_success(f"Created property {record.get('id', '')}".rstrip()))
    click.echo(style_dim("It will be reviewed by an admin before being published."))


@properties.command("update")
@click.argument("property_id")
@_form_options
@pass_options
def properties_update(options: RuntimeOptions, property_id: str, **fields: Any) -> None:
    """Edit a listing. Fields not given keep their current values."""

    async def _update(rt: Runtime) -> dict[str, Any]:
        rt.session.require_role(Role.AGENT)
        current = await retry_read(lambda: rt.api.get_property(property_id))
        form = {field: current.get(field) for field in _FORM_FIELDS if current.get(field) is not None}
        form.update(_given(fields))
        return await rt.api.update_property(property_id, build_property_payload(form))

    run_command(options, _update)
    click.echo(style_success(f"Updated property {property_id}"))


@properties.command("delete")
@click.argument("property_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@pass_options
def properties_delete(options: RuntimeOptions, property_id: str, yes: bool) -> None:
    """Remove a listing."""
    if not yes:
        click.confirm(f"Delete property {property_id}?", abort=True)

    async def _delete(rt: Runtime) -> None:
        rt.session.require_role(Role.AGENT)
        await rt.api.delete_property(property_id)

    run_command(options, _delete)
    click.echo(style_success(f"Deleted property {property_id}"))
