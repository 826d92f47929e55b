"""Review commands for homesphere CLI.

Commands:
    reviews list    - List reviews, all or for one property
    reviews submit  - Review a property (requires sign-in)
    reviews like    - Like a review
    reviews dislike - Dislike a review
"""

from __future__ import annotations

__all__ = ["reviews"]

import json
from typing import Any

import click

from homesphere.constants import MAX_RATING, MIN_RATING
from homesphere.validation import build_review_payload

from ..runtime import Runtime, RuntimeOptions, pass_options, require_signed_in, run_command
from ..styling import format_rating, style_dim, style_label, style_success


@click.group()
def reviews() -> None:
    """Review commands."""
    pass


@reviews.command("list")
@click.option("--property", "property_id", default=None, help="Only reviews of this property")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@pass_options
def reviews_list(options: RuntimeOptions, property_id: str | None, as_json: bool) -> None:
    """List reviews."""

    async def _list(rt: Runtime) -> list[dict[str, Any]]:
        if property_id is not None:
            return await rt.api.get_property_reviews(property_id)
        return await rt.api.get_reviews()

    items = run_command(options, _list)

    if as_json:
        click.echo(json.dumps(items, indent=2))
        return

    if not items:
        click.echo(style_dim("No reviews."))
        return

    click.echo("\n" + style_label("Reviews") + f" {len(items)}\n")
    for review in items:
        click.echo(f"  [{review.get('id', '?')}] {format_rating(review.get('rating'))}")
        click.echo(f"    {review.get('comment', '')}")
    click.echo()


@reviews.command("submit")
@click.option("--property", "property_id", required=True, help="Property being reviewed")
@click.option(
    "--rating",
    type=click.IntRange(MIN_RATING, MAX_RATING),
    prompt=f"Rating ({MIN_RATING}-{MAX_RATING})",
)
@click.option("--comment", prompt=True)
@pass_options
def reviews_submit(options: RuntimeOptions, property_id: str, rating: int, comment: str) -> None:
    """Submit a review of a property."""
    async def _submit(rt: Runtime) -> dict[str, Any]:
        payload = build_review_payload(rating, comment, property_id)
        require_signed_in(rt)
        return await rt.api.submit_review(payload)

    run_command(options, _submit)
    click.echo(style_success("Review submitted"))


@reviews.command("like")
@click.argument("review_id")
@pass_options
def reviews_like(options: RuntimeOptions, review_id: str) -> None:
    """Like a review."""

    async def _like(rt: Runtime) -> Any:
        require_signed_in(rt)
        return await rt.api.like_review(review_id)

    run_command(options, _like)
    click.echo(style_success(f"Liked review {review_id}"))


@reviews.command("dislike")
@click.argument("review_id")
@pass_options
def reviews_dislike(options: RuntimeOptions, review_id: str) -> None:
    """Dislike a review."""

    async def _dislike(rt: Runtime) -> Any:
        require_signed_in(rt)
        return await rt.api.dislike_review(review_id)

    run_command(options, _dislike)
    click.echo(style_success(f"Disliked review {review_id}"))
