"""Contact command for homesphere CLI."""

from __future__ import annotations

__all__ = ["contact"]

from typing import Any

import click

from homesphere.validation import validate_contact

from ..runtime import Runtime, RuntimeOptions, pass_options, run_command
from ..styling import style_success


@click.command()
@click.option("--name", prompt=True)
@click.option("--email", prompt=True)
@click.option("--subject", prompt=True)
@click.option("--message", prompt=True)
@pass_options
def contact(options: RuntimeOptions, name: str, email: str, subject: str, message: str) -> None:
    """Send a message to the HomeSphere team."""
    form = {"name": name, "email": email, "subject": subject, "message": message}

    async def _send(rt: Runtime) -> Any:
        validate_contact(form)
        return await rt.api.submit_contact(form)

    run_command(options, _send)
    click.echo(style_success("Message sent. We'll get back to you soon."))
