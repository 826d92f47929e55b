"""Authentication commands for homesphere CLI.

Commands:
    auth login    - Sign in with email and password
    auth register - Create an account (agents supply business details)
    auth logout   - Sign out and clear the stored session
    auth status   - Show who is signed in
"""

from __future__ import annotations

__all__ = ["auth"]

import json
from typing import Any

import click

from homesphere.models import Role
from homesphere.validation import build_registration, validate_credentials

from ..runtime import Runtime, RuntimeOptions, pass_options, run_command
from ..styling import style_dim, style_label, style_success


@click.group()
def auth() -> None:
    """Authentication commands."""
    pass


@auth.command()
@click.option("--email", prompt=True, help="Account email")
@click.option("--password", prompt=True, hide_input=True, help="Account password")
@pass_options
def login(options: RuntimeOptions, email: str, password: str) -> None:
    """Sign in and store the session.

    The session is kept in your OS keychain (or an encrypted file when no
    keychain is available) until you log out or the server rejects it.
    """

    async def _login(rt: Runtime) -> None:
        session = await rt.session.login(validate_credentials(email, password))
        click.echo(click.style(style_success(f"Signed in as {session.user.display_name}"), bold=True))
        click.echo(f"  Role: {session.user.role.value}")

    run_command(options, _login)


@auth.command()
@click.option(
    "--role",
    type=click.Choice([role.value for role in Role if role is not Role.ADMIN], case_sensitive=False),
    default=Role.USER.value,
    show_default=True,
    help="Account type",
)
@click.option("--first-name", prompt=True)
@click.option("--last-name", prompt=True)
@click.option("--email", prompt=True)
@click.option("--phone", prompt=True)
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
@pass_options
def register(
    options: RuntimeOptions,
    role: str,
    first_name: str,
    last_name: str,
    email: str,
    phone: str,
    password: str,
) -> None:
    """Create an account and sign in.

    Agents are additionally asked for business and bank details.
    """
    form: dict[str, Any] = {
        "firstName": first_name,
        "lastName": last_name,
        "email": email,
        "phone": phone,
        "password": password,
        # click already checked the confirmation prompt
        "confirmPassword": password,
    }
    if Role.parse(role) is Role.AGENT:
        form["businessName"] = click.prompt("Business name")
        form["registrationNumber"] = click.prompt("Registration number")
        form["yearsOfExperience"] = click.prompt("Years of experience", default="", show_default=False)
        form["bankName"] = click.prompt("Bank name")
        form["accountNumber"] = click.prompt("Account number")

    async def _register(rt: Runtime) -> None:
        session = await rt.session.register(build_registration(form, role))
        click.echo(click.style(style_success(f"Welcome, {session.user.display_name}"), bold=True))
        click.echo(f"  Role: {session.user.role.value}")

    run_command(options, _register)


@auth.command()
@pass_options
def logout(options: RuntimeOptions) -> None:
    """Sign out.

    The stored session is removed even when the server cannot be reached.
    """

    async def _logout(rt: Runtime) -> bool:
        was_signed_in = rt.session.is_authenticated
        await rt.session.logout()
        return was_signed_in

    if run_command(options, _logout):
        click.echo(style_success("Signed out"))
    else:
        click.echo(style_dim("Not signed in."))


@auth.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@pass_options
def status(options: RuntimeOptions, as_json: bool) -> None:
    """Show the signed-in user (no network call)."""

    async def _status(rt: Runtime) -> dict[str, Any] | None:
        user = rt.session.current_user
        if user is None:
            return None
        return user.model_dump(mode="json", by_alias=True)

    profile = run_command(options, _status)

    if as_json:
        click.echo(json.dumps({"authenticated": profile is not None, "user": profile}, indent=2))
        return

    if profile is None:
        click.echo(style_dim("Not signed in."))
        return

    name = " ".join(part for part in (profile.get("firstName"), profile.get("lastName")) if part)
    click.echo(style_label("Signed in as") + f" {name or profile.get('email')}")
    click.echo(f"  Email: {profile.get('email') or '?'}")
    click.echo(f"  Role:  {profile.get('role')}")
