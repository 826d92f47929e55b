"""Wiring for one CLI invocation.

Every command builds the same chain, config -> store -> gateway -> session,
runs one coroutine inside it and tears it down again:

    run_command(options, lambda rt: rt.api.get_properties())

Errors from the package are turned into click.ClickException so the user
sees a single line instead of a traceback.
"""

from __future__ import annotations

__all__ = [
    "Runtime",
    "RuntimeOptions",
    "open_runtime",
    "pass_options",
    "require_signed_in",
    "run_command",
]

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TypeVar

import click
import httpx

from homesphere.config import AppConfig, load_config
from homesphere.exceptions import HomeSphereError
from homesphere.gateway import GatewayClient, HomeSphereAPI
from homesphere.models import UserProfile
from homesphere.session import SessionManager
from homesphere.storage import KeyValueStore, MemoryStore, SessionStore, create_store
from homesphere.telemetry.system_logger import configure_system_logger_file, set_console_level

T = TypeVar("T")


@dataclass
class RuntimeOptions:
    """Per-invocation settings, carried on the click context.

    Attributes:
        config_path: Config file; the platform default when None.
        ephemeral: Keep the session in memory only.
        config: Preloaded config; skips reading config_path.
        store: Storage backend to use instead of the configured one.
        transport: httpx transport override.
        verbose: --verbose was given; overrides the configured console level.
    """

    config_path: Path | None = None
    ephemeral: bool = False
    config: AppConfig | None = None
    store: KeyValueStore | None = None
    transport: httpx.AsyncBaseTransport | None = None
    verbose: bool = False


pass_options = click.make_pass_decorator(RuntimeOptions, ensure=True)


@dataclass
class Runtime:
    config: AppConfig
    api: HomeSphereAPI
    session: SessionManager


@asynccontextmanager
async def open_runtime(options: RuntimeOptions) -> AsyncIterator[Runtime]:
    """Build the client stack and restore any stored session.

    Raises:
        ConfigurationError: If the config file is invalid.
    """
    config = options.config or load_config(options.config_path)
    configure_system_logger_file(config.logging.system_log_path)
    if not options.verbose:
        set_console_level(getattr(logging, config.logging.log_level))

    if options.store is not None:
        store = options.store
    elif options.ephemeral:
        store = MemoryStore()
    else:
        store = create_store(config.storage)

    client = GatewayClient(
        config.api.base_url,
        timeout=config.api.timeout_seconds,
        transport=options.transport,
    )
    api = HomeSphereAPI(client)
    session = SessionManager(api, SessionStore(store))
    try:
        await session.initialize()
        yield Runtime(config=config, api=api, session=session)
    finally:
        session.close()
        await client.aclose()


def run_command(options: RuntimeOptions, action: Callable[[Runtime], Awaitable[T]]) -> T:
    """Run ``action`` inside a fresh runtime.

    Raises:
        click.ClickException: For any HomeSphereError.
    """

    async def _main() -> T:
        async with open_runtime(options) as runtime:
            return await action(runtime)

    try:
        return asyncio.run(_main())
    except HomeSphereError as e:
        raise click.ClickException(e.message) from e


def require_signed_in(runtime: Runtime) -> UserProfile:
    """Return the current user or stop with a hint to log in."""
    user = runtime.session.current_user
    if user is None:
        raise click.ClickException("Not signed in. Run 'homesphere auth login' first.")
    return user
