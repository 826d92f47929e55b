"""Structured concurrency for one screen activation.

A ScreenScope owns every request a screen starts. Closing the scope
(screen teardown) cancels whatever is still in flight, so a late response
can never be applied to a screen that is gone.

Usage:
    async with ScreenScope("home") as scope:
        properties, favorites = await scope.gather(
            api.get_properties(),
            api.get_favorites(),
        )
"""

from __future__ import annotations

__all__ = ["ScreenScope"]

import asyncio
from collections.abc import Callable, Coroutine
from typing import Any, TypeVar

from homesphere.exceptions import ScopeClosedError
from homesphere.telemetry.system_logger import get_logger

T = TypeVar("T")

_logger = get_logger("sync")


class ScreenScope:
    """Tracks and cancels the tasks of one screen.

    Args:
        name: Screen name, for logs.
    """

    def __init__(self, name: str = "screen") -> None:
        self._name = name
        self._tasks: set[asyncio.Task[Any]] = set()
        self._closed = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_active(self) -> bool:
        return not self._closed

    @property
    def pending_count(self) -> int:
        return sum(1 for task in self._tasks if not task.done())

    def spawn(self, coro: Coroutine[Any, Any, T]) -> "asyncio.Task[T]":
        """Start ``coro`` as a task owned by this scope.

        Raises:
            ScopeClosedError: If the scope is already closed.
        """
        if self._closed:
            coro.close()
            raise ScopeClosedError(f"Screen scope '{self._name}' is closed")
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def run(self, coro: Coroutine[Any, Any, T]) -> T:
        """Run ``coro`` inside the scope and return its result.

        Raises:
            asyncio.CancelledError: If the scope is closed before it finishes.
        """
        return await self.spawn(coro)

    async def gather(self, *coros: Coroutine[Any, Any, Any]) -> list[Any]:
        """Run independent calls concurrently and wait for all of them.

        If one fails, the others are cancelled and the first error is raised,
        so callers never render half of a combined view.
        """
        tasks: list[asyncio.Task[Any]] = []
        try:
            for coro in coros:
                tasks.append(self.spawn(coro))
        except ScopeClosedError:
            for coro in coros[len(tasks) :]:
                coro.close()
            raise

        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    def apply_if_active(self, fn: Callable[..., Any], *args: Any) -> bool:
        """Call ``fn(*args)`` only while the scope is open.

        Returns:
            True if ``fn`` ran.
        """
        if self._closed:
            return False
        fn(*args)
        return True

    async def close(self) -> None:
        """Cancel in-flight tasks and refuse new ones. Idempotent."""
        if self._closed:
            return
        self._closed = True
        pending = [task for task in self._tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            _logger.debug(
                {
                    "event": "scope_closed",
                    "message": f"Cancelled {len(pending)} in-flight request(s) for '{self._name}'",
                }
            )

    async def __aenter__(self) -> "ScreenScope":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
