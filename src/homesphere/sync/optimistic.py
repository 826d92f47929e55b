"""Optimistic local updates with rollback.

The one place the snapshot/apply/effect/rollback sequence is written:

1. snapshot the current state
2. apply the intended change locally, so the view updates immediately
3. await the remote effect
4. on failure (or cancellation) restore the state and re-raise

On success nothing else happens: the optimistic state already matches what
the server now holds.
"""

from __future__ import annotations

__all__ = ["optimistic_update"]

from collections.abc import Awaitable, Callable
from typing import TypeVar

S = TypeVar("S")
T = TypeVar("T")


async def optimistic_update(
    read: Callable[[], S],
    write: Callable[[S], None],
    mutate: Callable[[S], S],
    effect: Callable[[], Awaitable[T]],
    *,
    revert: Callable[[S, S], S] | None = None,
) -> T:
    """Apply ``mutate`` locally, run ``effect``, roll back if it fails.

    Args:
        read: Returns the current local state.
        write: Replaces the local state.
        mutate: Pure function producing the tentative state from the snapshot.
        effect: Zero-argument coroutine factory performing the remote write.
        revert: Optional ``(snapshot, current) -> restored`` used instead of
            restoring the snapshot wholesale. Lets concurrent optimistic
            changes to other parts of the state survive this rollback.

    Returns:
        Whatever ``effect`` returned.

    Raises:
        Whatever ``effect`` raised, after the rollback.
    """
    snapshot = read()
    write(mutate(snapshot))
    try:
        return await effect()
    except BaseException:
        write(revert(snapshot, read()) if revert else snapshot)
        raise
