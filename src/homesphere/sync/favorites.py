"""Per-screen favorites state.

The local set of favorite property ids is an optimistic cache of the
server's truth. Toggles show up immediately, are rolled back exactly when
the server refuses them, and refresh() converges the set to what the server
holds. Nothing is persisted locally; the set lives as long as its screen.

Several toggles of the same id may overlap. Until the last of them
resolves the id shows its optimistic status; then it shows the status the
server last accepted, so refused toggles leave no trace.
"""

from __future__ import annotations

__all__ = ["FavoritesController"]

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from homesphere.models import property_id
from homesphere.sync.optimistic import optimistic_update
from homesphere.telemetry.system_logger import get_logger

if TYPE_CHECKING:
    from homesphere.gateway.api import HomeSphereAPI
    from homesphere.session.manager import SessionManager
    from homesphere.sync.scope import ScreenScope

_logger = get_logger("sync")


class FavoritesController:
    """Favorite ids for one screen activation.

    Args:
        api: Gateway facade.
        session: Session manager; favorites are only fetched when signed in.
        scope: The screen's scope. Updates stop once it is closed.
    """

    def __init__(self, api: "HomeSphereAPI", session: "SessionManager", scope: "ScreenScope") -> None:
        self._api = api
        self._session = session
        self._scope = scope
        self._ids: frozenset[str] = frozenset()
        # Per id: writes in flight, and the status the server last agreed to
        self._pending: dict[str, int] = {}
        self._confirmed: dict[str, bool] = {}

    @property
    def ids(self) -> frozenset[str]:
        return self._ids

    def is_favorite(self, pid: Any) -> bool:
        return str(pid) in self._ids

    def _read(self) -> frozenset[str]:
        return self._ids

    def _write(self, ids: frozenset[str]) -> None:
        self._scope.apply_if_active(self._assign, ids)

    def _assign(self, ids: frozenset[str]) -> None:
        self._ids = ids

    async def refresh(self) -> frozenset[str]:
        """Replace the local set with the server's favorites.

        Signed-out users have no favorites; no request is made.
        """
        if not self._session.is_authenticated:
            self._write(frozenset())
            return self._ids

        items = await self._scope.run(self._api.get_favorites())
        self._write(frozenset(property_id(item) for item in items))
        return self._ids

    async def toggle(self, pid: Any) -> bool:
        """Flip favorite status optimistically.

        Returns:
            The new status (True when now a favorite).

        Raises:
            GatewayError: The server refused the change. The local set has
                already been restored.
        """
        key = str(pid)
        if key in self._ids:
            await self.remove(key)
            return False
        await self.add(key)
        return True

    async def add(self, pid: Any) -> None:
        key = str(pid)
        await self._apply(key, True, lambda: self._api.add_to_favorites(pid))

    async def remove(self, pid: Any) -> None:
        key = str(pid)
        await self._apply(key, False, lambda: self._api.remove_from_favorites(pid))

    async def _apply(self, key: str, favorite: bool, call: Callable[[], Awaitable[Any]]) -> None:
        if not self._pending.get(key):
            self._confirmed[key] = key in self._ids
        self._pending[key] = self._pending.get(key, 0) + 1

        def mutate(ids: frozenset[str]) -> frozenset[str]:
            return ids | {key} if favorite else ids - {key}

        def revert(snapshot: frozenset[str], current: frozenset[str]) -> frozenset[str]:
            # Left to _settle: other writes of this id may still be in flight
            return current

        try:
            await optimistic_update(
                self._read,
                self._write,
                mutate,
                lambda: self._scope.run(call()),
                revert=revert,
            )
            self._confirmed[key] = favorite
        except Exception as e:
            _logger.info(
                {
                    "event": "favorite_rolled_back",
                    "message": f"Favorite change for property {key} failed: {e}",
                    "property_id": key,
                    "error_type": type(e).__name__,
                }
            )
            raise
        finally:
            self._settle(key)

    def _settle(self, key: str) -> None:
        """Once no write of ``key`` is in flight, show its last confirmed status."""
        self._pending[key] -= 1
        if self._pending[key]:
            return
        del self._pending[key]
        confirmed = self._confirmed.pop(key)
        if (key in self._ids) != confirmed:
            self._write(self._ids | {key} if confirmed else self._ids - {key})
