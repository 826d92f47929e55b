"""Combined property listing with favorite flags.

Properties and favorites are independent reads, so they are fetched
concurrently and the view is built only once both have arrived.
"""

from __future__ import annotations

__all__ = [
    "ListingItem",
    "load_listing",
]

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from homesphere.models import property_id

if TYPE_CHECKING:
    from homesphere.gateway.api import HomeSphereAPI
    from homesphere.sync.favorites import FavoritesController
    from homesphere.sync.scope import ScreenScope


@dataclass(frozen=True)
class ListingItem:
    """One property row and whether it is a favorite."""

    property_id: str
    record: dict[str, Any]
    is_favorite: bool


async def load_listing(
    api: "HomeSphereAPI",
    favorites: "FavoritesController",
    scope: "ScreenScope",
    params: Mapping[str, Any] | None = None,
) -> list[ListingItem]:
    """Fetch properties and favorites together.

    Args:
        api: Gateway facade.
        favorites: The screen's favorites controller; refreshed as a side effect.
        scope: The screen's scope; closing it cancels both requests.
        params: Property filters, forwarded as query parameters.

    Returns:
        Listing rows in server order.
    """
    properties, favorite_ids = await scope.gather(
        api.get_properties(params),
        favorites.refresh(),
    )
    items: list[ListingItem] = []
    for record in properties:
        pid = property_id(record)
        items.append(ListingItem(property_id=pid, record=record, is_favorite=pid in favorite_ids))
    return items
