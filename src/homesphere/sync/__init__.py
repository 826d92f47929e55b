"""Local view state kept in step with the server."""

from homesphere.sync.favorites import FavoritesController
from homesphere.sync.listing import ListingItem, load_listing
from homesphere.sync.optimistic import optimistic_update
from homesphere.sync.scope import ScreenScope

__all__ = [
    "FavoritesController",
    "ListingItem",
    "ScreenScope",
    "load_listing",
    "optimistic_update",
]
