"""Saved item repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.saved_item import SavedItem


class ISavedItemRepository(Protocol):
    """Repository interface for SavedItem entities."""

    async def get_all_for_profile(self, profile_id: UUID) -> list[SavedItem]:
        """Get all saved items for a profile, newest first."""
        ...

    async def get_many(self, profile_id: UUID, product_ids: list[str]) -> list[SavedItem]:
        """Get the profile's saved items among the given product IDs."""
        ...

    async def exists(self, profile_id: UUID, product_id: str) -> bool:
        """Whether the (profile, product) pair is saved."""
        ...

    async def create(self, item: SavedItem) -> SavedItem:
        """Insert a saved item. Raises ConflictError on a duplicate pair."""
        ...

    async def create_many(self, items: list[SavedItem]) -> list[SavedItem]:
        """Bulk insert saved items."""
        ...

    async def delete(self, profile_id: UUID, product_id: str) -> bool:
        """Delete one saved item and return whether it existed."""
        ...

    async def delete_all_for_profile(self, profile_id: UUID) -> int:
        """Delete every saved item of a profile and return the count."""
        ...
