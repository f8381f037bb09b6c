"""Collection repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.collection import Collection


class ICollectionRepository(Protocol):
    """Repository interface for Collection entities and their membership."""

    async def get_for_profile(self, profile_id: UUID, collection_id: UUID) -> Collection | None:
        """Get a collection only if it is owned by the profile."""
        ...

    async def get_public(self, collection_id: UUID) -> Collection | None:
        """Get a collection by ID only if it is public."""
        ...

    async def get_all_for_profile(self, profile_id: UUID) -> list[Collection]:
        """Get a profile's collections in creation order."""
        ...

    async def get_public_for_profile(self, profile_id: UUID) -> list[Collection]:
        """Get a profile's public collections, newest first."""
        ...

    async def get_many(self, collection_ids: list[UUID]) -> list[Collection]:
        """Get collections by ID in a single query, whoever owns them."""
        ...

    async def count_for_profile(self, profile_id: UUID) -> int:
        """Number of collections a profile owns."""
        ...

    async def create(self, collection: Collection) -> Collection:
        """Insert a collection together with its initial members."""
        ...

    async def update(self, collection: Collection) -> Collection:
        """Persist editable collection fields (not membership)."""
        ...

    async def delete(self, profile_id: UUID, collection_id: UUID) -> bool:
        """Delete an owned collection and its membership rows."""
        ...

    async def add_item(self, collection_id: UUID, product_id: str) -> bool:
        """Append a product; False if it was already a member."""
        ...

    async def remove_item(self, collection_id: UUID, product_id: str) -> bool:
        """Remove a product; False if it was not a member."""
        ...

    async def remove_product_everywhere(self, profile_id: UUID, product_id: str) -> list[UUID]:
        """Strip a product from all of a profile's collections; return affected IDs."""
        ...

    async def retain_products(self, profile_id: UUID, product_ids: set[str]) -> list[UUID]:
        """Drop members not in product_ids from a profile's collections; return affected IDs."""
        ...
