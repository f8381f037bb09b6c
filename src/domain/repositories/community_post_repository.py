"""Community post repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.community_post import CommunityPost


class ICommunityPostRepository(Protocol):
    """Repository interface for CommunityPost entities."""

    async def get_for_collection(
        self, profile_id: UUID, collection_id: UUID
    ) -> CommunityPost | None:
        """Get the post projected from a collection, if any."""
        ...

    async def get_public(self, limit: int, offset: int) -> list[CommunityPost]:
        """Get public posts, newest first."""
        ...

    async def get_public_for_profile(self, profile_id: UUID, limit: int) -> list[CommunityPost]:
        """Get one profile's public posts, newest first."""
        ...

    async def create(self, post: CommunityPost) -> CommunityPost:
        """Insert a post. Raises ConflictError if the collection already has one."""
        ...

    async def update(self, post: CommunityPost) -> CommunityPost:
        """Persist title and description."""
        ...

    async def delete_for_collection(self, profile_id: UUID, collection_id: UUID) -> bool:
        """Delete the post projected from a collection."""
        ...
