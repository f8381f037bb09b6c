"""Profile repository protocol."""

from typing import Any, Protocol
from uuid import UUID

from domain.entities.profile import Profile


class IProfileRepository(Protocol):
    """Repository interface for Profile entities and follow edges."""

    async def get(self, id: UUID) -> Profile | None:
        """Get a profile by internal ID."""
        ...

    async def get_by_external_id(self, external_id: str) -> Profile | None:
        """Get a profile by the identity provider's subject."""
        ...

    async def get_by_username(self, username: str) -> Profile | None:
        """Get a profile by username."""
        ...

    async def get_many(self, ids: list[UUID]) -> list[Profile]:
        """Get profiles by internal ID in a single query."""
        ...

    async def search_public(self, query: str, limit: int) -> list[Profile]:
        """Public profiles whose username or display name contains query, most followed first."""
        ...

    async def create(self, profile: Profile) -> Profile:
        """Insert a profile. Raises ConflictError on a duplicate external ID."""
        ...

    async def update(self, profile: Profile) -> Profile:
        """Persist editable profile fields."""
        ...

    async def set_data(self, id: UUID, data: dict[str, Any]) -> None:
        """Replace the preference blob."""
        ...

    async def claim_collection_seeding(self, id: UUID) -> bool:
        """Flip collections_seeded false -> true; True only for the caller that flipped it."""
        ...

    async def get_follow(self, follower_id: UUID, following_id: UUID) -> bool:
        """Whether follower_id currently follows following_id."""
        ...

    async def add_follow(self, follower_id: UUID, following_id: UUID) -> None:
        """Insert a follow edge and bump both counters."""
        ...

    async def remove_follow(self, follower_id: UUID, following_id: UUID) -> bool:
        """Delete a follow edge and decrement both counters if it existed."""
        ...
