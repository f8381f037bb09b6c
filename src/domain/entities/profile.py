"""Profile domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from domain.entities.collection import Collection, CollectionOwner
from domain.entities.community_post import CommunityPost

DEFAULT_DISPLAY_NAME = "User"

# Preference document served for profiles that have not filled one in yet
DEFAULT_PREFERENCES: dict[str, Any] = {
    "age": "",
    "gender": "",
    "bodyType": "",
    "style": [],
    "budgetRange": [],
    "shoppingSources": [],
    "lifestyle": "",
    "goals": [],
    "height": "",
    "heightUnit": "feet",
    "weight": "",
    "weightUnit": "lbs",
    "shoeSize": "",
    "shoeSizeUnit": "US",
    "waistSize": "",
    "chestSize": "",
    "hipSize": "",
    "allergies": "",
    "notes": "",
}


def default_username(external_id: str) -> str:
    """Derive the initial username from the tail of the external identity."""
    return f"user_{external_id[-8:]}"


@dataclass
class Profile:
    """Domain entity for a user profile, keyed by an external identity."""

    external_id: str
    username: str
    id: UUID = field(default_factory=uuid4)
    display_name: str = DEFAULT_DISPLAY_NAME
    bio: str | None = None
    avatar_url: str | None = None
    data: dict[str, Any] = field(default_factory=dict)
    is_public: bool = True
    follower_count: int = 0
    following_count: int = 0
    collections_seeded: bool = False
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @classmethod
    def for_external_id(cls, external_id: str) -> "Profile":
        """Build the profile created on first resolution of an identity."""
        return cls(external_id=external_id, username=default_username(external_id))

    def preferences(self) -> dict[str, Any]:
        """Stored preference fields layered over the defaults."""
        return {**DEFAULT_PREFERENCES, **(self.data or {})}

    def owner_summary(self) -> CollectionOwner:
        return CollectionOwner(
            id=self.id,
            username=self.username,
            display_name=self.display_name,
            avatar_url=self.avatar_url,
        )

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at


@dataclass(frozen=True, slots=True)
class PublicProfile:
    """Read-only view of a public profile with what it has published."""

    profile: Profile
    collections: list[Collection]
    posts: list[CommunityPost]
