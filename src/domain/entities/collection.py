"""Collection domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

from domain.entities.saved_item import SavedItem

# (name, color) pairs materialised the first time a profile lists its collections
DEFAULT_COLLECTIONS: tuple[tuple[str, str], ...] = (
    ("Summer Essentials", "bg-amber-500"),
    ("Work Outfits", "bg-blue-500"),
    ("Casual Weekend", "bg-green-500"),
    ("Evening Wear", "bg-purple-500"),
    ("Wishlist", "bg-pink-500"),
)

DEFAULT_COLOR = "#3b82f6"


@dataclass
class Collection:
    """Domain entity for a named grouping of saved products."""

    profile_id: UUID
    name: str
    id: UUID = field(default_factory=uuid4)
    color: str = DEFAULT_COLOR
    description: str | None = None
    custom_banner_url: str | None = None
    is_public: bool = True
    item_ids: list[str] = field(default_factory=list)
    position: int = 0
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def item_count(self) -> int:
        return len(self.item_ids)

    @property
    def should_be_posted(self) -> bool:
        """Whether this collection warrants a community post."""
        return self.is_public and self.item_count > 0

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at


@dataclass(frozen=True, slots=True)
class CollectionOwner:
    """Read-only summary of the profile that owns a collection."""

    id: UUID
    username: str
    display_name: str
    avatar_url: str | None = None


@dataclass(frozen=True, slots=True)
class CollectionDetail:
    """Read-only value object: a Collection with its resolved saved items."""

    collection: Collection
    items: list[SavedItem]
    owner: CollectionOwner | None = None
