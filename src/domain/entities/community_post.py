"""Community post domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

from domain.entities.collection import Collection, CollectionOwner
from domain.entities.saved_item import SavedItem

POST_TYPE_COLLECTION = "collection"

# Product snapshots shown with a collection post in the feed
FEED_PREVIEW_SIZE = 6


def collection_post_title(collection_name: str) -> str:
    return f"✨ {collection_name}"


def collection_post_description(description: str | None, item_count: int) -> str:
    return description or f"Check out my curated collection of {item_count} items!"


@dataclass
class CommunityPost:
    """Public post derived from a public, non-empty collection."""

    profile_id: UUID
    collection_id: UUID
    title: str
    description: str
    id: UUID = field(default_factory=uuid4)
    post_type: str = POST_TYPE_COLLECTION
    is_public: bool = True
    like_count: int = 0
    comment_count: int = 0
    view_count: int = 0
    share_count: int = 0
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)


@dataclass(frozen=True, slots=True)
class FeedPost:
    """Read-only value object: a post as rendered in the community feed.

    Carries the author summary, the source collection and the first few
    saved products of that collection.
    """

    post: CommunityPost
    author: CollectionOwner | None = None
    collection: Collection | None = None
    preview: list[SavedItem] = field(default_factory=list)
