"""Pydantic schemas for Community API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel

from api.v1.schemas.collection import CollectionOwnerResponse, CollectionResponse
from api.v1.schemas.common import CamelModel
from domain.entities.community_post import CommunityPost, FeedPost


class CommunityPostResponse(CamelModel):
    """Schema for a community post."""

    id: UUID
    profile_id: UUID
    collection_id: UUID | None = None
    post_type: str
    title: str
    description: str | None = None
    is_public: bool
    like_count: int = 0
    comment_count: int = 0
    view_count: int = 0
    share_count: int = 0
    created_at: datetime

    @classmethod
    def from_entity(cls, post: CommunityPost) -> "CommunityPostResponse":
        return cls(
            id=post.id,
            profile_id=post.profile_id,
            collection_id=post.collection_id,
            post_type=post.post_type,
            title=post.title,
            description=post.description,
            is_public=post.is_public,
            like_count=post.like_count,
            comment_count=post.comment_count,
            view_count=post.view_count,
            share_count=post.share_count,
            created_at=post.created_at,
        )


class FeedCollectionResponse(CollectionResponse):
    """The source collection of a feed post, with a few product snapshots."""

    products: list[dict[str, Any]]


class FeedPostResponse(CommunityPostResponse):
    """A community post with what the feed needs to render it."""

    author: CollectionOwnerResponse | None = None
    collection: FeedCollectionResponse | None = None

    @classmethod
    def from_feed_post(cls, feed_post: FeedPost) -> "FeedPostResponse":
        base = CommunityPostResponse.from_entity(feed_post.post)
        collection = None
        if feed_post.collection:
            collection = FeedCollectionResponse(
                **CollectionResponse.from_entity(feed_post.collection).model_dump(),
                products=[item.product for item in feed_post.preview],
            )
        return cls(
            **base.model_dump(),
            author=(
                CollectionOwnerResponse.from_owner(feed_post.author) if feed_post.author else None
            ),
            collection=collection,
        )


class CommunityFeedResponse(BaseModel):
    """Schema for the community feed."""

    data: list[FeedPostResponse]
