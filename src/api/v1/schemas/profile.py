"""Pydantic schemas for Profile API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from api.v1.schemas.collection import CollectionResponse
from api.v1.schemas.common import CamelModel
from api.v1.schemas.community import CommunityPostResponse
from domain.entities.profile import Profile, PublicProfile


class ProfileUpdate(CamelModel):
    """Schema for patching the caller's profile."""

    username: str | None = Field(None, min_length=3, max_length=100, pattern=r"^[A-Za-z0-9_.]+$")
    display_name: str | None = Field(None, min_length=1, max_length=100)
    bio: str | None = Field(None, max_length=500)
    avatar_url: str | None = Field(None, max_length=500)
    is_public: bool | None = None


class ProfileResponse(CamelModel):
    """Schema for Profile response."""

    id: UUID
    username: str
    display_name: str
    bio: str | None = None
    avatar_url: str | None = None
    is_public: bool
    follower_count: int
    following_count: int
    created_at: datetime

    @classmethod
    def from_entity(cls, profile: Profile) -> "ProfileResponse":
        return cls(
            id=profile.id,
            username=profile.username,
            display_name=profile.display_name,
            bio=profile.bio,
            avatar_url=profile.avatar_url,
            is_public=profile.is_public,
            follower_count=profile.follower_count,
            following_count=profile.following_count,
            created_at=profile.created_at,
        )


class ProfileDetailResponse(BaseModel):
    """Schema for single Profile."""

    data: ProfileResponse


class ProfileListResponse(BaseModel):
    """Schema for list of Profiles."""

    data: list[ProfileResponse]


class PublicProfileData(CamelModel):
    """A public profile with its public collections and posts."""

    profile: ProfileResponse
    collections: list[CollectionResponse]
    posts: list[CommunityPostResponse]

    @classmethod
    def from_view(cls, view: PublicProfile) -> "PublicProfileData":
        return cls(
            profile=ProfileResponse.from_entity(view.profile),
            collections=[CollectionResponse.from_entity(c) for c in view.collections],
            posts=[CommunityPostResponse.from_entity(p) for p in view.posts],
        )


class PublicProfileResponse(BaseModel):
    """Schema for a public profile view."""

    data: PublicProfileData


class PreferencesResponse(BaseModel):
    """Schema for the preference document."""

    data: dict[str, Any]
