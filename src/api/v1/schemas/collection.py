"""Pydantic schemas for Collection API."""

from datetime import datetime
from typing import Annotated, Literal, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from api.v1.schemas.common import CamelModel
from api.v1.schemas.saved_item import SavedItemResponse
from domain.entities.collection import Collection, CollectionDetail, CollectionOwner


class CollectionFields(CamelModel):
    """Fields accepted when creating a collection."""

    name: str = Field(..., max_length=100)
    color: str | None = Field(None, max_length=50)
    description: str | None = None
    custom_banner: str | None = Field(None, max_length=1000)
    is_public: bool = True
    item_ids: list[str] = Field(default_factory=list)


class CreateCollectionAction(CamelModel):
    """``{"action": "create", "collection": {...}}``"""

    action: Literal["create"]
    collection: CollectionFields


class AddItemAction(CamelModel):
    """``{"action": "addItem", "itemId": ..., "collectionId": ...}``"""

    action: Literal["addItem"]
    item_id: str
    collection_id: UUID


class RemoveItemAction(CamelModel):
    """``{"action": "removeItem", "itemId": ..., "collectionId": ...}``"""

    action: Literal["removeItem"]
    item_id: str
    collection_id: UUID


CollectionAction = Annotated[
    Union[CreateCollectionAction, AddItemAction, RemoveItemAction],
    Field(discriminator="action"),
]


class CollectionUpdate(CamelModel):
    """Schema for patching a collection. Only sent fields are applied."""

    name: str | None = Field(None, max_length=100)
    color: str | None = Field(None, max_length=50)
    description: str | None = None
    custom_banner: str | None = Field(None, max_length=1000)
    is_public: bool | None = None


class CollectionResponse(CamelModel):
    """Schema for Collection response."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "name": "Wishlist",
                "color": "bg-pink-500",
                "description": None,
                "customBanner": None,
                "isPublic": True,
                "itemIds": ["sku-123"],
                "itemCount": 1,
                "createdAt": "2026-01-28T10:00:00",
                "updatedAt": "2026-01-28T10:00:00",
            }
        },
    )

    id: UUID
    name: str
    color: str
    description: str | None = None
    custom_banner: str | None = None
    is_public: bool
    item_ids: list[str]
    item_count: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, collection: Collection) -> "CollectionResponse":
        return cls(
            id=collection.id,
            name=collection.name,
            color=collection.color,
            description=collection.description,
            custom_banner=collection.custom_banner_url,
            is_public=collection.is_public,
            item_ids=list(collection.item_ids),
            item_count=collection.item_count,
            created_at=collection.created_at,
            updated_at=collection.updated_at,
        )


class CollectionOwnerResponse(CamelModel):
    """Public summary of a collection's owner."""

    id: UUID
    username: str
    display_name: str
    avatar_url: str | None = None

    @classmethod
    def from_owner(cls, owner: CollectionOwner) -> "CollectionOwnerResponse":
        return cls(
            id=owner.id,
            username=owner.username,
            display_name=owner.display_name,
            avatar_url=owner.avatar_url,
        )


class CollectionDetailData(CollectionResponse):
    """A collection with its saved items resolved."""

    items: list[SavedItemResponse]
    owner: CollectionOwnerResponse | None = None

    @classmethod
    def from_detail(cls, detail: CollectionDetail) -> "CollectionDetailData":
        base = CollectionResponse.from_entity(detail.collection)
        return cls(
            **base.model_dump(),
            items=[SavedItemResponse.from_entity(item) for item in detail.items],
            owner=CollectionOwnerResponse.from_owner(detail.owner) if detail.owner else None,
        )


class CollectionListResponse(BaseModel):
    """Schema for list of Collections."""

    data: list[CollectionResponse]


class CollectionDetailResponse(BaseModel):
    """Schema for single Collection."""

    data: CollectionResponse


class CollectionWithItemsResponse(BaseModel):
    """Schema for a Collection with its items."""

    data: CollectionDetailData
