"""Pydantic schemas for Saved Items API."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from api.v1.schemas.common import CamelModel
from domain.entities.saved_item import SavedItem


class ProductPayload(BaseModel):
    """Product snapshot as sent by the client.

    Keys are stored as given; unknown keys are kept.
    """

    model_config = ConfigDict(
        extra="allow",
        json_schema_extra={
            "example": {
                "id": "sku-123",
                "title": "Linen Shirt",
                "price": 49.0,
                "brand": "Flair",
                "image": "https://cdn.example.com/sku-123.jpg",
                "link": "https://shop.example.com/sku-123",
            }
        },
    )

    id: str | int | None = None
    title: str | None = None
    price: float | str | None = None
    brand: str | None = None
    image: str | None = None
    link: str | None = None

    def to_product(self) -> dict[str, Any]:
        product = self.model_dump(exclude_none=True)
        if "id" in product:
            product["id"] = str(product["id"])
        return product


class SavedItemsReplace(CamelModel):
    """Schema for replacing the whole saved set."""

    items: list[ProductPayload] = Field(default_factory=list)


class SavedItemResponse(CamelModel):
    """Schema for a saved item."""

    product_id: str
    product: dict[str, Any]
    saved_at: datetime

    @classmethod
    def from_entity(cls, item: SavedItem) -> "SavedItemResponse":
        return cls(product_id=item.product_id, product=item.product, saved_at=item.saved_at)


class SavedItemListResponse(BaseModel):
    """Schema for list of saved items."""

    data: list[SavedItemResponse]


class SavedItemStatus(CamelModel):
    """Outcome of a save or unsave."""

    product_id: str
    saved: bool
    changed: bool


class SavedItemStatusResponse(BaseModel):
    """Schema for a save/unsave outcome."""

    data: SavedItemStatus
