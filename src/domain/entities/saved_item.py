"""Saved item domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

# Width of the product_id columns
MAX_PRODUCT_ID_LENGTH = 255


@dataclass
class SavedItem:
    """A product a profile has saved, with the product data captured at save time."""

    profile_id: UUID
    product_id: str
    product: dict[str, Any] = field(default_factory=dict)
    saved_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Keep the snapshot's id in step with the key and flag it as saved."""
        self.product = {**self.product, "id": self.product_id, "saved": True}
