"""Saved item service layer with business logic."""

from collections.abc import Callable
from typing import Any
from uuid import UUID

import structlog

from core.exceptions import ConflictError, ValidationError
from domain.entities.saved_item import MAX_PRODUCT_ID_LENGTH, SavedItem
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.community_post_projector import CommunityPostProjector

logger = structlog.get_logger()


def clean_product_id(value: object, field: str = "id") -> str:
    """Normalize a product id the way it is stored, rejecting blank or overlong ones."""
    product_id = str(value or "").strip()
    if not product_id:
        raise ValidationError("Product id is required", field=field)
    if len(product_id) > MAX_PRODUCT_ID_LENGTH:
        raise ValidationError(
            f"Product id must be at most {MAX_PRODUCT_ID_LENGTH} characters", field=field
        )
    return product_id


def _product_id(product: dict[str, Any]) -> str:
    return clean_product_id(product.get("id"))


class SavedItemService:
    """Service layer for a profile's saved products.

    Removing a saved product also removes it from every collection of the same
    profile, so a collection never references an unsaved product.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        projector: CommunityPostProjector,
    ) -> None:
        self._uow_factory = uow_factory
        self._projector = projector

    async def list_saved_items(self, profile_id: UUID) -> list[SavedItem]:
        """Get the profile's saved items, newest first."""
        async with self._uow_factory() as uow:
            return await uow.saved_items.get_all_for_profile(profile_id)  # type: ignore[no-any-return]

    async def add_saved_item(self, profile_id: UUID, product: dict[str, Any]) -> bool:
        """Save a product. Saving an already-saved product is a successful no-op.

        Returns:
            True if a new row was written, False if it was already saved.
        """
        product_id = _product_id(product)

        async with self._uow_factory() as uow:
            if await uow.saved_items.exists(profile_id, product_id):
                logger.info(
                    "saved_item_already_exists",
                    profile_id=str(profile_id),
                    product_id=product_id,
                )
                return False

            try:
                await uow.saved_items.create(
                    SavedItem(profile_id=profile_id, product_id=product_id, product=product)
                )
            except ConflictError:
                logger.info(
                    "saved_item_already_exists",
                    profile_id=str(profile_id),
                    product_id=product_id,
                )
                return False

            await uow.commit()
            logger.info("saved_item_added", profile_id=str(profile_id), product_id=product_id)
            return True

    async def remove_saved_item(self, profile_id: UUID, product_id: str) -> bool:
        """Unsave a product and strip it from all of the profile's collections.

        Returns:
            True if the product was saved before the call.
        """
        product_id = clean_product_id(product_id)

        async with self._uow_factory() as uow:
            removed = await uow.saved_items.delete(profile_id, product_id)
            affected = await uow.collections.remove_product_everywhere(profile_id, product_id)
            await self._projector.sync_collections(uow, profile_id, affected)
            await uow.commit()

            logger.info(
                "saved_item_removed",
                profile_id=str(profile_id),
                product_id=product_id,
                existed=removed,
                collections_updated=len(affected),
            )
            return removed  # type: ignore[no-any-return]

    async def replace_all_saved_items(
        self, profile_id: UUID, products: list[dict[str, Any]]
    ) -> list[SavedItem]:
        """Replace the whole saved set, e.g. for a profile import.

        Collection membership is reconciled against the new set: products that
        are no longer saved drop out of the profile's collections.
        """
        # Later duplicates win, first-seen order is kept
        by_id: dict[str, dict[str, Any]] = {}
        for product in products:
            by_id[_product_id(product)] = product

        async with self._uow_factory() as uow:
            await uow.saved_items.delete_all_for_profile(profile_id)
            items = [
                SavedItem(profile_id=profile_id, product_id=product_id, product=product)
                for product_id, product in by_id.items()
            ]
            created = await uow.saved_items.create_many(items) if items else []

            affected = await uow.collections.retain_products(profile_id, set(by_id))
            await self._projector.sync_collections(uow, profile_id, affected)
            await uow.commit()

            logger.info(
                "saved_items_replaced",
                profile_id=str(profile_id),
                item_count=len(created),
                collections_updated=len(affected),
            )
            return created  # type: ignore[no-any-return]
