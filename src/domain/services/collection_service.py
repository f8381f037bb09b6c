"""Collection service layer with business logic."""

from collections.abc import Callable
from datetime import datetime
from typing import cast
from uuid import UUID

import structlog

from core.exceptions import CollectionNotFoundError, ValidationError
from domain.entities.collection import (
    DEFAULT_COLLECTIONS,
    DEFAULT_COLOR,
    Collection,
    CollectionDetail,
)
from domain.entities.saved_item import SavedItem
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.community_post_projector import CommunityPostProjector
from domain.services.saved_item_service import clean_product_id

logger = structlog.get_logger()


def _clean_name(name: str | None) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Collection name is required", field="name")
    return cleaned


def _clean_item_id(item_id: str | None) -> str:
    return clean_product_id(item_id, field="itemId")


def _in_member_order(items: list[SavedItem], item_ids: list[str]) -> list[SavedItem]:
    by_id = {item.product_id: item for item in items}
    return [by_id[item_id] for item_id in item_ids if item_id in by_id]


class CollectionService:
    """Service layer for Collection business logic.

    Every mutation that can change whether a collection is public and
    non-empty re-runs the community post projection in the same transaction.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        projector: CommunityPostProjector,
    ) -> None:
        self._uow_factory = uow_factory
        self._projector = projector

    async def list_collections(self, profile_id: UUID) -> list[Collection]:
        """Get the profile's collections in creation order.

        The first call for a profile without collections seeds the defaults.
        Seeding is claimed through a flag on the profile, so it happens once
        even when two requests race, and not again after the user deletes
        every collection.
        """
        async with self._uow_factory() as uow:
            collections = await uow.collections.get_all_for_profile(profile_id)
            if collections:
                return collections  # type: ignore[no-any-return]

            if not await uow.profiles.claim_collection_seeding(profile_id):
                # Seeded before, or another request is seeding right now
                return await uow.collections.get_all_for_profile(profile_id)  # type: ignore[no-any-return]

            created_at = datetime.utcnow()
            seeded = []
            for position, (name, color) in enumerate(DEFAULT_COLLECTIONS):
                collection = Collection(
                    profile_id=profile_id,
                    name=name,
                    color=color,
                    position=position,
                    created_at=created_at,
                    updated_at=created_at,
                )
                seeded.append(await uow.collections.create(collection))

            await uow.commit()
            logger.info(
                "default_collections_seeded",
                profile_id=str(profile_id),
                count=len(seeded),
            )
            return seeded

    async def get_collection(self, profile_id: UUID, collection_id: UUID) -> CollectionDetail:
        """Get a collection with its saved items.

        Owners see their collection whatever its visibility; anyone else only
        sees it when it is public.
        """
        async with self._uow_factory() as uow:
            collection = await uow.collections.get_for_profile(profile_id, collection_id)
            if collection:
                items = await uow.saved_items.get_many(profile_id, collection.item_ids)
                return CollectionDetail(
                    collection=collection,
                    items=_in_member_order(items, collection.item_ids),
                )
            return await self._public_detail(uow, collection_id)

    async def get_public_collection(self, collection_id: UUID) -> CollectionDetail:
        """Get a public collection with its items and owner, for anonymous viewers."""
        async with self._uow_factory() as uow:
            return await self._public_detail(uow, collection_id)

    async def _public_detail(self, uow: IUnitOfWork, collection_id: UUID) -> CollectionDetail:
        collection = await uow.collections.get_public(collection_id)
        if not collection:
            raise CollectionNotFoundError(str(collection_id))

        owner = await uow.profiles.get(collection.profile_id)
        items = await uow.saved_items.get_many(collection.profile_id, collection.item_ids)
        return CollectionDetail(
            collection=collection,
            items=_in_member_order(items, collection.item_ids),
            owner=owner.owner_summary() if owner else None,
        )

    async def create_collection(
        self,
        profile_id: UUID,
        name: str,
        color: str | None = None,
        description: str | None = None,
        custom_banner_url: str | None = None,
        is_public: bool = True,
        item_ids: list[str] | None = None,
    ) -> Collection:
        """Create a collection, optionally with initial members."""
        name = _clean_name(name)
        members = list(dict.fromkeys(_clean_item_id(item_id) for item_id in item_ids or []))

        async with self._uow_factory() as uow:
            position = await uow.collections.count_for_profile(profile_id)
            collection = Collection(
                profile_id=profile_id,
                name=name,
                color=color or DEFAULT_COLOR,
                description=description,
                custom_banner_url=custom_banner_url,
                is_public=is_public,
                item_ids=members,
                position=position,
            )
            created = await uow.collections.create(collection)
            await self._projector.sync_post_for_collection(uow, profile_id, created)
            await uow.commit()

            logger.info(
                "collection_created",
                profile_id=str(profile_id),
                collection_id=str(created.id),
                item_count=created.item_count,
            )
            return created  # type: ignore[no-any-return]

    async def update_collection(
        self,
        profile_id: UUID,
        collection_id: UUID,
        name: str | None = None,
        color: str | None = None,
        description: object = ...,  # Sentinel to detect explicit None
        custom_banner_url: object = ...,  # Sentinel to detect explicit None
        is_public: bool | None = None,
    ) -> Collection:
        """Patch a collection owned by the profile. Omitted fields keep their values."""
        if name is not None:
            name = _clean_name(name)

        async with self._uow_factory() as uow:
            collection = await uow.collections.get_for_profile(profile_id, collection_id)
            if not collection:
                raise CollectionNotFoundError(str(collection_id))

            if name is not None:
                collection.name = name
            if color is not None:
                collection.color = color
            if description is not ...:
                collection.description = cast(str | None, description)
            if custom_banner_url is not ...:
                collection.custom_banner_url = cast(str | None, custom_banner_url)
            if is_public is not None:
                collection.is_public = is_public
            collection.updated_at = datetime.utcnow()

            updated = await uow.collections.update(collection)
            await self._projector.sync_post_for_collection(uow, profile_id, updated)
            await uow.commit()
            return updated  # type: ignore[no-any-return]

    async def add_item_to_collection(
        self, profile_id: UUID, item_id: str, collection_id: UUID
    ) -> Collection:
        """Add a product to a collection. Adding an existing member is a no-op."""
        item_id = _clean_item_id(item_id)

        async with self._uow_factory() as uow:
            collection = await uow.collections.get_for_profile(profile_id, collection_id)
            if not collection:
                raise CollectionNotFoundError(str(collection_id))

            if await uow.collections.add_item(collection_id, item_id):
                collection.item_ids.append(item_id)
            await self._projector.sync_post_for_collection(uow, profile_id, collection)
            await uow.commit()

            logger.info(
                "collection_item_added",
                profile_id=str(profile_id),
                collection_id=str(collection_id),
                item_id=item_id,
                item_count=collection.item_count,
            )
            return collection  # type: ignore[no-any-return]

    async def remove_item_from_collection(
        self, profile_id: UUID, item_id: str, collection_id: UUID
    ) -> Collection:
        """Remove a product from a collection. Removing a non-member is a no-op."""
        item_id = _clean_item_id(item_id)

        async with self._uow_factory() as uow:
            collection = await uow.collections.get_for_profile(profile_id, collection_id)
            if not collection:
                raise CollectionNotFoundError(str(collection_id))

            if await uow.collections.remove_item(collection_id, item_id):
                collection.item_ids = [i for i in collection.item_ids if i != item_id]
            await self._projector.sync_post_for_collection(uow, profile_id, collection)
            await uow.commit()

            logger.info(
                "collection_item_removed",
                profile_id=str(profile_id),
                collection_id=str(collection_id),
                item_id=item_id,
                item_count=collection.item_count,
            )
            return collection  # type: ignore[no-any-return]

    async def delete_collection(self, profile_id: UUID, collection_id: UUID) -> bool:
        """Delete a collection, retracting its community post first."""
        async with self._uow_factory() as uow:
            collection = await uow.collections.get_for_profile(profile_id, collection_id)
            if not collection:
                raise CollectionNotFoundError(str(collection_id))

            await self._projector.retract_post_for_collection(uow, profile_id, collection_id)
            deleted = await uow.collections.delete(profile_id, collection_id)
            await uow.commit()

            logger.info(
                "collection_deleted",
                profile_id=str(profile_id),
                collection_id=str(collection_id),
            )
            return deleted  # type: ignore[no-any-return]
