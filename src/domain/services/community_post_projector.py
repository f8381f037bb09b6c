"""Community post projection for collections.

A collection has a community post exactly when it is public and non-empty.
The projector is re-entrant: running it again for an already-projected
collection never creates a second post.
"""

from collections.abc import Callable
from uuid import UUID

import structlog

from core.exceptions import ConflictError
from domain.entities.collection import Collection
from domain.entities.community_post import (
    FEED_PREVIEW_SIZE,
    CommunityPost,
    FeedPost,
    collection_post_description,
    collection_post_title,
)
from domain.entities.saved_item import SavedItem
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class CommunityPostProjector:
    """Keeps community posts in step with collection state."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def sync_post_for_collection(
        self,
        uow: IUnitOfWork,
        profile_id: UUID,
        collection: Collection,
    ) -> CommunityPost | None:
        """Create, refresh or retract the collection's post within an existing UoW.

        Args:
            uow: The active Unit of Work (caller manages commit).
            profile_id: Owner of the collection.
            collection: Current collection state, membership included.

        Returns:
            The post that exists after the sync, or None.
        """
        existing = await uow.posts.get_for_collection(profile_id, collection.id)

        if not collection.should_be_posted:
            if existing:
                await uow.posts.delete_for_collection(profile_id, collection.id)
                logger.info(
                    "community_post_retracted",
                    profile_id=str(profile_id),
                    collection_id=str(collection.id),
                )
            return None

        title = collection_post_title(collection.name)
        description = collection_post_description(
            collection.description, collection.item_count
        )

        if existing:
            # Posts follow the collection's current name and description
            if existing.title != title or existing.description != description:
                existing.title = title
                existing.description = description
                return await uow.posts.update(existing)  # type: ignore[no-any-return]
            return existing

        post = CommunityPost(
            profile_id=profile_id,
            collection_id=collection.id,
            title=title,
            description=description,
        )
        try:
            created = await uow.posts.create(post)
        except ConflictError:
            logger.info(
                "community_post_already_exists",
                profile_id=str(profile_id),
                collection_id=str(collection.id),
            )
            return await uow.posts.get_for_collection(profile_id, collection.id)  # type: ignore[no-any-return]

        logger.info(
            "community_post_created",
            profile_id=str(profile_id),
            collection_id=str(collection.id),
            post_id=str(created.id),
        )
        return created  # type: ignore[no-any-return]

    async def retract_post_for_collection(
        self,
        uow: IUnitOfWork,
        profile_id: UUID,
        collection_id: UUID,
    ) -> bool:
        """Remove the collection's post within an existing UoW, if it has one."""
        deleted = await uow.posts.delete_for_collection(profile_id, collection_id)
        if deleted:
            logger.info(
                "community_post_retracted",
                profile_id=str(profile_id),
                collection_id=str(collection_id),
            )
        return deleted  # type: ignore[no-any-return]

    async def sync_collections(
        self,
        uow: IUnitOfWork,
        profile_id: UUID,
        collection_ids: list[UUID],
    ) -> None:
        """Re-run the projection for collections whose membership changed."""
        for collection_id in collection_ids:
            collection = await uow.collections.get_for_profile(profile_id, collection_id)
            if collection:
                await self.sync_post_for_collection(uow, profile_id, collection)

    async def list_public_posts(self, limit: int = 50, offset: int = 0) -> list[FeedPost]:
        """Public posts for the community feed, newest first.

        Each post comes with its author, its source collection and up to
        FEED_PREVIEW_SIZE of that collection's saved products, in member order.
        """
        async with self._uow_factory() as uow:
            posts = await uow.posts.get_public(limit=limit, offset=offset)
            if not posts:
                return []

            authors = {
                profile.id: profile
                for profile in await uow.profiles.get_many(
                    list(dict.fromkeys(post.profile_id for post in posts))
                )
            }
            collections = {
                collection.id: collection
                for collection in await uow.collections.get_many(
                    [post.collection_id for post in posts]
                )
            }

            feed = []
            for post in posts:
                author = authors.get(post.profile_id)
                collection = collections.get(post.collection_id)
                preview: list[SavedItem] = []
                if collection and collection.item_ids:
                    wanted = collection.item_ids[:FEED_PREVIEW_SIZE]
                    by_id = {
                        item.product_id: item
                        for item in await uow.saved_items.get_many(post.profile_id, wanted)
                    }
                    preview = [by_id[product_id] for product_id in wanted if product_id in by_id]
                feed.append(
                    FeedPost(
                        post=post,
                        author=author.owner_summary() if author else None,
                        collection=collection,
                        preview=preview,
                    )
                )
            return feed
