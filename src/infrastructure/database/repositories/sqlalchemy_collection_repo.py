"""SQLAlchemy implementation of Collection repository."""

from collections import defaultdict
from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.collection import Collection
from infrastructure.database.models import CollectionItemModel, CollectionModel
from infrastructure.database.statements import insert_ignore


class SQLAlchemyCollectionRepository:
    """SQLAlchemy implementation of ICollectionRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_for_profile(self, profile_id: UUID, collection_id: UUID) -> Collection | None:
        """Get a collection owned by the profile."""
        stmt = select(CollectionModel).where(
            CollectionModel.id == collection_id,
            CollectionModel.profile_id == profile_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if not model:
            return None
        members = await self._get_item_ids_batch([model.id])
        return self._to_entity(model, members.get(model.id, []))

    async def get_public(self, collection_id: UUID) -> Collection | None:
        """Get a public collection by ID."""
        stmt = select(CollectionModel).where(
            CollectionModel.id == collection_id,
            CollectionModel.is_public.is_(True),
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if not model:
            return None
        members = await self._get_item_ids_batch([model.id])
        return self._to_entity(model, members.get(model.id, []))

    async def get_all_for_profile(self, profile_id: UUID) -> list[Collection]:
        """Get all collections for a profile in creation order."""
        stmt = (
            select(CollectionModel)
            .where(CollectionModel.profile_id == profile_id)
            .order_by(CollectionModel.created_at, CollectionModel.position)
        )
        result = await self._session.execute(stmt)
        models = list(result.scalars())

        members = await self._get_item_ids_batch([model.id for model in models])
        return [self._to_entity(model, members.get(model.id, [])) for model in models]

    async def get_public_for_profile(self, profile_id: UUID) -> list[Collection]:
        """Get a profile's public collections, newest first."""
        stmt = (
            select(CollectionModel)
            .where(
                CollectionModel.profile_id == profile_id,
                CollectionModel.is_public.is_(True),
            )
            .order_by(CollectionModel.created_at.desc(), CollectionModel.position.desc())
        )
        result = await self._session.execute(stmt)
        models = list(result.scalars())

        members = await self._get_item_ids_batch([model.id for model in models])
        return [self._to_entity(model, members.get(model.id, [])) for model in models]

    async def get_many(self, collection_ids: list[UUID]) -> list[Collection]:
        """Get collections by ID in a single query."""
        if not collection_ids:
            return []

        stmt = select(CollectionModel).where(CollectionModel.id.in_(collection_ids))
        result = await self._session.execute(stmt)
        models = list(result.scalars())

        members = await self._get_item_ids_batch([model.id for model in models])
        return [self._to_entity(model, members.get(model.id, [])) for model in models]

    async def count_for_profile(self, profile_id: UUID) -> int:
        """Get the number of collections a profile owns."""
        stmt = (
            select(func.count())
            .select_from(CollectionModel)
            .where(CollectionModel.profile_id == profile_id)
        )
        result = await self._session.execute(stmt)
        return result.scalar() or 0

    async def create(self, collection: Collection) -> Collection:
        """Create a new collection with its initial members."""
        model = self._to_model(collection)
        self._session.add(model)
        await self._session.flush()

        if collection.item_ids:
            await insert_ignore(
                self._session,
                CollectionItemModel,
                [
                    {
                        "collection_id": collection.id,
                        "product_id": product_id,
                        "position": position,
                        "added_at": collection.created_at,
                    }
                    for position, product_id in enumerate(collection.item_ids)
                ],
            )

        return self._to_entity(model, list(collection.item_ids))

    async def update(self, collection: Collection) -> Collection:
        """Update an existing collection's fields."""
        stmt = select(CollectionModel).where(CollectionModel.id == collection.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Collection {collection.id} not found")

        model.name = collection.name
        model.color = collection.color
        model.description = collection.description
        model.custom_banner_url = collection.custom_banner_url
        model.is_public = collection.is_public
        model.updated_at = collection.updated_at

        await self._session.flush()
        return self._to_entity(model, list(collection.item_ids))

    async def delete(self, profile_id: UUID, collection_id: UUID) -> bool:
        """Delete an owned collection and its membership rows."""
        owned = select(CollectionModel.id).where(
            CollectionModel.id == collection_id,
            CollectionModel.profile_id == profile_id,
        )
        await self._session.execute(
            delete(CollectionItemModel).where(CollectionItemModel.collection_id.in_(owned))
        )
        stmt = delete(CollectionModel).where(
            CollectionModel.id == collection_id,
            CollectionModel.profile_id == profile_id,
        )
        result = await self._session.execute(stmt)
        return bool(result.rowcount)  # type: ignore[attr-defined]

    async def add_item(self, collection_id: UUID, product_id: str) -> bool:
        """Append a product to a collection."""
        stmt = select(func.max(CollectionItemModel.position)).where(
            CollectionItemModel.collection_id == collection_id
        )
        result = await self._session.execute(stmt)
        last = result.scalar()

        written = await insert_ignore(
            self._session,
            CollectionItemModel,
            {
                "collection_id": collection_id,
                "product_id": product_id,
                "position": 0 if last is None else last + 1,
                "added_at": datetime.utcnow(),
            },
        )
        if written:
            await self._touch([collection_id])
        return bool(written)

    async def remove_item(self, collection_id: UUID, product_id: str) -> bool:
        """Remove a product from a collection."""
        stmt = delete(CollectionItemModel).where(
            CollectionItemModel.collection_id == collection_id,
            CollectionItemModel.product_id == product_id,
        )
        result = await self._session.execute(stmt)
        if not result.rowcount:  # type: ignore[attr-defined]
            return False
        await self._touch([collection_id])
        return True

    async def remove_product_everywhere(self, profile_id: UUID, product_id: str) -> list[UUID]:
        """Remove a product from every collection of a profile."""
        stmt = (
            select(CollectionItemModel.collection_id)
            .join(CollectionModel, CollectionModel.id == CollectionItemModel.collection_id)
            .where(
                CollectionModel.profile_id == profile_id,
                CollectionItemModel.product_id == product_id,
            )
        )
        result = await self._session.execute(stmt)
        affected = list(result.scalars())
        if not affected:
            return []

        await self._session.execute(
            delete(CollectionItemModel).where(
                CollectionItemModel.collection_id.in_(affected),
                CollectionItemModel.product_id == product_id,
            )
        )
        await self._touch(affected)
        return affected

    async def retain_products(self, profile_id: UUID, product_ids: set[str]) -> list[UUID]:
        """Drop members outside product_ids from every collection of a profile."""
        stmt = (
            select(CollectionItemModel.collection_id, CollectionItemModel.product_id)
            .join(CollectionModel, CollectionModel.id == CollectionItemModel.collection_id)
            .where(CollectionModel.profile_id == profile_id)
        )
        result = await self._session.execute(stmt)

        stale: dict[UUID, list[str]] = defaultdict(list)
        for collection_id, product_id in result:
            if product_id not in product_ids:
                stale[collection_id].append(product_id)

        for collection_id, removed in stale.items():
            await self._session.execute(
                delete(CollectionItemModel).where(
                    CollectionItemModel.collection_id == collection_id,
                    CollectionItemModel.product_id.in_(removed),
                )
            )
        affected = list(stale)
        await self._touch(affected)
        return affected

    async def _get_item_ids_batch(self, collection_ids: list[UUID]) -> dict[UUID, list[str]]:
        """Get member product IDs for multiple collections in a single query."""
        if not collection_ids:
            return {}

        stmt = (
            select(CollectionItemModel.collection_id, CollectionItemModel.product_id)
            .where(CollectionItemModel.collection_id.in_(collection_ids))
            .order_by(CollectionItemModel.position, CollectionItemModel.added_at)
        )
        result = await self._session.execute(stmt)

        members: dict[UUID, list[str]] = defaultdict(list)
        for collection_id, product_id in result:
            members[collection_id].append(product_id)
        return dict(members)

    async def _touch(self, collection_ids: list[UUID]) -> None:
        if not collection_ids:
            return
        stmt = select(CollectionModel).where(CollectionModel.id.in_(collection_ids))
        result = await self._session.execute(stmt)
        now = datetime.utcnow()
        for model in result.scalars():
            model.updated_at = now
        await self._session.flush()

    def _to_entity(self, model: CollectionModel, item_ids: list[str]) -> Collection:
        """Convert ORM model to domain entity."""
        return Collection(
            id=model.id,
            profile_id=model.profile_id,
            name=model.name,
            color=model.color,
            description=model.description,
            custom_banner_url=model.custom_banner_url,
            is_public=model.is_public,
            item_ids=item_ids,
            position=model.position,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Collection) -> CollectionModel:
        """Convert domain entity to ORM model."""
        return CollectionModel(
            id=entity.id,
            profile_id=entity.profile_id,
            name=entity.name,
            color=entity.color,
            description=entity.description,
            custom_banner_url=entity.custom_banner_url,
            is_public=entity.is_public,
            position=entity.position,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
