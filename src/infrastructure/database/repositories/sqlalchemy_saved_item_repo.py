"""SQLAlchemy implementation of SavedItem repository."""

from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import ConflictError
from domain.entities.saved_item import SavedItem
from infrastructure.database.models import SavedItemModel
from infrastructure.database.statements import insert_ignore


class SQLAlchemySavedItemRepository:
    """SQLAlchemy implementation of ISavedItemRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_all_for_profile(self, profile_id: UUID) -> list[SavedItem]:
        """Get all saved items for a profile, newest first."""
        stmt = (
            select(SavedItemModel)
            .where(SavedItemModel.profile_id == profile_id)
            .order_by(SavedItemModel.saved_at.desc(), SavedItemModel.product_id)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_many(self, profile_id: UUID, product_ids: list[str]) -> list[SavedItem]:
        """Get saved items for a set of product IDs in a single query."""
        if not product_ids:
            return []

        stmt = select(SavedItemModel).where(
            SavedItemModel.profile_id == profile_id,
            SavedItemModel.product_id.in_(product_ids),
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def exists(self, profile_id: UUID, product_id: str) -> bool:
        """Check whether a product is saved."""
        stmt = select(SavedItemModel.product_id).where(
            SavedItemModel.profile_id == profile_id,
            SavedItemModel.product_id == product_id,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def create(self, item: SavedItem) -> SavedItem:
        """Create a new saved item."""
        written = await insert_ignore(self._session, SavedItemModel, self._to_values(item))
        if not written:
            raise ConflictError("SavedItem", {"product_id": item.product_id})
        return item

    async def create_many(self, items: list[SavedItem]) -> list[SavedItem]:
        """Insert saved items in one statement, skipping duplicates."""
        if not items:
            return []
        await insert_ignore(
            self._session,
            SavedItemModel,
            [self._to_values(item) for item in items],
        )
        return items

    async def delete(self, profile_id: UUID, product_id: str) -> bool:
        """Delete a saved item."""
        stmt = delete(SavedItemModel).where(
            SavedItemModel.profile_id == profile_id,
            SavedItemModel.product_id == product_id,
        )
        result = await self._session.execute(stmt)
        return bool(result.rowcount)  # type: ignore[attr-defined]

    async def delete_all_for_profile(self, profile_id: UUID) -> int:
        """Delete every saved item of a profile."""
        stmt = delete(SavedItemModel).where(SavedItemModel.profile_id == profile_id)
        result = await self._session.execute(stmt)
        return result.rowcount or 0  # type: ignore[attr-defined]

    def _to_values(self, item: SavedItem) -> dict:
        return {
            "profile_id": item.profile_id,
            "product_id": item.product_id,
            "product": item.product,
            "saved_at": item.saved_at,
        }

    def _to_entity(self, model: SavedItemModel) -> SavedItem:
        """Convert ORM model to domain entity."""
        return SavedItem(
            profile_id=model.profile_id,
            product_id=model.product_id,
            product=dict(model.product or {}),
            saved_at=model.saved_at,
        )
