"""Unit tests for SavedItemService."""

from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from core.exceptions import ConflictError, ValidationError
from domain.entities.saved_item import MAX_PRODUCT_ID_LENGTH, SavedItem
from domain.services.saved_item_service import SavedItemService
from tests.unit.conftest import FakeUnitOfWork


@pytest.fixture
def projector() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(uow: FakeUnitOfWork, projector: AsyncMock) -> SavedItemService:
    return SavedItemService(lambda: uow, projector=projector)


PRODUCT = {"id": "sku-1", "title": "Linen shirt", "price": "$40", "brand": "Acme"}


# --- add_saved_item ---


class TestAddSavedItem:
    @pytest.mark.asyncio
    async def test_saves_new_product(
        self, service: SavedItemService, uow: FakeUnitOfWork, profile_id: UUID
    ):
        uow.saved_items.exists.return_value = False

        changed = await service.add_saved_item(profile_id, PRODUCT)

        assert changed is True
        saved = uow.saved_items.create.call_args.args[0]
        assert saved.product_id == "sku-1"
        assert saved.product["saved"] is True
        assert saved.product["brand"] == "Acme"
        assert uow.committed

    @pytest.mark.asyncio
    async def test_numeric_id_is_stringified(
        self, service: SavedItemService, uow: FakeUnitOfWork, profile_id: UUID
    ):
        uow.saved_items.exists.return_value = False

        await service.add_saved_item(profile_id, {"id": 42, "title": "Cap"})

        uow.saved_items.exists.assert_called_once_with(profile_id, "42")

    @pytest.mark.asyncio
    async def test_already_saved_is_noop(
        self, service: SavedItemService, uow: FakeUnitOfWork, profile_id: UUID
    ):
        uow.saved_items.exists.return_value = True

        changed = await service.add_saved_item(profile_id, PRODUCT)

        assert changed is False
        uow.saved_items.create.assert_not_called()
        assert not uow.committed

    @pytest.mark.asyncio
    async def test_concurrent_save_is_noop(
        self, service: SavedItemService, uow: FakeUnitOfWork, profile_id: UUID
    ):
        uow.saved_items.exists.return_value = False
        uow.saved_items.create.side_effect = ConflictError("SavedItem")

        changed = await service.add_saved_item(profile_id, PRODUCT)

        assert changed is False
        assert not uow.committed

    @pytest.mark.asyncio
    @pytest.mark.parametrize("product", [{}, {"id": ""}, {"id": "  "}, {"title": "x"}])
    async def test_requires_product_id(
        self, service: SavedItemService, uow: FakeUnitOfWork, profile_id: UUID, product: dict
    ):
        with pytest.raises(ValidationError):
            await service.add_saved_item(profile_id, product)

        uow.saved_items.exists.assert_not_called()

    @pytest.mark.asyncio
    async def test_rejects_overlong_product_id(
        self, service: SavedItemService, uow: FakeUnitOfWork, profile_id: UUID
    ):
        product = {"id": "https://shop.example.com/p/" + "x" * (MAX_PRODUCT_ID_LENGTH)}

        with pytest.raises(ValidationError) as exc_info:
            await service.add_saved_item(profile_id, product)

        assert exc_info.value.status_code == 400
        uow.saved_items.exists.assert_not_called()
        uow.saved_items.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_accepts_product_id_at_column_width(
        self, service: SavedItemService, uow: FakeUnitOfWork, profile_id: UUID
    ):
        uow.saved_items.exists.return_value = False

        assert await service.add_saved_item(profile_id, {"id": "x" * MAX_PRODUCT_ID_LENGTH})


# --- remove_saved_item ---


class TestRemoveSavedItem:
    @pytest.mark.asyncio
    async def test_strips_product_from_collections(
        self,
        service: SavedItemService,
        uow: FakeUnitOfWork,
        projector: AsyncMock,
        profile_id: UUID,
    ):
        affected = [uuid4(), uuid4()]
        uow.saved_items.delete.return_value = True
        uow.collections.remove_product_everywhere.return_value = affected

        removed = await service.remove_saved_item(profile_id, "sku-1")

        assert removed is True
        uow.collections.remove_product_everywhere.assert_called_once_with(profile_id, "sku-1")
        projector.sync_collections.assert_called_once_with(uow, profile_id, affected)
        assert uow.committed

    @pytest.mark.asyncio
    async def test_unsaving_unknown_product_reports_false(
        self, service: SavedItemService, uow: FakeUnitOfWork, profile_id: UUID
    ):
        uow.saved_items.delete.return_value = False
        uow.collections.remove_product_everywhere.return_value = []

        removed = await service.remove_saved_item(profile_id, "missing")

        assert removed is False

    @pytest.mark.asyncio
    async def test_padded_id_matches_saved_key(
        self, service: SavedItemService, uow: FakeUnitOfWork, profile_id: UUID
    ):
        uow.saved_items.delete.return_value = True
        uow.collections.remove_product_everywhere.return_value = []

        assert await service.remove_saved_item(profile_id, "  sku-1 ") is True

        uow.saved_items.delete.assert_called_once_with(profile_id, "sku-1")
        uow.collections.remove_product_everywhere.assert_called_once_with(profile_id, "sku-1")

    @pytest.mark.asyncio
    async def test_blank_id_is_rejected(
        self, service: SavedItemService, uow: FakeUnitOfWork, profile_id: UUID
    ):
        with pytest.raises(ValidationError):
            await service.remove_saved_item(profile_id, "   ")

        uow.saved_items.delete.assert_not_called()


# --- replace_all_saved_items ---


class TestReplaceAllSavedItems:
    @pytest.mark.asyncio
    async def test_replaces_and_reconciles(
        self,
        service: SavedItemService,
        uow: FakeUnitOfWork,
        projector: AsyncMock,
        profile_id: UUID,
    ):
        uow.saved_items.create_many.side_effect = lambda items: items
        uow.collections.retain_products.return_value = []

        result = await service.replace_all_saved_items(
            profile_id,
            [
                {"id": "a", "title": "first"},
                {"id": "b"},
                {"id": "a", "title": "second"},
            ],
        )

        uow.saved_items.delete_all_for_profile.assert_called_once_with(profile_id)
        assert [item.product_id for item in result] == ["a", "b"]
        assert result[0].product["title"] == "second"
        uow.collections.retain_products.assert_called_once_with(profile_id, {"a", "b"})
        projector.sync_collections.assert_called_once()
        assert uow.committed

    @pytest.mark.asyncio
    async def test_empty_list_clears_everything(
        self, service: SavedItemService, uow: FakeUnitOfWork, profile_id: UUID
    ):
        uow.collections.retain_products.return_value = []

        result = await service.replace_all_saved_items(profile_id, [])

        assert result == []
        uow.saved_items.create_many.assert_not_called()
        uow.collections.retain_products.assert_called_once_with(profile_id, set())

    @pytest.mark.asyncio
    async def test_rejects_items_without_id(
        self, service: SavedItemService, uow: FakeUnitOfWork, profile_id: UUID
    ):
        with pytest.raises(ValidationError):
            await service.replace_all_saved_items(profile_id, [{"id": "a"}, {"title": "no id"}])

        uow.saved_items.delete_all_for_profile.assert_not_called()


class TestListSavedItems:
    @pytest.mark.asyncio
    async def test_returns_repository_order(
        self, service: SavedItemService, uow: FakeUnitOfWork, profile_id: UUID
    ):
        items = [
            SavedItem(profile_id=profile_id, product_id="new"),
            SavedItem(profile_id=profile_id, product_id="old"),
        ]
        uow.saved_items.get_all_for_profile.return_value = items

        result = await service.list_saved_items(profile_id)

        assert result == items
