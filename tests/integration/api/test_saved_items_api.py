"""Integration tests for Saved Items API endpoints."""

from urllib.parse import quote

import pytest
from httpx import AsyncClient

BASE = "/api/v1/saved-items"


def product(product_id: str, **extra) -> dict:
    return {"id": product_id, "title": f"Product {product_id}", "price": 25.0, **extra}


async def create_collection(client: AsyncClient, name: str, item_ids: list[str]) -> dict:
    response = await client.post(
        "/api/v1/collections",
        json={"action": "create", "collection": {"name": name, "itemIds": item_ids}},
    )
    assert response.status_code == 200
    return response.json()["data"]


class TestSavedItemsAuth:
    @pytest.mark.asyncio
    async def test_list_requires_auth(self, anonymous_client: AsyncClient):
        response = await anonymous_client.get(BASE)

        assert response.status_code == 401
        assert response.json()["error_code"] == "UNAUTHORIZED"

    @pytest.mark.asyncio
    async def test_invalid_token(self, anonymous_client: AsyncClient):
        response = await anonymous_client.get(
            BASE, headers={"Authorization": "Bearer not-a-token"}
        )

        assert response.status_code == 401
        assert response.json()["error_code"] == "INVALID_TOKEN"


class TestSaveProduct:
    @pytest.mark.asyncio
    async def test_save_and_list(self, authenticated_client: AsyncClient):
        response = await authenticated_client.post(
            BASE, json=product("sku-1", brand="Acme", color="navy")
        )

        assert response.status_code == 200
        assert response.json()["data"] == {"productId": "sku-1", "saved": True, "changed": True}

        response = await authenticated_client.get(BASE)
        assert response.status_code == 200
        items = response.json()["data"]
        assert len(items) == 1
        assert items[0]["productId"] == "sku-1"
        assert items[0]["product"]["saved"] is True
        # Unknown product keys are kept
        assert items[0]["product"]["color"] == "navy"
        assert "savedAt" in items[0]

    @pytest.mark.asyncio
    async def test_saving_twice_is_idempotent(self, authenticated_client: AsyncClient):
        await authenticated_client.post(BASE, json=product("sku-1"))
        response = await authenticated_client.post(BASE, json=product("sku-1"))

        assert response.status_code == 200
        assert response.json()["data"]["changed"] is False

        items = (await authenticated_client.get(BASE)).json()["data"]
        assert len(items) == 1

    @pytest.mark.asyncio
    async def test_numeric_id_is_stored_as_string(self, authenticated_client: AsyncClient):
        response = await authenticated_client.post(BASE, json={"id": 1234, "title": "Cap"})

        assert response.status_code == 200
        assert response.json()["data"]["productId"] == "1234"

    @pytest.mark.asyncio
    async def test_missing_id_is_rejected(self, authenticated_client: AsyncClient):
        response = await authenticated_client.post(BASE, json={"title": "No id"})

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_saved_items_are_per_user(
        self, authenticated_client: AsyncClient, other_client: AsyncClient
    ):
        await authenticated_client.post(BASE, json=product("sku-1"))

        response = await other_client.get(BASE)

        assert response.json()["data"] == []

    @pytest.mark.asyncio
    async def test_overlong_id_is_rejected(self, authenticated_client: AsyncClient):
        response = await authenticated_client.post(
            BASE, json=product("https://shop.example.com/p/" + "x" * 300)
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"
        assert (await authenticated_client.get(BASE)).json()["data"] == []


class TestUnsave:
    @pytest.mark.asyncio
    async def test_unsave_removes_from_every_collection(self, authenticated_client: AsyncClient):
        for product_id in ("a", "b"):
            await authenticated_client.post(BASE, json=product(product_id))
        first = await create_collection(authenticated_client, "Fits", ["a", "b"])
        second = await create_collection(authenticated_client, "More", ["a"])

        response = await authenticated_client.delete(f"{BASE}/a")

        assert response.status_code == 200
        assert response.json()["data"] == {"productId": "a", "saved": False, "changed": True}

        collections = {
            c["id"]: c
            for c in (await authenticated_client.get("/api/v1/collections")).json()["data"]
        }
        assert collections[first["id"]]["itemIds"] == ["b"]
        assert collections[second["id"]]["itemIds"] == []
        assert collections[second["id"]]["itemCount"] == 0

    @pytest.mark.asyncio
    async def test_unsave_unknown_product(self, authenticated_client: AsyncClient):
        response = await authenticated_client.delete(f"{BASE}/never-saved")

        assert response.status_code == 200
        assert response.json()["data"]["changed"] is False

    @pytest.mark.asyncio
    async def test_unsave_retracts_post_of_emptied_collection(
        self, authenticated_client: AsyncClient
    ):
        await authenticated_client.post(BASE, json=product("a"))
        await create_collection(authenticated_client, "Solo", ["a"])
        feed = (await authenticated_client.get("/api/v1/community/posts")).json()["data"]
        assert len(feed) == 1

        await authenticated_client.delete(f"{BASE}/a")

        feed = (await authenticated_client.get("/api/v1/community/posts")).json()["data"]
        assert feed == []

    @pytest.mark.asyncio
    async def test_unsave_link_shaped_id(self, authenticated_client: AsyncClient):
        link = "https://shop.example.com/p/123?ref=flair"
        await authenticated_client.post(BASE, json=product(link))
        collection = await create_collection(authenticated_client, "Links", [link])

        response = await authenticated_client.delete(f"{BASE}/{quote(link, safe='')}")

        assert response.status_code == 200
        assert response.json()["data"] == {"productId": link, "saved": False, "changed": True}
        assert (await authenticated_client.get(BASE)).json()["data"] == []
        detail = await authenticated_client.get(f"/api/v1/collections/{collection['id']}")
        assert detail.json()["data"]["itemIds"] == []

    @pytest.mark.asyncio
    async def test_unsave_with_padded_id(self, authenticated_client: AsyncClient):
        await authenticated_client.post(BASE, json=product("sku-1"))

        response = await authenticated_client.delete(f"{BASE}/%20sku-1%20")

        assert response.json()["data"] == {"productId": "sku-1", "saved": False, "changed": True}


class TestReplaceAll:
    @pytest.mark.asyncio
    async def test_replace_reconciles_collections(self, authenticated_client: AsyncClient):
        for product_id in ("a", "b", "c"):
            await authenticated_client.post(BASE, json=product(product_id))
        created = await create_collection(authenticated_client, "Fits", ["a", "b", "c"])

        response = await authenticated_client.put(
            BASE, json={"items": [product("b"), product("d")]}
        )

        assert response.status_code == 200
        assert {item["productId"] for item in response.json()["data"]} == {"b", "d"}

        listed = (await authenticated_client.get(BASE)).json()["data"]
        assert {item["productId"] for item in listed} == {"b", "d"}

        detail = (await authenticated_client.get(f"/api/v1/collections/{created['id']}")).json()
        assert detail["data"]["itemIds"] == ["b"]

    @pytest.mark.asyncio
    async def test_replace_with_empty_list(self, authenticated_client: AsyncClient):
        await authenticated_client.post(BASE, json=product("a"))

        response = await authenticated_client.put(BASE, json={"items": []})

        assert response.status_code == 200
        assert response.json()["data"] == []
        assert (await authenticated_client.get(BASE)).json()["data"] == []
