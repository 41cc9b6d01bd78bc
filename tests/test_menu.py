"""Menu tests - owner category and item management, public menu."""

from httpx import AsyncClient

from foodhub.models import MenuCategory
from tests.conftest import auth_header, make_token

MENU = "/api/v1/restaurant/menu"
PUBLIC = "/api/v1/customer/restaurants"


class TestCategories:

    async def test_create_and_list(self, client: AsyncClient, restaurant_owner, owner_headers):
        res = await client.post(f"{MENU}/categories", json={"name": "Soups", "sort_order": 2}, headers=owner_headers)
        assert res.status_code == 201
        assert res.json()["item_count"] == 0

        res = await client.get(f"{MENU}/categories", headers=owner_headers)
        assert [c["name"] for c in res.json()] == ["Soups"]

    async def test_duplicate_name_ignores_case(self, client: AsyncClient, menu_items, owner_headers):
        res = await client.post(f"{MENU}/categories", json={"name": " MOMO "}, headers=owner_headers)
        assert res.status_code == 400
        assert res.json()["message"] == "Category with this name already exists"

    async def test_delete_blocked_while_items_remain(self, client: AsyncClient, menu_items, owner_headers):
        category_id = menu_items["Thukpa"].category_id
        res = await client.delete(f"{MENU}/categories/{category_id}", headers=owner_headers)
        assert res.status_code == 400
        assert res.json()["message"] == "Cannot delete a category that still has menu items"

        for item in menu_items.values():
            assert (await client.delete(f"{MENU}/{item.id}", headers=owner_headers)).status_code == 204
        res = await client.delete(f"{MENU}/categories/{category_id}", headers=owner_headers)
        assert res.status_code == 204

    async def test_category_counts_items(self, client: AsyncClient, menu_items, owner_headers):
        res = await client.get(f"{MENU}/categories", headers=owner_headers)
        assert res.json()[0]["item_count"] == 2


class TestItems:

    async def test_create_item(self, client: AsyncClient, menu_items, owner_headers):
        category_id = str(menu_items["Thukpa"].category_id)
        res = await client.post(MENU, headers=owner_headers, json={
            "category_id": category_id,
            "name": "Jhol Momo",
            "price": 220,
            "images": ["https://cdn.foodhub.com/jhol.jpg"],
            "spice_level": "hot",
            "is_vegetarian": True,
        })
        assert res.status_code == 201
        data = res.json()
        assert data["category"] == "Momo"
        assert data["image"] == "https://cdn.foodhub.com/jhol.jpg"
        assert data["is_available"] is True
        assert data["order_count"] == 0

        res = await client.get(MENU, params={"search": "jhol"}, headers=owner_headers)
        assert [i["name"] for i in res.json()] == ["Jhol Momo"]

    async def test_create_rejects_bad_spice_level(self, client: AsyncClient, menu_items, owner_headers):
        res = await client.post(MENU, headers=owner_headers, json={
            "category_id": str(menu_items["Thukpa"].category_id),
            "name": "Fire Wings",
            "price": 300,
            "spice_level": "volcanic",
        })
        assert res.status_code == 400

    async def test_create_needs_own_category(
        self, client: AsyncClient, db, menu_items, pending_owner, owner_headers
    ):
        foreign = MenuCategory(restaurant_id=pending_owner.id, name="Curries")
        db.add(foreign)
        await db.flush()
        res = await client.post(MENU, headers=owner_headers, json={
            "category_id": str(foreign.id), "name": "Dal", "price": 100,
        })
        assert res.status_code == 404
        assert res.json()["message"] == "Category not found"

    async def test_update_and_get(self, client: AsyncClient, menu_items, owner_headers):
        thukpa = menu_items["Thukpa"]
        res = await client.put(f"{MENU}/{thukpa.id}", json={"price": 175, "tags": ["noodles"]}, headers=owner_headers)
        assert res.status_code == 200
        assert res.json()["price"] == 175.0

        res = await client.get(f"{MENU}/{thukpa.id}", headers=owner_headers)
        assert res.json()["tags"] == ["noodles"]

    async def test_toggle_availability(self, client: AsyncClient, menu_items, owner_headers):
        thukpa = menu_items["Thukpa"]
        res = await client.patch(f"{MENU}/{thukpa.id}/toggle", headers=owner_headers)
        assert res.json()["is_available"] is False

        res = await client.get(MENU, params={"available": False}, headers=owner_headers)
        assert [i["name"] for i in res.json()] == ["Thukpa"]

        res = await client.patch(f"{MENU}/{thukpa.id}/toggle", headers=owner_headers)
        assert res.json()["is_available"] is True

    async def test_other_owner_cannot_see_item(self, client: AsyncClient, menu_items, pending_owner):
        headers = auth_header(make_token(pending_owner, "restaurant"))
        res = await client.get(f"{MENU}/{menu_items['Thukpa'].id}", headers=headers)
        assert res.status_code == 404
        assert res.json()["message"] == "Menu item not found"

    async def test_unverified_owner_cannot_write(self, client: AsyncClient, pending_owner):
        headers = auth_header(make_token(pending_owner, "restaurant"))
        res = await client.post(f"{MENU}/categories", json={"name": "Curries"}, headers=headers)
        assert res.status_code == 403
        assert res.json()["message"].startswith("You cannot manage menu items")

    async def test_customer_token_rejected(self, client: AsyncClient, customer_headers):
        res = await client.get(MENU, headers=customer_headers)
        assert res.status_code == 403


class TestPublicMenu:

    async def test_hides_unavailable_items(self, client: AsyncClient, db, restaurant, menu_items):
        menu_items["Thukpa"].is_available = False
        await db.flush()

        res = await client.get(f"{PUBLIC}/{restaurant.id}/menu")
        assert res.status_code == 200
        assert [i["name"] for i in res.json()] == ["Chicken Momo"]

    async def test_unverified_restaurant_hidden(self, client: AsyncClient, db, restaurant, menu_items):
        restaurant.is_verified = False
        await db.flush()
        res = await client.get(f"{PUBLIC}/{restaurant.id}/menu")
        assert res.status_code == 404
