"""Restaurant tests - admin verification, owner self-service and public browsing."""

from httpx import AsyncClient
from sqlalchemy import select

from foodhub.models import Restaurant

ADMIN_RESTAURANTS = "/api/v1/admin/restaurants"
PUBLIC = "/api/v1/customer/restaurants"
PROFILE = "/api/v1/restaurant/profile"


class TestVerification:

    async def test_approve_creates_listing(self, client: AsyncClient, db, pending_owner, admin_headers):
        res = await client.patch(
            f"{ADMIN_RESTAURANTS}/{pending_owner.id}/verify",
            json={"action": "approve"},
            headers=admin_headers,
        )
        assert res.status_code == 200
        data = res.json()
        assert data["verification_status"] == "approved"
        assert data["is_verified"] is True
        assert data["restaurant_id"] is not None

        listing = (await db.execute(select(Restaurant).where(Restaurant.owner_id == pending_owner.id))).scalar_one()
        assert listing.name == "Curry Corner"
        assert listing.cuisine == ["Indian"]

    async def test_reject_requires_reason(self, client: AsyncClient, pending_owner, admin_headers):
        res = await client.patch(
            f"{ADMIN_RESTAURANTS}/{pending_owner.id}/verify",
            json={"action": "reject"},
            headers=admin_headers,
        )
        assert res.status_code == 400

        res = await client.patch(
            f"{ADMIN_RESTAURANTS}/{pending_owner.id}/verify",
            json={"action": "reject", "reason": "Blurry license"},
            headers=admin_headers,
        )
        data = res.json()
        assert data["verification_status"] == "rejected"
        assert data["rejection_reason"] == "Blurry license"
        assert data["restaurant_id"] is None

    async def test_cannot_decide_twice(self, client: AsyncClient, restaurant_owner, admin_headers):
        res = await client.patch(
            f"{ADMIN_RESTAURANTS}/{restaurant_owner.id}/verify",
            json={"action": "approve"},
            headers=admin_headers,
        )
        assert res.status_code == 400
        assert res.json()["message"] == "Restaurant is already approved"

    async def test_bulk_verify_skips(self, client: AsyncClient, pending_owner, restaurant_owner, admin_headers):
        res = await client.post(f"{ADMIN_RESTAURANTS}/verification/bulk", headers=admin_headers, json={
            "action": "approve",
            "restaurant_ids": [str(pending_owner.id), str(restaurant_owner.id), "garbage"],
        })
        assert res.status_code == 200
        data = res.json()
        assert data["processed"] == [str(pending_owner.id)]
        assert {s["id"]: s["reason"] for s in data["skipped"]} == {
            str(restaurant_owner.id): "Restaurant is already approved",
            "garbage": "Restaurant not found",
        }

    async def test_queue_and_stats(self, client: AsyncClient, pending_owner, restaurant_owner, admin_headers):
        res = await client.get(f"{ADMIN_RESTAURANTS}/verification/queue", headers=admin_headers)
        assert [r["email"] for r in res.json()["items"]] == ["new@curry.com"]

        res = await client.get(f"{ADMIN_RESTAURANTS}/verification/stats", headers=admin_headers)
        data = res.json()
        assert data["pending"] == 1
        assert data["approved"] == 1
        assert data["total"] == 2

    async def test_requires_permission(self, client: AsyncClient, pending_owner, limited_admin_headers):
        res = await client.get(ADMIN_RESTAURANTS, headers=limited_admin_headers)
        assert res.status_code == 403
        assert res.json()["message"] == "Access denied. Missing permission: manage_restaurants"


class TestAdminManagement:

    async def test_list_filters(self, client: AsyncClient, pending_owner, restaurant_owner, admin_headers):
        res = await client.get(ADMIN_RESTAURANTS, params={"status": "pending"}, headers=admin_headers)
        assert res.json()["total"] == 1

        res = await client.get(ADMIN_RESTAURANTS, params={"city": "pokhara"}, headers=admin_headers)
        assert [r["restaurant_name"] for r in res.json()["items"]] == ["Curry Corner"]

        res = await client.get(ADMIN_RESTAURANTS, params={"cuisine": "tibetan"}, headers=admin_headers)
        assert [r["restaurant_name"] for r in res.json()["items"]] == ["Momo House"]

    async def test_update_syncs_listing(self, client: AsyncClient, db, restaurant_owner, restaurant, admin_headers):
        res = await client.put(
            f"{ADMIN_RESTAURANTS}/{restaurant_owner.id}",
            json={"restaurant_name": "Momo Palace", "delivery_fee": 40},
            headers=admin_headers,
        )
        assert res.status_code == 200
        await db.refresh(restaurant)
        assert restaurant.name == "Momo Palace"
        assert restaurant.delivery_fee == 40

    async def test_zone_needs_listing(self, client: AsyncClient, pending_owner, zone, admin_headers):
        res = await client.put(
            f"{ADMIN_RESTAURANTS}/{pending_owner.id}",
            json={"zone_id": str(zone.id)},
            headers=admin_headers,
        )
        assert res.status_code == 400
        assert res.json()["message"] == "Restaurant must be approved before it can be assigned to a zone"

    async def test_delete(self, client: AsyncClient, pending_owner, admin_headers):
        res = await client.delete(f"{ADMIN_RESTAURANTS}/{pending_owner.id}", headers=admin_headers)
        assert res.status_code == 204
        res = await client.get(f"{ADMIN_RESTAURANTS}/{pending_owner.id}", headers=admin_headers)
        assert res.status_code == 404


class TestOwnerProfile:

    async def test_profile_shows_listing(self, client: AsyncClient, restaurant, owner_headers):
        res = await client.get(PROFILE, headers=owner_headers)
        assert res.status_code == 200
        data = res.json()
        assert data["restaurant_name"] == "Momo House"
        assert data["restaurant_id"] == str(restaurant.id)

    async def test_delivery_window_checked(self, client: AsyncClient, restaurant, owner_headers):
        res = await client.put(PROFILE, json={"delivery_time_max": 25}, headers=owner_headers)
        assert res.status_code == 400
        assert res.json()["message"] == "Maximum delivery time must be greater than minimum delivery time"

    async def test_open_status_syncs_listing(self, client: AsyncClient, db, restaurant, owner_headers):
        res = await client.patch(f"{PROFILE}/open-status", json={"is_open": False}, headers=owner_headers)
        assert res.status_code == 200
        data = res.json()
        assert data["is_open"] is False
        assert data["is_currently_open"] is False

        await db.refresh(restaurant)
        assert restaurant.is_open is False

    async def test_customer_token_rejected(self, client: AsyncClient, customer_headers):
        res = await client.get(PROFILE, headers=customer_headers)
        assert res.status_code == 403


class TestPublicBrowsing:

    async def test_no_auth_needed(self, client: AsyncClient, restaurant, pending_owner):
        res = await client.get(PUBLIC)
        assert res.status_code == 200
        data = res.json()
        assert data["total"] == 1
        assert data["items"][0]["name"] == "Momo House"

    async def test_search(self, client: AsyncClient, restaurant):
        res = await client.get(PUBLIC, params={"search": "momo"})
        assert res.json()["total"] == 1
        res = await client.get(PUBLIC, params={"search": "pizza"})
        assert res.json()["total"] == 0

    async def test_by_cuisine_and_city(self, client: AsyncClient, restaurant):
        res = await client.get(f"{PUBLIC}/cuisine/NEPALI")
        assert [r["name"] for r in res.json()] == ["Momo House"]
        res = await client.get(f"{PUBLIC}/cuisine/nep")
        assert res.json() == []
        res = await client.get(f"{PUBLIC}/city/kathmandu")
        assert [r["name"] for r in res.json()] == ["Momo House"]

    async def test_inactive_listing_hidden(self, client: AsyncClient, db, restaurant):
        restaurant.is_active = False
        await db.flush()
        res = await client.get(f"{PUBLIC}/{restaurant.id}")
        assert res.status_code == 404
        assert res.json()["message"] == "Restaurant not found"
