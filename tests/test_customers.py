"""Customer tests - profile, saved addresses and back-office management."""

from httpx import AsyncClient

PROFILE = "/api/v1/customer/profile"
ADMIN_CUSTOMERS = "/api/v1/admin/customers"


def _defaults(addresses: list[dict]) -> list[str]:
    return [a["id"] for a in addresses if a["is_default"]]


class TestProfile:

    async def test_get_profile(self, client: AsyncClient, customer_headers):
        res = await client.get(PROFILE, headers=customer_headers)
        assert res.status_code == 200
        data = res.json()
        assert data["email"] == "harriet@foodhub.com"
        assert data["segment"] == "new"
        assert "password_hash" not in data

    async def test_update_merges_notification_preferences(self, client: AsyncClient, customer_headers):
        await client.put(PROFILE, json={"notification_preferences": {"sms": True}}, headers=customer_headers)
        res = await client.put(
            PROFILE,
            json={"name": "Harriet H", "notification_preferences": {"email": False}},
            headers=customer_headers,
        )
        data = res.json()
        assert data["name"] == "Harriet H"
        assert data["notification_preferences"]["sms"] is True
        assert data["notification_preferences"]["email"] is False

    async def test_phone_taken(self, client: AsyncClient, other_customer, customer_headers):
        res = await client.put(PROFILE, json={"phone": "9800000002"}, headers=customer_headers)
        assert res.status_code == 400
        assert res.json()["message"] == "Customer with this email or phone number already exists"

    async def test_other_roles_rejected(self, client: AsyncClient, courier_headers):
        res = await client.get(PROFILE, headers=courier_headers)
        assert res.status_code == 403


class TestAddresses:

    async def test_first_address_becomes_default(self, client: AsyncClient, other_customer_headers):
        res = await client.post(
            f"{PROFILE}/addresses",
            json={"street": "2 Lake Road", "city": "Pokhara"},
            headers=other_customer_headers,
        )
        assert res.status_code == 201
        addresses = res.json()["addresses"]
        assert len(addresses) == 1
        assert addresses[0]["is_default"] is True
        assert len(addresses[0]["id"]) == 32

    async def test_new_default_replaces_old(self, client: AsyncClient, customer_headers):
        res = await client.post(
            f"{PROFILE}/addresses",
            json={"type": "work", "street": "3 Office Park", "city": "Lalitpur", "is_default": True},
            headers=customer_headers,
        )
        addresses = res.json()["addresses"]
        assert len(addresses) == 2
        assert _defaults(addresses) == [addresses[1]["id"]]

    async def test_non_default_keeps_old(self, client: AsyncClient, customer_headers):
        res = await client.post(
            f"{PROFILE}/addresses",
            json={"street": "3 Office Park", "city": "Lalitpur"},
            headers=customer_headers,
        )
        assert _defaults(res.json()["addresses"]) == ["a1"]

    async def test_set_default_and_delete_promotes(self, client: AsyncClient, customer_headers):
        res = await client.post(
            f"{PROFILE}/addresses",
            json={"street": "3 Office Park", "city": "Lalitpur"},
            headers=customer_headers,
        )
        second = res.json()["addresses"][1]["id"]

        res = await client.patch(f"{PROFILE}/addresses/{second}/default", headers=customer_headers)
        assert _defaults(res.json()["addresses"]) == [second]

        res = await client.delete(f"{PROFILE}/addresses/{second}", headers=customer_headers)
        assert res.status_code == 200
        assert _defaults(res.json()["addresses"]) == ["a1"]

    async def test_update_address(self, client: AsyncClient, customer_headers):
        res = await client.put(
            f"{PROFILE}/addresses/a1",
            json={"apartment": "Flat 4", "instructions": "Ring twice"},
            headers=customer_headers,
        )
        address = res.json()["addresses"][0]
        assert address["apartment"] == "Flat 4"
        assert address["street"] == "1 Main Street"
        assert address["is_default"] is True

    async def test_unknown_address(self, client: AsyncClient, customer_headers):
        res = await client.delete(f"{PROFILE}/addresses/nope", headers=customer_headers)
        assert res.status_code == 404
        assert res.json()["message"] == "Address not found"


class TestAdminCustomers:

    async def test_list_and_search(self, client: AsyncClient, customer, other_customer, admin_headers):
        res = await client.get(ADMIN_CUSTOMERS, headers=admin_headers)
        assert res.json()["total"] == 2

        res = await client.get(ADMIN_CUSTOMERS, params={"search": "oscar"}, headers=admin_headers)
        assert [c["name"] for c in res.json()["items"]] == ["Other Oscar"]

    async def test_segment_filter(self, client: AsyncClient, db, customer, other_customer, admin_headers):
        customer.total_spent = 1500.0
        await db.flush()

        res = await client.get(ADMIN_CUSTOMERS, params={"segment": "premium"}, headers=admin_headers)
        items = res.json()["items"]
        assert [c["email"] for c in items] == ["harriet@foodhub.com"]
        assert items[0]["segment"] == "premium"

    async def test_deactivate_blocks_login(self, client: AsyncClient, customer, admin_headers):
        res = await client.patch(
            f"{ADMIN_CUSTOMERS}/{customer.id}/status", json={"is_active": False}, headers=admin_headers
        )
        assert res.json()["is_active"] is False

        res = await client.post(
            "/api/v1/customer/auth/login",
            json={"email": "harriet@foodhub.com", "password": "customer123"},
        )
        assert res.status_code == 401
        assert res.json()["message"] == "Account is deactivated"

    async def test_analytics(self, client: AsyncClient, customer, other_customer, admin_headers):
        res = await client.get(f"{ADMIN_CUSTOMERS}/analytics", headers=admin_headers)
        data = res.json()
        assert data["total_customers"] == 2
        assert data["new_this_month"] == 2
        assert data["segments"] == {"premium": 0, "regular": 0, "new": 2}

    async def test_delete(self, client: AsyncClient, other_customer, admin_headers):
        res = await client.delete(f"{ADMIN_CUSTOMERS}/{other_customer.id}", headers=admin_headers)
        assert res.status_code == 204
        res = await client.get(f"{ADMIN_CUSTOMERS}/{other_customer.id}", headers=admin_headers)
        assert res.status_code == 404

    async def test_requires_manage_users(self, client: AsyncClient, limited_admin_headers):
        res = await client.get(ADMIN_CUSTOMERS, headers=limited_admin_headers)
        assert res.status_code == 403
