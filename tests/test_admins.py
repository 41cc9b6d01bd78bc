"""Admin account tests - profile, creation, permissions and activation."""

from httpx import AsyncClient

ADMINS = "/api/v1/admin/admins"

NEW_ADMIN = {
    "name": "Support Sam",
    "email": "sam@foodhub.com",
    "password": "support123",
    "admin_id": "cs001",
    "department": "Customer Service",
    "permissions": ["user_support"],
}


class TestAdminAccounts:

    async def test_create_super_admin_only(self, client: AsyncClient, super_admin_headers, admin_headers):
        res = await client.post(ADMINS, json=NEW_ADMIN, headers=admin_headers)
        assert res.status_code == 403
        assert res.json()["message"] == "Access denied. Required user type: super_admin"

        res = await client.post(ADMINS, json=NEW_ADMIN, headers=super_admin_headers)
        assert res.status_code == 201
        data = res.json()
        assert data["admin_id"] == "CS001"
        assert data["type"] == "admin"
        assert data["permissions"] == ["user_support"]

        res = await client.post(
            "/api/v1/admin/auth/login", json={"email": "sam@foodhub.com", "password": "support123"}
        )
        assert res.status_code == 200

    async def test_duplicates(self, client: AsyncClient, admin_user, super_admin_headers):
        res = await client.post(ADMINS, json={**NEW_ADMIN, "email": "ops@foodhub.com"}, headers=super_admin_headers)
        assert res.status_code == 400
        assert res.json()["message"] == "Admin with this email already exists"

        res = await client.post(ADMINS, json={**NEW_ADMIN, "admin_id": "AD001"}, headers=super_admin_headers)
        assert res.json()["message"] == "Admin with this admin ID already exists"

    async def test_unknown_permission(self, client: AsyncClient, super_admin_headers):
        res = await client.post(ADMINS, json={**NEW_ADMIN, "permissions": ["launch_rockets"]}, headers=super_admin_headers)
        assert res.status_code == 400
        assert "Unknown permissions: launch_rockets" in res.json()["message"]

    async def test_list_needs_manage_users(self, client: AsyncClient, admin_user, limited_admin, limited_admin_headers, admin_headers):
        res = await client.get(ADMINS, headers=limited_admin_headers)
        assert res.status_code == 403

        res = await client.get(ADMINS, params={"search": "intern"}, headers=admin_headers)
        assert res.status_code == 200
        assert [a["email"] for a in res.json()["items"]] == ["intern@foodhub.com"]

    async def test_grant_permission(self, client: AsyncClient, limited_admin, super_admin_headers, limited_admin_headers):
        res = await client.put(
            f"{ADMINS}/{limited_admin.id}/permissions",
            json={"permissions": ["view_analytics"]},
            headers=super_admin_headers,
        )
        assert res.json()["permissions"] == ["view_analytics"]

        res = await client.get("/api/v1/admin/analytics/overall", headers=limited_admin_headers)
        assert res.status_code == 200

    async def test_deactivate(self, client: AsyncClient, admin_user, super_admin, super_admin_headers, admin_headers):
        res = await client.patch(f"{ADMINS}/{admin_user.id}/status", json={"is_active": False}, headers=super_admin_headers)
        assert res.json()["is_active"] is False

        res = await client.get(f"{ADMINS}/profile", headers=admin_headers)
        assert res.status_code == 401

        res = await client.patch(f"{ADMINS}/{super_admin.id}/status", json={"is_active": False}, headers=super_admin_headers)
        assert res.status_code == 400
        assert res.json()["message"] == "You cannot deactivate your own account"

    async def test_own_profile(self, client: AsyncClient, admin_headers):
        res = await client.put(f"{ADMINS}/profile", json={"name": "Ops Lead", "department": "Finance"}, headers=admin_headers)
        assert res.status_code == 200
        assert res.json()["name"] == "Ops Lead"
        assert res.json()["department"] == "Finance"

    async def test_get_missing(self, client: AsyncClient, admin_headers):
        res = await client.get(f"{ADMINS}/00000000-0000-0000-0000-000000000000", headers=admin_headers)
        assert res.status_code == 404
        assert res.json()["message"] == "Admin not found"
