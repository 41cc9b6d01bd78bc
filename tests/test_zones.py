"""Zone API tests - CRUD, lookups, dropdown, stats and bulk status."""

from httpx import AsyncClient

from foodhub.models import Zone

ZONES = "/api/v1/admin/zones"

NEW_ZONE = {
    "name": "Lakeside",
    "description": "Pokhara lake front",
    "areas": [" Lakeside ", "Baidam"],
    "pincodes": ["33700"],
    "delivery_charge": 80,
}


class TestZoneCrud:

    async def test_create_zone(self, client: AsyncClient, admin_user, admin_headers):
        res = await client.post(ZONES, json=NEW_ZONE, headers=admin_headers)
        assert res.status_code == 201
        data = res.json()
        assert data["name"] == "Lakeside"
        assert data["areas"] == ["lakeside", "baidam"]
        assert data["status"] == "active"
        assert data["created_by"] == str(admin_user.id)
        assert data["efficiency"] == 0

    async def test_duplicate_name_any_case(self, client: AsyncClient, zone, admin_headers):
        res = await client.post(ZONES, json={**NEW_ZONE, "name": "CENTRAL"}, headers=admin_headers)
        assert res.status_code == 400
        assert res.json()["message"] == "Zone with this name already exists"

    async def test_invalid_pincode(self, client: AsyncClient, admin_headers):
        res = await client.post(ZONES, json={**NEW_ZONE, "pincodes": ["12"]}, headers=admin_headers)
        assert res.status_code == 400

    async def test_charge_upper_bound(self, client: AsyncClient, admin_headers):
        res = await client.post(ZONES, json={**NEW_ZONE, "delivery_charge": 1001}, headers=admin_headers)
        assert res.status_code == 400

    async def test_requires_admin(self, client: AsyncClient, customer_headers):
        res = await client.post(ZONES, json=NEW_ZONE, headers=customer_headers)
        assert res.status_code == 403

    async def test_get_and_update(self, client: AsyncClient, zone, admin_headers):
        res = await client.put(f"{ZONES}/{zone.id}", json={"delivery_charge": 65}, headers=admin_headers)
        assert res.status_code == 200
        assert res.json()["delivery_charge"] == 65
        assert res.json()["updated_by"] is not None

        res = await client.get(f"{ZONES}/{zone.id}", headers=admin_headers)
        assert res.json()["delivery_charge"] == 65

    async def test_malformed_id(self, client: AsyncClient, admin_headers):
        res = await client.get(f"{ZONES}/not-a-uuid", headers=admin_headers)
        assert res.status_code == 400
        assert res.json()["message"] == "Invalid zone_id: not-a-uuid"

    async def test_unknown_zone(self, client: AsyncClient, admin_headers):
        res = await client.get(f"{ZONES}/00000000-0000-0000-0000-000000000000", headers=admin_headers)
        assert res.status_code == 404

    async def test_delete_blocked_by_couriers(self, client: AsyncClient, zone, courier, admin_headers):
        res = await client.delete(f"{ZONES}/{zone.id}", headers=admin_headers)
        assert res.status_code == 400
        assert res.json()["message"] == "Cannot delete zone with 1 assigned delivery personnel"

    async def test_delete_empty_zone(self, client: AsyncClient, zone, admin_headers):
        res = await client.delete(f"{ZONES}/{zone.id}", headers=admin_headers)
        assert res.status_code == 204

        res = await client.get(f"{ZONES}/{zone.id}", headers=admin_headers)
        assert res.status_code == 404


class TestZoneQueries:

    async def test_list_paginated(self, client: AsyncClient, zone, admin_headers):
        res = await client.get(ZONES, headers=admin_headers)
        assert res.status_code == 200
        data = res.json()
        assert data["total"] == 1
        assert data["items"][0]["name"] == "Central"

    async def test_dropdown_lists_active_only(self, client: AsyncClient, db, zone, super_admin, admin_headers):
        db.add(Zone(name="Closed", areas=["Nowhere"], delivery_charge=10, status="inactive", created_by=super_admin.id))
        await db.flush()

        res = await client.get(ZONES, params={"dropdown": "true"}, headers=admin_headers)
        assert res.status_code == 200
        assert res.json() == [{
            "value": str(zone.id),
            "label": "Central",
            "id": str(zone.id),
            "delivery_charge": 50.0,
        }]

    async def test_find_by_area_case_insensitive(self, client: AsyncClient, zone, admin_headers):
        res = await client.get(f"{ZONES}/area/thamel", headers=admin_headers)
        assert res.status_code == 200
        assert [z["name"] for z in res.json()] == ["Central"]

    async def test_find_by_area_non_ascii(self, client: AsyncClient, admin_headers):
        res = await client.post(ZONES, json={**NEW_ZONE, "name": "Bakery Row", "areas": ["Café Lane"]}, headers=admin_headers)
        assert res.status_code == 201

        res = await client.get(f"{ZONES}/area/CAFÉ", headers=admin_headers)
        assert [z["name"] for z in res.json()] == ["Bakery Row"]
        res = await client.get(ZONES, params={"search": "café l"}, headers=admin_headers)
        assert res.json()["total"] == 1

    async def test_wildcards_are_literal(self, client: AsyncClient, zone, admin_headers):
        res = await client.get(f"{ZONES}/area/%25", headers=admin_headers)
        assert res.json() == []
        for term in ('"', "_", "%"):
            res = await client.get(ZONES, params={"search": term}, headers=admin_headers)
            assert res.json()["total"] == 0, term

    async def test_find_by_pincode(self, client: AsyncClient, zone, admin_headers):
        res = await client.get(f"{ZONES}/pincode/44600", headers=admin_headers)
        assert [z["id"] for z in res.json()] == [str(zone.id)]

        res = await client.get(f"{ZONES}/pincode/99999", headers=admin_headers)
        assert res.json() == []

    async def test_stats(self, client: AsyncClient, zone, admin_headers):
        res = await client.get(f"{ZONES}/stats", headers=admin_headers)
        assert res.status_code == 200
        data = res.json()
        assert data["total_zones"] == 1
        assert data["active_zones"] == 1
        assert data["average_charge"] == 50.0

    async def test_bulk_status(self, client: AsyncClient, zone, admin_headers):
        res = await client.patch(f"{ZONES}/bulk-status", headers=admin_headers, json={
            "zone_ids": [str(zone.id)],
            "status": "maintenance",
        })
        assert res.status_code == 200
        assert res.json() == {"matched_count": 1, "modified_count": 1}

        res = await client.get(f"{ZONES}/{zone.id}", headers=admin_headers)
        assert res.json()["status"] == "maintenance"
