"""Delivery personnel tests - admin management and the courier's own profile."""

from httpx import AsyncClient

PERSONNEL = "/api/v1/admin/personnel"
COURIER_PROFILE = "/api/v1/delivery/profile"


def _new_courier(**overrides) -> dict:
    body = {
        "name": "Swift Sita",
        "email": "sita@foodhub.com",
        "phone": "+977 9822-222222",
        "employee_id": "emp002",
        "zone": "central",
        "vehicle_type": "Scooter",
        "vehicle_number": "ba 2 pa 2222",
        "password": "courier123",
    }
    body.update(overrides)
    return body


class TestPersonnelAdmin:

    async def test_create_resolves_zone_by_name(self, client: AsyncClient, zone, admin_headers):
        res = await client.post(PERSONNEL, json=_new_courier(), headers=admin_headers)
        assert res.status_code == 201
        data = res.json()
        assert data["zone_id"] == str(zone.id)
        assert data["zone_name"] == "Central"
        assert data["phone"] == "+9779822222222"
        assert data["employee_id"] == "EMP002"
        assert data["vehicle_number"] == "BA 2 PA 2222"
        assert data["performance"] == "new"
        assert data["current_location"]["lat"] is not None

    async def test_create_resolves_zone_by_id(self, client: AsyncClient, zone, admin_headers):
        res = await client.post(PERSONNEL, json=_new_courier(zone=str(zone.id)), headers=admin_headers)
        assert res.status_code == 201

    async def test_unknown_zone(self, client: AsyncClient, zone, admin_headers):
        res = await client.post(PERSONNEL, json=_new_courier(zone="Atlantis"), headers=admin_headers)
        assert res.status_code == 400
        assert res.json()["message"] == "Invalid zone: Atlantis"

    async def test_duplicate_employee_id(self, client: AsyncClient, courier, admin_headers):
        res = await client.post(PERSONNEL, json=_new_courier(employee_id="EMP001"), headers=admin_headers)
        assert res.status_code == 400
        assert res.json()["message"] == "Delivery personnel with this employee ID already exists"

    async def test_invalid_phone(self, client: AsyncClient, zone, admin_headers):
        res = await client.post(PERSONNEL, json=_new_courier(phone="abc"), headers=admin_headers)
        assert res.status_code == 400

    async def test_invalid_vehicle_type(self, client: AsyncClient, zone, admin_headers):
        res = await client.post(PERSONNEL, json=_new_courier(vehicle_type="Tank"), headers=admin_headers)
        assert res.status_code == 400

    async def test_list_search(self, client: AsyncClient, courier, admin_headers):
        res = await client.get(PERSONNEL, params={"search": "rapid"}, headers=admin_headers)
        assert res.status_code == 200
        assert res.json()["total"] == 1

        res = await client.get(PERSONNEL, params={"search": "nobody"}, headers=admin_headers)
        assert res.json()["total"] == 0

    async def test_status_off_duty_goes_offline(self, client: AsyncClient, courier, admin_headers):
        res = await client.patch(f"{PERSONNEL}/{courier.id}/status", json={"status": "off_duty"}, headers=admin_headers)
        assert res.status_code == 200
        data = res.json()
        assert data["status"] == "off_duty"
        assert data["is_online"] is False
        assert data["is_available"] is False

    async def test_online_offline(self, client: AsyncClient, courier, admin_headers):
        res = await client.patch(f"{PERSONNEL}/{courier.id}/offline", headers=admin_headers)
        assert res.json()["status"] == "off_duty"

        res = await client.patch(f"{PERSONNEL}/{courier.id}/online", headers=admin_headers)
        data = res.json()
        assert data["status"] == "on_duty"
        assert data["is_available"] is True

    async def test_available_in_zone(self, client: AsyncClient, zone, courier, admin_headers):
        res = await client.get(f"{PERSONNEL}/available/{zone.id}", headers=admin_headers)
        assert [c["id"] for c in res.json()] == [str(courier.id)]

    async def test_bulk_status_skips_unknown_ids(self, client: AsyncClient, courier, admin_headers):
        res = await client.patch(f"{PERSONNEL}/bulk-status", headers=admin_headers, json={
            "personnel_ids": [str(courier.id), "garbage"],
            "status": "suspended",
        })
        assert res.status_code == 200
        assert res.json() == {"matched_count": 1, "modified_count": 1}

    async def test_stats(self, client: AsyncClient, courier, admin_headers):
        res = await client.get(f"{PERSONNEL}/stats", headers=admin_headers)
        data = res.json()
        assert data["total_personnel"] == 1
        assert data["active_personnel"] == 1
        assert data["online_personnel"] == 1

    async def test_delete(self, client: AsyncClient, courier, admin_headers):
        res = await client.delete(f"{PERSONNEL}/{courier.id}", headers=admin_headers)
        assert res.status_code == 204
        res = await client.get(f"{PERSONNEL}/{courier.id}", headers=admin_headers)
        assert res.status_code == 404

    async def test_delete_refused_with_delivery_history(self, client: AsyncClient, order, courier, admin_headers):
        res = await client.post("/api/v1/admin/deliveries", headers=admin_headers, json={
            "order_id": str(order.id),
            "personnel_id": str(courier.id),
        })
        assert res.status_code == 201

        res = await client.delete(f"{PERSONNEL}/{courier.id}", headers=admin_headers)
        assert res.status_code == 400
        assert res.json()["message"].startswith("Cannot delete delivery personnel with delivery history")

        res = await client.get("/api/v1/admin/deliveries", headers=admin_headers)
        assert res.json()["total"] == 1


class TestCourierSelfService:

    async def test_profile(self, client: AsyncClient, courier, courier_headers):
        res = await client.get(COURIER_PROFILE, headers=courier_headers)
        assert res.status_code == 200
        assert res.json()["email"] == "ram@foodhub.com"

    async def test_update_own_profile(self, client: AsyncClient, courier, courier_headers):
        res = await client.put(COURIER_PROFILE, json={"vehicle_model": "Honda Dio"}, headers=courier_headers)
        assert res.status_code == 200
        assert res.json()["vehicle_model"] == "Honda Dio"

    async def test_go_off_duty(self, client: AsyncClient, courier, courier_headers):
        res = await client.patch(f"{COURIER_PROFILE}/status", json={"status": "off_duty"}, headers=courier_headers)
        assert res.status_code == 200
        assert res.json()["is_online"] is False

    async def test_cannot_suspend_self(self, client: AsyncClient, courier, courier_headers):
        res = await client.patch(f"{COURIER_PROFILE}/status", json={"status": "suspended"}, headers=courier_headers)
        assert res.status_code == 403
        assert res.json()["message"] == "You can only switch between on_duty and off_duty"

    async def test_update_location(self, client: AsyncClient, courier, courier_headers):
        res = await client.patch(f"{COURIER_PROFILE}/location", headers=courier_headers, json={
            "lat": 27.7,
            "lng": 85.3,
            "address": "Ratna Park",
        })
        assert res.status_code == 200
        location = res.json()["current_location"]
        assert location["lat"] == 27.7
        assert location["address"] == "Ratna Park"

    async def test_customer_cannot_use_courier_app(self, client: AsyncClient, customer_headers):
        res = await client.get(COURIER_PROFILE, headers=customer_headers)
        assert res.status_code == 403
        assert res.json()["message"] == "Access denied. Required user type: delivery"
