"""Delivery tests - assignment, courier progress, order mirroring, delays and ratings."""

from httpx import AsyncClient
from sqlalchemy import select

from foodhub.models import DeliveryAnalytics, DeliveryPersonnel
from tests.conftest import auth_header, make_order, make_token

ADMIN_DELIVERIES = "/api/v1/admin/deliveries"
COURIER_DELIVERIES = "/api/v1/delivery/deliveries"
CUSTOMER = "/api/v1/customer"


async def _assign(client: AsyncClient, order, courier, headers, **extra) -> dict:
    res = await client.post(ADMIN_DELIVERIES, headers=headers, json={
        "order_id": str(order.id),
        "personnel_id": str(courier.id),
        "estimated_minutes": 45,
        "distance": 3.5,
        **extra,
    })
    assert res.status_code == 201, res.text
    return res.json()


class TestAssignment:

    async def test_assign_snapshots_and_totals(self, client: AsyncClient, db, order, courier, zone, admin_headers):
        data = await _assign(client, order, courier, admin_headers)
        assert data["status"] == "assigned"
        assert data["zone_id"] == str(zone.id)
        assert data["personnel"]["name"] == "Rapid Ram"
        assert data["customer"]["name"] == "Hungry Harriet"
        assert data["restaurant"]["name"] == "Momo House"
        assert data["order_value"] == 500.0
        assert data["delivery_charge"] == 50.0
        assert data["total_amount"] == order.total
        assert data["estimated_time_remaining"] > 40

        await db.refresh(order)
        await db.refresh(courier)
        assert order.delivery_person_id == courier.id
        assert order.tracking_updates[-1]["note"] == "Assigned to Rapid Ram"
        assert courier.status == "on_duty"

    async def test_one_delivery_per_order(self, client: AsyncClient, order, courier, admin_headers):
        await _assign(client, order, courier, admin_headers)
        res = await client.post(ADMIN_DELIVERIES, headers=admin_headers, json={
            "order_id": str(order.id),
            "personnel_id": str(courier.id),
        })
        assert res.status_code == 400
        assert res.json()["message"] == "Order already has a delivery assigned"

    async def test_offline_courier_unavailable(self, client: AsyncClient, db, order, courier, admin_headers):
        courier.is_online = False
        await db.flush()
        res = await client.post(ADMIN_DELIVERIES, headers=admin_headers, json={
            "order_id": str(order.id),
            "personnel_id": str(courier.id),
        })
        assert res.status_code == 400
        assert res.json()["message"] == "Delivery personnel is not available"

    async def test_finished_order_rejected(self, client: AsyncClient, db, customer, restaurant, courier, admin_headers):
        done = await make_order(db, customer, restaurant, status="delivered")
        res = await client.post(ADMIN_DELIVERIES, headers=admin_headers, json={
            "order_id": str(done.id),
            "personnel_id": str(courier.id),
        })
        assert res.status_code == 400
        assert res.json()["message"] == "Order is already delivered"

    async def test_bad_personnel_id(self, client: AsyncClient, order, admin_headers):
        res = await client.post(ADMIN_DELIVERIES, headers=admin_headers, json={
            "order_id": str(order.id),
            "personnel_id": "xyz",
        })
        assert res.status_code == 400
        assert res.json()["message"] == "Invalid personnel_id: xyz"


class TestCourierFlow:

    async def test_pickup_and_delivery_mirror_order(
        self, client: AsyncClient, db, order, courier, admin_headers, courier_headers
    ):
        delivery = await _assign(client, order, courier, admin_headers)
        url = f"{COURIER_DELIVERIES}/{delivery['id']}/status"

        res = await client.get(f"{COURIER_DELIVERIES}/active", headers=courier_headers)
        assert [d["id"] for d in res.json()] == [delivery["id"]]

        res = await client.patch(url, json={"status": "picked_up"}, headers=courier_headers)
        assert res.status_code == 200
        assert res.json()["picked_up_at"] is not None
        await db.refresh(order)
        assert order.status == "picked_up"

        res = await client.patch(url, json={"status": "in_transit"}, headers=courier_headers)
        assert res.status_code == 200
        await db.refresh(order)
        assert order.status == "picked_up"

        res = await client.patch(url, json={"status": "delivered"}, headers=courier_headers)
        assert res.status_code == 200
        data = res.json()
        assert data["actual_delivery"] is not None
        assert data["is_on_time"] is True
        assert data["actual_delivery_time"] == data["delivery_duration"]

        await db.refresh(order)
        await db.refresh(courier)
        assert order.status == "delivered"
        assert order.payment_status == "paid"
        assert courier.completed_deliveries == 1
        assert courier.on_time_deliveries == 1

        rows = (await db.execute(select(DeliveryAnalytics))).scalars().all()
        assert len(rows) == 2
        assert {r.personnel_id for r in rows} == {None, courier.id}
        assert all(r.completed_deliveries == 1 for r in rows)

    async def test_no_backwards_moves(self, client: AsyncClient, order, courier, admin_headers, courier_headers):
        delivery = await _assign(client, order, courier, admin_headers)
        url = f"{COURIER_DELIVERIES}/{delivery['id']}/status"
        await client.patch(url, json={"status": "in_transit"}, headers=courier_headers)

        res = await client.patch(url, json={"status": "picked_up"}, headers=courier_headers)
        assert res.status_code == 400
        assert res.json()["message"] == "Cannot move delivery from in_transit back to picked_up"

    async def test_delayed_status_flags_delay(self, client: AsyncClient, order, courier, admin_headers, courier_headers):
        delivery = await _assign(client, order, courier, admin_headers)
        res = await client.patch(
            f"{COURIER_DELIVERIES}/{delivery['id']}/status",
            json={"status": "delayed", "note": "Traffic jam"},
            headers=courier_headers,
        )
        data = res.json()
        assert data["is_delayed"] is True
        assert data["delay_reason"] == "Traffic jam"

    async def test_cancelled_delivery_releases_order(
        self, client: AsyncClient, db, order, courier, admin_headers, courier_headers
    ):
        delivery = await _assign(client, order, courier, admin_headers)
        res = await client.patch(
            f"{COURIER_DELIVERIES}/{delivery['id']}/status", json={"status": "failed"}, headers=courier_headers
        )
        assert res.status_code == 200

        await db.refresh(order)
        await db.refresh(courier)
        assert order.status == "placed"
        assert order.delivery_person_id is None
        assert courier.cancelled_deliveries == 1

        res = await client.patch(
            f"{COURIER_DELIVERIES}/{delivery['id']}/status", json={"status": "delivered"}, headers=courier_headers
        )
        assert res.status_code == 400
        assert res.json()["message"] == "Delivery is already failed"

    async def test_reassign_after_failed_delivery(
        self, client: AsyncClient, db, order, courier, admin_headers, courier_headers, customer_headers
    ):
        first = await _assign(client, order, courier, admin_headers)
        await client.patch(
            f"{COURIER_DELIVERIES}/{first['id']}/status", json={"status": "failed"}, headers=courier_headers
        )

        second = await _assign(client, order, courier, admin_headers)
        assert second["id"] != first["id"]
        assert second["status"] == "assigned"

        await db.refresh(order)
        assert order.delivery_person_id == courier.id

        # Order tracking follows the newest delivery
        res = await client.get(f"{CUSTOMER}/orders/{order.id}/delivery", headers=customer_headers)
        assert res.json()["id"] == second["id"]

        res = await client.get(ADMIN_DELIVERIES, headers=admin_headers)
        assert res.json()["total"] == 2

    async def test_delayed_delivery_cannot_return_to_assigned(
        self, client: AsyncClient, order, courier, admin_headers, courier_headers
    ):
        delivery = await _assign(client, order, courier, admin_headers)
        url = f"{COURIER_DELIVERIES}/{delivery['id']}/status"
        res = await client.patch(url, json={"status": "picked_up"}, headers=courier_headers)
        picked_up_at = res.json()["picked_up_at"]
        res = await client.patch(url, json={"status": "delayed"}, headers=courier_headers)
        assert res.json()["progress_status"] == "picked_up"

        res = await client.patch(url, json={"status": "assigned"}, headers=courier_headers)
        assert res.status_code == 400
        assert res.json()["message"] == "Cannot move delivery from delayed back to assigned"

        # Resuming where it left off is fine
        res = await client.patch(url, json={"status": "picked_up"}, headers=courier_headers)
        assert res.status_code == 200
        assert res.json()["picked_up_at"] == picked_up_at

    async def test_delay_pushes_estimate(self, client: AsyncClient, order, courier, admin_headers, courier_headers):
        delivery = await _assign(client, order, courier, admin_headers)
        res = await client.post(
            f"{COURIER_DELIVERIES}/{delivery['id']}/delay",
            json={"reason": "Rain", "minutes": 15},
            headers=courier_headers,
        )
        data = res.json()
        assert data["delay_time"] == 15
        assert data["estimated_time_remaining"] > 55

    async def test_location_updates_courier_too(
        self, client: AsyncClient, db, order, courier, admin_headers, courier_headers
    ):
        delivery = await _assign(client, order, courier, admin_headers)
        res = await client.patch(
            f"{COURIER_DELIVERIES}/{delivery['id']}/location",
            json={"lat": 27.71, "lng": 85.32},
            headers=courier_headers,
        )
        assert res.json()["current_location"]["lat"] == 27.71
        await db.refresh(courier)
        assert courier.current_lat == 27.71

    async def test_other_courier_cannot_touch(self, client: AsyncClient, db, order, courier, zone, admin_headers):
        delivery = await _assign(client, order, courier, admin_headers)
        stranger = DeliveryPersonnel(
            name="Stranger", email="x@foodhub.com", phone="+9779833333333", employee_id="EMP009",
            zone_id=zone.id, zone_name=zone.name, vehicle_type="Bicycle", vehicle_number="B1", status="active",
        )
        db.add(stranger)
        await db.flush()

        res = await client.get(
            f"{COURIER_DELIVERIES}/{delivery['id']}", headers=auth_header(make_token(stranger, "delivery"))
        )
        assert res.status_code == 404


class TestRating:

    async def _deliver(self, client, order, courier, admin_headers) -> dict:
        delivery = await _assign(client, order, courier, admin_headers)
        res = await client.patch(
            f"{ADMIN_DELIVERIES}/{delivery['id']}/status", json={"status": "delivered"}, headers=admin_headers
        )
        assert res.status_code == 200
        return delivery

    async def test_rate_once(self, client: AsyncClient, db, order, courier, admin_headers, customer_headers):
        delivery = await self._deliver(client, order, courier, admin_headers)
        url = f"{CUSTOMER}/deliveries/{delivery['id']}/rate"

        res = await client.post(url, json={"rating": 4, "feedback": "Quick"}, headers=customer_headers)
        assert res.status_code == 200
        assert res.json()["customer_rating"] == 4

        await db.refresh(courier)
        assert courier.rating == 4.0

        res = await client.post(url, json={"rating": 5}, headers=customer_headers)
        assert res.status_code == 400
        assert res.json()["message"] == "Delivery has already been rated"

    async def test_only_delivered(self, client: AsyncClient, order, courier, admin_headers, customer_headers):
        delivery = await _assign(client, order, courier, admin_headers)
        res = await client.post(f"{CUSTOMER}/deliveries/{delivery['id']}/rate", json={"rating": 5}, headers=customer_headers)
        assert res.status_code == 400
        assert res.json()["message"] == "Only delivered deliveries can be rated"

    async def test_other_customer_cannot_rate(
        self, client: AsyncClient, order, courier, admin_headers, other_customer_headers
    ):
        delivery = await self._deliver(client, order, courier, admin_headers)
        res = await client.post(
            f"{CUSTOMER}/deliveries/{delivery['id']}/rate", json={"rating": 1}, headers=other_customer_headers
        )
        assert res.status_code == 404

    async def test_customer_tracks_order_delivery(
        self, client: AsyncClient, order, courier, admin_headers, customer_headers
    ):
        delivery = await _assign(client, order, courier, admin_headers)
        res = await client.get(f"{CUSTOMER}/orders/{order.id}/delivery", headers=customer_headers)
        assert res.status_code == 200
        assert res.json()["id"] == delivery["id"]


class TestAdminDeliveryQueries:

    async def test_tracking_stats(self, client: AsyncClient, order, courier, admin_headers):
        await _assign(client, order, courier, admin_headers)
        res = await client.get(f"{ADMIN_DELIVERIES}/tracking-stats", headers=admin_headers)
        assert res.status_code == 200
        assert res.json()["active_deliveries"] == 1

    async def test_list_filters_by_status(self, client: AsyncClient, order, courier, admin_headers):
        await _assign(client, order, courier, admin_headers)
        res = await client.get(ADMIN_DELIVERIES, params={"status": "assigned"}, headers=admin_headers)
        assert res.json()["total"] == 1
        res = await client.get(ADMIN_DELIVERIES, params={"status": "delivered"}, headers=admin_headers)
        assert res.json()["total"] == 0
