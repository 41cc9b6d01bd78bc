"""Order tests - placement, restaurant and admin status changes, cancellation, deletion."""

import uuid

from httpx import AsyncClient
from sqlalchemy import select

from foodhub.models import DailySales, MenuCategory, MenuItem, Notification, Restaurant
from tests.conftest import auth_header, make_order, make_token

CUSTOMER_ORDERS = "/api/v1/customer/orders"
RESTAURANT_ORDERS = "/api/v1/restaurant/orders"
ADMIN_ORDERS = "/api/v1/admin/orders"


def _order_body(restaurant, menu_items, **overrides) -> dict:
    body = {
        "restaurant_id": str(restaurant.id),
        "items": [
            {"menu_item_id": str(menu_items["Chicken Momo"].id), "quantity": 2},
            {"menu_item_id": str(menu_items["Thukpa"].id), "quantity": 1, "customizations": ["extra spicy"]},
        ],
        "delivery_fee": 40,
        "tax": 10,
        "discount": 20,
        "payment_method": "card",
    }
    body.update(overrides)
    return body


class TestPlaceOrder:

    async def test_place_order_prices_lines(
        self, client: AsyncClient, db, customer, restaurant, menu_items, customer_headers
    ):
        res = await client.post(CUSTOMER_ORDERS, json=_order_body(restaurant, menu_items), headers=customer_headers)
        assert res.status_code == 201
        data = res.json()
        assert data["subtotal"] == 550.5
        assert data["total"] == 580.5
        assert data["status"] == "placed"
        assert data["payment_status"] == "pending"
        assert data["order_number"].startswith("ORD-")
        assert len(data["delivery_otp"]) == 4
        # Falls back to the customer's default address
        assert data["delivery_address"]["street"] == "1 Main Street"
        assert data["tracking_updates"][0]["status"] == "placed"

        # The restaurant owner is notified in-app
        result = await db.execute(select(Notification).where(Notification.recipient_type == "restaurant"))
        assert len(result.scalars().all()) == 1

    async def test_lines_snapshot_the_menu(
        self, client: AsyncClient, db, customer, restaurant, menu_items, customer_headers
    ):
        momo = menu_items["Chicken Momo"]
        res = await client.post(CUSTOMER_ORDERS, json=_order_body(restaurant, menu_items), headers=customer_headers)
        first = res.json()["items"][0]
        assert first["menu_item_id"] == str(momo.id)
        assert first["menu_item"]["name"] == "Chicken Momo"
        assert first["menu_item"]["price"] == 200.0
        assert first["menu_item"]["category"] == "Momo"
        assert first["subtotal"] == 400.0
        assert res.json()["items"][1]["customizations"] == ["extra spicy"]

        await db.refresh(momo)
        assert momo.order_count == 2

        # Later price changes leave placed orders alone
        momo.price = 999.0
        await db.flush()
        res = await client.get(f"{CUSTOMER_ORDERS}/{res.json()['id']}", headers=customer_headers)
        assert res.json()["items"][0]["menu_item"]["price"] == 200.0

    async def test_default_delivery_fee(self, client: AsyncClient, customer, restaurant, menu_items, customer_headers):
        body = _order_body(restaurant, menu_items, discount=0, tax=0)
        body.pop("delivery_fee")
        res = await client.post(CUSTOMER_ORDERS, json=body, headers=customer_headers)
        assert res.json()["delivery_fee"] == 50.0

    async def test_restaurant_delivery_fee(
        self, client: AsyncClient, db, customer, restaurant, menu_items, customer_headers
    ):
        restaurant.delivery_fee = 80.0
        await db.flush()
        body = _order_body(restaurant, menu_items, discount=0, tax=0)
        body.pop("delivery_fee")
        res = await client.post(CUSTOMER_ORDERS, json=body, headers=customer_headers)
        assert res.json()["delivery_fee"] == 80.0
        assert res.json()["total"] == 630.5

        # An explicit fee still wins
        res = await client.post(
            CUSTOMER_ORDERS, json=_order_body(restaurant, menu_items, delivery_fee=0), headers=customer_headers
        )
        assert res.json()["delivery_fee"] == 0.0

    async def test_requires_items(self, client: AsyncClient, customer, restaurant, menu_items, customer_headers):
        res = await client.post(
            CUSTOMER_ORDERS, json=_order_body(restaurant, menu_items, items=[]), headers=customer_headers
        )
        assert res.status_code == 400

    async def test_unknown_menu_item(self, client: AsyncClient, customer, restaurant, menu_items, customer_headers):
        missing = str(uuid.uuid4())
        body = _order_body(restaurant, menu_items, items=[{"menu_item_id": missing, "quantity": 1}])
        res = await client.post(CUSTOMER_ORDERS, json=body, headers=customer_headers)
        assert res.status_code == 400
        assert res.json()["message"] == f"Menu item not found: {missing}"

    async def test_other_restaurants_item(
        self, client: AsyncClient, db, customer, restaurant, menu_items, pending_owner, customer_headers
    ):
        category = MenuCategory(restaurant_id=pending_owner.id, name="Curries")
        db.add(category)
        await db.flush()
        curry = MenuItem(restaurant_id=pending_owner.id, category_id=category.id, name="Dal", price=1.0)
        db.add(curry)
        await db.flush()

        body = _order_body(restaurant, menu_items, items=[{"menu_item_id": str(curry.id), "quantity": 1}])
        res = await client.post(CUSTOMER_ORDERS, json=body, headers=customer_headers)
        assert res.status_code == 400
        assert res.json()["message"] == f"Menu item not found: {curry.id}"

    async def test_unavailable_item(
        self, client: AsyncClient, db, customer, restaurant, menu_items, customer_headers
    ):
        menu_items["Thukpa"].is_available = False
        await db.flush()
        res = await client.post(CUSTOMER_ORDERS, json=_order_body(restaurant, menu_items), headers=customer_headers)
        assert res.status_code == 400
        assert res.json()["message"] == "Thukpa is currently unavailable"

    async def test_inactive_restaurant(
        self, client: AsyncClient, db, customer, restaurant, menu_items, customer_headers
    ):
        restaurant.is_active = False
        await db.flush()
        res = await client.post(CUSTOMER_ORDERS, json=_order_body(restaurant, menu_items), headers=customer_headers)
        assert res.status_code == 400
        assert res.json()["message"] == "Restaurant is not accepting orders"

    async def test_no_address(
        self, client: AsyncClient, other_customer, restaurant, menu_items, other_customer_headers
    ):
        res = await client.post(
            CUSTOMER_ORDERS, json=_order_body(restaurant, menu_items), headers=other_customer_headers
        )
        assert res.status_code == 400
        assert res.json()["message"] == "Delivery address is required"

    async def test_bad_restaurant_id(self, client: AsyncClient, customer, menu_items, customer_headers):
        res = await client.post(CUSTOMER_ORDERS, headers=customer_headers, json={
            "restaurant_id": "abc",
            "items": [{"menu_item_id": str(menu_items["Thukpa"].id), "quantity": 1}],
        })
        assert res.status_code == 400
        assert res.json()["message"] == "Invalid restaurant_id: abc"

    async def test_customer_sees_only_own_orders(
        self, client: AsyncClient, order, other_customer_headers, customer_headers
    ):
        res = await client.get(f"{CUSTOMER_ORDERS}/{order.id}", headers=other_customer_headers)
        assert res.status_code == 404

        res = await client.get(CUSTOMER_ORDERS, headers=customer_headers)
        assert res.json()["total"] == 1


class TestRestaurantOrders:

    async def test_list_and_advance(self, client: AsyncClient, order, owner_headers):
        res = await client.get(RESTAURANT_ORDERS, headers=owner_headers)
        assert res.json()["total"] == 1

        res = await client.patch(f"{RESTAURANT_ORDERS}/{order.id}/status", json={"status": "confirmed"}, headers=owner_headers)
        assert res.status_code == 200
        assert res.json()["status"] == "confirmed"

    async def test_restaurant_cannot_mark_delivered(self, client: AsyncClient, order, owner_headers):
        res = await client.patch(f"{RESTAURANT_ORDERS}/{order.id}/status", json={"status": "delivered"}, headers=owner_headers)
        assert res.status_code == 403
        assert res.json()["message"] == "You cannot set order status to delivered"

    async def test_other_restaurant_order_hidden(self, client: AsyncClient, db, order, pending_owner):
        db.add(Restaurant(
            owner_id=pending_owner.id, name="Curry Corner", email=pending_owner.email, is_active=True, is_verified=True,
        ))
        await db.flush()

        headers = auth_header(make_token(pending_owner, "restaurant"))
        res = await client.get(f"{RESTAURANT_ORDERS}/{order.id}", headers=headers)
        assert res.status_code == 404
        res = await client.patch(f"{RESTAURANT_ORDERS}/{order.id}/status", json={"status": "confirmed"}, headers=headers)
        assert res.status_code == 404

class TestAdminOrderStatus:

    async def _set(self, client, order, status, headers, **extra):
        return await client.patch(f"{ADMIN_ORDERS}/{order.id}/status", json={"status": status, **extra}, headers=headers)

    async def test_delivered_side_effects(self, client: AsyncClient, db, order, customer, restaurant, zone, admin_headers):
        for status in ("confirmed", "preparing", "ready", "picked_up"):
            assert (await self._set(client, order, status, admin_headers)).status_code == 200

        res = await self._set(client, order, "delivered", admin_headers)
        assert res.status_code == 200
        data = res.json()
        assert data["payment_status"] == "paid"
        assert data["actual_delivery_time"] is not None
        assert data["picked_up_at"] is not None
        assert [u["status"] for u in data["tracking_updates"]][-1] == "delivered"

        await db.refresh(customer)
        await db.refresh(restaurant)
        await db.refresh(zone)
        assert customer.total_orders == 1
        assert customer.total_spent == 550.0
        assert customer.loyalty_points == 5
        assert restaurant.total_orders == 1
        assert zone.order_count == 1

        sales = (await db.execute(select(DailySales))).scalar_one()
        assert sales.completed_orders == 1
        assert sales.total_revenue == 550.0
        assert sales.commission == 55.0
        assert sales.customer_metrics == {"new": 1, "returning": 0}

    async def test_no_backwards_moves(self, client: AsyncClient, order, admin_headers):
        await self._set(client, order, "preparing", admin_headers)
        res = await self._set(client, order, "confirmed", admin_headers)
        assert res.status_code == 400
        assert res.json()["message"] == "Cannot move order from preparing back to confirmed"

    async def test_terminal_orders_are_frozen(self, client: AsyncClient, order, admin_headers):
        await self._set(client, order, "cancelled", admin_headers, cancellation_reason="Out of stock")
        res = await self._set(client, order, "confirmed", admin_headers)
        assert res.status_code == 400
        assert res.json()["message"] == "Order is already cancelled"

    async def test_cancel_paid_order_refunds(self, client: AsyncClient, db, order, admin_headers):
        order.payment_status = "paid"
        await db.flush()

        res = await self._set(client, order, "cancelled", admin_headers, cancellation_reason="Kitchen closed")
        data = res.json()
        assert data["payment_status"] == "refunded"
        assert data["cancellation_reason"] == "Kitchen closed"

        sales = (await db.execute(select(DailySales))).scalar_one()
        assert sales.cancelled_orders == 1
        assert sales.refunds == 550.0

    async def test_requires_manage_orders(self, client: AsyncClient, order, limited_admin_headers):
        res = await self._set(client, order, "confirmed", limited_admin_headers)
        assert res.status_code == 403
        assert res.json()["message"] == "Access denied. Missing permission: manage_orders"

    async def test_filter_by_status(self, client: AsyncClient, db, customer, restaurant, admin_headers):
        await make_order(db, customer, restaurant, status="placed")
        await make_order(db, customer, restaurant, status="delivered")
        res = await client.get(ADMIN_ORDERS, params={"status": "delivered"}, headers=admin_headers)
        assert res.json()["total"] == 1

    async def test_delete(self, client: AsyncClient, order, admin_headers):
        res = await client.delete(f"{ADMIN_ORDERS}/{order.id}", headers=admin_headers)
        assert res.status_code == 204
        res = await client.get(f"{ADMIN_ORDERS}/{order.id}", headers=admin_headers)
        assert res.status_code == 404


class TestCustomerCancel:

    async def test_cancel_before_pickup(self, client: AsyncClient, order, customer_headers):
        res = await client.post(f"{CUSTOMER_ORDERS}/{order.id}/cancel", json={"reason": "Changed my mind"}, headers=customer_headers)
        assert res.status_code == 200
        assert res.json()["status"] == "cancelled"
        assert res.json()["cancellation_reason"] == "Changed my mind"

    async def test_cannot_cancel_after_pickup(self, client: AsyncClient, db, customer, restaurant, customer_headers):
        picked = await make_order(db, customer, restaurant, status="picked_up")
        res = await client.post(f"{CUSTOMER_ORDERS}/{picked.id}/cancel", json={}, headers=customer_headers)
        assert res.status_code == 400
        assert res.json()["message"] == "Order cannot be cancelled once it is picked up"
