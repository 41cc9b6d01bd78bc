"""Notification tests - personal inbox, admin management, broadcasts and order events."""

import aiosmtplib
import pytest
from httpx import AsyncClient
from sqlalchemy import select

from foodhub.config import settings
from foodhub.models import Notification
from foodhub.services import notification_service as notification_module
from foodhub.services.notification_service import notification_service
from foodhub.utils.email import render_notification

INBOX = "/api/v1/notifications"
ADMIN_NOTIFICATIONS = "/api/v1/admin/notifications"


async def _send(client: AsyncClient, headers, recipient_type: str, recipient, title: str = "Hello") -> dict:
    res = await client.post(ADMIN_NOTIFICATIONS, headers=headers, json={
        "recipient_type": recipient_type,
        "recipient_id": str(recipient.id),
        "title": title,
        "message": "Welcome to FoodHub",
        "type": "system",
    })
    assert res.status_code == 201, res.text
    return res.json()


class TestInbox:

    async def test_unread_count_and_read(self, client: AsyncClient, customer, super_admin_headers, customer_headers):
        first = await _send(client, super_admin_headers, "customer", customer)
        await _send(client, super_admin_headers, "customer", customer, title="Second")

        res = await client.get(f"{INBOX}/unread-count", headers=customer_headers)
        assert res.json() == {"unread_count": 2}

        res = await client.patch(f"{INBOX}/{first['id']}/read", headers=customer_headers)
        assert res.status_code == 200
        assert res.json()["message"] == "Notification marked as read"

        res = await client.get(INBOX, params={"is_read": "false"}, headers=customer_headers)
        assert [n["title"] for n in res.json()["items"]] == ["Second"]

    async def test_read_all(self, client: AsyncClient, courier, super_admin_headers, courier_headers):
        await _send(client, super_admin_headers, "delivery", courier)
        await _send(client, super_admin_headers, "delivery", courier)

        res = await client.patch(f"{INBOX}/read-all", headers=courier_headers)
        assert res.json()["message"] == "2 notifications marked as read"

        res = await client.get(f"{INBOX}/unread-count", headers=courier_headers)
        assert res.json()["unread_count"] == 0

    async def test_cannot_read_someone_elses(
        self, client: AsyncClient, customer, super_admin_headers, other_customer_headers
    ):
        note = await _send(client, super_admin_headers, "customer", customer)
        res = await client.patch(f"{INBOX}/{note['id']}/read", headers=other_customer_headers)
        assert res.status_code == 404
        assert res.json()["message"] == "Notification not found"

    async def test_super_admin_shares_admin_inbox(self, client: AsyncClient, super_admin, super_admin_headers):
        await _send(client, super_admin_headers, "admin", super_admin)
        res = await client.get(INBOX, headers=super_admin_headers)
        assert res.json()["total"] == 1

    async def test_requires_token(self, client: AsyncClient):
        res = await client.get(INBOX)
        assert res.status_code == 401


class TestAdminManagement:

    async def test_update_and_delete(self, client: AsyncClient, customer, super_admin_headers):
        note = await _send(client, super_admin_headers, "customer", customer)

        res = await client.put(
            f"{ADMIN_NOTIFICATIONS}/{note['id']}", json={"is_read": True, "priority": "high"}, headers=super_admin_headers
        )
        data = res.json()
        assert data["is_read"] is True
        assert data["read_at"] is not None
        assert data["priority"] == "high"

        res = await client.delete(f"{ADMIN_NOTIFICATIONS}/{note['id']}", headers=super_admin_headers)
        assert res.status_code == 204
        res = await client.delete(f"{ADMIN_NOTIFICATIONS}/{note['id']}", headers=super_admin_headers)
        assert res.status_code == 404

    async def test_bad_recipient_id(self, client: AsyncClient, super_admin_headers):
        res = await client.post(ADMIN_NOTIFICATIONS, headers=super_admin_headers, json={
            "recipient_type": "customer",
            "recipient_id": "nobody",
            "title": "Hi",
            "message": "There",
        })
        assert res.status_code == 400
        assert res.json()["message"] == "Invalid recipient_id: nobody"

    async def test_stats(self, client: AsyncClient, customer, courier, super_admin_headers):
        await _send(client, super_admin_headers, "customer", customer)
        await _send(client, super_admin_headers, "delivery", courier)

        res = await client.get(f"{ADMIN_NOTIFICATIONS}/stats", headers=super_admin_headers)
        data = res.json()
        assert data["total"] == 2
        assert data["unread"] == 2
        assert data["by_type"] == {"system": 2}

    async def test_requires_user_support(self, client: AsyncClient, admin_headers):
        res = await client.get(ADMIN_NOTIFICATIONS, headers=admin_headers)
        assert res.status_code == 403
        assert res.json()["message"] == "Access denied. Missing permission: user_support"


class TestBroadcast:

    async def test_broadcast_to_customers(
        self, client: AsyncClient, db, customer, other_customer, courier, super_admin_headers
    ):
        res = await client.post(f"{ADMIN_NOTIFICATIONS}/broadcast", headers=super_admin_headers, json={
            "target": "customer",
            "title": "Free delivery",
            "message": "All weekend long",
            "type": "promotion",
        })
        assert res.status_code == 201
        data = res.json()
        assert data["recipients"] == 2

        rows = (await db.execute(select(Notification))).scalars().all()
        assert {str(r.broadcast_id) for r in rows} == {data["broadcast_id"]}
        assert {r.recipient_type for r in rows} == {"customer"}

    async def test_broadcast_all_skips_inactive(
        self, client: AsyncClient, db, super_admin, customer, courier, restaurant_owner, super_admin_headers
    ):
        customer.is_active = False
        await db.flush()

        res = await client.post(f"{ADMIN_NOTIFICATIONS}/broadcast", headers=super_admin_headers, json={
            "target": "all",
            "title": "Maintenance",
            "message": "Tonight at 2am",
        })
        # super admin, courier and restaurant owner
        assert res.json()["recipients"] == 3


class TestOrderEvents:

    async def test_status_change_notifies_customer(self, client: AsyncClient, db, order, customer, admin_headers):
        res = await client.patch(
            f"/api/v1/admin/orders/{order.id}/status", json={"status": "confirmed"}, headers=admin_headers
        )
        assert res.status_code == 200

        rows = (await db.execute(
            select(Notification).where(Notification.recipient_id == customer.id)
        )).scalars().all()
        assert [r.title for r in rows] == ["Order confirmed"]
        assert rows[0].reference_id == order.id

    async def test_email_disabled_is_only_logged(self, db, customer, monkeypatch):
        sent: list[str] = []

        async def fake_send(to, *args, **kwargs):
            sent.append(to)

        monkeypatch.setattr(settings, "EMAIL_NOTIFICATIONS_ENABLED", False)
        monkeypatch.setattr(notification_module, "send_email", fake_send)
        await notification_service.notify(db, "customer", customer.id, "Hi", "There", email=customer.email)
        assert sent == []

    async def test_email_enabled(self, db, customer, monkeypatch):
        sent: list[str] = []

        async def fake_send(to, *args, **kwargs):
            sent.append(to)

        monkeypatch.setattr(settings, "EMAIL_NOTIFICATIONS_ENABLED", True)
        monkeypatch.setattr(notification_module, "send_email", fake_send)
        await notification_service.notify(db, "customer", customer.id, "Hi", "There", email=customer.email)
        assert sent == ["harriet@foodhub.com"]

    async def test_smtp_failure_does_not_raise(self, db, customer, monkeypatch):
        async def broken_send(*args, **kwargs):
            raise aiosmtplib.SMTPException("relay down")

        monkeypatch.setattr(settings, "EMAIL_NOTIFICATIONS_ENABLED", True)
        monkeypatch.setattr(notification_module, "send_email", broken_send)
        notification = await notification_service.notify(db, "customer", customer.id, "Hi", "There", email="x@y.z")
        assert notification.id is not None


@pytest.mark.parametrize("account_type,expected", [("super_admin", "admin"), ("customer", "customer")])
def test_recipient_type_for(account_type, expected):
    assert notification_module.recipient_type_for(account_type) == expected


def test_render_notification_escapes_markup():
    html, text = render_notification("Order <ready>", "Pick up at 5 & 6", "urgent")
    assert "Order &lt;ready&gt;" in html
    assert "5 &amp; 6" in html
    assert "#dc2626" in html
    assert text.startswith("Order <ready>\n\nPick up at 5 & 6")
