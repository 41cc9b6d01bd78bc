"""Model tests - derived fields and domain helpers that need no database."""

import re
from datetime import date, datetime, timedelta, timezone

import pytest

from foodhub.models import Admin, Customer, Delivery, DeliveryAnalytics, DeliveryPersonnel, Order
from foodhub.models.order import generate_order_number
from foodhub.models.restaurant import default_opening_hours, format_address, is_open_at
from foodhub.models.zone import Zone, normalize_areas

NOW = datetime(2026, 3, 4, 12, 0, tzinfo=timezone.utc)  # a Wednesday


def _courier(**counters) -> DeliveryPersonnel:
    return DeliveryPersonnel(
        total_deliveries=counters.get("total", 0),
        completed_deliveries=counters.get("completed", 0),
        on_time_deliveries=counters.get("on_time", 0),
        cancelled_deliveries=0,
        rating=counters.get("rating", 0.0),
        average_delivery_time=30.0,
    )


class TestCourierPerformance:

    def test_new_courier(self):
        assert _courier().performance == "new"
        assert _courier().completion_rate == 0.0

    @pytest.mark.parametrize("total,completed,on_time,rating,expected", [
        (100, 98, 95, 4.8, "excellent"),
        (100, 90, 80, 4.2, "good"),
        (100, 60, 50, 4.9, "poor"),
        (100, 72, 54, 3.6, "average"),
    ])
    def test_grades(self, total, completed, on_time, rating, expected):
        courier = _courier(total=total, completed=completed, on_time=on_time, rating=rating)
        assert courier.performance == expected

    def test_update_performance_running_mean(self):
        courier = _courier()
        courier.update_performance(20.0, True)
        courier.update_performance(40.0, False)
        assert courier.completed_deliveries == 2
        assert courier.on_time_deliveries == 1
        assert courier.average_delivery_time == 30.0
        assert courier.efficiency == 75

    def test_clamp_counters(self):
        courier = _courier(total=2, completed=5, on_time=9)
        courier.clamp_counters()
        assert courier.completed_deliveries == 2
        assert courier.on_time_deliveries == 2

    def test_availability(self):
        courier = _courier()
        courier.status, courier.is_online = "on_duty", True
        assert courier.is_available
        courier.go_offline()
        assert courier.status == "off_duty"
        assert not courier.is_available


class TestDelivery:

    def _delivery(self, **kwargs) -> Delivery:
        return Delivery(
            status="assigned",
            assigned_at=NOW,
            estimated_delivery=NOW + timedelta(minutes=30),
            order_value=500.0,
            delivery_charge=50.0,
            delay_time=0,
            **kwargs,
        )

    def test_on_time(self):
        delivery = self._delivery(actual_delivery=NOW + timedelta(minutes=25))
        assert delivery.is_on_time is True
        assert delivery.delivery_duration == 25
        assert delivery.delay_duration == 0

    def test_late(self):
        delivery = self._delivery(actual_delivery=NOW + timedelta(minutes=41))
        assert delivery.is_on_time is False
        assert delivery.delay_duration == 11

    def test_not_delivered_yet(self):
        assert self._delivery().is_on_time is None
        assert self._delivery().delivery_duration is None

    def test_refresh_derived(self):
        delivery = self._delivery()
        delivery.refresh_derived(now=NOW + timedelta(minutes=10))
        assert delivery.total_amount == 550.0
        assert delivery.estimated_time_remaining == 20
        assert not delivery.is_delayed

        delivery.refresh_derived(now=NOW + timedelta(minutes=31))
        assert delivery.estimated_time_remaining == 0
        assert delivery.is_delayed
        assert delivery.delay_reason == "Delivery delayed"

    def test_add_delay(self):
        delivery = self._delivery()
        delivery.add_delay("Flat tyre", 10)
        assert delivery.delay_time == 10
        assert delivery.estimated_delivery == NOW + timedelta(minutes=40)


class TestLoginLockout:

    def _admin(self) -> Admin:
        return Admin(email="A@Foodhub.Com ", admin_id=" sa9 ", role="admin", permissions=["manage_orders"],
                     login_attempts=0, login_count=0)

    def test_normalization_and_permissions(self):
        admin = self._admin()
        assert admin.email == "a@foodhub.com"
        assert admin.admin_id == "SA9"
        assert admin.token_type == "admin"
        assert admin.has_permission("manage_orders")
        assert not admin.has_permission("view_analytics")

        admin.role = "super_admin"
        assert admin.has_permission("view_analytics")

    def test_locks_after_five_failures(self):
        admin = self._admin()
        for _ in range(4):
            admin.register_failed_login(NOW)
        assert not admin.is_locked(NOW)

        admin.register_failed_login(NOW)
        assert admin.is_locked(NOW)
        assert admin.is_locked(NOW + timedelta(hours=1, minutes=59))
        assert not admin.is_locked(NOW + timedelta(hours=2, seconds=1))

    def test_expired_lock_restarts_count(self):
        admin = self._admin()
        for _ in range(5):
            admin.register_failed_login(NOW)
        admin.register_failed_login(NOW + timedelta(hours=3))
        assert admin.login_attempts == 1
        assert admin.lock_until is None

    def test_success_resets(self):
        admin = self._admin()
        admin.register_failed_login(NOW)
        admin.register_successful_login(NOW)
        assert admin.login_attempts == 0
        assert admin.login_count == 1
        assert admin.last_login == NOW


class TestCustomer:

    @pytest.mark.parametrize("spent,segment", [(0.0, "new"), (99.99, "new"), (100.0, "regular"), (1000.0, "premium")])
    def test_segment(self, spent, segment):
        assert Customer(total_spent=spent).segment == segment

    def test_record_order(self):
        customer = Customer(total_orders=0, total_spent=0.0, loyalty_points=0)
        customer.record_order(250.0, NOW)
        customer.record_order(99.0, NOW)
        assert customer.total_orders == 2
        assert customer.total_spent == 349.0
        assert customer.loyalty_points == 2
        assert customer.average_order_value == 174.5

    def test_default_address_falls_back_to_first(self):
        customer = Customer(addresses=[{"id": "x", "is_default": False}, {"id": "y", "is_default": False}])
        assert customer.default_address["id"] == "x"
        assert Customer(addresses=[]).default_address is None


class TestOrder:

    def test_order_number_format(self):
        assert re.fullmatch(r"ORD-\d{13}-[A-Z0-9]{5}", generate_order_number())

    def test_recalculate_total(self):
        order = Order(subtotal=500.0, delivery_fee=50.0, tax=30.5, discount=20.0)
        assert order.recalculate_total() == 560.5

    def test_tracking_updates_append(self):
        order = Order(tracking_updates=[])
        order.add_tracking_update("placed", "Order placed", NOW)
        order.add_tracking_update("confirmed", moment=NOW)
        assert [u["status"] for u in order.tracking_updates] == ["placed", "confirmed"]
        assert order.tracking_updates[0]["timestamp"] == NOW.isoformat()

    def test_terminal(self):
        assert Order(status="delivered").is_terminal
        assert not Order(status="ready").is_terminal


class TestRestaurantHelpers:

    def test_default_hours(self):
        hours = default_opening_hours()
        assert hours["friday"]["close"] == "23:00"
        assert hours["sunday"] == {"open": "10:00", "close": "21:00", "is_closed": False}

    def test_is_open_at(self):
        hours = default_opening_hours()
        assert is_open_at(hours, NOW)
        assert not is_open_at(hours, NOW.replace(hour=23))
        hours["wednesday"]["is_closed"] = True
        assert not is_open_at(hours, NOW)

    def test_overnight_window(self):
        hours = {"wednesday": {"open": "18:00", "close": "02:00", "is_closed": False}}
        assert is_open_at(hours, NOW.replace(hour=23))
        assert is_open_at(hours, NOW.replace(hour=1))
        assert not is_open_at(hours, NOW)

    def test_format_address(self):
        assert format_address({"street": "5 Food Lane", "city": "Kathmandu", "zip_code": ""}) == "5 Food Lane, Kathmandu"
        assert format_address(None) == ""


class TestAnalyticsRow:

    def test_recompute(self):
        row = DeliveryAnalytics(
            date=date(2026, 3, 4),
            hour=19,
            total_deliveries=10,
            completed_deliveries=8,
            on_time_deliveries=6,
            total_delivery_time=240.0,
            total_distance=32.0,
            total_revenue=4000.0,
            rating_sum=18.0,
            total_ratings=4,
            positive_ratings=3,
        )
        row.recompute()
        assert row.completion_rate == 80
        assert row.on_time_rate == 75
        assert row.efficiency == 78
        assert row.average_delivery_time == 30.0
        assert row.average_rating == 4.5
        assert row.day_of_week == 2
        assert row.is_peak_hour is True
        assert row.success_rate == 80
        assert row.satisfaction_score == 75
        # (80 + 75 + 75) / 3
        assert row.performance_grade == "C"


def test_normalize_areas():
    assert normalize_areas([" Thamel", "thamel", "", "Durbar Marg "]) == ["thamel", "durbar marg"]


def test_area_index_follows_areas():
    zone = Zone(name="Old Town", areas=["Café Lane", "Bazaar"], delivery_charge=20.0)
    assert zone.area_index == "café lane\nbazaar"
    zone.areas = ["Ring Road"]
    assert zone.area_index == "ring road"
