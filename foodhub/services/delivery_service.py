"""Delivery Service - courier assignment and delivery tracking.

Courier progress is mirrored onto the order: ``picked_up`` and
``delivered`` move the order forward, while a cancelled or failed
delivery only releases the order so it can be reassigned.
"""

import logging
from datetime import timedelta
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.models.customer import Customer
from foodhub.models.delivery import DEFAULT_DELIVERY_MINUTES, FINISHED_DELIVERY_STATUSES, Delivery
from foodhub.models.order import ORDER_STATUSES, Order
from foodhub.models.personnel import DeliveryPersonnel
from foodhub.models.restaurant import Restaurant
from foodhub.models.zone import Zone
from foodhub.repositories.customer_repository import customer_repository
from foodhub.repositories.delivery_repository import delivery_repository
from foodhub.repositories.order_repository import order_repository
from foodhub.repositories.personnel_repository import personnel_repository
from foodhub.repositories.restaurant_repository import restaurant_repository
from foodhub.repositories.zone_repository import zone_repository
from foodhub.schemas.delivery import (
    DeliveryAssign,
    DeliveryDelay,
    DeliveryRating,
    DeliveryResponse,
    DeliveryStatusUpdate,
    TrackingStats,
)
from foodhub.schemas.personnel import LocationUpdate
from foodhub.services.analytics_service import analytics_service
from foodhub.services.order_service import order_service
from foodhub.utils.clock import start_of_day, utcnow
from foodhub.utils.exceptions import BadRequestError, DuplicateError, NotFoundError
from foodhub.utils.ids import parse_uuid

logger = logging.getLogger(__name__)

# Forward path of a delivery; ``delayed`` may interrupt it and later resume
DELIVERY_FLOW: tuple[str, ...] = ("assigned", "picked_up", "in_transit", "delivered")
# Delivery statuses that move the order along
_ORDER_MIRROR: dict[str, str] = {"picked_up": "picked_up", "delivered": "delivered"}


class DeliveryService:
    """Delivery assignment, tracking and feedback service."""

    def _to_response(self, delivery: Delivery) -> DeliveryResponse:
        return DeliveryResponse(
            id=str(delivery.id),
            order_id=str(delivery.order_id),
            order_number=delivery.order_number,
            customer=dict(delivery.customer or {}),
            delivery_address=dict(delivery.delivery_address or {}),
            restaurant=dict(delivery.restaurant or {}),
            personnel=dict(delivery.personnel or {}),
            zone=dict(delivery.zone or {}),
            personnel_id=str(delivery.personnel_id),
            zone_id=str(delivery.zone_id),
            status=delivery.status,
            progress_status=delivery.progress_status or "assigned",
            priority=delivery.priority,
            assigned_at=delivery.assigned_at,
            picked_up_at=delivery.picked_up_at,
            estimated_delivery=delivery.estimated_delivery,
            actual_delivery=delivery.actual_delivery,
            current_location=dict(delivery.current_location or {}),
            distance=delivery.distance,
            estimated_time_remaining=delivery.estimated_time_remaining or 0,
            actual_delivery_time=delivery.actual_delivery_time,
            delivery_duration=delivery.delivery_duration,
            is_on_time=delivery.is_on_time,
            order_value=delivery.order_value,
            delivery_charge=delivery.delivery_charge,
            total_amount=delivery.total_amount,
            payment_method=delivery.payment_method,
            special_instructions=delivery.special_instructions,
            is_delayed=delivery.is_delayed,
            delay_reason=delivery.delay_reason,
            delay_time=delivery.delay_time or 0,
            customer_rating=delivery.customer_rating,
            feedback=delivery.feedback,
        )

    async def get_delivery_or_404(
        self,
        db: AsyncSession,
        delivery_id: UUID,
        personnel_id: UUID | None = None,
    ) -> Delivery:
        delivery: Delivery | None = await delivery_repository.get_by_id(db, delivery_id)
        if delivery is None or (personnel_id is not None and delivery.personnel_id != personnel_id):
            raise NotFoundError("Delivery not found")
        return delivery

    # --- Assignment -------------------------------------------------------

    async def assign(self, db: AsyncSession, data: DeliveryAssign) -> DeliveryResponse:
        """Assign an order to an available courier.

        The delivery zone is the courier's home zone; customer, restaurant,
        courier and zone details are snapshotted onto the delivery.

        Raises:
            NotFoundError: Unknown order or courier
            DuplicateError: Order's latest delivery is still open
            BadRequestError: Order finished or picked up, or courier unavailable
        """
        order: Order | None = await order_repository.get_by_id(db, parse_uuid(data.order_id, "order_id"))
        if order is None:
            raise NotFoundError("Order not found")
        if order.is_terminal or order.status == "picked_up":
            raise BadRequestError(f"Order is already {order.status.replace('_', ' ')}")
        latest: Delivery | None = await delivery_repository.get_by_order(db, order.id)
        if latest is not None and latest.status not in ("cancelled", "failed"):
            raise DuplicateError("Order already has a delivery assigned")

        courier: DeliveryPersonnel | None = await personnel_repository.get_by_id(
            db, parse_uuid(data.personnel_id, "personnel_id")
        )
        if courier is None:
            raise NotFoundError("Delivery personnel not found")
        if not courier.is_available:
            raise BadRequestError("Delivery personnel is not available")

        zone: Zone | None = await zone_repository.get_by_id(db, courier.zone_id)
        if zone is None:
            raise NotFoundError("Zone not found")
        customer: Customer | None = await customer_repository.get_by_id(db, order.customer_id)
        restaurant: Restaurant | None = await restaurant_repository.get_by_id(db, order.restaurant_id)

        now = utcnow()
        delivery: Delivery = await delivery_repository.create(
            db,
            {
                "order_id": order.id,
                "order_number": order.order_number,
                "customer": self._customer_snapshot(customer),
                "delivery_address": dict(order.delivery_address or {}),
                "restaurant": self._restaurant_snapshot(restaurant),
                "personnel": {
                    "id": str(courier.id),
                    "name": courier.name,
                    "phone": courier.phone,
                    "vehicle_type": courier.vehicle_type,
                    "vehicle_number": courier.vehicle_number,
                },
                "zone": {"id": str(zone.id), "name": zone.name, "delivery_charge": zone.delivery_charge},
                "personnel_id": courier.id,
                "zone_id": zone.id,
                "priority": data.priority,
                "assigned_at": now,
                "estimated_delivery": now + timedelta(minutes=data.estimated_minutes),
                "distance": data.distance,
                "order_value": round(order.total - (order.delivery_fee or 0), 2),
                "delivery_charge": order.delivery_fee or 0.0,
                "payment_method": data.payment_method,
                "special_instructions": data.special_instructions or order.special_instructions,
                "current_location": {
                    "lat": courier.current_lat,
                    "lng": courier.current_lng,
                    "address": courier.current_address,
                    "updated_at": now.isoformat(),
                },
            },
        )

        order.delivery_person_id = courier.id
        order.zone_id = order.zone_id or zone.id
        order.add_tracking_update(order.status, f"Assigned to {courier.name}", now)
        if courier.status == "active":
            courier.status = "on_duty"
        await db.flush()

        logger.info("Order %s assigned to %s", order.order_number, courier.employee_id)
        return self._to_response(delivery)

    def _customer_snapshot(self, customer: Customer | None) -> dict[str, Any]:
        if customer is None:
            return {}
        return {"id": str(customer.id), "name": customer.name, "phone": customer.phone, "email": customer.email}

    def _restaurant_snapshot(self, restaurant: Restaurant | None) -> dict[str, Any]:
        if restaurant is None:
            return {}
        return {
            "id": str(restaurant.id),
            "name": restaurant.name,
            "phone": restaurant.phone,
            "address": restaurant.full_address,
        }

    # --- Queries ----------------------------------------------------------

    async def list_deliveries(
        self,
        db: AsyncSession,
        status: str | None = None,
        personnel_id: UUID | None = None,
        zone_id: UUID | None = None,
        page: int = 1,
        per_page: int = 10,
    ) -> tuple[list[DeliveryResponse], int]:
        deliveries, total = await delivery_repository.get_list(db, status, personnel_id, zone_id, page, per_page)
        return [self._to_response(d) for d in deliveries], total

    async def get_active(
        self,
        db: AsyncSession,
        personnel_id: UUID | None = None,
        zone_id: UUID | None = None,
    ) -> list[DeliveryResponse]:
        return [self._to_response(d) for d in await delivery_repository.get_active(db, personnel_id, zone_id)]

    async def get_delivery(self, db: AsyncSession, delivery_id: UUID, personnel_id: UUID | None = None) -> DeliveryResponse:
        return self._to_response(await self.get_delivery_or_404(db, delivery_id, personnel_id))

    async def get_for_order(self, db: AsyncSession, order_id: UUID) -> DeliveryResponse:
        delivery: Delivery | None = await delivery_repository.get_by_order(db, order_id)
        if delivery is None:
            raise NotFoundError("Delivery not found")
        return self._to_response(delivery)

    async def get_tracking_stats(self, db: AsyncSession) -> TrackingStats:
        day_start = start_of_day(utcnow().date())
        stats = await delivery_repository.get_tracking_stats(db, day_start, day_start + timedelta(days=1))
        return TrackingStats(**stats)

    # --- Progress ---------------------------------------------------------

    def _check_transition(self, delivery: Delivery, status: str) -> None:
        if delivery.status in FINISHED_DELIVERY_STATUSES:
            raise BadRequestError(f"Delivery is already {delivery.status}")
        if status == delivery.status:
            raise BadRequestError(f"Delivery is already {status}")
        # A delayed delivery resumes at or after the furthest step it reached
        reached: str = delivery.progress_status or "assigned"
        if status in DELIVERY_FLOW and DELIVERY_FLOW.index(status) < DELIVERY_FLOW.index(reached):
            raise BadRequestError(f"Cannot move delivery from {delivery.status} back to {status}")

    async def _mirror_order(self, db: AsyncSession, delivery: Delivery, note: str | None) -> None:
        order: Order | None = await order_repository.get_by_id(db, delivery.order_id)
        if order is None or order.is_terminal:
            return

        if delivery.status in ("cancelled", "failed"):
            order.delivery_person_id = None
            order.add_tracking_update(order.status, f"Delivery {delivery.status}; awaiting reassignment")
            return

        target: str | None = _ORDER_MIRROR.get(delivery.status)
        if target is None or ORDER_STATUSES.index(target) <= ORDER_STATUSES.index(order.status):
            return
        await order_service.apply_status(db, order, target, note)

    async def update_status(
        self,
        db: AsyncSession,
        delivery_id: UUID,
        data: DeliveryStatusUpdate,
        personnel_id: UUID | None = None,
    ) -> DeliveryResponse:
        """Advance a delivery (admin, or the assigned courier).

        Raises:
            NotFoundError: Unknown delivery or not the caller's
            BadRequestError: Delivery finished or backwards move
        """
        delivery: Delivery = await self.get_delivery_or_404(db, delivery_id, personnel_id)
        self._check_transition(delivery, data.status)

        now = utcnow()
        delivery.status = data.status
        if data.status in DELIVERY_FLOW:
            delivery.progress_status = data.status
        courier: DeliveryPersonnel | None = await personnel_repository.get_by_id(db, delivery.personnel_id)

        if data.status == "picked_up":
            delivery.picked_up_at = delivery.picked_up_at or now
        elif data.status == "delayed":
            delivery.is_delayed = True
            delivery.delay_reason = data.note or delivery.delay_reason or "Delivery delayed"
        elif data.status == "delivered":
            delivery.actual_delivery = now
            delivery.actual_delivery_time = delivery.delivery_duration
            if courier is not None:
                courier.update_performance(
                    float(delivery.actual_delivery_time or DEFAULT_DELIVERY_MINUTES),
                    bool(delivery.is_on_time),
                )
        elif data.status in ("cancelled", "failed") and courier is not None:
            courier.record_cancellation()

        await db.flush()
        await self._mirror_order(db, delivery, data.note)
        if data.status in FINISHED_DELIVERY_STATUSES:
            await analytics_service.record_delivery(db, delivery)

        logger.info("Delivery %s -> %s", delivery.order_number, data.status)
        await db.refresh(delivery)
        return self._to_response(delivery)

    async def update_location(
        self,
        db: AsyncSession,
        delivery_id: UUID,
        data: LocationUpdate,
        personnel_id: UUID | None = None,
    ) -> DeliveryResponse:
        delivery: Delivery = await self.get_delivery_or_404(db, delivery_id, personnel_id)
        if delivery.status in FINISHED_DELIVERY_STATUSES:
            raise BadRequestError(f"Delivery is already {delivery.status}")

        delivery.update_location(data.lat, data.lng, data.address)
        courier: DeliveryPersonnel | None = await personnel_repository.get_by_id(db, delivery.personnel_id)
        if courier is not None:
            courier.update_location(data.lat, data.lng, data.address)
        await db.flush()
        await db.refresh(delivery)
        return self._to_response(delivery)

    async def add_delay(
        self,
        db: AsyncSession,
        delivery_id: UUID,
        data: DeliveryDelay,
        personnel_id: UUID | None = None,
    ) -> DeliveryResponse:
        """Flag a delay and push the estimate back by ``minutes``."""
        delivery: Delivery = await self.get_delivery_or_404(db, delivery_id, personnel_id)
        if delivery.status in FINISHED_DELIVERY_STATUSES:
            raise BadRequestError(f"Delivery is already {delivery.status}")

        delivery.add_delay(data.reason, data.minutes)
        await db.flush()
        await db.refresh(delivery)
        logger.info("Delivery %s delayed %d min: %s", delivery.order_number, data.minutes, data.reason)
        return self._to_response(delivery)

    async def rate(
        self,
        db: AsyncSession,
        delivery_id: UUID,
        data: DeliveryRating,
        customer_id: UUID | None = None,
    ) -> DeliveryResponse:
        """Record the customer's rating of a delivered delivery.

        The courier's rating becomes the mean of all their rated deliveries.

        Raises:
            BadRequestError: Not delivered yet or already rated
        """
        delivery: Delivery = await self.get_delivery_or_404(db, delivery_id)
        if customer_id is not None and (delivery.customer or {}).get("id") != str(customer_id):
            raise NotFoundError("Delivery not found")
        if delivery.status != "delivered":
            raise BadRequestError("Only delivered deliveries can be rated")
        if delivery.customer_rating is not None:
            raise BadRequestError("Delivery has already been rated")

        courier: DeliveryPersonnel | None = await personnel_repository.get_by_id(db, delivery.personnel_id)
        if courier is not None:
            rated: int = await delivery_repository.count(
                db,
                Delivery.personnel_id == courier.id,
                Delivery.customer_rating.is_not(None),
            )
            previous: float = courier.rating if rated else 0.0
            courier.rating = round((previous * rated + data.rating) / (rated + 1), 2)

        delivery.customer_rating = data.rating
        delivery.feedback = data.feedback
        await db.flush()
        await analytics_service.record_rating(db, delivery, data.rating)
        await db.refresh(delivery)
        return self._to_response(delivery)


# Singleton instance
delivery_service: DeliveryService = DeliveryService()
