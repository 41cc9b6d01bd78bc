"""Order Service - order placement and lifecycle.

Status moves forward through ORDER_STATUSES; ``cancelled`` may interrupt
any non-terminal order. Reaching ``delivered`` updates the customer,
restaurant and zone counters and the restaurant's DailySales row;
reaching ``cancelled`` updates DailySales only.
"""

import logging
from datetime import timedelta
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.config import settings
from foodhub.models.customer import Customer
from foodhub.models.order import CANCELLABLE_STATUSES, ORDER_STATUSES, Order
from foodhub.models.restaurant import Restaurant, RestaurantUser
from foodhub.models.zone import Zone
from foodhub.repositories.customer_repository import customer_repository
from foodhub.repositories.delivery_repository import delivery_repository
from foodhub.repositories.order_repository import order_repository
from foodhub.repositories.restaurant_repository import restaurant_repository, restaurant_user_repository
from foodhub.repositories.zone_repository import zone_repository
from foodhub.schemas.order import OrderCancel, OrderCreate, OrderResponse, OrderStatusUpdate
from foodhub.services.analytics_service import analytics_service
from foodhub.services.menu_service import menu_service
from foodhub.services.notification_service import ORDER_PLACED, STATUS_CHANGED, notification_service
from foodhub.utils.clock import utcnow
from foodhub.utils.exceptions import BadRequestError, ForbiddenError, NotFoundError
from foodhub.utils.ids import parse_uuid

logger = logging.getLogger(__name__)

# Statuses a restaurant owner may set on its own orders
RESTAURANT_STATUSES: tuple[str, ...] = ("confirmed", "preparing", "ready", "cancelled")


class OrderService:
    """Order service: placement, listing and status transitions."""

    def _to_response(self, order: Order) -> OrderResponse:
        return OrderResponse(
            id=str(order.id),
            order_number=order.order_number,
            customer_id=str(order.customer_id),
            restaurant_id=str(order.restaurant_id),
            zone_id=str(order.zone_id) if order.zone_id else None,
            items=list(order.items or []),
            delivery_address=dict(order.delivery_address or {}),
            subtotal=order.subtotal,
            delivery_fee=order.delivery_fee,
            tax=order.tax,
            discount=order.discount,
            total=order.total,
            status=order.status,
            payment_status=order.payment_status,
            payment_method=order.payment_method,
            estimated_delivery_time=order.estimated_delivery_time,
            picked_up_at=order.picked_up_at,
            actual_delivery_time=order.actual_delivery_time,
            delivery_person_id=str(order.delivery_person_id) if order.delivery_person_id else None,
            tracking_updates=list(order.tracking_updates or []),
            delivery_otp=order.delivery_otp,
            special_instructions=order.special_instructions,
            cancellation_reason=order.cancellation_reason,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )

    async def get_order_or_404(
        self,
        db: AsyncSession,
        order_id: UUID,
        customer_id: UUID | None = None,
        restaurant_id: UUID | None = None,
    ) -> Order:
        """Load an order, optionally scoped to one customer or restaurant.

        Orders outside the scope are reported as missing rather than forbidden.
        """
        order: Order | None = await order_repository.get_by_id(db, order_id)
        if order is None:
            raise NotFoundError("Order not found")
        if customer_id is not None and order.customer_id != customer_id:
            raise NotFoundError("Order not found")
        if restaurant_id is not None and order.restaurant_id != restaurant_id:
            raise NotFoundError("Order not found")
        return order

    async def _owner_id(self, db: AsyncSession, restaurant_id: UUID) -> UUID | None:
        restaurant: Restaurant | None = await restaurant_repository.get_by_id(db, restaurant_id)
        return restaurant.owner_id if restaurant else None

    async def _customer_email(self, db: AsyncSession, customer_id: UUID) -> str | None:
        customer: Customer | None = await customer_repository.get_by_id(db, customer_id)
        return customer.email if customer else None

    # --- Placement --------------------------------------------------------

    def _delivery_fee(self, data: OrderCreate, restaurant: Restaurant) -> float:
        """Requested fee, else the restaurant's own fee when set, else the platform default."""
        if data.delivery_fee is not None:
            return data.delivery_fee
        if restaurant.delivery_fee:
            return restaurant.delivery_fee
        return settings.DEFAULT_DELIVERY_FEE

    async def create_order(self, db: AsyncSession, customer: Customer, data: OrderCreate) -> OrderResponse:
        """Place an order for the signed-in customer.

        Line prices are read from the restaurant's menu.

        Raises:
            NotFoundError: Unknown restaurant
            BadRequestError: Restaurant inactive, unknown or unavailable menu item,
                no delivery address, or below minimum order
        """
        restaurant: Restaurant | None = await restaurant_repository.get_by_id(
            db, parse_uuid(data.restaurant_id, "restaurant_id")
        )
        if restaurant is None:
            raise NotFoundError("Restaurant not found")
        if not (restaurant.is_active and restaurant.is_verified):
            raise BadRequestError("Restaurant is not accepting orders")

        items: list[dict[str, Any]] = await menu_service.price_order_lines(db, restaurant, data.items)
        subtotal: float = round(sum(item["subtotal"] for item in items), 2)
        if subtotal < (restaurant.minimum_order or 0):
            raise BadRequestError(f"Minimum order amount is {restaurant.minimum_order:.2f}")

        delivery_address: dict[str, Any] | None = data.delivery_address or customer.default_address
        if not delivery_address:
            raise BadRequestError("Delivery address is required")

        now = utcnow()
        order = Order(
            customer_id=customer.id,
            restaurant_id=restaurant.id,
            zone_id=restaurant.zone_id,
            items=items,
            delivery_address=delivery_address,
            subtotal=subtotal,
            delivery_fee=self._delivery_fee(data, restaurant),
            tax=data.tax,
            discount=data.discount,
            payment_method=data.payment_method,
            special_instructions=data.special_instructions,
            estimated_delivery_time=now + timedelta(minutes=restaurant.delivery_time_max or 60),
        )
        order.recalculate_total()
        if order.total < 0:
            raise BadRequestError("Discount cannot exceed the order amount")
        order.add_tracking_update("placed", "Order placed", now)
        db.add(order)
        await db.flush()
        await db.refresh(order)

        logger.info("Order %s placed by %s at %s (total=%.2f)", order.order_number, customer.email, restaurant.name, order.total)
        await notification_service.dispatch_order_event(
            db, ORDER_PLACED, order, restaurant_owner_id=restaurant.owner_id, customer_email=customer.email
        )
        return self._to_response(order)

    # --- Queries ----------------------------------------------------------

    async def list_orders(
        self,
        db: AsyncSession,
        status: str | None = None,
        restaurant_id: UUID | None = None,
        customer_id: UUID | None = None,
        delivery_person_id: UUID | None = None,
        page: int = 1,
        per_page: int = 10,
    ) -> tuple[list[OrderResponse], int]:
        orders, total = await order_repository.get_list(
            db, status, restaurant_id, customer_id, delivery_person_id, page, per_page
        )
        return [self._to_response(o) for o in orders], total

    async def get_order(
        self,
        db: AsyncSession,
        order_id: UUID,
        customer_id: UUID | None = None,
        restaurant_id: UUID | None = None,
    ) -> OrderResponse:
        return self._to_response(await self.get_order_or_404(db, order_id, customer_id, restaurant_id))

    async def get_recent(self, db: AsyncSession, limit: int = 10, restaurant_id: UUID | None = None) -> list[OrderResponse]:
        return [self._to_response(o) for o in await order_repository.get_recent(db, limit, restaurant_id)]

    # --- Lifecycle --------------------------------------------------------

    def _check_transition(self, order: Order, status: str) -> None:
        if order.is_terminal:
            raise BadRequestError(f"Order is already {order.status}")
        if status == order.status:
            raise BadRequestError(f"Order is already {status}")
        if status != "cancelled" and ORDER_STATUSES.index(status) < ORDER_STATUSES.index(order.status):
            raise BadRequestError(f"Cannot move order from {order.status} back to {status}")

    async def _on_delivered(self, db: AsyncSession, order: Order) -> None:
        customer: Customer | None = await customer_repository.get_by_id(db, order.customer_id)
        if customer is not None:
            customer.record_order(order.total, order.actual_delivery_time)

        restaurant: Restaurant | None = await restaurant_repository.get_by_id(db, order.restaurant_id)
        if restaurant is not None:
            restaurant.update_order_stats(order.total)
            owner: RestaurantUser | None = await restaurant_user_repository.get_by_id(db, restaurant.owner_id)
            if owner is not None:
                owner.update_order_stats(order.total)

        if order.zone_id is not None:
            zone: Zone | None = await zone_repository.get_by_id(db, order.zone_id)
            if zone is not None:
                zone.record_order(order.total)

    async def apply_status(
        self,
        db: AsyncSession,
        order: Order,
        status: str,
        note: str | None = None,
        cancellation_reason: str | None = None,
    ) -> Order:
        """Move an order to ``status`` and run the side effects.

        Also used by the delivery service to mirror courier progress.

        Raises:
            BadRequestError: Terminal order or backwards move
        """
        self._check_transition(order, status)
        now = utcnow()
        previous: str = order.status
        order.status = status
        order.add_tracking_update(status, note, now)

        if status == "picked_up":
            order.picked_up_at = now
        elif status == "delivered":
            order.actual_delivery_time = now
            if order.payment_status == "pending":
                order.payment_status = "paid"
            await self._on_delivered(db, order)
        elif status == "cancelled":
            order.cancellation_reason = cancellation_reason or note
            if order.payment_status == "paid":
                order.payment_status = "refunded"

        await db.flush()
        if status in ("delivered", "cancelled"):
            await analytics_service.record_order_sales(db, order)

        logger.info("Order %s: %s -> %s", order.order_number, previous, status)
        await notification_service.dispatch_order_event(
            db,
            STATUS_CHANGED,
            order,
            restaurant_owner_id=await self._owner_id(db, order.restaurant_id),
            customer_email=await self._customer_email(db, order.customer_id),
        )
        return order

    async def update_status(
        self,
        db: AsyncSession,
        order_id: UUID,
        data: OrderStatusUpdate,
        restaurant_id: UUID | None = None,
        allowed_statuses: Sequence[str] | None = None,
    ) -> OrderResponse:
        """Change an order's status (admin, or restaurant on its own orders).

        Raises:
            ForbiddenError: Status not allowed for the caller
        """
        if allowed_statuses is not None and data.status not in allowed_statuses:
            raise ForbiddenError(f"You cannot set order status to {data.status}")
        order: Order = await self.get_order_or_404(db, order_id, restaurant_id=restaurant_id)
        await self.apply_status(db, order, data.status, data.note, data.cancellation_reason)
        await db.refresh(order)
        return self._to_response(order)

    async def cancel_order(
        self,
        db: AsyncSession,
        order_id: UUID,
        customer_id: UUID,
        data: OrderCancel,
    ) -> OrderResponse:
        """Customer cancellation, only before the courier has picked the order up.

        Raises:
            BadRequestError: Order already picked up or finished
        """
        order: Order = await self.get_order_or_404(db, order_id, customer_id=customer_id)
        if order.status not in CANCELLABLE_STATUSES:
            raise BadRequestError(f"Order cannot be cancelled once it is {order.status.replace('_', ' ')}")
        await self.apply_status(db, order, "cancelled", "Cancelled by customer", data.reason or "Cancelled by customer")
        await db.refresh(order)
        return self._to_response(order)

    async def delete_order(self, db: AsyncSession, order_id: UUID) -> None:
        """Delete an order together with its delivery records."""
        order: Order = await self.get_order_or_404(db, order_id)
        for delivery in await delivery_repository.get_all(db, {"order_id": order.id}):
            await delivery_repository.delete(db, delivery.id)
        await order_repository.delete(db, order.id)
        logger.info("Order %s deleted", order.order_number)


# Singleton instance
order_service: OrderService = OrderService()
