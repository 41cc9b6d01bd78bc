"""Customer Service - customer profiles, saved addresses and back-office views.

Addresses live in a JSON list on the customer row. Each stored address
carries a generated ``id``; exactly one is flagged ``is_default`` whenever
the list is non-empty.
"""

import logging
import uuid
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.models.customer import Customer
from foodhub.repositories.customer_repository import customer_repository, segment_clause
from foodhub.schemas.customer import (
    AddressPayload,
    AddressUpdate,
    CustomerAnalyticsResponse,
    CustomerProfileUpdate,
    CustomerResponse,
    CustomerStatusUpdate,
)
from foodhub.utils.clock import growth_rate, previous_month_start, start_of_month, utcnow
from foodhub.utils.exceptions import DuplicateError, NotFoundError

logger = logging.getLogger(__name__)


def _ensure_single_default(addresses: list[dict[str, Any]], default_id: str | None = None) -> list[dict[str, Any]]:
    """Return a copy in which exactly one address is the default.

    ``default_id`` wins when given; otherwise the first flagged address is
    kept, falling back to the first address.
    """
    if not addresses:
        return []
    if default_id is None:
        flagged = [a["id"] for a in addresses if a.get("is_default")]
        default_id = flagged[0] if flagged else addresses[0]["id"]
    return [{**a, "is_default": a["id"] == default_id} for a in addresses]


class CustomerService:
    """Customer account service."""

    def _to_response(self, customer: Customer) -> CustomerResponse:
        return CustomerResponse(
            id=str(customer.id),
            name=customer.name,
            email=customer.email,
            phone=customer.phone,
            date_of_birth=customer.date_of_birth,
            gender=customer.gender,
            avatar=customer.avatar,
            addresses=list(customer.addresses or []),
            preferences=dict(customer.preferences or {}),
            notification_preferences=dict(customer.notification_preferences or {}),
            loyalty_points=customer.loyalty_points or 0,
            total_orders=customer.total_orders or 0,
            total_spent=customer.total_spent or 0.0,
            average_order_value=customer.average_order_value,
            segment=customer.segment,
            is_active=customer.is_active,
            is_verified=customer.is_verified,
            last_login=customer.last_login,
            created_at=customer.created_at,
        )

    async def _get_or_404(self, db: AsyncSession, customer_id: UUID) -> Customer:
        customer: Customer | None = await customer_repository.get_by_id(db, customer_id)
        if customer is None:
            raise NotFoundError("Customer not found")
        return customer

    # --- Self-service ------------------------------------------------------

    def get_profile(self, customer: Customer) -> CustomerResponse:
        return self._to_response(customer)

    async def update_profile(
        self,
        db: AsyncSession,
        customer: Customer,
        data: CustomerProfileUpdate,
    ) -> CustomerResponse:
        """Partially update a customer's own profile.

        Raises:
            DuplicateError: New phone already used by another customer
        """
        update_data: dict[str, Any] = data.model_dump(exclude_unset=True, mode="json")
        if data.phone and await customer_repository.email_or_phone_taken(db, None, data.phone, exclude_id=customer.id):
            raise DuplicateError("Customer with this email or phone number already exists")
        if "date_of_birth" in update_data:
            update_data["date_of_birth"] = data.date_of_birth
        if "notification_preferences" in update_data:
            update_data["notification_preferences"] = {
                **(customer.notification_preferences or {}),
                **update_data["notification_preferences"],
            }

        for field, value in update_data.items():
            setattr(customer, field, value)
        await db.flush()
        await db.refresh(customer)
        return self._to_response(customer)

    async def add_address(self, db: AsyncSession, customer: Customer, data: AddressPayload) -> CustomerResponse:
        address: dict[str, Any] = {"id": uuid.uuid4().hex, **data.model_dump(mode="json")}
        addresses: list[dict[str, Any]] = [*(customer.addresses or []), address]
        customer.addresses = _ensure_single_default(addresses, address["id"] if data.is_default else None)
        await db.flush()
        await db.refresh(customer)
        return self._to_response(customer)

    def _find_address(self, customer: Customer, address_id: str) -> dict[str, Any]:
        for address in customer.addresses or []:
            if address.get("id") == address_id:
                return address
        raise NotFoundError("Address not found")

    async def update_address(
        self,
        db: AsyncSession,
        customer: Customer,
        address_id: str,
        data: AddressUpdate,
    ) -> CustomerResponse:
        self._find_address(customer, address_id)
        changes: dict[str, Any] = data.model_dump(exclude_unset=True, mode="json")
        make_default: bool = bool(changes.pop("is_default", False))

        addresses = [
            {**a, **changes} if a.get("id") == address_id else dict(a)
            for a in customer.addresses or []
        ]
        customer.addresses = _ensure_single_default(addresses, address_id if make_default else None)
        await db.flush()
        await db.refresh(customer)
        return self._to_response(customer)

    async def delete_address(self, db: AsyncSession, customer: Customer, address_id: str) -> CustomerResponse:
        """Remove an address; the next one is promoted if it was the default."""
        self._find_address(customer, address_id)
        remaining = [dict(a) for a in customer.addresses or [] if a.get("id") != address_id]
        customer.addresses = _ensure_single_default(remaining)
        await db.flush()
        await db.refresh(customer)
        return self._to_response(customer)

    async def set_default_address(self, db: AsyncSession, customer: Customer, address_id: str) -> CustomerResponse:
        self._find_address(customer, address_id)
        customer.addresses = _ensure_single_default([dict(a) for a in customer.addresses], address_id)
        await db.flush()
        await db.refresh(customer)
        return self._to_response(customer)

    # --- Back office -------------------------------------------------------

    async def list_customers(
        self,
        db: AsyncSession,
        status: str | None = None,
        segment: str | None = None,
        search: str | None = None,
        page: int = 1,
        per_page: int = 10,
    ) -> tuple[list[CustomerResponse], int]:
        customers, total = await customer_repository.get_list(db, status, segment, search, page, per_page)
        return [self._to_response(c) for c in customers], total

    async def get_customer(self, db: AsyncSession, customer_id: UUID) -> CustomerResponse:
        return self._to_response(await self._get_or_404(db, customer_id))

    async def update_status(
        self,
        db: AsyncSession,
        customer_id: UUID,
        data: CustomerStatusUpdate,
    ) -> CustomerResponse:
        customer: Customer = await self._get_or_404(db, customer_id)
        customer.is_active = data.is_active
        await db.flush()
        await db.refresh(customer)
        logger.info("Customer %s %s", customer.email, "activated" if data.is_active else "deactivated")
        return self._to_response(customer)

    async def delete_customer(self, db: AsyncSession, customer_id: UUID) -> None:
        if not await customer_repository.delete(db, customer_id):
            raise NotFoundError("Customer not found")

    async def get_analytics(self, db: AsyncSession) -> CustomerAnalyticsResponse:
        """Totals, segment counts and month-over-month sign-up growth."""
        month_start = start_of_month(utcnow())
        last_month_start = previous_month_start(month_start)

        new_this_month: int = await customer_repository.count_created_between(db, month_start)
        new_last_month: int = await customer_repository.count_created_between(db, last_month_start, month_start)

        return CustomerAnalyticsResponse(
            total_customers=await customer_repository.count(db),
            active_customers=await customer_repository.count(db, Customer.is_active.is_(True)),
            verified_customers=await customer_repository.count(db, Customer.is_verified.is_(True)),
            new_this_month=new_this_month,
            segments={
                segment: await customer_repository.count(db, segment_clause(segment))
                for segment in ("premium", "regular", "new")
            },
            growth_rate=growth_rate(new_this_month, new_last_month),
        )


# Singleton instance
customer_service: CustomerService = CustomerService()
