"""Personnel Service - courier management and courier self-service.

Status changes drive presence: ``on_duty`` puts a courier online, while
``off_duty``, ``inactive`` and ``suspended`` take them offline.
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.config import settings
from foodhub.models.personnel import DeliveryPersonnel
from foodhub.models.zone import Zone
from foodhub.repositories.delivery_repository import delivery_repository
from foodhub.repositories.personnel_repository import personnel_repository
from foodhub.repositories.zone_repository import zone_repository
from foodhub.schemas.common import BulkStatusResult
from foodhub.schemas.personnel import (
    CourierProfileUpdate,
    LocationUpdate,
    PersonnelBulkStatus,
    PersonnelCreate,
    PersonnelResponse,
    PersonnelStats,
    PersonnelStatusUpdate,
    PersonnelUpdate,
)
from foodhub.utils.clock import growth_rate, previous_month_start, start_of_month, utcnow
from foodhub.utils.exceptions import BadRequestError, DuplicateError, ForbiddenError, NotFoundError
from foodhub.utils.ids import try_parse_uuid
from foodhub.utils.password import hash_password

logger = logging.getLogger(__name__)

OFFLINE_STATUSES: tuple[str, ...] = ("off_duty", "inactive", "suspended")
# Statuses a courier may pick for themselves
SELF_SERVICE_STATUSES: tuple[str, ...] = ("on_duty", "off_duty")

_CONFLICT_MESSAGES: dict[str, str] = {
    "email": "Delivery personnel with this email already exists",
    "phone": "Delivery personnel with this phone number already exists",
    "employee_id": "Delivery personnel with this employee ID already exists",
}


def presence_for_status(status: str) -> dict[str, Any]:
    """Column values implied by moving a courier to ``status``."""
    values: dict[str, Any] = {"status": status}
    if status == "on_duty":
        values.update(is_online=True, last_active=utcnow())
    elif status in OFFLINE_STATUSES:
        values.update(is_online=False, last_active=utcnow())
    return values


class PersonnelService:
    """Delivery personnel service."""

    def _to_response(self, courier: DeliveryPersonnel) -> PersonnelResponse:
        return PersonnelResponse(
            id=str(courier.id),
            name=courier.name,
            email=courier.email,
            phone=courier.phone,
            employee_id=courier.employee_id,
            status=courier.status,
            zone_id=str(courier.zone_id),
            zone_name=courier.zone_name,
            vehicle_type=courier.vehicle_type,
            vehicle_number=courier.vehicle_number,
            vehicle_model=courier.vehicle_model,
            vehicle_year=courier.vehicle_year,
            rating=courier.rating,
            total_deliveries=courier.total_deliveries or 0,
            completed_deliveries=courier.completed_deliveries or 0,
            cancelled_deliveries=courier.cancelled_deliveries or 0,
            on_time_deliveries=courier.on_time_deliveries or 0,
            average_delivery_time=courier.average_delivery_time,
            completion_rate=courier.completion_rate,
            on_time_rate=courier.on_time_rate,
            efficiency=courier.efficiency,
            performance=courier.performance,
            earnings=courier.earnings or 0.0,
            base_salary=courier.base_salary or 0.0,
            commission_rate=courier.commission_rate,
            current_location={
                "lat": courier.current_lat,
                "lng": courier.current_lng,
                "address": courier.current_address,
                "last_updated": courier.location_updated_at,
            },
            is_online=courier.is_online,
            is_available=courier.is_available,
            last_active=courier.last_active,
            last_login=courier.last_login,
            work_schedule=dict(courier.work_schedule or {}),
            join_date=courier.join_date,
            created_at=courier.created_at,
        )

    async def get_personnel_or_404(self, db: AsyncSession, personnel_id: UUID) -> DeliveryPersonnel:
        courier: DeliveryPersonnel | None = await personnel_repository.get_by_id(db, personnel_id)
        if courier is None:
            raise NotFoundError("Delivery personnel not found")
        return courier

    async def _resolve_zone(self, db: AsyncSession, value: str) -> Zone:
        """Accept a zone UUID or the name of an active zone (any case).

        Raises:
            BadRequestError: Neither matches
        """
        zone: Zone | None = None
        zone_id: UUID | None = try_parse_uuid(value)
        if zone_id is not None:
            zone = await zone_repository.get_by_id(db, zone_id)
        else:
            zone = await zone_repository.get_by_name(db, value, active_only=True)
        if zone is None:
            raise BadRequestError(f"Invalid zone: {value}")
        return zone

    async def _check_conflicts(
        self,
        db: AsyncSession,
        email: str | None,
        phone: str | None,
        employee_id: str | None,
        exclude_id: UUID | None = None,
    ) -> None:
        field: str | None = await personnel_repository.find_conflict(db, email, phone, employee_id, exclude_id)
        if field is not None:
            raise DuplicateError(_CONFLICT_MESSAGES[field])

    # --- Admin management --------------------------------------------------

    async def list_personnel(
        self,
        db: AsyncSession,
        status: str | None = None,
        zone_id: UUID | None = None,
        search: str | None = None,
        page: int = 1,
        per_page: int = 10,
    ) -> tuple[list[PersonnelResponse], int]:
        couriers, total = await personnel_repository.get_list(db, status, zone_id, search, page, per_page)
        return [self._to_response(c) for c in couriers], total

    async def get_personnel(self, db: AsyncSession, personnel_id: UUID) -> PersonnelResponse:
        return self._to_response(await self.get_personnel_or_404(db, personnel_id))

    async def create_personnel(self, db: AsyncSession, data: PersonnelCreate, created_by: UUID) -> PersonnelResponse:
        """Create a courier.

        Raises:
            DuplicateError: E-mail, phone or employee id already used
            BadRequestError: Unknown zone
        """
        await self._check_conflicts(db, data.email, data.phone, data.employee_id)
        zone: Zone = await self._resolve_zone(db, data.zone)

        values: dict[str, Any] = data.model_dump(exclude={"zone", "password"})
        values.update(
            zone_id=zone.id,
            zone_name=zone.name,
            password_hash=hash_password(data.password) if data.password else None,
            current_lat=settings.DEFAULT_LATITUDE,
            current_lng=settings.DEFAULT_LONGITUDE,
            location_updated_at=utcnow(),
            created_by=created_by,
        )
        values.update(presence_for_status(data.status))

        courier: DeliveryPersonnel = await personnel_repository.create(db, values)
        logger.info("Courier %s (%s) created in zone %s", courier.name, courier.employee_id, zone.name)
        return self._to_response(courier)

    async def update_personnel(
        self,
        db: AsyncSession,
        personnel_id: UUID,
        data: PersonnelUpdate,
        updated_by: UUID,
    ) -> PersonnelResponse:
        courier: DeliveryPersonnel = await self.get_personnel_or_404(db, personnel_id)
        update_data: dict[str, Any] = data.model_dump(exclude_unset=True)

        await self._check_conflicts(
            db,
            update_data.get("email"),
            update_data.get("phone"),
            update_data.get("employee_id"),
            exclude_id=courier.id,
        )

        zone_value: str | None = update_data.pop("zone", None)
        if zone_value:
            zone: Zone = await self._resolve_zone(db, zone_value)
            update_data.update(zone_id=zone.id, zone_name=zone.name)

        password: str | None = update_data.pop("password", None)
        if password:
            update_data["password_hash"] = hash_password(password)

        if update_data.get("status"):
            update_data.update(presence_for_status(update_data["status"]))

        update_data["updated_by"] = updated_by
        for field, value in update_data.items():
            setattr(courier, field, value)
        await db.flush()
        await db.refresh(courier)
        return self._to_response(courier)

    async def delete_personnel(self, db: AsyncSession, personnel_id: UUID) -> None:
        """Delete a courier account.

        Raises:
            NotFoundError: Unknown courier
            BadRequestError: The courier has delivery history; deactivate instead
        """
        courier: DeliveryPersonnel = await self.get_personnel_or_404(db, personnel_id)
        if await delivery_repository.count_for_personnel(db, courier.id):
            raise BadRequestError("Cannot delete delivery personnel with delivery history. Set status to inactive instead.")
        await personnel_repository.delete(db, courier.id)

    async def update_status(
        self,
        db: AsyncSession,
        personnel_id: UUID,
        data: PersonnelStatusUpdate,
        updated_by: UUID | None = None,
    ) -> PersonnelResponse:
        courier: DeliveryPersonnel = await self.get_personnel_or_404(db, personnel_id)
        for field, value in presence_for_status(data.status).items():
            setattr(courier, field, value)
        if updated_by is not None:
            courier.updated_by = updated_by
        await db.flush()
        await db.refresh(courier)
        return self._to_response(courier)

    async def update_location(self, db: AsyncSession, personnel_id: UUID, data: LocationUpdate) -> PersonnelResponse:
        courier: DeliveryPersonnel = await self.get_personnel_or_404(db, personnel_id)
        courier.update_location(data.lat, data.lng, data.address)
        await db.flush()
        await db.refresh(courier)
        return self._to_response(courier)

    async def set_online(self, db: AsyncSession, personnel_id: UUID, online: bool) -> PersonnelResponse:
        courier: DeliveryPersonnel = await self.get_personnel_or_404(db, personnel_id)
        if online:
            courier.go_online()
        else:
            courier.go_offline()
        await db.flush()
        await db.refresh(courier)
        return self._to_response(courier)

    async def get_available_in_zone(self, db: AsyncSession, zone_id: UUID) -> list[PersonnelResponse]:
        return [self._to_response(c) for c in await personnel_repository.get_available_in_zone(db, zone_id)]

    async def get_stats(self, db: AsyncSession) -> PersonnelStats:
        totals: dict[str, Any] = await personnel_repository.get_totals(db)
        month_start = start_of_month(utcnow())
        this_month: int = await personnel_repository.count_created_between(db, month_start)
        last_month: int = await personnel_repository.count_created_between(
            db, previous_month_start(month_start), month_start
        )
        return PersonnelStats(
            total_personnel=totals["total"],
            active_personnel=totals["active"],
            on_duty_personnel=totals["on_duty"],
            online_personnel=totals["online"],
            average_rating=round(totals["average_rating"], 2),
            total_deliveries=totals["deliveries"],
            monthly_growth=growth_rate(this_month, last_month),
        )

    async def bulk_update_status(
        self,
        db: AsyncSession,
        data: PersonnelBulkStatus,
        updated_by: UUID,
    ) -> BulkStatusResult:
        ids: list[UUID] = [i for i in (try_parse_uuid(v) for v in data.personnel_ids) if i is not None]
        values: dict[str, Any] = {**presence_for_status(data.status), "updated_by": updated_by}
        matched, modified = await personnel_repository.bulk_update_status(db, ids, values)
        logger.info("Bulk courier status %s: %d matched, %d modified", data.status, matched, modified)
        return BulkStatusResult(matched_count=matched, modified_count=modified)

    # --- Courier self-service ---------------------------------------------

    def get_profile(self, courier: DeliveryPersonnel) -> PersonnelResponse:
        return self._to_response(courier)

    async def update_own_profile(
        self,
        db: AsyncSession,
        courier: DeliveryPersonnel,
        data: CourierProfileUpdate,
    ) -> PersonnelResponse:
        update_data: dict[str, Any] = data.model_dump(exclude_unset=True)
        if update_data.get("phone"):
            await self._check_conflicts(db, None, update_data["phone"], None, exclude_id=courier.id)
        for field, value in update_data.items():
            setattr(courier, field, value)
        await db.flush()
        await db.refresh(courier)
        return self._to_response(courier)

    async def update_own_status(
        self,
        db: AsyncSession,
        courier: DeliveryPersonnel,
        data: PersonnelStatusUpdate,
    ) -> PersonnelResponse:
        """Couriers may only switch themselves between on and off duty."""
        if data.status not in SELF_SERVICE_STATUSES:
            raise ForbiddenError("You can only switch between on_duty and off_duty")
        return await self.update_status(db, courier.id, data)


# Singleton instance
personnel_service: PersonnelService = PersonnelService()
