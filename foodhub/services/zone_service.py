"""Zone Service - delivery zone management."""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.models.zone import Zone
from foodhub.repositories.personnel_repository import personnel_repository
from foodhub.repositories.zone_repository import zone_repository
from foodhub.schemas.common import BulkStatusResult
from foodhub.schemas.zone import (
    ZoneBulkStatus,
    ZoneCreate,
    ZoneDropdownItem,
    ZoneResponse,
    ZoneStats,
    ZoneUpdate,
)
from foodhub.utils.clock import growth_rate, previous_month_start, start_of_month, utcnow
from foodhub.utils.exceptions import BadRequestError, DuplicateError, NotFoundError
from foodhub.utils.ids import parse_uuid

logger = logging.getLogger(__name__)


class ZoneService:
    """Zone service: CRUD, lookups, statistics and bulk status changes."""

    def _to_response(self, zone: Zone) -> ZoneResponse:
        return ZoneResponse(
            id=str(zone.id),
            name=zone.name,
            description=zone.description,
            areas=list(zone.areas or []),
            pincodes=list(zone.pincodes or []),
            delivery_charge=zone.delivery_charge,
            status=zone.status,
            coverage=zone.coverage,
            estimated_delivery_time=zone.estimated_delivery_time,
            center_lat=zone.center_lat,
            center_lng=zone.center_lng,
            boundaries=list(zone.boundaries or []),
            restaurant_count=zone.restaurant_count or 0,
            order_count=zone.order_count or 0,
            total_revenue=zone.total_revenue or 0.0,
            efficiency=zone.efficiency,
            created_by=str(zone.created_by),
            updated_by=str(zone.updated_by) if zone.updated_by else None,
            created_at=zone.created_at,
            updated_at=zone.updated_at,
        )

    def _to_dropdown_item(self, zone: Zone) -> ZoneDropdownItem:
        return ZoneDropdownItem(
            value=str(zone.id),
            label=zone.name,
            id=str(zone.id),
            delivery_charge=zone.delivery_charge,
        )

    async def get_zone_or_404(self, db: AsyncSession, zone_id: UUID) -> Zone:
        zone: Zone | None = await zone_repository.get_by_id(db, zone_id)
        if zone is None:
            raise NotFoundError("Zone not found")
        return zone

    async def list_zones(
        self,
        db: AsyncSession,
        status: str | None = None,
        search: str | None = None,
        sort_by: str = "name",
        sort_order: str = "asc",
        page: int = 1,
        per_page: int = 100,
    ) -> tuple[list[ZoneResponse], int]:
        zones, total = await zone_repository.get_list(db, status, search, sort_by, sort_order, page, per_page)
        return [self._to_response(z) for z in zones], total

    async def get_dropdown(self, db: AsyncSession) -> list[ZoneDropdownItem]:
        """Active zones only, shaped for select inputs."""
        return [self._to_dropdown_item(z) for z in await zone_repository.get_active(db)]

    async def get_zone(self, db: AsyncSession, zone_id: UUID) -> ZoneResponse:
        return self._to_response(await self.get_zone_or_404(db, zone_id))

    async def create_zone(self, db: AsyncSession, data: ZoneCreate, created_by: UUID) -> ZoneResponse:
        """Create a zone.

        Raises:
            DuplicateError: A zone with the same name (any case) exists
        """
        if await zone_repository.get_by_name(db, data.name) is not None:
            raise DuplicateError("Zone with this name already exists")

        zone: Zone = await zone_repository.create(
            db,
            {**data.model_dump(), "name": data.name.strip(), "created_by": created_by},
        )
        logger.info("Zone %s created by %s", zone.name, created_by)
        return self._to_response(zone)

    async def update_zone(
        self,
        db: AsyncSession,
        zone_id: UUID,
        data: ZoneUpdate,
        updated_by: UUID,
    ) -> ZoneResponse:
        await self.get_zone_or_404(db, zone_id)
        update_data: dict[str, Any] = data.model_dump(exclude_unset=True)

        if update_data.get("name"):
            update_data["name"] = update_data["name"].strip()
            if await zone_repository.get_by_name(db, update_data["name"], exclude_id=zone_id) is not None:
                raise DuplicateError("Zone with this name already exists")

        update_data["updated_by"] = updated_by
        zone: Zone | None = await zone_repository.update(db, zone_id, update_data)
        return self._to_response(zone)

    async def delete_zone(self, db: AsyncSession, zone_id: UUID) -> None:
        """Delete a zone.

        Raises:
            NotFoundError: Unknown zone
            BadRequestError: Couriers are still assigned to it
        """
        zone: Zone = await self.get_zone_or_404(db, zone_id)
        assigned: int = await personnel_repository.count_in_zone(db, zone_id)
        if assigned:
            raise BadRequestError(f"Cannot delete zone with {assigned} assigned delivery personnel")
        await zone_repository.delete(db, zone.id)
        logger.info("Zone %s deleted", zone.name)

    async def get_stats(self, db: AsyncSession) -> ZoneStats:
        totals: dict[str, Any] = await zone_repository.get_totals(db)
        month_start = start_of_month(utcnow())
        this_month: int = await zone_repository.count_created_between(db, month_start)
        last_month: int = await zone_repository.count_created_between(db, previous_month_start(month_start), month_start)

        return ZoneStats(
            total_zones=totals["total"],
            active_zones=await zone_repository.count(db, Zone.status == "active"),
            total_delivery_charges=round(totals["revenue"], 2),
            average_charge=round(totals["average_charge"], 2),
            total_orders=totals["orders"],
            monthly_growth=growth_rate(this_month, last_month),
        )

    async def find_by_area(self, db: AsyncSession, area: str) -> list[ZoneResponse]:
        return [self._to_response(z) for z in await zone_repository.find_by_area(db, area)]

    async def find_by_pincode(self, db: AsyncSession, pincode: str) -> list[ZoneResponse]:
        return [self._to_response(z) for z in await zone_repository.find_by_pincode(db, pincode)]

    async def bulk_update_status(self, db: AsyncSession, data: ZoneBulkStatus, updated_by: UUID) -> BulkStatusResult:
        zone_ids: list[UUID] = [parse_uuid(value, "zone_id") for value in data.zone_ids]
        matched, modified = await zone_repository.bulk_update_status(db, zone_ids, data.status, updated_by)
        logger.info("Bulk zone status %s: %d matched, %d modified", data.status, matched, modified)
        return BulkStatusResult(matched_count=matched, modified_count=modified)


# Singleton instance
zone_service: ZoneService = ZoneService()
