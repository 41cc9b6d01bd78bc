"""Zone Repository - delivery zone queries."""

from datetime import datetime
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import Select, String, cast, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.models.zone import Zone
from foodhub.repositories.base import LIKE_ESCAPE, BaseRepository, like_pattern

# Columns a zone list may be sorted by
SORTABLE_COLUMNS: dict[str, Any] = {
    "name": Zone.name,
    "delivery_charge": Zone.delivery_charge,
    "created_at": Zone.created_at,
    "order_count": Zone.order_count,
    "status": Zone.status,
}


class ZoneRepository(BaseRepository[Zone]):
    """Repository for the zones table."""

    def __init__(self) -> None:
        super().__init__(Zone)

    async def get_by_name(
        self,
        db: AsyncSession,
        name: str,
        exclude_id: UUID | None = None,
        active_only: bool = False,
    ) -> Zone | None:
        """Find a zone by name, ignoring case."""
        query: Select = select(Zone).where(func.lower(Zone.name) == name.strip().lower())
        if exclude_id is not None:
            query = query.where(Zone.id != exclude_id)
        if active_only:
            query = query.where(Zone.status == "active")
        result = await db.execute(query.limit(1))
        return result.scalar_one_or_none()

    async def get_list(
        self,
        db: AsyncSession,
        status: str | None = None,
        search: str | None = None,
        sort_by: str = "name",
        sort_order: str = "asc",
        page: int = 1,
        per_page: int = 100,
    ) -> tuple[Sequence[Zone], int]:
        """List zones with filtering and sorting.

        Args:
            db: Async database session
            status: Exact status; ``all`` or None disables the filter
            search: Case-insensitive match on name, description or areas
            sort_by: One of SORTABLE_COLUMNS (unknown names fall back to name)
            sort_order: ``asc`` or ``desc``
            page: 1-based page number
            per_page: Records per page

        Returns:
            tuple[Sequence[Zone], int]: (zones, total count)
        """
        query: Select = select(Zone)
        if status and status != "all":
            query = query.where(Zone.status == status)
        if search:
            pattern = like_pattern(search.strip().lower())
            query = query.where(
                or_(
                    func.lower(Zone.name).like(pattern, escape=LIKE_ESCAPE),
                    func.lower(Zone.description).like(pattern, escape=LIKE_ESCAPE),
                    Zone.area_index.like(pattern, escape=LIKE_ESCAPE),
                )
            )
        column = SORTABLE_COLUMNS.get(sort_by, Zone.name)
        query = query.order_by(column.desc() if sort_order == "desc" else column.asc())
        return await self.get_paginated(db, query, page, per_page)

    async def get_active(self, db: AsyncSession) -> list[Zone]:
        result = await db.execute(select(Zone).where(Zone.status == "active").order_by(Zone.name))
        return list(result.scalars().all())

    async def find_by_area(self, db: AsyncSession, area: str) -> list[Zone]:
        """Active zones with an area containing ``area`` (case-insensitive)."""
        query: Select = (
            select(Zone)
            .where(
                Zone.status == "active",
                Zone.area_index.like(like_pattern(area.strip().lower()), escape=LIKE_ESCAPE),
            )
            .order_by(Zone.name)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def find_by_pincode(self, db: AsyncSession, pincode: str) -> list[Zone]:
        pincode = pincode.strip()
        if not pincode.isdigit():
            return []
        query: Select = (
            select(Zone)
            .where(Zone.status == "active", cast(Zone.pincodes, String).like(f'%"{pincode}"%'))
            .order_by(Zone.name)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_totals(self, db: AsyncSession) -> dict[str, Any]:
        """Aggregate counters across all zones."""
        result = await db.execute(
            select(
                func.count(Zone.id).label("total"),
                func.coalesce(func.sum(Zone.total_revenue), 0).label("revenue"),
                func.coalesce(func.avg(Zone.delivery_charge), 0).label("average_charge"),
                func.coalesce(func.sum(Zone.order_count), 0).label("orders"),
            )
        )
        row = result.one()
        return {
            "total": row.total or 0,
            "revenue": float(row.revenue or 0),
            "average_charge": float(row.average_charge or 0),
            "orders": int(row.orders or 0),
        }

    async def count_created_between(self, db: AsyncSession, start: datetime, end: datetime | None = None) -> int:
        criteria = [Zone.created_at >= start]
        if end is not None:
            criteria.append(Zone.created_at < end)
        return await self.count(db, *criteria)

    async def bulk_update_status(
        self,
        db: AsyncSession,
        zone_ids: list[UUID],
        status: str,
        updated_by: UUID,
    ) -> tuple[int, int]:
        """Set ``status`` on many zones.

        Returns:
            tuple[int, int]: (matched_count, modified_count)
        """
        matched: int = await self.count(db, Zone.id.in_(zone_ids))
        result = await db.execute(
            update(Zone)
            .where(Zone.id.in_(zone_ids), Zone.status != status)
            .values(status=status, updated_by=updated_by)
            .execution_options(synchronize_session="fetch")
        )
        await db.flush()
        return matched, result.rowcount or 0


zone_repository: ZoneRepository = ZoneRepository()
