"""Delivery Personnel Repository - courier queries."""

from datetime import datetime
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import Select, case, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.models.personnel import WORKING_STATUSES, DeliveryPersonnel
from foodhub.repositories.base import LIKE_ESCAPE, BaseRepository, like_pattern


class PersonnelRepository(BaseRepository[DeliveryPersonnel]):
    """Repository for the delivery_personnel table."""

    def __init__(self) -> None:
        super().__init__(DeliveryPersonnel)

    async def get_by_email(self, db: AsyncSession, email: str) -> DeliveryPersonnel | None:
        result = await db.execute(
            select(DeliveryPersonnel).where(DeliveryPersonnel.email == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def find_conflict(
        self,
        db: AsyncSession,
        email: str | None = None,
        phone: str | None = None,
        employee_id: str | None = None,
        exclude_id: UUID | None = None,
    ) -> str | None:
        """Name of the first unique field already used by another courier.

        Returns:
            str | None: ``email``, ``phone`` or ``employee_id``; None when free
        """
        checks: list[tuple[str, Any]] = []
        if email:
            checks.append(("email", DeliveryPersonnel.email == email.strip().lower()))
        if phone:
            checks.append(("phone", DeliveryPersonnel.phone == phone))
        if employee_id:
            checks.append(("employee_id", DeliveryPersonnel.employee_id == employee_id.strip().upper()))

        for field, criterion in checks:
            criteria = [criterion]
            if exclude_id is not None:
                criteria.append(DeliveryPersonnel.id != exclude_id)
            if await self.count(db, *criteria):
                return field
        return None

    async def get_list(
        self,
        db: AsyncSession,
        status: str | None = None,
        zone_id: UUID | None = None,
        search: str | None = None,
        page: int = 1,
        per_page: int = 10,
    ) -> tuple[Sequence[DeliveryPersonnel], int]:
        """List couriers, newest first.

        Args:
            db: Async database session
            status: Exact status filter
            zone_id: Home zone filter
            search: Match on name, e-mail, employee id or phone
            page: 1-based page number
            per_page: Records per page

        Returns:
            tuple[Sequence[DeliveryPersonnel], int]: (couriers, total count)
        """
        query: Select = select(DeliveryPersonnel)
        if status:
            query = query.where(DeliveryPersonnel.status == status)
        if zone_id is not None:
            query = query.where(DeliveryPersonnel.zone_id == zone_id)
        if search:
            pattern = like_pattern(search.strip().lower())
            query = query.where(
                or_(
                    func.lower(DeliveryPersonnel.name).like(pattern, escape=LIKE_ESCAPE),
                    DeliveryPersonnel.email.like(pattern, escape=LIKE_ESCAPE),
                    func.lower(DeliveryPersonnel.employee_id).like(pattern, escape=LIKE_ESCAPE),
                    DeliveryPersonnel.phone.like(like_pattern(search.strip()), escape=LIKE_ESCAPE),
                )
            )
        query = query.order_by(DeliveryPersonnel.created_at.desc())
        return await self.get_paginated(db, query, page, per_page)

    async def get_available_in_zone(self, db: AsyncSession, zone_id: UUID) -> list[DeliveryPersonnel]:
        """Online couriers in a working status, best rated first."""
        query: Select = (
            select(DeliveryPersonnel)
            .where(
                DeliveryPersonnel.zone_id == zone_id,
                DeliveryPersonnel.status.in_(WORKING_STATUSES),
                DeliveryPersonnel.is_online.is_(True),
            )
            .order_by(DeliveryPersonnel.rating.desc())
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_totals(self, db: AsyncSession) -> dict[str, Any]:
        result = await db.execute(
            select(
                func.count(DeliveryPersonnel.id).label("total"),
                func.sum(case((DeliveryPersonnel.status.in_(WORKING_STATUSES), 1), else_=0)).label("active"),
                func.sum(case((DeliveryPersonnel.status == "on_duty", 1), else_=0)).label("on_duty"),
                func.sum(case((DeliveryPersonnel.is_online.is_(True), 1), else_=0)).label("online"),
                func.coalesce(func.avg(DeliveryPersonnel.rating), 0).label("average_rating"),
                func.coalesce(func.sum(DeliveryPersonnel.total_deliveries), 0).label("deliveries"),
            )
        )
        row = result.one()
        return {
            "total": row.total or 0,
            "active": int(row.active or 0),
            "on_duty": int(row.on_duty or 0),
            "online": int(row.online or 0),
            "average_rating": float(row.average_rating or 0),
            "deliveries": int(row.deliveries or 0),
        }

    async def count_created_between(self, db: AsyncSession, start: datetime, end: datetime | None = None) -> int:
        criteria = [DeliveryPersonnel.created_at >= start]
        if end is not None:
            criteria.append(DeliveryPersonnel.created_at < end)
        return await self.count(db, *criteria)

    async def count_in_zone(self, db: AsyncSession, zone_id: UUID) -> int:
        return await self.count(db, DeliveryPersonnel.zone_id == zone_id)

    async def bulk_update_status(
        self,
        db: AsyncSession,
        personnel_ids: list[UUID],
        values: dict[str, Any],
    ) -> tuple[int, int]:
        """Apply ``values`` (status and presence flags) to many couriers.

        Returns:
            tuple[int, int]: (matched_count, modified_count)
        """
        matched: int = await self.count(db, DeliveryPersonnel.id.in_(personnel_ids))
        result = await db.execute(
            update(DeliveryPersonnel)
            .where(DeliveryPersonnel.id.in_(personnel_ids), DeliveryPersonnel.status != values["status"])
            .values(**values)
            .execution_options(synchronize_session="fetch")
        )
        await db.flush()
        return matched, result.rowcount or 0

    async def get_active_ids(self, db: AsyncSession) -> list[UUID]:
        result = await db.execute(
            select(DeliveryPersonnel.id).where(DeliveryPersonnel.status.in_(WORKING_STATUSES))
        )
        return list(result.scalars().all())


personnel_repository: PersonnelRepository = PersonnelRepository()
