"""Admin Repository - back-office account queries."""

from typing import Sequence

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.models.admin import Admin
from foodhub.repositories.base import LIKE_ESCAPE, BaseRepository, like_pattern


class AdminRepository(BaseRepository[Admin]):
    """Repository for the admins table (admins and super admins)."""

    def __init__(self) -> None:
        super().__init__(Admin)

    async def get_by_email(self, db: AsyncSession, email: str) -> Admin | None:
        result = await db.execute(select(Admin).where(Admin.email == email.strip().lower()))
        return result.scalar_one_or_none()

    async def get_list(
        self,
        db: AsyncSession,
        role: str | None = None,
        is_active: bool | None = None,
        search: str | None = None,
        page: int = 1,
        per_page: int = 10,
    ) -> tuple[Sequence[Admin], int]:
        """List admins, newest first.

        Args:
            db: Async database session
            role: Exact role filter
            is_active: Active flag filter
            search: Case-insensitive match on name, e-mail or admin_id
            page: 1-based page number
            per_page: Records per page

        Returns:
            tuple[Sequence[Admin], int]: (admins, total count)
        """
        query: Select = select(Admin)
        if role:
            query = query.where(Admin.role == role)
        if is_active is not None:
            query = query.where(Admin.is_active == is_active)
        if search:
            pattern = like_pattern(search.strip().lower())
            query = query.where(
                or_(
                    func.lower(Admin.name).like(pattern, escape=LIKE_ESCAPE),
                    Admin.email.like(pattern, escape=LIKE_ESCAPE),
                    func.lower(Admin.admin_id).like(pattern, escape=LIKE_ESCAPE),
                )
            )
        query = query.order_by(Admin.created_at.desc())
        return await self.get_paginated(db, query, page, per_page)

    async def get_active_ids(self, db: AsyncSession) -> list:
        result = await db.execute(select(Admin.id).where(Admin.is_active.is_(True)))
        return list(result.scalars().all())


admin_repository: AdminRepository = AdminRepository()
