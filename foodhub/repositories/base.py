"""Base CRUD repository - parent class for all domain repositories.

Usage:
    class ZoneRepository(BaseRepository[Zone]):
        def __init__(self) -> None:
            super().__init__(Zone)
"""

from typing import Any, Generic, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.database import Base
from foodhub.utils.pagination import paginate

# Generic type variable representing a SQLAlchemy model
ModelType = TypeVar("ModelType", bound=Base)

LIKE_ESCAPE: str = "\\"


def like_pattern(text: str) -> str:
    """``%text%`` with LIKE wildcards in ``text`` escaped; pair with ``escape=LIKE_ESCAPE``."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class BaseRepository(Generic[ModelType]):
    """Generic CRUD repository providing common database operations.

    Attributes:
        model: The SQLAlchemy model class
    """

    def __init__(self, model: type[ModelType]) -> None:
        self.model: type[ModelType] = model

    async def get_by_id(
        self,
        db: AsyncSession,
        record_id: UUID,
    ) -> ModelType | None:
        """Retrieve a single record by its UUID.

        Args:
            db: Async database session
            record_id: UUID of the record to retrieve

        Returns:
            ModelType | None: Found record or None
        """
        result = await db.execute(select(self.model).where(self.model.id == record_id))
        return result.scalar_one_or_none()

    async def get_by_ids(
        self,
        db: AsyncSession,
        record_ids: Sequence[UUID],
    ) -> list[ModelType]:
        if not record_ids:
            return []
        result = await db.execute(select(self.model).where(self.model.id.in_(record_ids)))
        return list(result.scalars().all())

    async def get_all(
        self,
        db: AsyncSession,
        filters: dict[str, Any] | None = None,
        order_by: Any | None = None,
    ) -> Sequence[ModelType]:
        """Retrieve all records matching equality filters.

        Args:
            db: Async database session
            filters: {'column_name': value}; None values are ignored
            order_by: Column to order by

        Returns:
            Sequence[ModelType]: Matching records
        """
        query: Select = select(self.model)

        if filters:
            for column_name, value in filters.items():
                if hasattr(self.model, column_name) and value is not None:
                    query = query.where(getattr(self.model, column_name) == value)

        if order_by is not None:
            query = query.order_by(order_by)

        result = await db.execute(query)
        return result.scalars().all()

    async def get_paginated(
        self,
        db: AsyncSession,
        query: Select,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[ModelType], int]:
        """Retrieve a page of ``query`` and the total match count.

        Args:
            db: Async database session
            query: Base SELECT query
            page: 1-based page number
            per_page: Records per page

        Returns:
            tuple[Sequence[ModelType], int]: (records, total count)
        """
        return await paginate(db, query, page, per_page)

    async def create(
        self,
        db: AsyncSession,
        obj_data: dict[str, Any],
    ) -> ModelType:
        """Create a new record.

        Args:
            db: Async database session
            obj_data: Column values for the new record

        Returns:
            ModelType: The created record
        """
        db_obj: ModelType = self.model(**obj_data)
        db.add(db_obj)
        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    async def update(
        self,
        db: AsyncSession,
        record_id: UUID,
        update_data: dict[str, Any],
    ) -> ModelType | None:
        """Update an existing record by its UUID.

        Args:
            db: Async database session
            record_id: UUID of the record to update
            update_data: Fields and values to set (None values are written too)

        Returns:
            ModelType | None: Updated record or None
        """
        db_obj: ModelType | None = await self.get_by_id(db, record_id)
        if db_obj is None:
            return None

        for field, value in update_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    async def delete(
        self,
        db: AsyncSession,
        record_id: UUID,
    ) -> bool:
        """Delete a record by its UUID.

        Returns:
            bool: Whether a record was deleted
        """
        db_obj: ModelType | None = await self.get_by_id(db, record_id)
        if db_obj is None:
            return False

        await db.delete(db_obj)
        await db.flush()
        return True

    async def exists(
        self,
        db: AsyncSession,
        filters: dict[str, Any],
        exclude_id: UUID | None = None,
    ) -> bool:
        """Check if a record matching the given filters exists.

        Args:
            db: Async database session
            filters: Equality criteria
            exclude_id: Record to ignore (the one being updated)

        Returns:
            bool: Whether a matching record exists
        """
        query: Select = select(func.count()).select_from(self.model)
        for column_name, value in filters.items():
            if hasattr(self.model, column_name):
                query = query.where(getattr(self.model, column_name) == value)
        if exclude_id is not None:
            query = query.where(self.model.id != exclude_id)

        count: int = (await db.execute(query)).scalar() or 0
        return count > 0

    async def count(
        self,
        db: AsyncSession,
        *criteria: Any,
    ) -> int:
        """Count records matching arbitrary SQL criteria."""
        query: Select = select(func.count()).select_from(self.model)
        if criteria:
            query = query.where(*criteria)
        return (await db.execute(query)).scalar() or 0
