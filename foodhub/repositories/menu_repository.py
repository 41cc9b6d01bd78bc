"""Menu Repositories - menu categories and items."""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.models.menu import MenuCategory, MenuItem
from foodhub.repositories.base import LIKE_ESCAPE, BaseRepository, like_pattern


class MenuCategoryRepository(BaseRepository[MenuCategory]):
    """Repository for the menu_categories table."""

    def __init__(self) -> None:
        super().__init__(MenuCategory)

    async def get_for_restaurant(
        self,
        db: AsyncSession,
        restaurant_id: UUID,
        active_only: bool = False,
    ) -> Sequence[MenuCategory]:
        query: Select = select(MenuCategory).where(MenuCategory.restaurant_id == restaurant_id)
        if active_only:
            query = query.where(MenuCategory.is_active.is_(True))
        result = await db.execute(query.order_by(MenuCategory.sort_order, MenuCategory.name))
        return result.scalars().all()

    async def get_by_name(
        self,
        db: AsyncSession,
        restaurant_id: UUID,
        name: str,
        exclude_id: UUID | None = None,
    ) -> MenuCategory | None:
        """Find one of the restaurant's categories by name, ignoring case."""
        query: Select = select(MenuCategory).where(
            MenuCategory.restaurant_id == restaurant_id,
            func.lower(MenuCategory.name) == name.strip().lower(),
        )
        if exclude_id is not None:
            query = query.where(MenuCategory.id != exclude_id)
        result = await db.execute(query.limit(1))
        return result.scalar_one_or_none()


class MenuItemRepository(BaseRepository[MenuItem]):
    """Repository for the menu_items table."""

    def __init__(self) -> None:
        super().__init__(MenuItem)

    async def get_for_restaurant(
        self,
        db: AsyncSession,
        restaurant_id: UUID,
        category_id: UUID | None = None,
        available: bool | None = None,
        search: str | None = None,
    ) -> Sequence[MenuItem]:
        """List a restaurant's items by display order.

        Args:
            db: Async database session
            restaurant_id: Owning restaurant account
            category_id: Only items of this category
            available: Filter on is_available when not None
            search: Case-insensitive match on name, description or tags

        Returns:
            Sequence[MenuItem]: Items ordered by sort_order, then name
        """
        query: Select = select(MenuItem).where(MenuItem.restaurant_id == restaurant_id)
        if category_id is not None:
            query = query.where(MenuItem.category_id == category_id)
        if available is not None:
            query = query.where(MenuItem.is_available.is_(available))
        if search:
            pattern = like_pattern(search.strip().lower())
            query = query.where(
                or_(
                    func.lower(MenuItem.name).like(pattern, escape=LIKE_ESCAPE),
                    func.lower(MenuItem.description).like(pattern, escape=LIKE_ESCAPE),
                )
            )
        result = await db.execute(query.order_by(MenuItem.sort_order, MenuItem.name))
        return result.scalars().all()

    async def get_public_menu(self, db: AsyncSession, restaurant_id: UUID) -> Sequence[MenuItem]:
        """Available items in active categories."""
        result = await db.execute(
            select(MenuItem)
            .join(MenuCategory, MenuCategory.id == MenuItem.category_id)
            .where(
                MenuItem.restaurant_id == restaurant_id,
                MenuItem.is_available.is_(True),
                MenuCategory.is_active.is_(True),
            )
            .order_by(MenuCategory.sort_order, MenuItem.sort_order, MenuItem.name)
        )
        return result.scalars().all()

    async def count_in_category(self, db: AsyncSession, category_id: UUID) -> int:
        return await self.count(db, MenuItem.category_id == category_id)


menu_category_repository: MenuCategoryRepository = MenuCategoryRepository()
menu_item_repository: MenuItemRepository = MenuItemRepository()
