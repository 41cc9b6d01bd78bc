"""Menu Service - restaurant menu categories and items.

Menu rows belong to the owner account (restaurant_users.id). Only verified,
active restaurants may change their menu. Order placement prices every line
from the stored item through ``price_order_lines``.
"""

import logging
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.models.menu import MenuCategory, MenuItem
from foodhub.models.restaurant import Restaurant, RestaurantUser
from foodhub.repositories.menu_repository import menu_category_repository, menu_item_repository
from foodhub.schemas.menu import (
    MenuCategoryCreate,
    MenuCategoryResponse,
    MenuCategoryUpdate,
    MenuItemCreate,
    MenuItemResponse,
    MenuItemUpdate,
)
from foodhub.schemas.order import OrderItemPayload
from foodhub.utils.exceptions import BadRequestError, DuplicateError, ForbiddenError, NotFoundError
from foodhub.utils.ids import parse_uuid

logger = logging.getLogger(__name__)

NOT_VERIFIED_MESSAGE: str = "You cannot manage menu items until your restaurant is verified and approved by admin."


class MenuService:
    """Menu service: category and item management, order-line pricing."""

    def _category_response(self, category: MenuCategory, item_count: int = 0) -> MenuCategoryResponse:
        return MenuCategoryResponse(
            id=str(category.id),
            name=category.name,
            description=category.description,
            is_active=category.is_active,
            sort_order=category.sort_order,
            item_count=item_count,
            created_at=category.created_at,
        )

    def _item_response(self, item: MenuItem, category_name: str | None = None) -> MenuItemResponse:
        return MenuItemResponse(
            id=str(item.id),
            category_id=str(item.category_id),
            category=category_name,
            name=item.name,
            description=item.description,
            price=item.price,
            image=item.image,
            images=list(item.images or []),
            tags=list(item.tags or []),
            is_vegetarian=item.is_vegetarian,
            is_vegan=item.is_vegan,
            is_gluten_free=item.is_gluten_free,
            spice_level=item.spice_level,
            preparation_time=item.preparation_time,
            calories=item.calories,
            is_available=item.is_available,
            sort_order=item.sort_order,
            order_count=item.order_count,
            created_at=item.created_at,
        )

    async def _category_names(self, db: AsyncSession, restaurant_id: UUID) -> dict[UUID, str]:
        categories = await menu_category_repository.get_for_restaurant(db, restaurant_id)
        return {c.id: c.name for c in categories}

    def _require_verified(self, owner: RestaurantUser) -> None:
        if not (owner.is_verified and owner.is_active):
            raise ForbiddenError(NOT_VERIFIED_MESSAGE)

    async def _get_category(self, db: AsyncSession, owner: RestaurantUser, category_id: UUID) -> MenuCategory:
        category: MenuCategory | None = await menu_category_repository.get_by_id(db, category_id)
        if category is None or category.restaurant_id != owner.id:
            raise NotFoundError("Category not found")
        return category

    async def _get_item(self, db: AsyncSession, owner: RestaurantUser, item_id: UUID) -> MenuItem:
        item: MenuItem | None = await menu_item_repository.get_by_id(db, item_id)
        if item is None or item.restaurant_id != owner.id:
            raise NotFoundError("Menu item not found")
        return item

    # --- Categories --------------------------------------------------------

    async def list_categories(self, db: AsyncSession, owner: RestaurantUser) -> list[MenuCategoryResponse]:
        categories = await menu_category_repository.get_for_restaurant(db, owner.id)
        return [
            self._category_response(c, await menu_item_repository.count_in_category(db, c.id))
            for c in categories
        ]

    async def create_category(
        self, db: AsyncSession, owner: RestaurantUser, data: MenuCategoryCreate
    ) -> MenuCategoryResponse:
        self._require_verified(owner)
        if await menu_category_repository.get_by_name(db, owner.id, data.name):
            raise DuplicateError("Category with this name already exists")
        category: MenuCategory = await menu_category_repository.create(
            db, {**data.model_dump(), "name": data.name.strip(), "restaurant_id": owner.id}
        )
        return self._category_response(category)

    async def update_category(
        self, db: AsyncSession, owner: RestaurantUser, category_id: UUID, data: MenuCategoryUpdate
    ) -> MenuCategoryResponse:
        self._require_verified(owner)
        category: MenuCategory = await self._get_category(db, owner, category_id)
        update_data: dict[str, Any] = data.model_dump(exclude_unset=True, exclude_none=True)
        if update_data.get("name"):
            if await menu_category_repository.get_by_name(db, owner.id, update_data["name"], exclude_id=category.id):
                raise DuplicateError("Category with this name already exists")
            update_data["name"] = update_data["name"].strip()
        updated: MenuCategory | None = await menu_category_repository.update(db, category.id, update_data)
        return self._category_response(updated, await menu_item_repository.count_in_category(db, category.id))

    async def delete_category(self, db: AsyncSession, owner: RestaurantUser, category_id: UUID) -> None:
        """Delete an empty category.

        Raises:
            BadRequestError: The category still holds menu items
        """
        self._require_verified(owner)
        category: MenuCategory = await self._get_category(db, owner, category_id)
        if await menu_item_repository.count_in_category(db, category.id):
            raise BadRequestError("Cannot delete a category that still has menu items")
        await menu_category_repository.delete(db, category.id)

    # --- Items -------------------------------------------------------------

    async def list_items(
        self,
        db: AsyncSession,
        owner: RestaurantUser,
        category_id: UUID | None = None,
        available: bool | None = None,
        search: str | None = None,
    ) -> list[MenuItemResponse]:
        items = await menu_item_repository.get_for_restaurant(db, owner.id, category_id, available, search)
        names = await self._category_names(db, owner.id)
        return [self._item_response(i, names.get(i.category_id)) for i in items]

    async def get_item(self, db: AsyncSession, owner: RestaurantUser, item_id: UUID) -> MenuItemResponse:
        item: MenuItem = await self._get_item(db, owner, item_id)
        names = await self._category_names(db, owner.id)
        return self._item_response(item, names.get(item.category_id))

    async def create_item(self, db: AsyncSession, owner: RestaurantUser, data: MenuItemCreate) -> MenuItemResponse:
        self._require_verified(owner)
        category: MenuCategory = await self._get_category(db, owner, parse_uuid(data.category_id, "category_id"))
        values: dict[str, Any] = data.model_dump()
        values.update(category_id=category.id, restaurant_id=owner.id, name=data.name.strip())
        item: MenuItem = await menu_item_repository.create(db, values)
        logger.info("Menu item %s added by %s", item.name, owner.restaurant_name)
        return self._item_response(item, category.name)

    async def update_item(
        self, db: AsyncSession, owner: RestaurantUser, item_id: UUID, data: MenuItemUpdate
    ) -> MenuItemResponse:
        self._require_verified(owner)
        item: MenuItem = await self._get_item(db, owner, item_id)
        # Explicit nulls leave the field unchanged
        update_data: dict[str, Any] = data.model_dump(exclude_unset=True, exclude_none=True)
        if "category_id" in update_data:
            category = await self._get_category(db, owner, parse_uuid(update_data["category_id"], "category_id"))
            update_data["category_id"] = category.id
        if "name" in update_data:
            update_data["name"] = update_data["name"].strip()
        updated: MenuItem | None = await menu_item_repository.update(db, item.id, update_data)
        names = await self._category_names(db, owner.id)
        return self._item_response(updated, names.get(updated.category_id))

    async def delete_item(self, db: AsyncSession, owner: RestaurantUser, item_id: UUID) -> None:
        self._require_verified(owner)
        item: MenuItem = await self._get_item(db, owner, item_id)
        await menu_item_repository.delete(db, item.id)

    async def toggle_availability(self, db: AsyncSession, owner: RestaurantUser, item_id: UUID) -> MenuItemResponse:
        self._require_verified(owner)
        item: MenuItem = await self._get_item(db, owner, item_id)
        item.is_available = not item.is_available
        await db.flush()
        await db.refresh(item)
        names = await self._category_names(db, owner.id)
        return self._item_response(item, names.get(item.category_id))

    # --- Customer facing ---------------------------------------------------

    async def get_public_menu(self, db: AsyncSession, restaurant: Restaurant) -> list[MenuItemResponse]:
        items = await menu_item_repository.get_public_menu(db, restaurant.owner_id)
        names = await self._category_names(db, restaurant.owner_id)
        return [self._item_response(i, names.get(i.category_id)) for i in items]

    async def price_order_lines(
        self,
        db: AsyncSession,
        restaurant: Restaurant,
        lines: Sequence[OrderItemPayload],
    ) -> list[dict[str, Any]]:
        """Build order lines from the restaurant's stored menu.

        Prices come from the menu, never from the request. Each ordered item's
        ``order_count`` grows by the ordered quantity.

        Raises:
            BadRequestError: Unknown item, item of another restaurant, or unavailable item
        """
        item_ids: list[UUID] = [parse_uuid(line.menu_item_id, "menu_item_id") for line in lines]
        items: dict[UUID, MenuItem] = {
            item.id: item for item in await menu_item_repository.get_by_ids(db, list(set(item_ids)))
        }
        names = await self._category_names(db, restaurant.owner_id)

        priced: list[dict[str, Any]] = []
        for item_id, line in zip(item_ids, lines):
            item: MenuItem | None = items.get(item_id)
            if item is None or item.restaurant_id != restaurant.owner_id:
                raise BadRequestError(f"Menu item not found: {line.menu_item_id}")
            if not item.is_available:
                raise BadRequestError(f"{item.name} is currently unavailable")
            item.order_count = (item.order_count or 0) + line.quantity
            priced.append({
                "menu_item_id": str(item.id),
                "menu_item": item.snapshot(names.get(item.category_id)),
                "quantity": line.quantity,
                "customizations": list(line.customizations),
                "subtotal": round(item.price * line.quantity, 2),
            })
        return priced


# Singleton instance
menu_service: MenuService = MenuService()
