"""Restaurant Menu Router - the caller's menu categories and items.

Reads are open to any restaurant account; writes need a verified restaurant.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.api.deps import get_current_restaurant_user
from foodhub.database import get_db
from foodhub.models.restaurant import RestaurantUser
from foodhub.schemas.menu import (
    MenuCategoryCreate,
    MenuCategoryResponse,
    MenuCategoryUpdate,
    MenuItemCreate,
    MenuItemResponse,
    MenuItemUpdate,
)
from foodhub.services.menu_service import menu_service

router: APIRouter = APIRouter()


# --- Categories ------------------------------------------------------------


@router.get("/categories", response_model=list[MenuCategoryResponse])
async def list_categories(
    db: Annotated[AsyncSession, Depends(get_db)],
    owner: Annotated[RestaurantUser, Depends(get_current_restaurant_user)],
) -> list[MenuCategoryResponse]:
    return await menu_service.list_categories(db, owner)


@router.post("/categories", response_model=MenuCategoryResponse, status_code=201)
async def create_category(
    data: MenuCategoryCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    owner: Annotated[RestaurantUser, Depends(get_current_restaurant_user)],
) -> MenuCategoryResponse:
    result: MenuCategoryResponse = await menu_service.create_category(db, owner, data)
    await db.commit()
    return result


@router.put("/categories/{category_id}", response_model=MenuCategoryResponse)
async def update_category(
    category_id: UUID,
    data: MenuCategoryUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    owner: Annotated[RestaurantUser, Depends(get_current_restaurant_user)],
) -> MenuCategoryResponse:
    result: MenuCategoryResponse = await menu_service.update_category(db, owner, category_id, data)
    await db.commit()
    return result


@router.delete("/categories/{category_id}", status_code=204)
async def delete_category(
    category_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    owner: Annotated[RestaurantUser, Depends(get_current_restaurant_user)],
) -> None:
    await menu_service.delete_category(db, owner, category_id)
    await db.commit()


# --- Items -----------------------------------------------------------------


@router.get("", response_model=list[MenuItemResponse])
async def list_items(
    db: Annotated[AsyncSession, Depends(get_db)],
    owner: Annotated[RestaurantUser, Depends(get_current_restaurant_user)],
    category_id: UUID | None = None,
    available: bool | None = None,
    search: str | None = None,
) -> list[MenuItemResponse]:
    return await menu_service.list_items(db, owner, category_id, available, search)


@router.get("/{item_id}", response_model=MenuItemResponse)
async def get_item(
    item_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    owner: Annotated[RestaurantUser, Depends(get_current_restaurant_user)],
) -> MenuItemResponse:
    return await menu_service.get_item(db, owner, item_id)


@router.post("", response_model=MenuItemResponse, status_code=201)
async def create_item(
    data: MenuItemCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    owner: Annotated[RestaurantUser, Depends(get_current_restaurant_user)],
) -> MenuItemResponse:
    result: MenuItemResponse = await menu_service.create_item(db, owner, data)
    await db.commit()
    return result


@router.put("/{item_id}", response_model=MenuItemResponse)
async def update_item(
    item_id: UUID,
    data: MenuItemUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    owner: Annotated[RestaurantUser, Depends(get_current_restaurant_user)],
) -> MenuItemResponse:
    result: MenuItemResponse = await menu_service.update_item(db, owner, item_id, data)
    await db.commit()
    return result


@router.delete("/{item_id}", status_code=204)
async def delete_item(
    item_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    owner: Annotated[RestaurantUser, Depends(get_current_restaurant_user)],
) -> None:
    await menu_service.delete_item(db, owner, item_id)
    await db.commit()


@router.patch("/{item_id}/toggle", response_model=MenuItemResponse)
async def toggle_item_availability(
    item_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    owner: Annotated[RestaurantUser, Depends(get_current_restaurant_user)],
) -> MenuItemResponse:
    result: MenuItemResponse = await menu_service.toggle_availability(db, owner, item_id)
    await db.commit()
    return result
